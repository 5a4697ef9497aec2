"""Seed the news portal database with bilingual demo data."""
import asyncio
import argparse
import random
import time
from datetime import datetime, timezone, timedelta

from newsportal.database import engine, async_session, Base
from newsportal.models import Category, News, User
from newsportal.security import hash_password

USERS = [
    ("admin@example.com", "Администратор"),
    ("editor@example.com", "Редактор"),
    ("author@example.com", "Автор"),
    ("user@example.com", "Пользователь"),
]

# (slug, name_ru, name_tm, description_ru, description_tm)
CATEGORIES = [
    ("tech", "Технологии", "Tehnologiýalar",
     "Новости о технологиях, IT и инновациях", "Tehnologiýalar, IT we täzeçilikler barada habarlar"),
    ("science", "Наука", "Ylym",
     "Научные открытия и исследования", "Ylymy açyşlar we gözlegler"),
    ("sport", "Спорт", "Sport",
     "Спортивные новости и события", "Sport habarlary we wakalar"),
    ("politics", "Политика", "Politika",
     "Политические новости и события", "Syýasy habarlar we wakalar"),
    ("economy", "Экономика", "Ykdysadyýet",
     "Экономические новости и аналитика", "Ykdysady habarlar we analitika"),
    ("culture", "Культура", "Medeniýet",
     "Культурные события и искусство", "Medeni wakalar we sungat"),
]

# (category slug, title_ru, title_tm, is_flash)
HEADLINES = [
    ("tech", "Новые технологии в искусственном интеллекте", "Ýasama intellektde täze tehnologiýalar", False),
    ("science", "Прорыв в квантовых вычислениях", "Kwant hasaplamalarynda öňe çykyş", False),
    ("sport", "Чемпионат мира по футболу: итоги первого тура",
     "Dünýä futbol çempionaty: birinji aýlawyň netijeleri", True),
    ("economy", "Новые меры поддержки экономики", "Ykdysadyýeti goldamagyň täze çäreleri", False),
    ("culture", "Открытие нового музея современного искусства",
     "Häzirki zaman sungatynyň täze muzeýiniň açylyşy", False),
    ("tech", "Новый процессор для мобильных устройств", "Mobil enjamlary üçin täze prosessor", False),
]


async def seed(extra: int = 0):
    print(f"Seeding: {len(USERS)} users, {len(CATEGORIES)} categories, {len(HEADLINES) + extra} news")
    start = time.perf_counter()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as session:
        password = hash_password("password123")
        users = [User(email=email, name=name, password=password) for email, name in USERS]
        session.add_all(users)

        categories = {
            slug: Category(slug=slug, name_ru=ru, name_tm=tm, description_ru=d_ru, description_tm=d_tm)
            for slug, ru, tm, d_ru, d_tm in CATEGORIES
        }
        session.add_all(categories.values())
        await session.flush()

        now = datetime.now(timezone.utc)
        headlines = list(HEADLINES)
        for i in range(extra):
            slug = random.choice(CATEGORIES)[0]
            headlines.append((slug, f"Новость номер {i}", f"Habar belgi {i}", random.random() < 0.1))

        for days_ago, (slug, title_ru, title_tm, is_flash) in enumerate(headlines, start=1):
            session.add(News(
                title_ru=title_ru,
                title_tm=title_tm,
                content_ru=f"{title_ru}. Подробности появятся позже.",
                content_tm=f"{title_tm}. Jikme-jiklikler soňra berler.",
                is_flash=is_flash,
                category_id=categories[slug].id,
                author_id=random.choice(users).id,
                published_at=now - timedelta(days=days_ago),
            ))

        await session.commit()

    elapsed = time.perf_counter() - start
    print(f"Seeding complete in {elapsed:.1f}s (login: admin@example.com / password123)")


def main():
    parser = argparse.ArgumentParser(description="Seed the news portal database")
    parser.add_argument("--extra", type=int, default=0, help="Generate N additional filler news items")
    args = parser.parse_args()
    asyncio.run(seed(extra=args.extra))


if __name__ == "__main__":
    main()
