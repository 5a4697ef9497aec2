# Services package.
#
# Each module exposes async functions holding the business logic and
# database access for one aggregate:
#
#   category_service — bilingual Category CRUD, localized reads
#   news_service     — localized feed / category page / search, author-gated writes
#   user_service     — registration and login of news authors
#
# Every function takes the AsyncSession as its first argument; the router
# layer owns the transaction through the ``get_db`` dependency.  Failures
# are raised as ``newsportal.errors`` exceptions.
