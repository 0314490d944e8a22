# Services package init
"""
Blog API — Services Layer
===========================

What:  Business logic between routes (HTTP) and the database.

Service Inventory:
    - PostService: listing composer (all / by author / by tag, any sort)
                   and post create / get / update / delete

Services can be unit-tested with a plain AsyncSession, no HTTP involved.
"""
