# Routes package init
"""
Blog API — API Routes Package
===============================

Route Inventory:
    - posts.py:   GET    /api/v1/posts            (list, filter by author or tag, sort)
                  GET    /api/v1/posts/{id}       (single post)
                  POST   /api/v1/posts            (create)
                  PATCH  /api/v1/posts/{id}       (field-level update)
                  DELETE /api/v1/posts/{id}       (delete)
    - health.py:  GET    /health                  (service health check)

Routes stay THIN: read the request, call PostService, shape the response.
"""
