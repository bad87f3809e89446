# Routes package init
"""
CrudHub Backend — API Routes Package
======================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - crud.py:    create_crud_router(collection), mounted once per resource:
                  GET/POST /api/<resource>, GET/PUT/DELETE /api/<resource>/{id}
    - health.py:  GET /health  (per-resource availability)
    - home.py:    GET /        (welcome message)

Design Principle:
    Routes are THIN. Each CRUD handler makes exactly one collection call;
    storage behaviour belongs to the collection adapters.
"""
