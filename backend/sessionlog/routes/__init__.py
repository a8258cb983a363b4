# Routes package init
"""
SessionLog Backend — API Routes Package
=========================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - resources.py: build_resource_router(resource), mounted once per
                    Resource (/api/sessions, /api/logs)
    - health.py:    GET /health (service health check)

Design Principle:
    Routes are THIN: they build the store, call the ResourceController and
    choose the status code. Everything else lives in services.
"""
