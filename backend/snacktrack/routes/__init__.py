# Routes package init
"""
SnackTrack Backend - API Routes Package
========================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - auth.py:      POST /api/register, POST /api/login
    - requests.py:  GET/POST /api/requests, GET /api/requests/user/{userId},
                    PUT /api/requests/{id}/order, PUT /api/requests/{id}/keep,
                    DELETE /api/requests/{id}
    - health.py:    GET /health

Routes stay thin: parse path and body, call one service method, return its
result. Status codes for failures come from the exception handlers in main.py.
"""
