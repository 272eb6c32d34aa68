# Middleware package init
"""
SnackTrack Backend - Middleware Package
========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [Origin allow-list] → [GZip] → [CORS] → Route Handler

    1. Request ID first so every later log line can carry it
    2. Logging wraps everything below it, rejections included
    3. Origin allow-list stops foreign browser origins before routing
    4. CORS answers preflights and decorates allowed responses
"""
