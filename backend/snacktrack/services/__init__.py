# Services package init
"""
SnackTrack Backend - Services Layer
====================================

What:  Business logic between routes (HTTP) and the database (persistence).

Service Inventory:
    - security:         bcrypt hash / verify, run off the event loop
    - UserService:      register, authenticate
    - RequestService:   list_all, list_for_user, create, set_ordered,
                        set_keep_on_hand, delete

Services receive the request's AsyncSession on every call and keep no state
of their own, so the module-level singletons are safe to share.
"""
