# Services package init
"""
Happy Thoughts API — Services Package
=======================================

Service Inventory:
    - thought_service.py: list, create and like operations on thoughts

Services receive the request's AsyncSession as an argument and hold no
per-request state, so a single module-level instance is shared.
"""
