"""
Happy Thoughts API — API Routes Package
=========================================

Route Inventory:
    - root.py:      GET   /                      (endpoint index)
    - thoughts.py:  GET   /thoughts              (recency feed or offset page)
                    POST  /thoughts              (create a thought)
                    PATCH /thoughts/{id}/like    (add one heart)
    - health.py:    GET   /health                (service health check)

Routes stay thin: read the request, call ThoughtService, wrap the result in
the response envelope. Errors are raised, never caught here; the handlers
in main.py format them.
"""
