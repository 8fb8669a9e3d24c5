"""API Layer - FastAPI routers, shared dependencies and error handlers.

Invariants:
    - Routers are registered explicitly in main.py (no auto-discovery)
    - Every error leaves the API as the {"error": "<message>", ...} envelope
"""
