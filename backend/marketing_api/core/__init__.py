"""Core - pure domain types, errors and helpers with no IO.

Invariants:
    - Nothing in core imports FastAPI, SQLAlchemy or infrastructure modules
"""
