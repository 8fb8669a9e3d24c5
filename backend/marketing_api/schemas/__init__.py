"""Request & Response Schemas - pydantic models for every marketing endpoint.

Invariants:
    - Request schemas strip unknown fields and never touch the database
    - Response schemas read ORM rows through from_attributes
"""
