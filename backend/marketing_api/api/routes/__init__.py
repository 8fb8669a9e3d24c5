"""Route Modules - one file per marketing resource.

Invariants:
    - Each module defines its own APIRouter with prefix and tags
    - Aggregations and catalog rules live in services/, lookups in crud_helpers
"""
