"""Marketing API Package - campaigns, plans, expenses, vendors and type catalogs over HTTP.

Invariants:
    - Package root holds no executable code beyond the version constant
"""

__version__ = "1.0.0"
