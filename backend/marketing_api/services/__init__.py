"""Data-Access Services - queries shared by more than one router.

Invariants:
    - Services never commit; the calling route owns the transaction
    - Services raise MarketingError subclasses, never HTTPException
"""
