"""Catalog Defaults - system rows seeded into an empty plan-type catalog.

Invariants:
    - Keys are unique and stable; the seeded rows are flagged is_system
    - sort_order follows list position
"""

DEFAULT_PLAN_TYPES: list[dict] = [
    {
        "key": "social_media",
        "name": "Social Media Campaign",
        "description": "Organic and boosted posts across social platforms",
        "color": "blue",
        "icon": "share-2",
    },
    {
        "key": "paid_ads",
        "name": "Paid Ads",
        "description": "Search, display and paid social advertising",
        "color": "green",
        "icon": "megaphone",
    },
    {
        "key": "influencer",
        "name": "Influencer Partnership",
        "description": "Sponsored content with creators",
        "color": "purple",
        "icon": "users",
    },
    {
        "key": "events",
        "name": "Events",
        "description": "Launch events, conferences and meetups",
        "color": "orange",
        "icon": "calendar",
    },
    {
        "key": "other",
        "name": "Other",
        "description": None,
        "color": "gray",
        "icon": "circle",
    },
]
