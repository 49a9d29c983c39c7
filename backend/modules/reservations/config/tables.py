# backend/modules/reservations/config/tables.py

"""
Default venue layout: physical tables and the combinations they can form.
"""

PHYSICAL_TABLES = [
    # Two-tops
    {"id": "m1", "capacity": 2, "location": "interior"},
    {"id": "m2", "capacity": 2, "location": "interior"},
    {"id": "m3", "capacity": 2, "location": "interior"},
    {"id": "m4", "capacity": 2, "location": "terraza"},
    # Four-tops
    {"id": "m5", "capacity": 4, "location": "interior"},
    {"id": "m6", "capacity": 4, "location": "interior"},
    {"id": "m7", "capacity": 4, "location": "interior"},
    {"id": "m8", "capacity": 4, "location": "terraza"},
    {"id": "m9", "capacity": 4, "location": "terraza"},
    {"id": "m10", "capacity": 4, "location": "interior"},
    # Six-tops
    {"id": "m11", "capacity": 6, "location": "interior"},
    {"id": "m12", "capacity": 6, "location": "interior"},
    # Eight-top
    {"id": "m13", "capacity": 8, "location": "interior"},
]

# Combination capacity is configured, not the sum of its components.
COMBINATIONS = [
    {"id": "c1", "components": ["m1", "m2"], "capacity": 4, "location": "interior"},
    {"id": "c2", "components": ["m3", "m5"], "capacity": 6, "location": "interior"},
    {"id": "c3", "components": ["m8", "m9"], "capacity": 8, "location": "terraza"},
    {"id": "c4", "components": ["m6", "m7"], "capacity": 8, "location": "interior"},
    {"id": "c5", "components": ["m11", "m3"], "capacity": 8, "location": "interior"},
]
