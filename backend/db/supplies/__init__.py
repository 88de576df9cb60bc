"""
Supplies catalog (two disjoint item tables).

Models:
- Toner (stock counter + optional price)
- Drum (stock counter + optional price)

Movements reference either table through an untyped item_id.
"""
