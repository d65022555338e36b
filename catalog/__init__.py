"""
Catalog app.

Handles:
- Products that licenses are issued for
- Tenants (customer organisations) that licenses belong to
"""
