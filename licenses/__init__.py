"""
Licenses module.

This module handles:
- License entity and domain logic
- License key generation
- License lifecycle (suspend, resume, revoke, renew)
- Lazy expiry detection
"""
