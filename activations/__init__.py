"""
Activations app.

Handles:
- Device activation accounting against license limits
- Online activation and revalidation token issuance
- Activation attempt logging
"""
