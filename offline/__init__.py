"""
Offline issuance.

Validates client-generated offline activation requests and issues signed
license files for air-gapped devices.
"""
