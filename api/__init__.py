"""
HTTP API.

Django REST Framework views over the application handlers.
"""
