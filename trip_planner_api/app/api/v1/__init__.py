"""
Version 1 of the API.

Mounted both at ``/api`` (the paths existing clients use) and at
``/api/v1``.
"""
