"""
API package containing versioned routes.

A version subpackage (currently only ``v1``) exposes a top‑level
``router`` that includes all of its domain routers.
"""
