"""
Pydantic schema definitions for API payloads.

Each domain (users, trips, rates) defines its own Pydantic models for
request and response bodies.  Schemas are separated from the database
rows to decouple the API representation from persistence.
"""
