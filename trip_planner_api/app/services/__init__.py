"""
Service layer.

Each service encapsulates the business logic of one domain (users,
trips, exchange rates) and raises the exceptions from ``core.errors``.
Services receive their collaborators (database connection, HTTP
client, caller identity) explicitly so they can be used without the
web layer.
"""
