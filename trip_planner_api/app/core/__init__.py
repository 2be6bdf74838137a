"""
Cross‑cutting infrastructure: settings, logging, database access,
security primitives, error types and request budgets.
"""
