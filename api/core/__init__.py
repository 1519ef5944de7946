"""
Shared, cross-cutting code for the API.

`core/` holds the small building blocks every feature uses (DB wiring,
settings, logging, error rendering). Keep resource-specific SQL and business
logic in the feature package (`resources/`).
"""
