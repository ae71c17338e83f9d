"""
Domain schemas.

Pydantic models for service inputs, listing filters and API responses.
"""
