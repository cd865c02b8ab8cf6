"""Pydantic schemas for stored documents and API contracts."""
