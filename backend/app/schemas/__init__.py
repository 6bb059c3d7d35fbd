"""Pydantic request and response schemas for the Courtside API."""
