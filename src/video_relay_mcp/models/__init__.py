"""Pydantic value objects for the video relay."""
