"""Models package - settings, Pydantic schemas and domain exceptions."""
