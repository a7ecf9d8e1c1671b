"""API-specific utilities."""
