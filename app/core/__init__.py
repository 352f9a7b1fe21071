"""Core application settings, logging and auth."""
