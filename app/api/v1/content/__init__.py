"""Editable content API endpoints."""
