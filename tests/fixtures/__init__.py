"""Shared test fixtures.

Contains fixtures for:
- In-memory and failure-injecting content repositories
- Content sessions
- The FastAPI application and HTTP clients
"""
