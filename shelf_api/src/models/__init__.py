"""Data models for the FastAPI service.

Pydantic request, response and domain models for users, books, movies and
reviews.
"""
