"""Shelf API: HTTP backend for saved books, movies and reviews."""
