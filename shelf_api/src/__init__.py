"""FastAPI service proxying media shelf records to Airtable.

This package provides REST API endpoints for user accounts, saved books and
movies, reviews, and Open Library / OMDb metadata lookups.
"""

__version__ = "1.0.0"
