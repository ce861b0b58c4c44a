"""Utilities shared by the Shelf API server and its client package."""
