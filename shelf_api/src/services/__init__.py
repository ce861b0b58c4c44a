"""Business logic services.

This package contains the account service, the Open Library / OMDb lookup
clients and the profile picture storage used by the routers.
"""
