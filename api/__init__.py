"""
FastAPI RESTful API for the Book Tracker.

This module provides a REST API for:
- Logging in and issuing bearer tokens
- Listing, searching, sorting and paginating a user's books
- Adding, editing and deleting books
- Reading statistics
"""
