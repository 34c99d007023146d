"""
Integration tests for the HTTP service clients.

Tests run against the Flask stub of the JSONPlaceholder API and cover:
- CRUD operations on posts and users
- Nested resources (post comments, posts by user)
- Transport and decoding error handling
"""
