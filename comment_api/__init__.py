"""Comment API - CRUD service for post comments."""
