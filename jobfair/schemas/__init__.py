"""
Schemas module - Request/Response schemas for API endpoints and the
result values returned by services.
"""
