"""
Authentication module for the health program system.

This module provides authentication and authorization functionality including:
- Client registration with a client profile
- Email verification
- Password reset and password change
- JWT token authentication
- Role-based access control
"""
