"""
Auth Module - User accounts.

Features:
- Registration with unique email
- Login issuing signed bearer tokens
- Token resolution for protected routes
"""

from forum_api.modules.auth.service import AuthService

__all__ = ["AuthService"]
