"""
Authentication helpers for the Gateway service.
"""

from .token_authenticator import (
    AuthenticationFailure,
    AuthenticationResult,
    Principal,
    SigningKey,
    TokenAuthenticator,
)

__all__ = [
    "AuthenticationFailure",
    "AuthenticationResult",
    "Principal",
    "SigningKey",
    "TokenAuthenticator",
]
