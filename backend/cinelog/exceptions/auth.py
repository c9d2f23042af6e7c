class AuthException(Exception):
    """Base exception for authentication errors"""
    pass

class InvalidTokenException(AuthException):
    """Raised when a bearer token is missing, expired or fails verification"""
    pass
