"""Custom exceptions for the SCIMS admin backend."""

class ScimsError(Exception):
    """Base exception for all application errors."""
    def __init__(self, message="An internal error occurred", status_code=500, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    def to_dict(self):
        rv = dict(self.payload or ())
        rv['success'] = False
        rv['error'] = self.message
        # Callers tell "never ran" apart from "ran with errors" by the empty map
        rv.setdefault('results', {})
        return rv

class AuthenticationError(ScimsError):
    """Raised when no logged-in, active user is attached to the request."""
    def __init__(self, message="Unauthorized. Please log in."):
        super().__init__(message, 401)

class UnauthorizedError(ScimsError):
    """Raised when a user lacks permission for an action."""
    def __init__(self, message="Unauthorized access"):
        super().__init__(message, 403)

class ProtectedSetResolutionError(ScimsError):
    """Raised when the rows that must survive a cleanup cannot be determined."""
    def __init__(self, message="Could not resolve protected accounts", payload=None):
        super().__init__(message, 500, payload)
