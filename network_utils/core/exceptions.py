from typing import Any, Dict, Optional

class NetworkUtilsError(Exception):
    """Base exception class for all network_utils exceptions"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

class ConfigError(NetworkUtilsError):
    """Raised when there is a configuration error"""
    pass

class LoggerError(NetworkUtilsError):
    """Raised when there is a logging error"""
    pass

class ValidationError(NetworkUtilsError):
    """Raised when an argument fails validation"""
    pass

class CredentialFormatError(NetworkUtilsError, ValueError):
    """Raised when pre-signed upload credentials are malformed"""
    pass

class NetworkError(NetworkUtilsError):
    """Raised when a response carries a JSON value that is not an object"""
    def __init__(self, status_code: int, body: Optional[Dict[str, Any]] = None):
        super().__init__(
            f"Unexpected response shape (status {status_code})",
            details={"status_code": status_code, "body": body}
        )
        self.status_code = status_code
        self.body = body
