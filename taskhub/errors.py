# taskhub/errors.py
"""
Error taxonomy shared by services and routers.

Services raise these at the point of detection; ``main.py`` maps them to
HTTP responses through a single exception handler.
"""

from fastapi import status


class TaskHubError(Exception):
    """Base class for errors that map onto an HTTP status code"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(TaskHubError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"


class NotFoundError(TaskHubError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ForbiddenError(TaskHubError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not authorized"


class UnauthenticatedError(TaskHubError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class ConflictError(TaskHubError):
    # Duplicate email is reported as a bad request
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Already exists"
