"""
Error taxonomy shared by the engines and rendered by the API exception handlers
"""


class FeedbackServiceError(Exception):
    """Base class for errors that map onto a client-visible HTTP status"""

    status_code: int = 500
    default_message: str = "Server Error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InputValidationError(FeedbackServiceError):
    status_code = 400
    default_message = "Invalid request"


class UnauthorizedError(FeedbackServiceError):
    status_code = 401
    default_message = "Access denied. No token provided. Please login to continue"


class ForbiddenError(FeedbackServiceError):
    status_code = 403
    default_message = "Access denied"


class NotFoundError(FeedbackServiceError):
    status_code = 404
    default_message = "Resource not found"


class ConflictError(FeedbackServiceError):
    status_code = 409
    default_message = "Conflicting state"


class UpstreamUnavailableError(FeedbackServiceError):
    """An external collaborator (reply generation, attachment storage) failed"""

    status_code = 502
    default_message = "Upstream service unavailable"
