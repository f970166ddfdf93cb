"""Error taxonomy shared by the pipeline and the HTTP layer.

Each error carries the status code and short title the route boundary renders
as ``{"error": title, "message": str(exc)}``.
"""

class NewsVerifyError(Exception):
    status_code = 500
    title = "Internal server error"


class ValidationError(NewsVerifyError):
    status_code = 400
    title = "Validation failed"


class AuthError(NewsVerifyError):
    status_code = 401
    title = "Authentication required"


class NotFoundError(NewsVerifyError):
    status_code = 404
    title = "Analysis not found"


class ExtractionError(NewsVerifyError):
    status_code = 502
    title = "Analysis failed"


class ExternalServiceError(NewsVerifyError):
    """Text-generation failure. Recovered inside the AI analyzer, never rendered."""
    status_code = 502
    title = "External service failed"
