class AnalysisError(Exception):
    """Base error for a failed analysis request; maps to an HTTP status."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AnalysisError):
    status_code = 400


class InvalidTypeError(AnalysisError):
    status_code = 400

    def __init__(self, message: str = "Invalid analysis type."):
        super().__init__(message)


class MethodError(AnalysisError):
    status_code = 405

    def __init__(self, message: str = "Method Not Allowed (must be POST)"):
        super().__init__(message)


class ConfigurationError(AnalysisError):
    status_code = 500


class UpstreamError(AnalysisError):
    # Gemini failed or returned something unusable
    status_code = 502
