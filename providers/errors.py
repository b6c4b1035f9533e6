"""Provider error type shared by every LLM backend."""


class ProviderError(Exception):
    """An LLM call that did not produce usable content.

    Attributes:
        code: One of the class-level codes below
        retryable: True when the same call may succeed later
    """

    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    RATE_LIMITED = "RATE_LIMITED"
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
    EMPTY_RESPONSE = "EMPTY_RESPONSE"
    API_ERROR = "API_ERROR"

    def __init__(self, message: str, code: str = API_ERROR, retryable: bool = False):
        super().__init__(message)
        self.code = code
        self.retryable = retryable

    def __repr__(self) -> str:
        return f"ProviderError({str(self)!r}, code={self.code!r}, retryable={self.retryable})"
