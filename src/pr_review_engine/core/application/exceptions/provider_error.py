class ProviderError(Exception):
    """Failure reported by an external provider (LLM gateway, code host API)."""

    def __init__(
        self,
        provider: str,
        message: str,
        *,
        retryable: bool = False,
        status_code: int | None = None,
        error_code: str | None = None,
    ) -> None:
        super().__init__(message)
        self.provider = provider
        self.message = message
        self.retryable = retryable
        self.status_code = status_code
        self.error_code = error_code

    def __str__(self) -> str:
        status = f" [{self.status_code}]" if self.status_code is not None else ""
        return f"{self.provider}{status}: {self.message}"
