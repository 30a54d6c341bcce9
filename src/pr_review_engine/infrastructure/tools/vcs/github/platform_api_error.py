from collections.abc import Mapping

from pr_review_engine.core.application.exceptions import ProviderError


class PlatformApiError(ProviderError):
    """Non-2xx answer from the code host, with the headers needed to classify it."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        headers: Mapping[str, str] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__("GitHub", message, retryable=retryable, status_code=status_code)
        self.headers: dict[str, str] = {k.lower(): v for k, v in (headers or {}).items()}

    def header_int(self, name: str) -> int | None:
        value = self.headers.get(name.lower())
        if value is None:
            return None
        try:
            return int(value.strip())
        except ValueError:
            return None
