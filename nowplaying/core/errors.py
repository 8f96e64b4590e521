from __future__ import annotations

from typing import List


class ConfigurationError(RuntimeError):
    def __init__(self, missing: List[str]) -> None:
        self.missing = list(missing)
        super().__init__(
            "Missing env vars: " + ", ".join(self.missing) + ". Check your .env."
        )


class SpotifyApiError(RuntimeError):
    """Non-success response from the accounts or web API."""

    def __init__(self, what: str, status_code: int, body: str = "") -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"{what} failed: {status_code} {body}".strip())
