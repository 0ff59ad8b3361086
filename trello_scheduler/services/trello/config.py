"""Trello API config. Application key from settings (TRELLO_API_KEY); the user token travels with each action."""
from trello_scheduler.config import settings

DEFAULT_BASE_URL = "https://api.trello.com/1"


class TrelloConfig:
    """Application key, base URL and timeout for Trello."""

    __slots__ = ("api_key", "base_url", "timeout")

    def __init__(
        self,
        *,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self.api_key = (api_key if api_key is not None else settings.trello_api_key).strip()
        self.base_url = (base_url or settings.trello_base_url or DEFAULT_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.trello_timeout_seconds

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def auth_params(self, token: str) -> dict[str, str]:
        return {"key": self.api_key, "token": token}

    def headers(self) -> dict[str, str]:
        return {"Accept": "application/json"}
