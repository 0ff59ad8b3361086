"""Trello API client: lowest level, sends request only. No validation, never raises."""
from typing import Any

import httpx

from trello_scheduler.services.trello.config import TrelloConfig


class TrelloClient:
    """Card comment and due-complete client. Every call returns a dict; failures carry an "error" key."""

    def __init__(self, config: TrelloConfig | None = None, *, transport: httpx.BaseTransport | None = None) -> None:
        self._config = config or TrelloConfig()
        self._transport = transport

    def _credentials_error(self) -> dict[str, Any]:
        return {"error": "Trello API key not configured. Add TRELLO_API_KEY to .env."}

    def _request(self, method: str, path: str, params: dict[str, str]) -> dict[str, Any]:
        if not self._config.is_configured():
            return self._credentials_error()
        url = f"{self._config.base_url}{path}"
        try:
            with httpx.Client(timeout=self._config.timeout, transport=self._transport) as c:
                r = c.request(method, url, params=params, headers=self._config.headers())
        except Exception as e:
            return {"error": str(e)}
        if not r.is_success:
            return {
                "error": f"Trello API error: {r.status_code}",
                "status_code": r.status_code,
                "detail": (r.text[:500] if r.text else None),
            }
        try:
            return r.json() if r.content else {}
        except Exception:
            return {"_raw_body": (r.text[:2000] if r.text else "")}

    def add_comment(self, card_id: str, text: str, token: str) -> dict[str, Any]:
        """POST a comment on the card as the token's user."""
        params = {**self._config.auth_params(token), "text": text}
        return self._request("POST", f"/cards/{card_id}/actions/comments", params)

    def set_due_complete(self, card_id: str, complete: bool, token: str) -> dict[str, Any]:
        """PUT the card's dueComplete flag."""
        params = {**self._config.auth_params(token), "dueComplete": "true" if complete else "false"}
        return self._request("PUT", f"/cards/{card_id}", params)
