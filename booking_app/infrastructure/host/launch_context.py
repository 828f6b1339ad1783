from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping
from urllib.parse import parse_qs, urlsplit

from booking_app.application.ports.token_source import TokenSourcePort


@dataclass(frozen=True)
class LaunchContext(TokenSourcePort):
    """
    What the host hands over when the booking view opens.

    The token comes from the host start parameter first, then from the `token`
    query parameter of the page URL.
    """

    start_param: str | None = None
    url: str | None = None
    user_id: str | None = None

    @classmethod
    def from_host_payload(cls, payload: Mapping[str, Any] | None, url: str | None = None) -> "LaunchContext":
        """Build from the host's unsafe init data ({"start_param": ..., "user": {"id": ...}})."""
        payload = payload or {}
        user = payload.get("user") or {}
        user_id = user.get("id") if isinstance(user, Mapping) else None
        return cls(
            start_param=payload.get("start_param") or None,
            url=url,
            user_id=str(user_id) if user_id is not None else None,
        )

    def get_token(self) -> str | None:
        if self.start_param:
            return self.start_param
        return query_token(self.url)

    def get_user_id(self) -> str | None:
        return self.user_id


def query_token(url: str | None) -> str | None:
    if not url:
        return None
    values = parse_qs(urlsplit(url).query).get("token")
    if not values:
        return None
    return values[0] or None
