from __future__ import annotations

from pydantic import BaseModel

__all__ = ["RequestView"]


class RequestView(BaseModel):
    """Read-only snapshot of an inbound request.

    Built once per request by the HTTP layer and handed to route handlers.
    Headers and query keep their wire order and repeats, as (name, value) pairs.
    """

    model_config = {"frozen": True}

    method: str
    url: str
    path: str
    proto: str = "HTTP/1.1"
    query: tuple[tuple[str, str], ...] = ()
    headers: tuple[tuple[str, str], ...] = ()
    body: bytes = b""

    def has_header(self, name: str) -> bool:
        """Return True if a header with this name was sent (case-insensitive)."""
        wanted = name.lower()
        return any(k.lower() == wanted for k, _ in self.headers)

    def header_map(self) -> dict[str, list[str]]:
        """Group header values by lower-cased name, preserving order."""
        out: dict[str, list[str]] = {}
        for k, v in self.headers:
            out.setdefault(k.lower(), []).append(v)
        return out

    def query_map(self) -> dict[str, list[str]]:
        out: dict[str, list[str]] = {}
        for k, v in self.query:
            out.setdefault(k, []).append(v)
        return out
