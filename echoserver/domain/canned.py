from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "HTML_CONTENT_TYPE",
    "DEFAULT_BODY",
    "WELCOME_BACK_BODY",
    "WELCOME_FIRST_BODY",
    "VISIT_COOKIE",
    "SECRET_BODY",
    "DIGEST_CHALLENGE",
    "REDIRECT_LOCATION",
    "REDIRECT_STATUSES",
    "INTERNAL_ERROR_BODY",
    "Reply",
]

HTML_CONTENT_TYPE = "text/html; charset=utf-8"

DEFAULT_BODY = "<html><body>Hello, World!</body></html>\n"

VISIT_COOKIE = "VISIT=TRUE"
WELCOME_BACK_BODY = "<html><body>Thank you, comeback!</body></html>\n"
WELCOME_FIRST_BODY = "<html><body>Thank you, you're first visit!</body></html>\n"

SECRET_BODY = "<html><body>secret page</body></html>\n"
# Fixed challenge; the Authorization answer is never checked.
DIGEST_CHALLENGE = (
    'Digest realm="Secret Zone", '
    'nonce="TgLc25U2BQA=f510a2780473e18e6587be8-2c2e78fe2b04afd", '
    'algorithm=MD5, qop="auth"'
)

REDIRECT_LOCATION = "/redirected-location"
# route key -> status code
REDIRECT_STATUSES: dict[str, int] = {
    "redirect-300": 300,
    "redirect-301": 301,
    "redirect-302": 302,
    "redirect-303": 303,
    "redirect-307": 307,
}

INTERNAL_ERROR_BODY = "internal server error\n"


@dataclass(frozen=True)
class Reply:
    """What a route handler wants sent back, free of any HTTP framework.

    A reply that is not `final` gets DEFAULT_BODY appended by the dispatcher.
    """

    status: int = 200
    headers: tuple[tuple[str, str], ...] = ()
    body: str = ""
    final: bool = False
    content_type: str | None = HTML_CONTENT_TYPE

    def with_default_body(self) -> "Reply":
        if self.final:
            return self
        return Reply(
            status=self.status,
            headers=self.headers,
            body=self.body + DEFAULT_BODY,
            final=True,
            content_type=self.content_type,
        )
