from dataclasses import dataclass
from dataclasses import field
from datetime import datetime
from datetime import timedelta
from datetime import timezone
from typing import Any
from typing import Optional
from urllib.parse import parse_qsl
from urllib.parse import urlsplit


def _to_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


@dataclass
class VkAuthorization:
    """Outcome of one authorization attempt.

    Produced from the URL VK redirects to at the end of the login flow, e.g.
    ``https://oauth.vk.com/blank.html#access_token=...&expires_in=0&user_id=1``.
    """

    access_token: Optional[str] = None
    expires_in: int = 0
    user_id: Optional[int] = None
    email: Optional[str] = None
    state: Optional[str] = None
    captcha_id: Optional[int] = None
    error: Optional[str] = None
    error_description: Optional[str] = None
    is_authorization_required: bool = False
    issued_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_url(cls, url: str) -> "VkAuthorization":
        """Parses the query string and the fragment of a redirect URL."""
        parts = urlsplit(url)
        params: dict[str, str] = {}
        # Fragment wins: tokens are always delivered there
        for source in (parts.query, parts.fragment):
            params.update(parse_qsl(source, keep_blank_values=True))

        return cls(
            access_token=params.get("access_token") or None,
            expires_in=_to_int(params.get("expires_in")) or 0,
            user_id=_to_int(params.get("user_id")),
            email=params.get("email") or None,
            state=params.get("state") or None,
            captcha_id=_to_int(params.get("sid")),
            error=params.get("error") or None,
            error_description=params.get("error_description") or None,
            is_authorization_required="__q_hash" in params,
        )

    @property
    def is_authorized(self) -> bool:
        return self.access_token is not None

    @property
    def expires_at(self) -> Optional[datetime]:
        """Moment the token stops working, ``None`` for non-expiring tokens."""
        if not self.is_authorized or self.expires_in == 0:
            return None
        return self.issued_at + timedelta(seconds=self.expires_in)

    def to_dict(self) -> dict[str, Any]:
        expires_at = self.expires_at
        return {
            "access_token": self.access_token,
            "expires_in": self.expires_in,
            "expires_at": expires_at.isoformat() if expires_at else None,
            "user_id": self.user_id,
            "email": self.email,
            "state": self.state,
            "captcha_id": self.captcha_id,
            "error": self.error,
            "error_description": self.error_description,
        }

    def __repr__(self):
        parts = [f"authorized={self.is_authorized}"]
        if self.user_id is not None:
            parts.append(f"user_id={self.user_id}")
        if self.captcha_id is not None:
            parts.append(f"captcha_id={self.captcha_id}")
        if self.error:
            parts.append(f"error={self.error}")
        # Never print the token itself
        return f"VkAuthorization({', '.join(parts)})"
