"""
Actor context.

Identity of whoever performs an operation, passed explicitly to every
service that mutates data.
"""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class ActorContext:
    user: Any = None
    ip_address: Optional[str] = None
    user_agent: str = ''

    @classmethod
    def from_request(cls, request) -> 'ActorContext':
        meta = getattr(request, 'META', {})
        forwarded = meta.get('HTTP_X_FORWARDED_FOR', '')
        ip = forwarded.split(',')[0].strip() if forwarded else meta.get('REMOTE_ADDR')
        user = getattr(request, 'user', None)
        return cls(
            user=user if user is not None and user.is_authenticated else None,
            ip_address=ip or None,
            user_agent=meta.get('HTTP_USER_AGENT', '')[:500],
        )

    @classmethod
    def system(cls) -> 'ActorContext':
        """Context for background jobs and management commands."""
        return cls(user_agent='system')

    @property
    def username(self) -> str:
        if self.user is None:
            return 'system' if self.user_agent == 'system' else ''
        return self.user.get_username()
