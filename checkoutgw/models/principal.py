from dataclasses import dataclass
from typing import Optional, Tuple

from flask_login import UserMixin


@dataclass(frozen=True)
class Principal(UserMixin):
    """Authenticated user attempting a checkout.

    Supplied by the auth layer through the Flask-Login user loader and
    never mutated during a checkout attempt.
    """
    id: str
    email: str
    full_name: Optional[str] = None
    phone: Optional[str] = None
    workspace_id: Optional[str] = None

    def split_name(self) -> Tuple[str, str]:
        """Split the display name into (first, last) at the first whitespace."""
        parts = (self.full_name or '').split(None, 1)
        if not parts:
            return '', ''
        if len(parts) == 1:
            return parts[0], ''
        # line breaks and tabs in a display name collapse to single spaces
        return parts[0], ' '.join(parts[1].split())

    @classmethod
    def from_dict(cls, data):
        """Build a principal from an auth-layer record (e.g. a profile row)."""
        return cls(
            id=str(data['id']),
            email=data.get('email') or '',
            full_name=data.get('full_name'),
            phone=data.get('phone'),
            workspace_id=data.get('workspace_id'),
        )
