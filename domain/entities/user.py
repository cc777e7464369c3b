"""
User Entity - Clean Architecture Domain Layer
Account owning zero or more roadmaps
"""
import re
from dataclasses import dataclass, field
from typing import Dict, Optional, Any
from datetime import datetime
from uuid import uuid4

from ..exceptions.domain_exceptions import ValidationFailedError

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50
PASSWORD_MIN_LENGTH = 6


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


@dataclass
class User:
    """
    Entity representing a registered account.
    The password hash is opaque to the domain; hashing lives in infrastructure.
    """
    name: str
    email: str
    password_hash: str

    user_id: str = field(default_factory=lambda: uuid4().hex)
    is_active: bool = True
    created_at: datetime = field(default_factory=datetime.now)
    last_login_at: Optional[datetime] = None

    def __post_init__(self):
        self.name = (self.name or "").strip()
        self.email = normalize_email(self.email)
        self._validate_user()

    def _validate_user(self):
        errors: Dict[str, str] = {}
        if not NAME_MIN_LENGTH <= len(self.name) <= NAME_MAX_LENGTH:
            errors["name"] = (
                f"Name must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters"
            )
        if not _EMAIL_PATTERN.match(self.email):
            errors["email"] = "Please provide a valid email"
        if not self.password_hash:
            errors["password"] = "Password is required"
        if errors:
            raise ValidationFailedError(errors)

    def record_login(self) -> None:
        self.last_login_at = datetime.now()

    @property
    def profile(self) -> Dict[str, Any]:
        """Public view of the account (never includes the password hash)."""
        return {
            "id": self.user_id,
            "name": self.name,
            "email": self.email,
            "createdAt": self.created_at.isoformat(),
            "lastLogin": self.last_login_at.isoformat() if self.last_login_at else None,
        }

    def __eq__(self, other) -> bool:
        if not isinstance(other, User):
            return False
        return self.user_id == other.user_id

    def __hash__(self) -> int:
        return hash(self.user_id)
