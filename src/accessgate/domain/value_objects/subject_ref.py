"""Grant subject - a user or a role, never both."""

from dataclasses import dataclass
from uuid import UUID

from accessgate.domain.exceptions import InvalidGrantTarget


@dataclass(frozen=True)
class SubjectRef:
    """Addressee of a grant: exactly one of user_id or role_id."""

    user_id: str | None = None
    role_id: UUID | None = None

    def __post_init__(self) -> None:
        if (self.user_id is None) == (self.role_id is None):
            raise InvalidGrantTarget("Grant subject must be exactly one of user_id or role_id")
        if self.user_id is not None and not self.user_id.strip():
            raise InvalidGrantTarget("Grant subject user_id must not be blank")

    @classmethod
    def user(cls, user_id: str) -> "SubjectRef":
        return cls(user_id=user_id)

    @classmethod
    def role(cls, role_id: UUID) -> "SubjectRef":
        return cls(role_id=role_id)

    @property
    def is_user(self) -> bool:
        return self.user_id is not None

    def __str__(self) -> str:
        return f"user:{self.user_id}" if self.is_user else f"role:{self.role_id}"
