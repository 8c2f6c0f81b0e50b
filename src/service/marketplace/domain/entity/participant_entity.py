from typing import Any

import attrs
import uuid_utils

from src.platform.exception.exceptions import DomainError


def _validate_non_empty_string(instance: object, attribute: attrs.Attribute, value: str) -> None:
    if not value or not value.strip():
        raise ValueError(f'Participant {attribute.name} cannot be empty')


def new_participant_id() -> str:
    return str(uuid_utils.uuid7())


def require_positive(**values: Any) -> None:
    """Raise one DomainError listing every non-positive value"""
    violations = [f'{name} must be greater than zero' for name, value in values.items() if value <= 0]
    if violations:
        raise DomainError('; '.join(violations))


def validate_password_length(password: str, *, min_length: int) -> None:
    if len(password or '') < min_length:
        raise DomainError(f'Password must be at least {min_length} characters')


@attrs.define(frozen=True)
class ParticipantIdentity:
    """Identity shared by vendors and customers"""

    name: str = attrs.field(validator=_validate_non_empty_string)
    email: str = attrs.field(validator=_validate_non_empty_string)
    hashed_password: str = attrs.field(default='', repr=False)  # Hide from repr for security
    id: str = attrs.field(factory=new_participant_id)
