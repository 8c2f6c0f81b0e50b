from datetime import datetime, timezone
from typing import Optional

import attrs

from src.platform.exception.exceptions import InvalidConfigurationError
from src.platform.logging.loguru_io import Logger


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@attrs.define(frozen=True)
class EventConfiguration:
    event_name: str
    max_capacity: int
    ticket_release_rate: int
    customer_retrieval_rate: int
    total_tickets: int = 0  # reported snapshot of the pool, not authoritative
    event_date: datetime = attrs.field(factory=_utc_now)
    updated_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        event_name: str,
        max_capacity: int,
        ticket_release_rate: int,
        customer_retrieval_rate: int,
        total_tickets: int = 0,
        event_date: Optional[datetime] = None,
    ) -> 'EventConfiguration':
        config = cls(
            event_name=(event_name or '').strip(),
            max_capacity=max_capacity,
            ticket_release_rate=ticket_release_rate,
            customer_retrieval_rate=customer_retrieval_rate,
            total_tickets=total_tickets,
            event_date=event_date or _utc_now(),
        )
        config.validate()
        return config

    def collect_violations(self) -> list[str]:
        violations = []
        if self.total_tickets < 0:
            violations.append('Total tickets must not be negative')
        if self.max_capacity <= 0:
            violations.append('Maximum capacity must be greater than zero')
        if self.ticket_release_rate <= 0:
            violations.append('Ticket release rate must be greater than zero')
        if self.customer_retrieval_rate <= 0:
            violations.append('Customer retrieval rate must be greater than zero')
        if not self.event_name or not self.event_name.strip():
            violations.append('Event name must not be empty')
        return violations

    def validate(self) -> None:
        if violations := self.collect_violations():
            raise InvalidConfigurationError('; '.join(violations))

    def with_total_tickets(self, total_tickets: int) -> 'EventConfiguration':
        return attrs.evolve(self, total_tickets=total_tickets, updated_at=_utc_now())
