from datetime import datetime, timezone
from typing import Optional

import attrs

from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.domain.entity.participant_entity import (
    ParticipantIdentity,
    require_positive,
)


@attrs.define(frozen=True)
class Customer:
    identity: ParticipantIdentity
    tickets_to_purchase: int
    ticket_retrieval_interval: float  # seconds
    total_tickets_purchased: int = 0
    is_active: bool = True
    created_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        name: str,
        email: str,
        hashed_password: str,
        tickets_to_purchase: int,
        ticket_retrieval_interval: float,
    ) -> 'Customer':
        require_positive(
            tickets_to_purchase=tickets_to_purchase,
            ticket_retrieval_interval=ticket_retrieval_interval,
        )
        return cls(
            identity=ParticipantIdentity(name=name, email=email, hashed_password=hashed_password),
            tickets_to_purchase=tickets_to_purchase,
            ticket_retrieval_interval=ticket_retrieval_interval,
            created_at=datetime.now(timezone.utc),
        )

    @property
    def id(self) -> str:
        return self.identity.id

    @property
    def name(self) -> str:
        return self.identity.name

    @property
    def email(self) -> str:
        return self.identity.email

    @property
    def remaining_to_purchase(self) -> int:
        return max(0, self.tickets_to_purchase - self.total_tickets_purchased)

    @property
    def has_reached_limit(self) -> bool:
        return self.total_tickets_purchased >= self.tickets_to_purchase

    def record_purchase(self, count: int) -> 'Customer':
        purchased = self.total_tickets_purchased + count
        return attrs.evolve(
            self,
            total_tickets_purchased=purchased,
            is_active=self.is_active and purchased < self.tickets_to_purchase,
        )

    def reconcile_remaining(self, remaining: int) -> 'Customer':
        purchased = max(self.total_tickets_purchased, self.tickets_to_purchase - remaining)
        return attrs.evolve(
            self,
            total_tickets_purchased=purchased,
            is_active=self.is_active and purchased < self.tickets_to_purchase,
        )

    def deactivate(self) -> 'Customer':
        return attrs.evolve(self, is_active=False)

    def reactivate(
        self,
        *,
        tickets_to_purchase: Optional[int] = None,
        ticket_retrieval_interval: Optional[float] = None,
    ) -> 'Customer':
        updated = attrs.evolve(
            self,
            tickets_to_purchase=tickets_to_purchase or self.tickets_to_purchase,
            ticket_retrieval_interval=ticket_retrieval_interval or self.ticket_retrieval_interval,
            is_active=True,
        )
        require_positive(
            tickets_to_purchase=updated.tickets_to_purchase,
            ticket_retrieval_interval=updated.ticket_retrieval_interval,
        )
        if updated.has_reached_limit:
            raise DomainError(
                f'Customer has already purchased {updated.total_tickets_purchased} of {updated.tickets_to_purchase} tickets'
            )
        return updated
