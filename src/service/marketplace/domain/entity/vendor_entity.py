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
class Vendor:
    identity: ParticipantIdentity
    tickets_per_release: int
    ticket_release_interval: float  # seconds
    tickets_to_sell: int
    tickets_released: int = 0
    total_tickets_sold: int = 0
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
        tickets_per_release: int,
        ticket_release_interval: float,
        tickets_to_sell: int,
    ) -> 'Vendor':
        require_positive(
            tickets_per_release=tickets_per_release,
            ticket_release_interval=ticket_release_interval,
            tickets_to_sell=tickets_to_sell,
        )
        return cls(
            identity=ParticipantIdentity(name=name, email=email, hashed_password=hashed_password),
            tickets_per_release=tickets_per_release,
            ticket_release_interval=ticket_release_interval,
            tickets_to_sell=tickets_to_sell,
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
    def remaining_to_release(self) -> int:
        return max(0, self.tickets_to_sell - self.tickets_released)

    @property
    def unsold_tickets(self) -> int:
        """Released but not yet sold; held off the market while inactive"""
        return max(0, self.tickets_released - self.total_tickets_sold)

    @property
    def is_sold_out(self) -> bool:
        return self.total_tickets_sold >= self.tickets_to_sell

    def record_release(self, count: int) -> 'Vendor':
        return attrs.evolve(
            self,
            tickets_released=self.tickets_released + count,
            is_active=self.is_active and not self.is_sold_out,
        )

    def record_sale(self, count: int) -> 'Vendor':
        sold = self.total_tickets_sold + count
        return attrs.evolve(
            self, total_tickets_sold=sold, is_active=self.is_active and sold < self.tickets_to_sell
        )

    def reconcile_sold(self, sold: int) -> 'Vendor':
        sold = max(self.total_tickets_sold, sold)
        return attrs.evolve(
            self, total_tickets_sold=sold, is_active=self.is_active and sold < self.tickets_to_sell
        )

    def deactivate(self) -> 'Vendor':
        return attrs.evolve(self, is_active=False)

    def reactivate(
        self,
        *,
        tickets_per_release: Optional[int] = None,
        ticket_release_interval: Optional[float] = None,
        tickets_to_sell: Optional[int] = None,
    ) -> 'Vendor':
        """Return an active copy, optionally with new release parameters"""
        updated = attrs.evolve(
            self,
            tickets_per_release=tickets_per_release or self.tickets_per_release,
            ticket_release_interval=ticket_release_interval or self.ticket_release_interval,
            tickets_to_sell=tickets_to_sell or self.tickets_to_sell,
            is_active=True,
        )
        require_positive(
            tickets_per_release=updated.tickets_per_release,
            ticket_release_interval=updated.ticket_release_interval,
            tickets_to_sell=updated.tickets_to_sell,
        )
        if updated.tickets_to_sell < updated.tickets_released:
            raise DomainError(
                f'tickets_to_sell cannot be lower than the {updated.tickets_released} tickets already released'
            )
        if updated.is_sold_out:
            raise DomainError('Vendor has already sold all tickets')
        return updated
