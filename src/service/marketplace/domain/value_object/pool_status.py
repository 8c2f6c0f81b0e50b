from typing import Optional

import attrs

from src.service.marketplace.domain.enum.pool_state import PoolState


@attrs.define(frozen=True)
class PoolStatus:
    """Point-in-time view of the ticket pool"""

    state: PoolState
    available_tickets: int = 0
    event_name: Optional[str] = None
    max_capacity: int = 0
    ticket_release_rate: int = 0
    customer_retrieval_rate: int = 0

    @property
    def configured(self) -> bool:
        return self.state == PoolState.CONFIGURED

    @property
    def remaining_capacity(self) -> int:
        return max(0, self.max_capacity - self.available_tickets)
