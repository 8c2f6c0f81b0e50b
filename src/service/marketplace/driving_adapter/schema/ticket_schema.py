from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from src.service.marketplace.domain.entity.ticket_entity import Ticket


class TicketResponse(BaseModel):
    """Ticket response."""

    id: str
    vendor_id: str
    customer_id: Optional[str] = None
    event_name: str
    created_at: datetime
    purchased_at: Optional[datetime] = None

    class Config:
        json_schema_extra = {
            'example': {
                'id': '0192f7c4-2b1e-7cc3-9a55-5d0b3c0e9e10',
                'vendor_id': '0192f7c3-ffa0-7a21-8f0e-6c1d2b3a4f50',
                'customer_id': '0192f7c4-0a11-7b42-a3c1-1e2d3c4b5a60',
                'event_name': 'Summer Concert',
                'created_at': '2026-07-01T18:00:00Z',
                'purchased_at': '2026-07-01T18:00:00Z',
            }
        }

    @classmethod
    def from_entity(cls, ticket: Ticket) -> 'TicketResponse':
        return cls(
            id=ticket.id,
            vendor_id=ticket.vendor_id,
            customer_id=ticket.customer_id,
            event_name=ticket.event_name,
            created_at=ticket.created_at,
            purchased_at=ticket.purchased_at,
        )
