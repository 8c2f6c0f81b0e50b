"""
Pool API Schemas - Pydantic models for request/response
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from src.service.marketplace.domain.entity.event_configuration_entity import EventConfiguration
from src.service.marketplace.domain.enum.pool_state import PoolState
from src.service.marketplace.domain.value_object.pool_status import PoolStatus


class EventConfigurationRequest(BaseModel):
    """Numbers are checked by the domain so every violation is reported at once"""

    event_name: str = Field(..., max_length=255)
    max_capacity: int
    ticket_release_rate: int
    customer_retrieval_rate: int
    total_tickets: int = 0
    event_date: Optional[datetime] = None

    class Config:
        json_schema_extra = {
            'example': {
                'event_name': 'Summer Concert',
                'max_capacity': 100,
                'ticket_release_rate': 5,
                'customer_retrieval_rate': 3,
                'total_tickets': 0,
                'event_date': '2026-07-01T19:30:00Z',
            }
        }


class EventConfigurationResponse(BaseModel):
    event_name: str
    max_capacity: int
    ticket_release_rate: int
    customer_retrieval_rate: int
    total_tickets: int
    event_date: datetime
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, config: EventConfiguration) -> 'EventConfigurationResponse':
        return cls(
            event_name=config.event_name,
            max_capacity=config.max_capacity,
            ticket_release_rate=config.ticket_release_rate,
            customer_retrieval_rate=config.customer_retrieval_rate,
            total_tickets=config.total_tickets,
            event_date=config.event_date,
            updated_at=config.updated_at,
        )


class PoolStatusResponse(BaseModel):
    state: PoolState
    available_tickets: int
    event_name: Optional[str] = None
    max_capacity: int = 0
    ticket_release_rate: int = 0
    customer_retrieval_rate: int = 0

    class Config:
        json_schema_extra = {
            'example': {
                'state': 'configured',
                'available_tickets': 42,
                'event_name': 'Summer Concert',
                'max_capacity': 100,
                'ticket_release_rate': 5,
                'customer_retrieval_rate': 3,
            }
        }

    @classmethod
    def from_status(cls, status: PoolStatus) -> 'PoolStatusResponse':
        return cls(
            state=status.state,
            available_tickets=status.available_tickets,
            event_name=status.event_name,
            max_capacity=status.max_capacity,
            ticket_release_rate=status.ticket_release_rate,
            customer_retrieval_rate=status.customer_retrieval_rate,
        )
