from datetime import datetime
from typing import Optional

import attrs
import uuid_utils


@attrs.define(frozen=True)
class Ticket:
    """A sold ticket; created at purchase time and never mutated afterwards"""

    vendor_id: str
    customer_id: Optional[str]
    event_name: str
    created_at: datetime
    purchased_at: Optional[datetime] = None
    id: str = attrs.field(factory=lambda: str(uuid_utils.uuid7()))

    @classmethod
    def issue(
        cls, *, vendor_id: str, customer_id: str, event_name: str, purchased_at: datetime
    ) -> 'Ticket':
        return cls(
            vendor_id=vendor_id,
            customer_id=customer_id,
            event_name=event_name,
            created_at=purchased_at,
            purchased_at=purchased_at,
        )
