"""
Per-role behaviour of a ParticipantRunner.

A runner knows nothing about vendors or customers: each cycle it asks its
strategy whether the participant is done, how many tickets to try for, and
to perform the attempt against the pool controller.
"""

from abc import ABC, abstractmethod

from src.service.marketplace.app.pool.ticket_pool_controller import TicketPoolController
from src.service.marketplace.domain.entity.customer_entity import Customer
from src.service.marketplace.domain.entity.vendor_entity import Vendor
from src.service.marketplace.domain.enum.participant_role import ParticipantRole
from src.service.marketplace.domain.value_object.pool_status import PoolStatus


class AttemptStrategy(ABC):
    role: ParticipantRole

    @property
    @abstractmethod
    def participant_id(self) -> str:
        pass

    @property
    @abstractmethod
    def participant_name(self) -> str:
        pass

    @property
    @abstractmethod
    def interval(self) -> float:
        """Seconds between attempts"""
        pass

    @abstractmethod
    def cap_reached(self) -> bool:
        pass

    @abstractmethod
    def next_attempt_size(self, status: PoolStatus) -> int:
        """Tickets to attempt this cycle; 0 means wait for the pool to change"""
        pass

    @abstractmethod
    async def attempt(self, *, controller: TicketPoolController, size: int) -> int:
        """Run one release/purchase and return how many tickets moved"""
        pass


class VendorAttemptStrategy(AttemptStrategy):
    role = ParticipantRole.VENDOR

    def __init__(self, *, vendor: Vendor) -> None:
        self.vendor = vendor
        self.tickets_released = vendor.tickets_released

    @property
    def participant_id(self) -> str:
        return self.vendor.id

    @property
    def participant_name(self) -> str:
        return self.vendor.name

    @property
    def interval(self) -> float:
        return self.vendor.ticket_release_interval

    @property
    def remaining_to_release(self) -> int:
        return max(0, self.vendor.tickets_to_sell - self.tickets_released)

    def cap_reached(self) -> bool:
        return self.remaining_to_release == 0

    def next_attempt_size(self, status: PoolStatus) -> int:
        return max(
            0,
            min(
                self.vendor.tickets_per_release,
                status.ticket_release_rate,
                status.remaining_capacity,
                self.remaining_to_release,
            ),
        )

    async def attempt(self, *, controller: TicketPoolController, size: int) -> int:
        await controller.release(vendor_id=self.vendor.id, count=size)
        self.tickets_released += size
        return size


class CustomerAttemptStrategy(AttemptStrategy):
    role = ParticipantRole.CUSTOMER

    def __init__(self, *, customer: Customer) -> None:
        self.customer = customer
        self.tickets_purchased = customer.total_tickets_purchased

    @property
    def participant_id(self) -> str:
        return self.customer.id

    @property
    def participant_name(self) -> str:
        return self.customer.name

    @property
    def interval(self) -> float:
        return self.customer.ticket_retrieval_interval

    @property
    def remaining_to_purchase(self) -> int:
        return max(0, self.customer.tickets_to_purchase - self.tickets_purchased)

    def cap_reached(self) -> bool:
        return self.remaining_to_purchase == 0

    def next_attempt_size(self, status: PoolStatus) -> int:
        return max(
            0,
            min(
                status.customer_retrieval_rate,
                status.available_tickets,
                self.remaining_to_purchase,
            ),
        )

    async def attempt(self, *, controller: TicketPoolController, size: int) -> int:
        purchased = await controller.purchase(customer_id=self.customer.id, requested_count=size)
        self.tickets_purchased += purchased
        return purchased
