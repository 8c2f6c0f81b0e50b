"""
Ticket Pool Controller

Single authority over the shared ticket pool. Vendors release tickets into it
and customers purchase from it; the controller owns every pool counter:

- available_tickets: unsold tickets in the pool (0 <= n <= max_capacity)
- vendor_available: unsold pool inventory per vendor (sums to available_tickets)
- vendor_sold: tickets sold per vendor
- customer_remaining: purchase allowance left per customer

Every operation runs under one controller-wide anyio.Lock, including its
persistence calls. Changes are staged and committed through a unit of work
first; the in-memory counters move only after the commit succeeds, so a
failed call leaves both the counters and the stored records untouched.
"""

from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

import anyio

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import (
    CapacityExceededError,
    CustomBaseError,
    DomainError,
    InvalidConfigurationError,
    LimitExceededError,
    LimitReachedError,
    NotConfiguredError,
    NotFoundError,
    PoolClosedError,
    ProcessingError,
)
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.pool.event_configuration_holder import EventConfigurationHolder
from src.service.marketplace.domain.entity.customer_entity import Customer
from src.service.marketplace.domain.entity.event_configuration_entity import EventConfiguration
from src.service.marketplace.domain.entity.ticket_entity import Ticket
from src.service.marketplace.domain.entity.vendor_entity import Vendor
from src.service.marketplace.domain.enum.pool_state import PoolState
from src.service.marketplace.domain.value_object.pool_counters import PoolCounters
from src.service.marketplace.domain.value_object.pool_status import PoolStatus
from src.service.marketplace.domain.value_object.vendor_allocation import VendorAllocation


class TicketPoolController:
    def __init__(
        self,
        *,
        config_holder: EventConfigurationHolder,
        uow_factory: Callable[[], AbstractUnitOfWork],
    ) -> None:
        self.config_holder = config_holder
        self.uow_factory = uow_factory
        self._lock = anyio.Lock()
        self._state = PoolState.UNCONFIGURED
        self._available_tickets = 0
        self._vendor_available: dict[str, int] = {}
        self._vendor_sold: dict[str, int] = {}
        self._customer_remaining: dict[str, int] = {}

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def state(self) -> PoolState:
        return self._state

    def get_status(self) -> PoolStatus:
        """
        Lock-free snapshot for runners and status endpoints.

        Counters are only reassigned in code paths without an await between
        them, so a reader never sees a half-applied update.
        """
        config = self.config_holder.current
        if self._state != PoolState.CONFIGURED or config is None:
            return PoolStatus(state=self._state, available_tickets=self._available_tickets)
        return PoolStatus(
            state=self._state,
            available_tickets=self._available_tickets,
            event_name=config.event_name,
            max_capacity=config.max_capacity,
            ticket_release_rate=config.ticket_release_rate,
            customer_retrieval_rate=config.customer_retrieval_rate,
        )

    def snapshot(self) -> PoolCounters:
        return PoolCounters(
            available_tickets=self._available_tickets,
            vendor_available=dict(self._vendor_available),
            vendor_sold=dict(self._vendor_sold),
            customer_remaining=dict(self._customer_remaining),
        )

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @Logger.io
    async def configure(self, *, config: EventConfiguration) -> EventConfiguration:
        """
        Replace the active configuration and rebuild every counter.

        Raises:
            InvalidConfigurationError: config is malformed, or max_capacity is
                below the tickets already sitting in the pool. The previous
                configuration stays active.
        """
        self.config_holder.validate(config)
        async with self._lock:
            self._ensure_open()
            return await self._configure_locked(config)

    @Logger.io
    async def reload(self) -> PoolStatus:
        """Rebuild counters from the stored active vendors and customers"""
        async with self._lock:
            config = self._require_configured()
            await self._configure_locked(config)
            return self.get_status()

    @Logger.io
    async def load_configuration(self) -> Optional[EventConfiguration]:
        """Restore the stored configuration at startup, if there is a valid one"""
        async with self._lock:
            self._ensure_open()
            async with self._transaction('load configuration') as uow:
                stored = await self.config_holder.load(uow=uow)
            if stored is None:
                Logger.base.info('📭 [POOL] No stored configuration, waiting for configure')
                return None
            return await self._configure_locked(stored)

    async def _configure_locked(self, config: EventConfiguration) -> EventConfiguration:
        async with self._transaction('apply configuration') as uow:
            counters = await self._rebuild_counters(uow=uow, config=config)
            saved = await self.config_holder.persist(
                uow=uow, config=config.with_total_tickets(counters.available_tickets)
            )
            await uow.commit()

        self.config_holder.accept(saved)
        self._apply_counters(counters)
        self._state = PoolState.CONFIGURED
        Logger.base.info(
            f'🎫 [POOL] Configured "{saved.event_name}": capacity={saved.max_capacity}, '
            f'available={self._available_tickets}, vendors={len(self._vendor_available)}, '
            f'customers={len(self._customer_remaining)}'
        )
        return saved

    async def _rebuild_counters(
        self, *, uow: AbstractUnitOfWork, config: EventConfiguration
    ) -> PoolCounters:
        vendors = await uow.vendor_repo.list_active()
        customers = await uow.customer_repo.list_active()
        sold_by_vendor = await uow.ticket_repo.count_by_vendor(vendor_ids=[v.id for v in vendors])

        vendor_available: dict[str, int] = {}
        vendor_sold: dict[str, int] = {}
        reconciled: list[Vendor] = []
        for vendor in vendors:
            # Ticket rows win over a stale counter
            reconciled_vendor = vendor.reconcile_sold(sold_by_vendor.get(vendor.id, 0))
            if reconciled_vendor != vendor:
                reconciled.append(reconciled_vendor)
            sold = reconciled_vendor.total_tickets_sold
            vendor_sold[vendor.id] = sold
            vendor_available[vendor.id] = reconciled_vendor.unsold_tickets

        available = sum(vendor_available.values())
        if available > config.max_capacity:
            raise InvalidConfigurationError(
                f'Maximum capacity of {config.max_capacity} is below the {available} tickets already in the pool'
            )
        if reconciled:
            await uow.vendor_repo.save_all(vendors=reconciled)

        return PoolCounters(
            available_tickets=available,
            vendor_available=vendor_available,
            vendor_sold=vendor_sold,
            customer_remaining={c.id: c.remaining_to_purchase for c in customers},
        )

    def _apply_counters(self, counters: PoolCounters) -> None:
        self._available_tickets = counters.available_tickets
        self._vendor_available = dict(counters.vendor_available)
        self._vendor_sold = dict(counters.vendor_sold)
        self._customer_remaining = dict(counters.customer_remaining)

    # ------------------------------------------------------------------
    # Release / purchase
    # ------------------------------------------------------------------

    @Logger.io
    async def release(self, *, vendor_id: str, count: int) -> None:
        """
        Add `count` tickets from a vendor to the pool.

        Raises:
            NotConfiguredError: no active configuration
            DomainError: count is not positive or above ticket_release_rate
            NotFoundError: vendor unknown or not active in the pool
            LimitExceededError: vendor would pass tickets_to_sell
            CapacityExceededError: pool would pass max_capacity
            ProcessingError: persistence failed
        """
        async with self._lock:
            config = self._require_configured()
            if count <= 0:
                raise DomainError('Ticket count must be greater than zero')
            if count > config.ticket_release_rate:
                raise DomainError(
                    f'Cannot release {count} tickets: release rate is {config.ticket_release_rate} per release'
                )

            async with self._transaction('release tickets') as uow:
                vendor = await uow.vendor_repo.get_by_id(vendor_id=vendor_id)
                if vendor is None:
                    raise NotFoundError(f'Vendor {vendor_id} not found')
                if not vendor.is_active or vendor_id not in self._vendor_available:
                    raise NotFoundError(f'Vendor {vendor_id} is not active in the pool')

                in_pool = self._vendor_available[vendor_id]
                committed = max(self._vendor_sold.get(vendor_id, 0) + in_pool, vendor.tickets_released)
                if committed + count > vendor.tickets_to_sell:
                    raise LimitExceededError(
                        f"Cannot release {count} tickets: would exceed vendor's maximum of {vendor.tickets_to_sell}"
                    )
                if self._available_tickets + count > config.max_capacity:
                    raise CapacityExceededError(
                        f'Cannot release {count} tickets: would exceed maximum capacity of {config.max_capacity}'
                    )

                available = self._available_tickets + count
                await uow.vendor_repo.save(vendor=vendor.record_release(count))
                saved_config = await self.config_holder.persist(
                    uow=uow, config=config.with_total_tickets(available)
                )
                await uow.commit()

            self._vendor_available[vendor_id] = in_pool + count
            self._available_tickets = available
            self.config_holder.accept(saved_config)

        Logger.base.info(
            f'📥 [POOL] {vendor.name} released {count} tickets (available={available})'
        )

    @Logger.io
    async def purchase(self, *, customer_id: str, requested_count: int) -> int:
        """
        Buy up to `requested_count` tickets for a customer.

        Returns:
            Tickets actually purchased; 0 when nothing can be bought right now

        Raises:
            NotConfiguredError: no active configuration
            LimitReachedError: customer already bought tickets_to_purchase
            NotFoundError: customer or an allocated vendor vanished
            ProcessingError: persistence failed
        """
        async with self._lock:
            config = self._require_configured()
            if requested_count <= 0:
                return 0

            async with self._transaction('purchase tickets') as uow:
                customer = await uow.customer_repo.get_by_id(customer_id=customer_id)
                if customer is None:
                    raise NotFoundError(f'Customer {customer_id} not found')
                if customer.has_reached_limit:
                    raise LimitReachedError(
                        f'Customer {customer_id} has reached their limit of {customer.tickets_to_purchase} tickets'
                    )
                if not customer.is_active or customer_id not in self._customer_remaining:
                    raise NotFoundError(f'Customer {customer_id} is not active in the pool')

                remaining = min(customer.remaining_to_purchase, self._customer_remaining[customer_id])
                allowed = min(requested_count, remaining, self._available_tickets)
                if allowed <= 0:
                    return 0

                allocations = self._allocate(allowed)
                vendors = await uow.vendor_repo.get_by_ids(
                    vendor_ids=[allocation.vendor_id for allocation in allocations]
                )
                for allocation in allocations:
                    if allocation.vendor_id not in vendors:
                        raise NotFoundError(f'Vendor {allocation.vendor_id} not found')

                purchased = sum(allocation.count for allocation in allocations)
                purchased_at = datetime.now(timezone.utc)
                tickets = [
                    Ticket.issue(
                        vendor_id=allocation.vendor_id,
                        customer_id=customer_id,
                        event_name=config.event_name,
                        purchased_at=purchased_at,
                    )
                    for allocation in allocations
                    for _ in range(allocation.count)
                ]
                available = self._available_tickets - purchased

                await uow.ticket_repo.save_all(tickets=tickets)
                await uow.vendor_repo.save_all(
                    vendors=[vendors[a.vendor_id].record_sale(a.count) for a in allocations]
                )
                await uow.customer_repo.save(customer=customer.record_purchase(purchased))
                saved_config = await self.config_holder.persist(
                    uow=uow, config=config.with_total_tickets(available)
                )
                await uow.commit()

            for allocation in allocations:
                self._vendor_available[allocation.vendor_id] -= allocation.count
                self._vendor_sold[allocation.vendor_id] = (
                    self._vendor_sold.get(allocation.vendor_id, 0) + allocation.count
                )
            self._customer_remaining[customer_id] = remaining - purchased
            self._available_tickets = available
            self.config_holder.accept(saved_config)

        Logger.base.info(
            f'🛒 [POOL] {customer.name} purchased {purchased} tickets from '
            f'{len(allocations)} vendor(s) (available={available})'
        )
        return purchased

    def _allocate(self, wanted: int) -> list[VendorAllocation]:
        """Largest inventory first, ties by vendor id; never takes more than a vendor holds"""
        candidates = sorted(
            ((vendor_id, in_pool) for vendor_id, in_pool in self._vendor_available.items() if in_pool > 0),
            key=lambda item: (-item[1], item[0]),
        )
        allocations: list[VendorAllocation] = []
        for vendor_id, in_pool in candidates:
            if wanted <= 0:
                break
            take = min(wanted, in_pool)
            allocations.append(VendorAllocation(vendor_id=vendor_id, count=take))
            wanted -= take
        return allocations

    # ------------------------------------------------------------------
    # Participant tracking (called by ParticipantRegistry)
    # ------------------------------------------------------------------

    @Logger.io
    async def enroll_vendor(self, *, vendor: Vendor) -> None:
        """
        Start tracking a vendor; a no-op until configured, since configure reloads everyone.

        Unsold tickets of a returning vendor go back into the pool.

        Raises:
            CapacityExceededError: those tickets do not fit under max_capacity
        """
        async with self._lock:
            if self._state != PoolState.CONFIGURED or vendor.id in self._vendor_available:
                return
            config = self.config_holder.require()
            in_pool = vendor.unsold_tickets
            available = self._available_tickets + in_pool
            if available > config.max_capacity:
                raise CapacityExceededError(
                    f'Cannot enroll vendor {vendor.id}: {in_pool} unsold tickets would exceed maximum capacity of {config.max_capacity}'
                )
            saved_config: Optional[EventConfiguration] = None
            if in_pool:
                async with self._transaction('enroll vendor') as uow:
                    saved_config = await self.config_holder.persist(
                        uow=uow, config=config.with_total_tickets(available)
                    )
                    await uow.commit()

            self._vendor_sold[vendor.id] = vendor.total_tickets_sold
            self._vendor_available[vendor.id] = in_pool
            self._available_tickets = available
            if saved_config is not None:
                self.config_holder.accept(saved_config)

        if in_pool:
            Logger.base.info(
                f'📥 [POOL] {vendor.name} returned {in_pool} unsold tickets (available={available})'
            )

    @Logger.io
    async def enroll_customer(self, *, customer: Customer) -> None:
        async with self._lock:
            if self._state != PoolState.CONFIGURED:
                return
            self._customer_remaining[customer.id] = customer.remaining_to_purchase

    @Logger.io
    async def withdraw_vendor(self, *, vendor_id: str) -> Vendor:
        """
        Deactivate a vendor and take its unsold inventory out of the pool.

        The tickets stay counted as released and return to the pool if the
        vendor is reactivated.
        """
        async with self._lock:
            self._ensure_open()
            in_pool = self._vendor_available.get(vendor_id, 0)
            async with self._transaction('withdraw vendor') as uow:
                vendor = await uow.vendor_repo.get_by_id(vendor_id=vendor_id)
                if vendor is None:
                    raise NotFoundError(f'Vendor {vendor_id} not found')
                withdrawn = await uow.vendor_repo.save(vendor=vendor.deactivate())
                available = self._available_tickets - in_pool
                saved_config: Optional[EventConfiguration] = None
                if in_pool and (config := self.config_holder.current) is not None:
                    saved_config = await self.config_holder.persist(
                        uow=uow, config=config.with_total_tickets(available)
                    )
                await uow.commit()

            self._vendor_available.pop(vendor_id, None)
            self._vendor_sold.pop(vendor_id, None)
            self._available_tickets = available
            if saved_config is not None:
                self.config_holder.accept(saved_config)

        if in_pool:
            Logger.base.info(f'📤 [POOL] Withdrew {in_pool} unsold tickets of vendor {vendor_id}')
        return withdrawn

    @Logger.io
    async def withdraw_customer(self, *, customer_id: str) -> Customer:
        async with self._lock:
            self._ensure_open()
            async with self._transaction('withdraw customer') as uow:
                customer = await uow.customer_repo.get_by_id(customer_id=customer_id)
                if customer is None:
                    raise NotFoundError(f'Customer {customer_id} not found')
                withdrawn = await uow.customer_repo.save(customer=customer.deactivate())
                await uow.commit()
            self._customer_remaining.pop(customer_id, None)
            return withdrawn

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    @Logger.io
    async def shutdown(self) -> None:
        """Persist final counters for every tracked participant, then refuse further calls"""
        async with self._lock:
            if self._state == PoolState.SHUT_DOWN:
                return
            try:
                if self._state == PoolState.CONFIGURED:
                    await self._persist_final_counters()
            finally:
                self._state = PoolState.SHUT_DOWN
        Logger.base.info('🛑 [POOL] Ticket pool shut down')

    async def _persist_final_counters(self) -> None:
        config = self.config_holder.require()
        async with self._transaction('persist final pool counters') as uow:
            vendors = await uow.vendor_repo.get_by_ids(vendor_ids=list(self._vendor_sold))
            await uow.vendor_repo.save_all(
                vendors=[
                    vendor.reconcile_sold(self._vendor_sold[vendor_id])
                    for vendor_id, vendor in vendors.items()
                ]
            )
            customers = await uow.customer_repo.get_by_ids(
                customer_ids=list(self._customer_remaining)
            )
            for customer_id, customer in customers.items():
                remaining = self._customer_remaining[customer_id]
                Logger.base.info(
                    f'🧾 [POOL] {customer.name}: {customer.tickets_to_purchase - remaining} '
                    f'of {customer.tickets_to_purchase} tickets purchased'
                )
            await uow.customer_repo.save_all(
                customers=[
                    customer.reconcile_remaining(self._customer_remaining[customer_id])
                    for customer_id, customer in customers.items()
                ]
            )
            saved_config = await self.config_holder.persist(
                uow=uow, config=config.with_total_tickets(self._available_tickets)
            )
            await uow.commit()
        self.config_holder.accept(saved_config)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _ensure_open(self) -> None:
        if self._state == PoolState.SHUT_DOWN:
            raise PoolClosedError()

    def _require_configured(self) -> EventConfiguration:
        self._ensure_open()
        if self._state != PoolState.CONFIGURED:
            raise NotConfiguredError()
        return self.config_holder.require()

    @asynccontextmanager
    async def _transaction(self, action: str) -> AsyncIterator[AbstractUnitOfWork]:
        """Unit of work whose unexpected failures surface as ProcessingError"""
        try:
            async with self.uow_factory() as uow:
                yield uow
        except CustomBaseError:
            raise
        except Exception as e:
            raise ProcessingError(f'Failed to {action}: {e}') from e
