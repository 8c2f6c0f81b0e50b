from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Optional

import anyio
from anyio.abc import TaskGroup
import attrs

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import (
    CapacityExceededError,
    ConflictError,
    NotFoundError,
)
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.participant.attempt_strategy import (
    AttemptStrategy,
    CustomerAttemptStrategy,
    VendorAttemptStrategy,
)
from src.service.marketplace.app.participant.participant_runner import ParticipantRunner
from src.service.marketplace.app.pool.ticket_pool_controller import TicketPoolController
from src.service.marketplace.domain.entity.customer_entity import Customer
from src.service.marketplace.domain.entity.vendor_entity import Vendor
from src.service.marketplace.domain.enum.participant_role import ParticipantRole


class ParticipantRegistry:
    """
    Bookkeeping of active participants and their runners, keyed by participant id.

    Runners live in a task group opened by `running()`; the app lifespan keeps
    it open for the life of the process.
    """

    def __init__(
        self,
        *,
        controller: TicketPoolController,
        uow_factory: Callable[[], AbstractUnitOfWork],
        error_backoff: float = 1.0,
    ) -> None:
        self.controller = controller
        self.uow_factory = uow_factory
        self.error_backoff = error_backoff
        self._runners: dict[str, ParticipantRunner] = {}
        self._task_group: Optional[TaskGroup] = None
        # Serializes check, enroll and start so one participant never gets two runners
        self._lock = anyio.Lock()

    @asynccontextmanager
    async def running(self, *, resume_active: bool = True) -> AsyncIterator['ParticipantRegistry']:
        """Open the runners' task group; on exit every runner is stopped and awaited"""
        async with anyio.create_task_group() as tg:
            self._task_group = tg
            try:
                if resume_active:
                    await self.resume_active()
                yield self
            finally:
                self.stop_all()
                self._task_group = None

    @property
    def is_running(self) -> bool:
        return self._task_group is not None

    def get_runner(self, participant_id: str) -> Optional[ParticipantRunner]:
        return self._runners.get(participant_id)

    def active_participant_ids(self, role: Optional[ParticipantRole] = None) -> list[str]:
        return [
            participant_id
            for participant_id, runner in self._runners.items()
            if role is None or runner.role == role
        ]

    @Logger.io
    async def resume_active(self) -> int:
        """Start runners for participants stored as active (after a restart)"""
        async with self._lock:
            return await self._resume_active_locked()

    async def _resume_active_locked(self) -> int:
        async with self.uow_factory() as uow:
            vendors = await uow.vendor_repo.list_active()
            customers = await uow.customer_repo.list_active()

        started = 0
        for vendor in vendors:
            if vendor.id not in self._runners:
                await self.controller.enroll_vendor(vendor=vendor)
                self._start_runner(VendorAttemptStrategy(vendor=vendor))
                started += 1
        for customer in customers:
            if customer.id not in self._runners:
                await self.controller.enroll_customer(customer=customer)
                self._start_runner(CustomerAttemptStrategy(customer=customer))
                started += 1
        Logger.base.info(f'🔁 [REGISTRY] Resumed {started} participant runner(s)')
        return started

    # === Vendors ===

    @Logger.io
    async def register_vendor(self, *, vendor: Vendor) -> Vendor:
        """
        Persist a new vendor and start its runner.

        An inactive vendor with the same email is reactivated with the new
        parameters instead; an active one is a conflict.
        """
        self._require_running()
        async with self._lock:
            async with self.uow_factory() as uow:
                existing = await uow.vendor_repo.get_by_email(email=vendor.email)
                if existing is not None:
                    if existing.is_active:
                        raise ConflictError(
                            f'Vendor with email {vendor.email} is already registered'
                        )
                    vendor = attrs.evolve(
                        existing.reactivate(
                            tickets_per_release=vendor.tickets_per_release,
                            ticket_release_interval=vendor.ticket_release_interval,
                            tickets_to_sell=vendor.tickets_to_sell,
                        ),
                        identity=attrs.evolve(
                            existing.identity,
                            name=vendor.name,
                            hashed_password=vendor.identity.hashed_password,
                        ),
                    )
                saved = await uow.vendor_repo.save(vendor=vendor)
                await uow.commit()

            return await self._activate_vendor(saved)

    @Logger.io
    async def reactivate_vendor(self, *, vendor_id: str) -> Vendor:
        self._require_running()
        async with self._lock:
            async with self.uow_factory() as uow:
                vendor = await uow.vendor_repo.get_by_id(vendor_id=vendor_id)
                if vendor is None:
                    raise NotFoundError(f'Vendor {vendor_id} not found')
                if vendor.is_active and vendor_id in self._runners:
                    return vendor
                if not vendor.is_active:
                    vendor = await uow.vendor_repo.save(vendor=vendor.reactivate())
                    await uow.commit()

            return await self._activate_vendor(vendor)

    @Logger.io
    async def deactivate_vendor(self, *, vendor_id: str) -> Vendor:
        async with self._lock:
            await self._stop_runner(vendor_id)
            vendor = await self.controller.withdraw_vendor(vendor_id=vendor_id)
        Logger.base.info(f'💤 [REGISTRY] Vendor {vendor.name} deactivated')
        return vendor

    async def _activate_vendor(self, vendor: Vendor) -> Vendor:
        try:
            await self.controller.enroll_vendor(vendor=vendor)
        except CapacityExceededError:
            # Unsold tickets do not fit back into the pool; keep the vendor inactive
            async with self.uow_factory() as uow:
                await uow.vendor_repo.save(vendor=vendor.deactivate())
                await uow.commit()
            raise
        self._start_runner(VendorAttemptStrategy(vendor=vendor))
        Logger.base.info(f'🏪 [REGISTRY] Vendor {vendor.name} active')
        return vendor

    # === Customers ===

    @Logger.io
    async def register_customer(self, *, customer: Customer) -> Customer:
        self._require_running()
        async with self._lock:
            async with self.uow_factory() as uow:
                existing = await uow.customer_repo.get_by_email(email=customer.email)
                if existing is not None:
                    if existing.is_active:
                        raise ConflictError(
                            f'Customer with email {customer.email} is already registered'
                        )
                    customer = attrs.evolve(
                        existing.reactivate(
                            tickets_to_purchase=customer.tickets_to_purchase,
                            ticket_retrieval_interval=customer.ticket_retrieval_interval,
                        ),
                        identity=attrs.evolve(
                            existing.identity,
                            name=customer.name,
                            hashed_password=customer.identity.hashed_password,
                        ),
                    )
                saved = await uow.customer_repo.save(customer=customer)
                await uow.commit()

            return await self._activate_customer(saved)

    @Logger.io
    async def reactivate_customer(self, *, customer_id: str) -> Customer:
        self._require_running()
        async with self._lock:
            async with self.uow_factory() as uow:
                customer = await uow.customer_repo.get_by_id(customer_id=customer_id)
                if customer is None:
                    raise NotFoundError(f'Customer {customer_id} not found')
                if customer.is_active and customer_id in self._runners:
                    return customer
                if not customer.is_active:
                    customer = await uow.customer_repo.save(customer=customer.reactivate())
                    await uow.commit()

            return await self._activate_customer(customer)

    @Logger.io
    async def deactivate_customer(self, *, customer_id: str) -> Customer:
        async with self._lock:
            await self._stop_runner(customer_id)
            customer = await self.controller.withdraw_customer(customer_id=customer_id)
        Logger.base.info(f'💤 [REGISTRY] Customer {customer.name} deactivated')
        return customer

    async def _activate_customer(self, customer: Customer) -> Customer:
        await self.controller.enroll_customer(customer=customer)
        self._start_runner(CustomerAttemptStrategy(customer=customer))
        Logger.base.info(f'🙋 [REGISTRY] Customer {customer.name} active')
        return customer

    # === Runner bookkeeping ===

    def stop_all(self) -> None:
        for runner in list(self._runners.values()):
            runner.stop()

    def _require_running(self) -> None:
        if self._task_group is None:
            raise RuntimeError('Participant registry is not running')

    def _start_runner(self, strategy: AttemptStrategy) -> ParticipantRunner:
        self._require_running()
        assert self._task_group is not None
        runner = ParticipantRunner(
            strategy=strategy,
            controller=self.controller,
            error_backoff=self.error_backoff,
            on_finished=self._forget,
        )
        previous = self._runners.get(strategy.participant_id)
        if previous is not None:
            previous.stop()
        self._runners[strategy.participant_id] = runner
        self._task_group.start_soon(runner.run, name=f'{strategy.role}:{strategy.participant_id}')
        return runner

    async def _stop_runner(self, participant_id: str) -> None:
        runner = self._runners.pop(participant_id, None)
        if runner is None:
            return
        runner.stop()
        await runner.wait_finished()

    def _forget(self, runner: ParticipantRunner) -> None:
        # A reactivated participant may already own a newer runner
        if self._runners.get(runner.participant_id) is runner:
            del self._runners[runner.participant_id]
