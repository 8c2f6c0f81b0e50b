import anyio
import pytest

from src.platform.exception.exceptions import (
    CapacityExceededError,
    ConflictError,
    NotFoundError,
)
from src.service.marketplace.app.participant.attempt_strategy import CustomerAttemptStrategy
from src.service.marketplace.app.participant.participant_registry import ParticipantRegistry
from src.service.marketplace.app.participant.participant_runner import ParticipantRunner
from src.service.marketplace.domain.enum.participant_role import ParticipantRole
from src.service.marketplace.domain.enum.runner_state import RunnerState
from test.marketplace_fakes import make_customer, make_vendor


@pytest.fixture
def registry(configured_controller, store) -> ParticipantRegistry:
    return ParticipantRegistry(
        controller=configured_controller, uow_factory=store.uow, error_backoff=0.01
    )


async def _wait_until(predicate, timeout: float = 2.0) -> None:
    with anyio.fail_after(timeout):
        while not predicate():
            await anyio.sleep(0.005)


@pytest.mark.unit
class TestRegistration:
    @pytest.mark.asyncio
    async def test_register_vendor_persists_and_starts_runner(self, registry, store):
        # Given: Vendor releasing 3 at once, then idling for a minute
        vendor = make_vendor(tickets_per_release=3, ticket_release_interval=60)

        async with registry.running(resume_active=False):
            # When
            saved = await registry.register_vendor(vendor=vendor)
            await _wait_until(lambda: registry.controller.get_status().available_tickets == 3)

            # Then
            assert store.vendor(saved.id).is_active
            assert registry.active_participant_ids(ParticipantRole.VENDOR) == [saved.id]
            assert registry.get_runner(saved.id).state == RunnerState.RUNNING

        assert registry.active_participant_ids() == []

    @pytest.mark.asyncio
    async def test_registering_an_active_email_is_a_conflict(self, registry, store):
        store.add_vendor(make_vendor(email='shop@vendor.test'))

        async with registry.running(resume_active=False):
            with pytest.raises(ConflictError):
                await registry.register_vendor(vendor=make_vendor(email='shop@vendor.test'))

    @pytest.mark.asyncio
    async def test_registering_an_inactive_email_reactivates_account(self, registry, store):
        # Given: A customer who logged out after buying 1 of 2
        existing = store.add_customer(
            make_customer(
                email='jane@customer.test',
                tickets_to_purchase=2,
                total_tickets_purchased=1,
                is_active=False,
            )
        )

        async with registry.running(resume_active=False):
            # When: Registering again with a bigger wish list
            reactivated = await registry.register_customer(
                customer=make_customer(
                    name='Jane Again',
                    email='jane@customer.test',
                    tickets_to_purchase=5,
                    ticket_retrieval_interval=60,
                )
            )

            # Then: Same account, counters kept
            assert reactivated.id == existing.id
            assert reactivated.name == 'Jane Again'
            assert reactivated.total_tickets_purchased == 1
            assert reactivated.tickets_to_purchase == 5
            assert store.customer(existing.id).is_active
            assert registry.controller.snapshot().customer_remaining[existing.id] == 4

    @pytest.mark.asyncio
    async def test_registration_requires_running_registry(self, registry):
        with pytest.raises(RuntimeError):
            await registry.register_vendor(vendor=make_vendor())


@pytest.mark.unit
class TestActivation:
    @pytest.mark.asyncio
    async def test_deactivate_vendor_withdraws_inventory(self, registry, store):
        vendor = make_vendor(tickets_per_release=4, ticket_release_interval=60, tickets_to_sell=4)

        async with registry.running(resume_active=False):
            saved = await registry.register_vendor(vendor=vendor)
            await _wait_until(lambda: registry.controller.get_status().available_tickets == 4)

            # When
            deactivated = await registry.deactivate_vendor(vendor_id=saved.id)

            # Then
            assert deactivated.is_active is False
            assert registry.get_runner(saved.id) is None
            assert registry.controller.get_status().available_tickets == 0
            assert store.vendor(saved.id).tickets_released == 4

            # When: The vendor comes back
            await registry.reactivate_vendor(vendor_id=saved.id)

            # Then: Its unsold tickets are on the market again, counter unchanged
            assert registry.controller.get_status().available_tickets == 4
            assert store.vendor(saved.id).tickets_released == 4
            assert store.config.total_tickets == 4

    @pytest.mark.asyncio
    async def test_reactivation_that_overflows_pool_keeps_vendor_inactive(self, registry, store):
        # Given: 8 unsold tickets held by an inactive vendor, pool already at 5 of 10
        returning = store.add_vendor(make_vendor(tickets_released=8, is_active=False))
        active = make_vendor(name='Second', ticket_release_interval=60)

        async with registry.running(resume_active=False):
            saved = await registry.register_vendor(vendor=active)
            await _wait_until(lambda: registry.controller.get_status().available_tickets == 5)

            # When
            with pytest.raises(CapacityExceededError):
                await registry.reactivate_vendor(vendor_id=returning.id)

            # Then
            assert store.vendor(returning.id).is_active is False
            assert registry.get_runner(returning.id) is None
            assert registry.active_participant_ids() == [saved.id]

    @pytest.mark.asyncio
    async def test_concurrent_reactivation_starts_one_runner(self, registry, store, monkeypatch):
        # Given: A logged-out customer and a record of every runner started
        customer = store.add_customer(
            make_customer(ticket_retrieval_interval=60, is_active=False)
        )
        started: list[ParticipantRunner] = []
        start_runner = registry._start_runner

        def _recording_start(strategy):
            runner = start_runner(strategy)
            started.append(runner)
            return runner

        monkeypatch.setattr(registry, '_start_runner', _recording_start)

        async with registry.running(resume_active=False):
            # When: Two activations race, then the customer logs out
            with anyio.fail_after(2):
                async with anyio.create_task_group() as tg:
                    tg.start_soon(lambda: registry.reactivate_customer(customer_id=customer.id))
                    tg.start_soon(lambda: registry.reactivate_customer(customer_id=customer.id))
            await registry.deactivate_customer(customer_id=customer.id)

            # Then: A single runner existed and it is stopped
            assert len(started) == 1
            assert all(runner.is_finished for runner in started)
            assert registry.active_participant_ids() == []

    @pytest.mark.asyncio
    async def test_replaced_runner_is_stopped(self, registry, store):
        customer = store.add_customer(make_customer(ticket_retrieval_interval=60))

        async with registry.running(resume_active=False):
            first = registry._start_runner(CustomerAttemptStrategy(customer=customer))
            second = registry._start_runner(CustomerAttemptStrategy(customer=customer))

            with anyio.fail_after(2):
                await first.wait_finished()

            assert first.state == RunnerState.STOPPED
            assert registry.get_runner(customer.id) is second

    @pytest.mark.asyncio
    async def test_reactivate_restarts_runner(self, registry, store):
        customer = store.add_customer(
            make_customer(ticket_retrieval_interval=60, is_active=False)
        )

        async with registry.running(resume_active=False):
            reactivated = await registry.reactivate_customer(customer_id=customer.id)

            assert reactivated.is_active
            assert registry.get_runner(customer.id) is not None
            assert customer.id in registry.controller.snapshot().customer_remaining

    @pytest.mark.asyncio
    async def test_reactivate_unknown_participant(self, registry):
        async with registry.running(resume_active=False):
            with pytest.raises(NotFoundError):
                await registry.reactivate_vendor(vendor_id='nobody')

    @pytest.mark.asyncio
    async def test_resume_starts_stored_active_participants(self, registry, store):
        # Given: Active vendor and customer from a previous run, plus an inactive one
        vendor = store.add_vendor(make_vendor(ticket_release_interval=60))
        customer = store.add_customer(make_customer(ticket_retrieval_interval=60))
        store.add_customer(make_customer(name='Gone', is_active=False))

        # When
        async with registry.running(resume_active=True):
            # Then
            assert set(registry.active_participant_ids()) == {vendor.id, customer.id}

    @pytest.mark.asyncio
    async def test_completed_runner_is_forgotten(self, registry, store):
        # Given: Vendor with a single release worth of tickets
        vendor = make_vendor(tickets_per_release=2, tickets_to_sell=2)

        async with registry.running(resume_active=False):
            saved = await registry.register_vendor(vendor=vendor)

            # When: The runner releases everything
            await _wait_until(lambda: registry.get_runner(saved.id) is None)

            # Then: Still active until sold out, but no runner left
            assert store.vendor(saved.id).tickets_released == 2
            assert store.vendor(saved.id).is_active
