"""
Unit tests for ParticipantRunner

Runners are driven with millisecond intervals inside an anyio task group;
every wait is bounded by fail_after so a stuck loop fails instead of hanging.
"""

from unittest.mock import AsyncMock, MagicMock

import anyio
import pytest

from src.platform.exception.exceptions import LimitExceededError
from src.service.marketplace.app.participant.attempt_strategy import (
    CustomerAttemptStrategy,
    VendorAttemptStrategy,
)
from src.service.marketplace.app.participant.participant_runner import ParticipantRunner
from src.service.marketplace.domain.enum.pool_state import PoolState
from src.service.marketplace.domain.enum.runner_state import RunnerState
from src.service.marketplace.domain.value_object.pool_status import PoolStatus
from test.marketplace_fakes import make_config, make_customer, make_vendor


def _configured_status(**overrides) -> PoolStatus:
    values = {
        'state': PoolState.CONFIGURED,
        'available_tickets': 0,
        'event_name': 'Summer Concert',
        'max_capacity': 10,
        'ticket_release_rate': 5,
        'customer_retrieval_rate': 3,
    }
    values.update(overrides)
    return PoolStatus(**values)


def _mock_controller(status: PoolStatus) -> MagicMock:
    controller = MagicMock()
    controller.get_status.return_value = status
    controller.release = AsyncMock(return_value=None)
    controller.purchase = AsyncMock(return_value=0)
    return controller


@pytest.mark.unit
class TestAttemptSize:
    def test_vendor_size_is_smallest_limit(self):
        # Given: per release 5, rate 3, 2 slots left in the pool
        strategy = VendorAttemptStrategy(vendor=make_vendor(tickets_per_release=5))
        status = _configured_status(ticket_release_rate=3, available_tickets=8)

        # Then
        assert strategy.next_attempt_size(status) == 2

    def test_vendor_size_respects_remaining_quota(self):
        strategy = VendorAttemptStrategy(
            vendor=make_vendor(tickets_per_release=5, tickets_to_sell=6, tickets_released=5)
        )

        assert strategy.next_attempt_size(_configured_status()) == 1

    def test_customer_size_is_zero_on_empty_pool(self):
        strategy = CustomerAttemptStrategy(customer=make_customer())

        assert strategy.next_attempt_size(_configured_status(available_tickets=0)) == 0

    def test_customer_size_is_capped_by_retrieval_rate(self):
        strategy = CustomerAttemptStrategy(customer=make_customer(tickets_to_purchase=10))

        assert strategy.next_attempt_size(_configured_status(available_tickets=9)) == 3


@pytest.mark.unit
class TestRunnerAgainstController:
    @pytest.mark.asyncio
    async def test_vendor_runner_completes_after_releasing_quota(self, configured_controller, store):
        # Given: Vendor selling 6 tickets, 2 per release
        vendor = store.add_vendor(make_vendor(tickets_per_release=2, tickets_to_sell=6))
        await configured_controller.enroll_vendor(vendor=vendor)
        runner = ParticipantRunner(
            strategy=VendorAttemptStrategy(vendor=vendor), controller=configured_controller
        )

        # When
        with anyio.fail_after(2):
            await runner.run()

        # Then
        assert runner.state == RunnerState.COMPLETED
        assert runner.completion_reason == 'lifetime cap reached'
        assert store.vendor(vendor.id).tickets_released == 6
        assert configured_controller.get_status().available_tickets == 6

    @pytest.mark.asyncio
    async def test_customer_waits_for_configuration_then_buys(self, controller, store):
        # Given: Customer runner started on an unconfigured pool
        vendor = store.add_vendor(make_vendor(tickets_released=4))
        customer = store.add_customer(make_customer(tickets_to_purchase=4))
        runner = ParticipantRunner(
            strategy=CustomerAttemptStrategy(customer=customer), controller=controller
        )

        # When: The pool is configured while the runner polls
        with anyio.fail_after(2):
            async with anyio.create_task_group() as tg:
                tg.start_soon(runner.run)
                await anyio.sleep(0.05)
                assert runner.state == RunnerState.RUNNING
                await controller.configure(config=make_config())
                await runner.wait_finished()

        # Then: Bought all 4 from the vendor's stored inventory
        assert runner.state == RunnerState.COMPLETED
        assert store.customer(customer.id).total_tickets_purchased == 4
        assert store.vendor(vendor.id).total_tickets_sold == 4
        assert controller.get_status().available_tickets == 0

    @pytest.mark.asyncio
    async def test_runner_exits_when_pool_shuts_down(self, configured_controller, store):
        customer = store.add_customer(make_customer())
        await configured_controller.enroll_customer(customer=customer)
        runner = ParticipantRunner(
            strategy=CustomerAttemptStrategy(customer=customer), controller=configured_controller
        )

        with anyio.fail_after(2):
            async with anyio.create_task_group() as tg:
                tg.start_soon(runner.run)
                await anyio.sleep(0.03)
                await configured_controller.shutdown()
                await runner.wait_finished()

        assert runner.state == RunnerState.STOPPED


@pytest.mark.unit
class TestRunnerLifecycle:
    @pytest.mark.asyncio
    async def test_stop_interrupts_a_long_sleep(self):
        # Given: A customer with a 60 second interval and nothing to buy
        controller = _mock_controller(_configured_status(available_tickets=0))
        customer = make_customer(ticket_retrieval_interval=60)
        runner = ParticipantRunner(
            strategy=CustomerAttemptStrategy(customer=customer), controller=controller
        )

        # When
        with anyio.fail_after(1):
            async with anyio.create_task_group() as tg:
                tg.start_soon(runner.run)
                await anyio.sleep(0.02)
                runner.stop()
                await runner.wait_finished()

        # Then
        assert runner.state == RunnerState.STOPPED
        controller.purchase.assert_not_called()

    @pytest.mark.asyncio
    async def test_stop_before_start_finishes_immediately(self):
        finished: list[ParticipantRunner] = []
        runner = ParticipantRunner(
            strategy=VendorAttemptStrategy(vendor=make_vendor()),
            controller=_mock_controller(_configured_status()),
            on_finished=finished.append,
        )

        runner.stop()
        await runner.run()

        assert runner.state == RunnerState.STOPPED
        assert finished == [runner]

    @pytest.mark.asyncio
    async def test_limit_exceeded_completes_runner(self):
        controller = _mock_controller(_configured_status())
        controller.release.side_effect = LimitExceededError('would exceed vendor\'s maximum of 20')
        runner = ParticipantRunner(
            strategy=VendorAttemptStrategy(vendor=make_vendor()), controller=controller
        )

        with anyio.fail_after(1):
            await runner.run()

        assert runner.state == RunnerState.COMPLETED
        assert 'maximum of 20' in runner.completion_reason
        controller.release.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unexpected_error_is_retried_after_backoff(self):
        # Given: First release blows up, later ones succeed
        controller = _mock_controller(_configured_status())
        controller.release.side_effect = [RuntimeError('db down'), None, None, None, None]
        vendor = make_vendor(tickets_per_release=5, tickets_to_sell=20)
        runner = ParticipantRunner(
            strategy=VendorAttemptStrategy(vendor=vendor),
            controller=controller,
            error_backoff=0.01,
        )

        # When
        with anyio.fail_after(2):
            await runner.run()

        # Then: One failed attempt plus four successful releases of 5
        assert runner.state == RunnerState.COMPLETED
        assert controller.release.await_count == 5
