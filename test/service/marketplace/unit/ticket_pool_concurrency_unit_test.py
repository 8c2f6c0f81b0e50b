import anyio
import pytest

from src.platform.exception.exceptions import CapacityExceededError, LimitReachedError
from test.marketplace_fakes import make_config, make_customer, make_vendor


@pytest.mark.unit
class TestConcurrentTrading:
    @pytest.mark.asyncio
    async def test_concurrent_purchases_never_oversell(self, controller, store):
        # Given: 7 tickets in the pool and 10 customers each wanting 3
        await controller.configure(config=make_config(max_capacity=10, ticket_release_rate=7))
        vendor = store.add_vendor(make_vendor(tickets_to_sell=7))
        await controller.enroll_vendor(vendor=vendor)
        await controller.release(vendor_id=vendor.id, count=7)
        customers = [
            store.add_customer(make_customer(name=f'Customer {i}', tickets_to_purchase=3))
            for i in range(10)
        ]
        for customer in customers:
            await controller.enroll_customer(customer=customer)
        results: list[int] = []

        async def buy(customer_id: str) -> None:
            results.append(await controller.purchase(customer_id=customer_id, requested_count=3))

        # When
        async with anyio.create_task_group() as tg:
            for customer in customers:
                tg.start_soon(buy, customer.id)

        # Then: Exactly the 7 pool tickets were sold, no more
        assert sum(results) == 7
        assert len(store.tickets) == 7
        assert controller.get_status().available_tickets == 0
        assert store.vendor(vendor.id).total_tickets_sold == 7
        assert controller.snapshot().is_balanced()

    @pytest.mark.asyncio
    async def test_interleaved_release_and_purchase_stay_balanced(self, controller, store):
        # Given: Several vendors and customers hammering a small pool
        await controller.configure(config=make_config(max_capacity=6, ticket_release_rate=2))
        vendors = [
            store.add_vendor(make_vendor(name=f'Vendor {i}', tickets_to_sell=10)) for i in range(3)
        ]
        customers = [
            store.add_customer(make_customer(name=f'Buyer {i}', tickets_to_purchase=5))
            for i in range(3)
        ]
        for vendor in vendors:
            await controller.enroll_vendor(vendor=vendor)
        for customer in customers:
            await controller.enroll_customer(customer=customer)
        observed: list[bool] = []

        async def vendor_loop(vendor_id: str) -> None:
            for _ in range(5):
                try:
                    await controller.release(vendor_id=vendor_id, count=2)
                except CapacityExceededError:
                    pass
                observed.append(controller.snapshot().is_balanced())
                await anyio.sleep(0)

        async def customer_loop(customer_id: str) -> None:
            for _ in range(5):
                try:
                    await controller.purchase(customer_id=customer_id, requested_count=2)
                except LimitReachedError:
                    return
                observed.append(controller.snapshot().is_balanced())
                await anyio.sleep(0)

        # When
        async with anyio.create_task_group() as tg:
            for vendor in vendors:
                tg.start_soon(vendor_loop, vendor.id)
            for customer in customers:
                tg.start_soon(customer_loop, customer.id)

        # Then: Every intermediate snapshot and the final stored state agree
        assert all(observed)
        sold = sum(store.vendor(v.id).total_tickets_sold for v in vendors)
        released = sum(store.vendor(v.id).tickets_released for v in vendors)
        purchased = sum(store.customer(c.id).total_tickets_purchased for c in customers)
        assert sold == purchased == len(store.tickets)
        assert controller.get_status().available_tickets == released - sold
        assert 0 <= controller.get_status().available_tickets <= 6
        for customer in customers:
            assert store.customer(customer.id).total_tickets_purchased <= 5
        for vendor in vendors:
            stored = store.vendor(vendor.id)
            assert stored.tickets_released <= stored.tickets_to_sell
