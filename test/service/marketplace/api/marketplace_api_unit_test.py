"""
HTTP API tests

The real routers and use cases run against an in-memory store: the container's
pool controller, registry and unit of work are overridden before the app starts.
Participants are registered before the pool is configured, so their runners
park for a full interval and the test drives the pool by hand.
"""

from collections.abc import AsyncIterator, Generator
from contextlib import asynccontextmanager

from dependency_injector import providers
from fastapi import FastAPI
from fastapi.testclient import TestClient
import pytest

from src.platform.app_factory import create_app
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.service.marketplace.app.participant.participant_registry import ParticipantRegistry
from src.service.marketplace.app.pool.event_configuration_holder import EventConfigurationHolder
from src.service.marketplace.app.pool.ticket_pool_controller import TicketPoolController
from test.marketplace_fakes import InMemoryStore, PlainTextPasswordHasher


@pytest.fixture
def client(store: InMemoryStore) -> Generator[TestClient, None, None]:
    controller = TicketPoolController(
        config_holder=EventConfigurationHolder(), uow_factory=store.uow
    )
    registry = ParticipantRegistry(controller=controller, uow_factory=store.uow, error_backoff=0.01)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        container.wire(modules=WIRE_MODULES)
        async with registry.running(resume_active=False):
            yield
        await controller.shutdown()
        container.unwire()

    app = create_app(lifespan=lifespan, title_suffix=' (Test)')
    with (
        container.ticket_pool_controller.override(providers.Object(controller)),
        container.participant_registry.override(providers.Object(registry)),
        container.unit_of_work.override(providers.Callable(store.uow)),
        container.password_hasher.override(providers.Object(PlainTextPasswordHasher())),
    ):
        with TestClient(app) as test_client:
            yield test_client


def _register_vendor(client: TestClient, **overrides) -> dict:
    payload = {
        'name': 'Box Office',
        'email': 'box@example.com',
        'password': 'P@ssw0rd',
        'tickets_per_release': 4,
        'ticket_release_interval': 60,
        'tickets_to_sell': 10,
    } | overrides
    response = client.post('/api/vendor', json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def _register_customer(client: TestClient, **overrides) -> dict:
    payload = {
        'name': 'Jane Doe',
        'email': 'jane@example.com',
        'password': 'P@ssw0rd',
        'tickets_to_purchase': 3,
        'ticket_retrieval_interval': 60,
    } | overrides
    response = client.post('/api/customer', json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def _configure(client: TestClient, **overrides):
    payload = {
        'event_name': 'Summer Concert',
        'max_capacity': 10,
        'ticket_release_rate': 5,
        'customer_retrieval_rate': 3,
    } | overrides
    return client.put('/api/pool/configuration', json=payload)


@pytest.mark.unit
class TestPoolApi:
    def test_health(self, client):
        response = client.get('/health')

        assert response.status_code == 200
        assert response.json()['status'] == 'healthy'

    def test_unconfigured_pool(self, client):
        status_response = client.get('/api/pool/status')
        config_response = client.get('/api/pool/configuration')

        assert status_response.json()['state'] == 'unconfigured'
        assert config_response.status_code == 503
        assert config_response.headers['Retry-After'] == '1'

    def test_invalid_configuration_is_rejected(self, client):
        response = _configure(client, max_capacity=0, ticket_release_rate=0)

        assert response.status_code == 400
        assert response.json()['detail'] == (
            'Maximum capacity must be greater than zero; '
            'Ticket release rate must be greater than zero'
        )
        assert client.get('/api/pool/status').json()['state'] == 'unconfigured'

    def test_configure_and_read_back(self, client, store):
        response = _configure(client, max_capacity=25)

        assert response.status_code == 200
        assert response.json()['max_capacity'] == 25
        assert client.get('/api/pool/configuration').json()['event_name'] == 'Summer Concert'
        assert store.config.max_capacity == 25


@pytest.mark.unit
class TestTradingApi:
    def test_release_purchase_and_logout(self, client, store):
        # Given: One vendor and one customer, then a configured pool
        vendor = _register_vendor(client)
        customer = _register_customer(client)
        assert _configure(client).status_code == 200

        # When: Vendor releases 4, customer buys 2
        release = client.post(f'/api/vendor/{vendor["id"]}/release', json={'count': 4})
        purchase = client.post(f'/api/customer/{customer["id"]}/purchase', json={'count': 2})

        # Then
        assert release.status_code == 200
        assert release.json()['available_tickets'] == 4
        assert purchase.json() == {'customer_id': customer['id'], 'requested': 2, 'purchased': 2}
        tickets = client.get(f'/api/ticket/customer/{customer["id"]}').json()
        assert len(tickets) == 2
        assert {t['vendor_id'] for t in tickets} == {vendor['id']}

        # When: Customer asks for more than their remaining allowance
        second = client.post(f'/api/customer/{customer["id"]}/purchase', json={'count': 3})

        # Then: Only the last allowed ticket is sold, further purchases are refused
        assert second.json()['purchased'] == 1
        refused = client.post(f'/api/customer/{customer["id"]}/purchase', json={'count': 1})
        assert refused.status_code == 409

        # When: Vendor logs out with one ticket left in the pool
        logout = client.post(f'/api/vendor/{vendor["id"]}/logout')

        # Then
        assert logout.status_code == 200
        assert logout.json()['is_active'] is False
        assert client.get('/api/pool/status').json()['available_tickets'] == 0
        assert store.vendor(vendor['id']).tickets_released == 4
        assert store.vendor(vendor['id']).total_tickets_sold == 3

    def test_release_above_rate_is_bad_request(self, client):
        vendor = _register_vendor(client)
        _configure(client)

        response = client.post(f'/api/vendor/{vendor["id"]}/release', json={'count': 6})

        assert response.status_code == 400

    def test_release_beyond_capacity_is_conflict(self, client):
        first = _register_vendor(client)
        second = _register_vendor(client, name='Second', email='second@example.com')
        _configure(client, max_capacity=6)

        first_release = client.post(f'/api/vendor/{first["id"]}/release', json={'count': 4})
        assert first_release.status_code == 200
        response = client.post(f'/api/vendor/{second["id"]}/release', json={'count': 4})

        assert response.status_code == 409
        assert 'maximum capacity of 6' in response.json()['detail']


@pytest.mark.unit
class TestParticipantApi:
    def test_duplicate_registration_is_conflict(self, client):
        _register_customer(client)

        response = client.post(
            '/api/customer',
            json={
                'name': 'Jane Again',
                'email': 'jane@example.com',
                'password': 'P@ssw0rd',
                'tickets_to_purchase': 3,
                'ticket_retrieval_interval': 60,
            },
        )

        assert response.status_code == 409

    def test_logout_then_login(self, client):
        customer = _register_customer(client)

        logout = client.post(f'/api/customer/{customer["id"]}/logout')
        bad_login = client.post(
            '/api/customer/login', json={'email': 'jane@example.com', 'password': 'nope'}
        )
        login = client.post(
            '/api/customer/login', json={'email': 'jane@example.com', 'password': 'P@ssw0rd'}
        )

        assert logout.json()['is_active'] is False
        assert bad_login.status_code == 401
        assert login.status_code == 200
        assert login.json()['is_active'] is True
        assert [c['id'] for c in client.get('/api/customer').json()] == [customer['id']]

    def test_search_and_missing_participant(self, client):
        vendor = _register_vendor(client, name='Taipei Arena Box Office')

        found = client.get('/api/vendor/search', params={'name': 'arena'}).json()
        missing = client.get('/api/vendor/does-not-exist')

        assert [v['id'] for v in found] == [vendor['id']]
        assert missing.status_code == 404

    def test_short_password_is_rejected(self, client):
        response = client.post(
            '/api/vendor',
            json={
                'name': 'Box Office',
                'email': 'box@example.com',
                'password': '123',
                'tickets_per_release': 4,
                'ticket_release_interval': 60,
                'tickets_to_sell': 10,
            },
        )

        assert response.status_code == 400


@pytest.mark.unit
class TestTicketApi:
    def test_delete_ticket(self, client, store):
        vendor = _register_vendor(client)
        customer = _register_customer(client)
        _configure(client)
        client.post(f'/api/vendor/{vendor["id"]}/release', json={'count': 2})
        client.post(f'/api/customer/{customer["id"]}/purchase', json={'count': 1})
        ticket_id = client.get('/api/ticket').json()[0]['id']

        assert client.get(f'/api/ticket/{ticket_id}').status_code == 200
        assert client.delete(f'/api/ticket/{ticket_id}').status_code == 204
        assert client.get(f'/api/ticket/{ticket_id}').status_code == 404
        assert client.get('/api/pool/status').json()['available_tickets'] == 1
