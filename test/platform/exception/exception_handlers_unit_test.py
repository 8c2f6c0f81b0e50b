from fastapi import FastAPI
from fastapi.testclient import TestClient
import pytest

from src.platform.exception.exception_handlers import register_exception_handlers
from src.platform.exception.exceptions import (
    LimitReachedError,
    PoolClosedError,
    ProcessingError,
)


@pytest.fixture
def client() -> TestClient:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get('/closed')
    async def closed() -> None:
        raise PoolClosedError()

    @app.get('/limit')
    async def limit() -> None:
        raise LimitReachedError('Customer c1 has reached their limit of 2 tickets')

    @app.get('/processing')
    async def processing() -> None:
        raise ProcessingError('Failed to purchase tickets: connection reset')

    @app.get('/value')
    async def value() -> None:
        raise ValueError('Participant name cannot be empty')

    return TestClient(app)


@pytest.mark.unit
class TestExceptionHandlers:
    def test_pool_closed_is_service_unavailable(self, client):
        response = client.get('/closed')

        assert response.status_code == 503
        assert response.headers['Retry-After'] == '1'
        assert response.json() == {'detail': 'Ticket pool has been shut down'}

    def test_limit_reached_is_conflict(self, client):
        response = client.get('/limit')

        assert response.status_code == 409
        assert 'limit of 2' in response.json()['detail']

    def test_processing_error_is_internal_error(self, client):
        assert client.get('/processing').status_code == 500

    def test_value_error_is_bad_request(self, client):
        response = client.get('/value')

        assert response.status_code == 400
        assert response.json()['detail'] == 'Participant name cannot be empty'
