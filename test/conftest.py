"""
Test Configuration and Fixtures

- Environment is prepared before any application module is imported
- Persistence is replaced by the in-memory unit of work from marketplace_fakes
"""

# =============================================================================
# Environment setup MUST happen before any other imports
# Settings and the log sink read these at import time
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    os.environ['POSTGRES_DB'] = 'ticket_marketplace_test_db'
    os.environ.setdefault('DEBUG', 'false')
    os.environ.setdefault('PARTICIPANT_ERROR_BACKOFF_SECONDS', '0.01')

    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)


_early_setup_test_environment()

import pytest  # noqa: E402

from src.service.marketplace.app.pool.event_configuration_holder import (  # noqa: E402
    EventConfigurationHolder,
)
from src.service.marketplace.app.pool.ticket_pool_controller import (  # noqa: E402
    TicketPoolController,
)
from test.marketplace_fakes import InMemoryStore, make_config  # noqa: E402


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def controller(store: InMemoryStore) -> TicketPoolController:
    return TicketPoolController(config_holder=EventConfigurationHolder(), uow_factory=store.uow)


@pytest.fixture
async def configured_controller(controller: TicketPoolController) -> TicketPoolController:
    """Pool configured with capacity 10, release rate 5, retrieval rate 3"""
    await controller.configure(config=make_config())
    return controller
