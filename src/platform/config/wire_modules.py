"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.marketplace.app.command import (
    change_participant_activity_use_case,
    configure_event_use_case,
    delete_ticket_use_case,
    login_participant_use_case,
    register_customer_use_case,
    register_vendor_use_case,
    reload_pool_use_case,
    trade_tickets_use_case,
)
from src.service.marketplace.app.query import (
    get_pool_status_use_case,
    list_tickets_use_case,
    participant_query_use_case,
)


WIRE_MODULES: list[ModuleType] = [
    configure_event_use_case,
    reload_pool_use_case,
    register_vendor_use_case,
    register_customer_use_case,
    login_participant_use_case,
    change_participant_activity_use_case,
    trade_tickets_use_case,
    delete_ticket_use_case,
    get_pool_status_use_case,
    list_tickets_use_case,
    participant_query_use_case,
]
