"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy
"""

from src.service.marketplace.driven_adapter.model.customer_model import CustomerModel
from src.service.marketplace.driven_adapter.model.event_configuration_model import (
    EventConfigurationModel,
)
from src.service.marketplace.driven_adapter.model.ticket_model import TicketModel
from src.service.marketplace.driven_adapter.model.vendor_model import VendorModel

__all__ = [
    'CustomerModel',
    'EventConfigurationModel',
    'TicketModel',
    'VendorModel',
]
