"""
Vendor / Customer API Schemas - Pydantic models for request/response
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, SecretStr

from src.service.marketplace.domain.entity.customer_entity import Customer
from src.service.marketplace.domain.entity.vendor_entity import Vendor


class LoginRequest(BaseModel):
    email: EmailStr
    password: SecretStr = Field(
        ..., min_length=1, max_length=72, description='Participant password (max 72 chars)'
    )

    class Config:
        json_schema_extra = {'example': {'email': 'v@t.com', 'password': 'P@ssw0rd'}}


# ============================ Vendor ============================


class VendorRegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: SecretStr = Field(..., max_length=72, description='bcrypt limit is 72 bytes')
    tickets_per_release: int
    ticket_release_interval: float = Field(..., description='Seconds between releases')
    tickets_to_sell: int

    class Config:
        json_schema_extra = {
            'example': {
                'name': 'Box Office',
                'email': 'v@t.com',
                'password': 'P@ssw0rd',
                'tickets_per_release': 5,
                'ticket_release_interval': 2.0,
                'tickets_to_sell': 50,
            }
        }


class VendorResponse(BaseModel):
    id: str
    name: str
    email: str
    tickets_per_release: int
    ticket_release_interval: float
    tickets_to_sell: int
    tickets_released: int
    total_tickets_sold: int
    is_active: bool
    created_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, vendor: Vendor) -> 'VendorResponse':
        return cls(
            id=vendor.id,
            name=vendor.name,
            email=vendor.email,
            tickets_per_release=vendor.tickets_per_release,
            ticket_release_interval=vendor.ticket_release_interval,
            tickets_to_sell=vendor.tickets_to_sell,
            tickets_released=vendor.tickets_released,
            total_tickets_sold=vendor.total_tickets_sold,
            is_active=vendor.is_active,
            created_at=vendor.created_at,
        )


class ReleaseRequest(BaseModel):
    count: int

    class Config:
        json_schema_extra = {'example': {'count': 5}}


# ============================ Customer ============================


class CustomerRegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: SecretStr = Field(..., max_length=72, description='bcrypt limit is 72 bytes')
    tickets_to_purchase: int
    ticket_retrieval_interval: float = Field(..., description='Seconds between purchases')

    class Config:
        json_schema_extra = {
            'example': {
                'name': 'Jane Doe',
                'email': 'c@t.com',
                'password': 'P@ssw0rd',
                'tickets_to_purchase': 4,
                'ticket_retrieval_interval': 1.5,
            }
        }


class CustomerResponse(BaseModel):
    id: str
    name: str
    email: str
    tickets_to_purchase: int
    ticket_retrieval_interval: float
    total_tickets_purchased: int
    is_active: bool
    created_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, customer: Customer) -> 'CustomerResponse':
        return cls(
            id=customer.id,
            name=customer.name,
            email=customer.email,
            tickets_to_purchase=customer.tickets_to_purchase,
            ticket_retrieval_interval=customer.ticket_retrieval_interval,
            total_tickets_purchased=customer.total_tickets_purchased,
            is_active=customer.is_active,
            created_at=customer.created_at,
        )


class PurchaseRequest(BaseModel):
    count: int

    class Config:
        json_schema_extra = {'example': {'count': 2}}


class PurchaseResponse(BaseModel):
    customer_id: str
    requested: int
    purchased: int
