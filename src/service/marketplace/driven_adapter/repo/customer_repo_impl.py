from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_customer_repo import ICustomerRepo
from src.service.marketplace.domain.entity.customer_entity import Customer
from src.service.marketplace.domain.entity.participant_entity import ParticipantIdentity
from src.service.marketplace.driven_adapter.model.customer_model import CustomerModel


class CustomerRepoImpl(ICustomerRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def get_by_id(self, *, customer_id: str) -> Optional[Customer]:
        model = await self.session.get(CustomerModel, customer_id)
        return self._model_to_entity(model) if model else None

    @Logger.io
    async def get_by_ids(self, *, customer_ids: List[str]) -> dict[str, Customer]:
        if not customer_ids:
            return {}
        result = await self.session.execute(
            select(CustomerModel).where(CustomerModel.id.in_(customer_ids))
        )
        return {model.id: self._model_to_entity(model) for model in result.scalars()}

    @Logger.io
    async def get_by_email(self, *, email: str) -> Optional[Customer]:
        result = await self.session.execute(
            select(CustomerModel).where(CustomerModel.email == email)
        )
        model = result.scalar_one_or_none()
        return self._model_to_entity(model) if model else None

    @Logger.io
    async def find_by_name(self, *, name: str) -> List[Customer]:
        result = await self.session.execute(
            select(CustomerModel)
            .where(CustomerModel.name.ilike(f'%{name}%'))
            .order_by(CustomerModel.name)
        )
        return [self._model_to_entity(model) for model in result.scalars()]

    @Logger.io
    async def list_active(self) -> List[Customer]:
        result = await self.session.execute(
            select(CustomerModel)
            .where(CustomerModel.is_active.is_(True))
            .order_by(CustomerModel.created_at, CustomerModel.id)
        )
        return [self._model_to_entity(model) for model in result.scalars()]

    @Logger.io
    async def save(self, *, customer: Customer) -> Customer:
        model = await self._upsert(customer)
        await self.session.flush()
        return self._model_to_entity(model)

    @Logger.io
    async def save_all(self, *, customers: List[Customer]) -> None:
        for customer in customers:
            await self._upsert(customer)
        await self.session.flush()

    async def _upsert(self, customer: Customer) -> CustomerModel:
        model = await self.session.get(CustomerModel, customer.id)
        if model is None:
            model = CustomerModel(
                id=customer.id, created_at=customer.created_at or datetime.now(timezone.utc)
            )
            self.session.add(model)
        model.name = customer.name
        model.email = customer.email
        model.hashed_password = customer.identity.hashed_password
        model.tickets_to_purchase = customer.tickets_to_purchase
        model.ticket_retrieval_interval = customer.ticket_retrieval_interval
        model.total_tickets_purchased = customer.total_tickets_purchased
        model.is_active = customer.is_active
        return model

    @staticmethod
    def _model_to_entity(model: CustomerModel) -> Customer:
        return Customer(
            identity=ParticipantIdentity(
                id=model.id,
                name=model.name,
                email=model.email,
                hashed_password=model.hashed_password,
            ),
            tickets_to_purchase=model.tickets_to_purchase,
            ticket_retrieval_interval=model.ticket_retrieval_interval,
            total_tickets_purchased=model.total_tickets_purchased,
            is_active=model.is_active,
            created_at=model.created_at,
        )
