from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_vendor_repo import IVendorRepo
from src.service.marketplace.domain.entity.participant_entity import ParticipantIdentity
from src.service.marketplace.domain.entity.vendor_entity import Vendor
from src.service.marketplace.driven_adapter.model.vendor_model import VendorModel


class VendorRepoImpl(IVendorRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def get_by_id(self, *, vendor_id: str) -> Optional[Vendor]:
        model = await self.session.get(VendorModel, vendor_id)
        return self._model_to_entity(model) if model else None

    @Logger.io
    async def get_by_ids(self, *, vendor_ids: List[str]) -> dict[str, Vendor]:
        if not vendor_ids:
            return {}
        result = await self.session.execute(
            select(VendorModel).where(VendorModel.id.in_(vendor_ids))
        )
        return {model.id: self._model_to_entity(model) for model in result.scalars()}

    @Logger.io
    async def get_by_email(self, *, email: str) -> Optional[Vendor]:
        result = await self.session.execute(select(VendorModel).where(VendorModel.email == email))
        model = result.scalar_one_or_none()
        return self._model_to_entity(model) if model else None

    @Logger.io
    async def find_by_name(self, *, name: str) -> List[Vendor]:
        result = await self.session.execute(
            select(VendorModel).where(VendorModel.name.ilike(f'%{name}%')).order_by(VendorModel.name)
        )
        return [self._model_to_entity(model) for model in result.scalars()]

    @Logger.io
    async def list_active(self) -> List[Vendor]:
        result = await self.session.execute(
            select(VendorModel)
            .where(VendorModel.is_active.is_(True))
            .order_by(VendorModel.created_at, VendorModel.id)
        )
        return [self._model_to_entity(model) for model in result.scalars()]

    @Logger.io
    async def save(self, *, vendor: Vendor) -> Vendor:
        model = await self._upsert(vendor)
        await self.session.flush()
        return self._model_to_entity(model)

    @Logger.io
    async def save_all(self, *, vendors: List[Vendor]) -> None:
        for vendor in vendors:
            await self._upsert(vendor)
        await self.session.flush()

    async def _upsert(self, vendor: Vendor) -> VendorModel:
        model = await self.session.get(VendorModel, vendor.id)
        if model is None:
            model = VendorModel(
                id=vendor.id, created_at=vendor.created_at or datetime.now(timezone.utc)
            )
            self.session.add(model)
        model.name = vendor.name
        model.email = vendor.email
        model.hashed_password = vendor.identity.hashed_password
        model.tickets_per_release = vendor.tickets_per_release
        model.ticket_release_interval = vendor.ticket_release_interval
        model.tickets_to_sell = vendor.tickets_to_sell
        model.tickets_released = vendor.tickets_released
        model.total_tickets_sold = vendor.total_tickets_sold
        model.is_active = vendor.is_active
        return model

    @staticmethod
    def _model_to_entity(model: VendorModel) -> Vendor:
        return Vendor(
            identity=ParticipantIdentity(
                id=model.id,
                name=model.name,
                email=model.email,
                hashed_password=model.hashed_password,
            ),
            tickets_per_release=model.tickets_per_release,
            ticket_release_interval=model.ticket_release_interval,
            tickets_to_sell=model.tickets_to_sell,
            tickets_released=model.tickets_released,
            total_tickets_sold=model.total_tickets_sold,
            is_active=model.is_active,
            created_at=model.created_at,
        )
