from typing import Callable, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from pydantic import SecretStr

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import AuthenticationError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_password_hasher import IPasswordHasher
from src.service.marketplace.app.participant.participant_registry import ParticipantRegistry
from src.service.marketplace.domain.entity.customer_entity import Customer
from src.service.marketplace.domain.entity.vendor_entity import Vendor
from src.service.marketplace.domain.enum.participant_role import ParticipantRole


class LoginParticipantUseCase:
    """
    Check a participant's credentials and put them back in the marketplace.

    Logging in reactivates the participant and restarts its runner.
    """

    def __init__(
        self,
        *,
        uow_factory: Callable[[], AbstractUnitOfWork],
        password_hasher: IPasswordHasher,
        registry: ParticipantRegistry,
    ) -> None:
        self.uow_factory = uow_factory
        self.password_hasher = password_hasher
        self.registry = registry

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: Callable[[], AbstractUnitOfWork] = Depends(
            Provide[Container.unit_of_work.provider]
        ),
        password_hasher: IPasswordHasher = Depends(Provide[Container.password_hasher]),
        registry: ParticipantRegistry = Depends(Provide[Container.participant_registry]),
    ) -> Self:
        return cls(uow_factory=uow_factory, password_hasher=password_hasher, registry=registry)

    @Logger.io
    async def execute(
        self, *, role: ParticipantRole, email: str, password: SecretStr
    ) -> Vendor | Customer:
        async with self.uow_factory() as uow:
            if role == ParticipantRole.VENDOR:
                participant: Vendor | Customer | None = await uow.vendor_repo.get_by_email(
                    email=email
                )
            else:
                participant = await uow.customer_repo.get_by_email(email=email)

        if participant is None or not self.password_hasher.verify_password(
            plain_password=password, hashed_password=participant.identity.hashed_password
        ):
            raise AuthenticationError('Invalid email or password')

        if role == ParticipantRole.VENDOR:
            return await self.registry.reactivate_vendor(vendor_id=participant.id)
        return await self.registry.reactivate_customer(customer_id=participant.id)
