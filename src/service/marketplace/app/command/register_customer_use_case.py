from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from pydantic import SecretStr

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_password_hasher import IPasswordHasher
from src.service.marketplace.app.participant.participant_registry import ParticipantRegistry
from src.service.marketplace.domain.entity.customer_entity import Customer
from src.service.marketplace.domain.entity.participant_entity import validate_password_length


class RegisterCustomerUseCase:
    def __init__(
        self,
        *,
        registry: ParticipantRegistry,
        password_hasher: IPasswordHasher,
        settings: Settings,
    ) -> None:
        self.registry = registry
        self.password_hasher = password_hasher
        self.settings = settings

    @classmethod
    @inject
    def depends(
        cls,
        registry: ParticipantRegistry = Depends(Provide[Container.participant_registry]),
        password_hasher: IPasswordHasher = Depends(Provide[Container.password_hasher]),
        settings: Settings = Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(registry=registry, password_hasher=password_hasher, settings=settings)

    @Logger.io
    async def execute(
        self,
        *,
        name: str,
        email: str,
        password: SecretStr,
        tickets_to_purchase: int,
        ticket_retrieval_interval: float,
    ) -> Customer:
        validate_password_length(
            password.get_secret_value(), min_length=self.settings.MIN_PASSWORD_LENGTH
        )
        customer = Customer.create(
            name=name,
            email=email,
            hashed_password=self.password_hasher.hash_password(plain_password=password),
            tickets_to_purchase=tickets_to_purchase,
            ticket_retrieval_interval=ticket_retrieval_interval,
        )
        return await self.registry.register_customer(customer=customer)
