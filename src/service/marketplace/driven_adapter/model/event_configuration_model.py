from datetime import datetime

from sqlalchemy import DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base

ACTIVE_CONFIGURATION_ID = 1


class EventConfigurationModel(Base):
    """Single-row table holding the active event configuration"""

    __tablename__ = 'event_configuration'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=ACTIVE_CONFIGURATION_ID)
    event_name: Mapped[str] = mapped_column(String(255), nullable=False)
    event_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    total_tickets: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    max_capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    ticket_release_rate: Mapped[int] = mapped_column(Integer, nullable=False)
    customer_retrieval_rate: Mapped[int] = mapped_column(Integer, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
