from datetime import datetime

from sqlalchemy import Boolean, DateTime, Float, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base


class VendorModel(Base):
    __tablename__ = 'vendor'

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    tickets_per_release: Mapped[int] = mapped_column(Integer, nullable=False)
    ticket_release_interval: Mapped[float] = mapped_column(Float, nullable=False)
    tickets_to_sell: Mapped[int] = mapped_column(Integer, nullable=False)
    tickets_released: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_tickets_sold: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    def __repr__(self):
        return f'<VendorModel(id={self.id}, email={self.email}, released={self.tickets_released}, sold={self.total_tickets_sold})>'
