import enum
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.models.mixins import AuditMixin


class ShipmentStatus(str, enum.Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class TransportMode(str, enum.Enum):
    FCL = "FCL"
    LCL = "LCL"
    RORO = "RORO"
    AIR = "AIR"


class Shipment(AuditMixin, Base):
    """
    Top-level freight movement owned by a shipper.
    `shipment_number` and `shipper_id` are written once at creation.
    """
    __tablename__ = "shipment"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    shipment_number: Mapped[str] = mapped_column(String(40), unique=True, index=True, nullable=False)
    origin: Mapped[str] = mapped_column(String(255), nullable=False)
    destination: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, index=True, default=ShipmentStatus.DRAFT.value
    )

    # Identities come from the auth service; no FK into a local user table.
    shipper_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    forwarder_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)

    estimated_departure: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    estimated_arrival: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    actual_departure: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    actual_arrival: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    loads: Mapped[list["ShipmentLoad"]] = relationship(
        "ShipmentLoad", back_populates="shipment", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Shipment(number={self.shipment_number}, status={self.status})>"


class ShipmentLoad(AuditMixin, Base):
    """A physical consignment inside a shipment, tagged with one transport mode."""
    __tablename__ = "shipment_load"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    shipment_id: Mapped[int] = mapped_column(
        ForeignKey("shipment.id", ondelete="CASCADE"), nullable=False, index=True
    )
    load_number: Mapped[str] = mapped_column(String(50), unique=True, index=True, nullable=False)
    reference: Mapped[str] = mapped_column(String(100), nullable=False)
    transport_mode: Mapped[str] = mapped_column(String(10), nullable=False)
    status: Mapped[str] = mapped_column(String(30), nullable=False, default="pending")

    container_number: Mapped[str | None] = mapped_column(String(20), nullable=True)
    container_size: Mapped[str | None] = mapped_column(String(10), nullable=True)
    container_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    weight: Mapped[float | None] = mapped_column(Float, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    pickup_address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    delivery_address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    pickup_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    delivery_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    shipment: Mapped["Shipment"] = relationship("Shipment", back_populates="loads")
    items: Mapped[list["LoadItem"]] = relationship(
        "LoadItem", back_populates="load", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<ShipmentLoad(number={self.load_number}, mode={self.transport_mode})>"


class LoadItem(AuditMixin, Base):
    """
    A cargo unit inside a load. `type` is the discriminant of `specifications`
    and never changes after the row is written.
    """
    __tablename__ = "load_item"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    shipment_load_id: Mapped[int] = mapped_column(
        ForeignKey("shipment_load.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type: Mapped[str] = mapped_column(String(10), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    dangerous_goods: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    special_instructions: Mapped[str | None] = mapped_column(Text, nullable=True)
    specifications: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)

    load: Mapped["ShipmentLoad"] = relationship("ShipmentLoad", back_populates="items")

    def __repr__(self) -> str:
        return f"<LoadItem(load={self.shipment_load_id}, type={self.type})>"
