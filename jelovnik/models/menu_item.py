from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import DateTime, Integer, Numeric, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from jelovnik.db import Base


class MenuItem(Base):
    """One sellable product variant; identified by external_id, not by the row id."""

    __tablename__ = "jelovnik"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    external_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    collection: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    collection_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    product_name: Mapped[str] = mapped_column(String(255), nullable=False)
    product_name_en: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    product_name_de: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    product_name_tr: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    description_hr: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description_en: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description_de: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description_tr: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    size: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    image: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
