"""SQLAlchemy ORM model definitions."""

from sqlalchemy import (
    Column,
    String,
    Integer,
    DateTime,
    Boolean,
    ForeignKey,
    Numeric,
    Index,
    UniqueConstraint,
    Enum as SqlEnum,
)
from sqlalchemy.orm import relationship

from patrimony.repositories.sqlalchemy.database import Base
from patrimony.domain.models.enums import AssetCategory, StakeholderRole


class StakeholderORM(Base):
    """SQLAlchemy model for Stakeholder."""

    __tablename__ = "stakeholders"

    stakeholder_id = Column(String(36), primary_key=True)
    name = Column(String(255), nullable=False)
    role = Column(SqlEnum(StakeholderRole), nullable=False, default=StakeholderRole.INVESTOR)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=True)

    shares = relationship("OwnershipShareORM", back_populates="stakeholder", passive_deletes=True)


class AssetORM(Base):
    """SQLAlchemy model for Asset (vehicle)."""

    __tablename__ = "assets"

    asset_id = Column(String(36), primary_key=True)
    label = Column(String(255), nullable=False, default="")
    asset_class_code = Column(Integer, nullable=False)
    model_code = Column(Integer, nullable=False)
    year_series_id = Column(String(20), nullable=False)
    fuel_code = Column(String(4), nullable=True)
    asset_category = Column(SqlEnum(AssetCategory), nullable=False)
    is_collective = Column(Boolean, nullable=False, default=False)
    brand_name = Column(String(255), nullable=True)
    model_name = Column(String(255), nullable=True)
    display_year = Column(Integer, nullable=True)
    display_fuel = Column(String(50), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=True)
    updated_at = Column(DateTime(timezone=True), nullable=True)

    shares = relationship("OwnershipShareORM", back_populates="asset")


class OwnershipShareORM(Base):
    """SQLAlchemy model for OwnershipShare."""

    __tablename__ = "ownership_shares"

    asset_id = Column(String(36), ForeignKey("assets.asset_id"), primary_key=True)
    stakeholder_id = Column(
        String(36),
        ForeignKey("stakeholders.stakeholder_id", ondelete="CASCADE"),
        primary_key=True,
    )
    percentage = Column(Numeric(precision=5, scale=2), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=True)
    updated_at = Column(DateTime(timezone=True), nullable=True)

    asset = relationship("AssetORM", back_populates="shares")
    stakeholder = relationship("StakeholderORM", back_populates="shares")


class PriceCacheORM(Base):
    """SQLAlchemy model for CacheEntry (one row per lookup key)."""

    __tablename__ = "price_cache"
    __table_args__ = (
        UniqueConstraint(
            "asset_class_code",
            "model_code",
            "year_series_id",
            "fuel_code",
            "asset_category",
            name="uq_price_cache_lookup_key",
        ),
        Index(
            "ix_price_cache_family",
            "asset_class_code",
            "model_code",
            "asset_category",
            "updated_at",
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    asset_class_code = Column(Integer, nullable=False)
    model_code = Column(Integer, nullable=False)
    year_series_id = Column(String(20), nullable=False)
    fuel_code = Column(String(4), nullable=False)
    asset_category = Column(SqlEnum(AssetCategory), nullable=False)
    price = Column(Numeric(precision=12, scale=2), nullable=False)
    reference_period = Column(String(50), nullable=False, default="N/A")
    brand_name = Column(String(255), nullable=True)
    model_name = Column(String(255), nullable=True)
    fuel_name = Column(String(50), nullable=True)
    model_year = Column(Integer, nullable=True)
    source_code = Column(String(20), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)
