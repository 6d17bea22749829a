"""SQLAlchemy implementation of AssetRepository."""

from typing import Optional

from sqlalchemy.orm import Session

from patrimony.core.exceptions import NotFoundError
from patrimony.domain.models import Asset, PriceLookupKey
from patrimony.repositories.sqlalchemy.orm_models import AssetORM


class SqlAlchemyAssetRepository:
    """SQLAlchemy-backed asset repository."""

    def __init__(self, db: Session):
        self._db = db

    def create(self, asset: Asset) -> Asset:
        """Persist a new asset."""
        orm_asset = AssetORM(asset_id=asset.asset_id, created_at=asset.created_at)
        self._apply(orm_asset, asset)
        self._db.add(orm_asset)
        self._db.commit()
        self._db.refresh(orm_asset)
        return self._to_domain(orm_asset)

    def get_by_id(self, asset_id: str) -> Optional[Asset]:
        """Retrieve asset by ID."""
        orm_asset = self._db.query(AssetORM).filter(AssetORM.asset_id == asset_id).first()
        return self._to_domain(orm_asset) if orm_asset else None

    def list_all(self) -> list[Asset]:
        """List all assets."""
        orm_assets = self._db.query(AssetORM).order_by(AssetORM.created_at, AssetORM.asset_id).all()
        return [self._to_domain(a) for a in orm_assets]

    def list_collective(self) -> list[Asset]:
        """List assets flagged as collectively owned."""
        orm_assets = (
            self._db.query(AssetORM)
            .filter(AssetORM.is_collective.is_(True))
            .order_by(AssetORM.created_at, AssetORM.asset_id)
            .all()
        )
        return [self._to_domain(a) for a in orm_assets]

    def update(self, asset: Asset) -> Asset:
        """Update an existing asset."""
        orm_asset = self._db.query(AssetORM).filter(AssetORM.asset_id == asset.asset_id).first()
        if not orm_asset:
            raise NotFoundError("Asset", asset.asset_id)
        self._apply(orm_asset, asset)
        self._db.commit()
        self._db.refresh(orm_asset)
        return self._to_domain(orm_asset)

    def delete(self, asset_id: str) -> None:
        """Delete an asset."""
        self._db.query(AssetORM).filter(AssetORM.asset_id == asset_id).delete()
        self._db.commit()

    @staticmethod
    def _apply(orm: AssetORM, asset: Asset) -> None:
        key = asset.lookup_key
        orm.label = asset.label
        orm.asset_class_code = key.asset_class_code
        orm.model_code = key.model_code
        orm.year_series_id = key.year_series_id
        orm.fuel_code = key.fuel_code
        orm.asset_category = key.asset_category
        orm.is_collective = asset.is_collective
        orm.brand_name = asset.brand_name
        orm.model_name = asset.model_name
        orm.display_year = asset.display_year
        orm.display_fuel = asset.display_fuel
        orm.updated_at = asset.updated_at

    @staticmethod
    def _to_domain(orm: AssetORM) -> Asset:
        """Convert ORM model to domain model."""
        return Asset(
            asset_id=orm.asset_id,
            lookup_key=PriceLookupKey(
                asset_class_code=orm.asset_class_code,
                model_code=orm.model_code,
                year_series_id=orm.year_series_id,
                asset_category=orm.asset_category,
                fuel_code=orm.fuel_code,
            ),
            label=orm.label,
            is_collective=bool(orm.is_collective),
            brand_name=orm.brand_name,
            model_name=orm.model_name,
            display_year=orm.display_year,
            display_fuel=orm.display_fuel,
            created_at=orm.created_at,
            updated_at=orm.updated_at,
        )
