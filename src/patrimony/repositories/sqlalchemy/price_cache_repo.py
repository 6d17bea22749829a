"""SQLAlchemy implementation of PriceCacheRepository."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from patrimony.core.exceptions import ValidationError
from patrimony.core.timezone import now_local
from patrimony.domain.models import AssetCategory, CacheEntry, PriceLookupKey
from patrimony.repositories.sqlalchemy.orm_models import PriceCacheORM

_KEY_COLUMNS = (
    "asset_class_code",
    "model_code",
    "year_series_id",
    "fuel_code",
    "asset_category",
)

_METADATA_FIELDS = (
    "reference_period",
    "brand_name",
    "model_name",
    "fuel_name",
    "model_year",
    "source_code",
)

_DIALECT_INSERTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


class SqlAlchemyPriceCacheRepository:
    """
    SQLAlchemy-backed reference price cache.

    upsert is a single INSERT ... ON CONFLICT DO UPDATE statement against
    the unique lookup-key constraint, so concurrent writers can never
    create a second row for the same key.
    """

    def __init__(self, db: Session):
        self._db = db

    def get(self, key: PriceLookupKey) -> Optional[CacheEntry]:
        """Return the entry for an exact key, if any."""
        self._require_normalized(key)
        orm_entry = self._key_query(key).first()
        return self._to_domain(orm_entry) if orm_entry else None

    def upsert(
        self,
        key: PriceLookupKey,
        price: Decimal,
        metadata: Optional[dict] = None,
        now: Optional[datetime] = None,
    ) -> CacheEntry:
        """Insert or overwrite the entry for a key."""
        self._require_normalized(key)
        now = now or now_local()
        metadata = metadata or {}

        values = {
            "asset_class_code": key.asset_class_code,
            "model_code": key.model_code,
            "year_series_id": key.year_series_id,
            "fuel_code": key.fuel_code,
            "asset_category": key.asset_category,
            "price": price,
            "reference_period": metadata.get("reference_period") or "N/A",
            "brand_name": metadata.get("brand_name"),
            "model_name": metadata.get("model_name"),
            "fuel_name": metadata.get("fuel_name"),
            "model_year": metadata.get("model_year"),
            "source_code": metadata.get("source_code"),
            "created_at": now,
            "updated_at": now,
        }

        stmt = self._insert()(PriceCacheORM).values(**values)
        refreshed = {name: stmt.excluded[name] for name in ("price", "updated_at") + _METADATA_FIELDS}
        stmt = stmt.on_conflict_do_update(index_elements=list(_KEY_COLUMNS), set_=refreshed)

        self._db.execute(stmt)
        self._db.commit()
        return self.get(key)

    def find_most_recent_for_asset_class(
        self,
        asset_class_code: int,
        model_code: int,
        asset_category: AssetCategory,
    ) -> Optional[CacheEntry]:
        """Most recently updated entry of a vehicle family, ignoring year and fuel."""
        orm_entry = (
            self._db.query(PriceCacheORM)
            .filter(
                PriceCacheORM.asset_class_code == asset_class_code,
                PriceCacheORM.model_code == model_code,
                PriceCacheORM.asset_category == asset_category,
            )
            .order_by(PriceCacheORM.updated_at.desc(), PriceCacheORM.id.desc())
            .first()
        )
        return self._to_domain(orm_entry) if orm_entry else None

    def delete(self, key: PriceLookupKey) -> bool:
        """Delete the entry for a key; return True if one existed."""
        self._require_normalized(key)
        deleted = self._key_query(key).delete()
        self._db.commit()
        return deleted > 0

    def list_all(self) -> list[CacheEntry]:
        """List every cached entry."""
        orm_entries = (
            self._db.query(PriceCacheORM)
            .order_by(PriceCacheORM.asset_class_code, PriceCacheORM.model_code, PriceCacheORM.year_series_id)
            .all()
        )
        return [self._to_domain(e) for e in orm_entries]

    def _key_query(self, key: PriceLookupKey):
        return self._db.query(PriceCacheORM).filter(
            PriceCacheORM.asset_class_code == key.asset_class_code,
            PriceCacheORM.model_code == key.model_code,
            PriceCacheORM.year_series_id == key.year_series_id,
            PriceCacheORM.fuel_code == key.fuel_code,
            PriceCacheORM.asset_category == key.asset_category,
        )

    def _insert(self):
        dialect = self._db.get_bind().dialect.name
        try:
            return _DIALECT_INSERTS[dialect]
        except KeyError:
            raise NotImplementedError(f"Atomic upsert not supported for dialect: {dialect}")

    @staticmethod
    def _require_normalized(key: PriceLookupKey) -> None:
        if not key.is_normalized:
            raise ValidationError(f"Lookup key must carry a fuel code: {key}")

    @staticmethod
    def _to_domain(orm: PriceCacheORM) -> CacheEntry:
        """Convert ORM model to domain model."""
        return CacheEntry(
            key=PriceLookupKey(
                asset_class_code=orm.asset_class_code,
                model_code=orm.model_code,
                year_series_id=orm.year_series_id,
                asset_category=orm.asset_category,
                fuel_code=orm.fuel_code,
            ),
            price=Decimal(str(orm.price)) if orm.price is not None else Decimal("0"),
            reference_period=orm.reference_period,
            brand_name=orm.brand_name,
            model_name=orm.model_name,
            fuel_name=orm.fuel_name,
            model_year=orm.model_year,
            source_code=orm.source_code,
            created_at=orm.created_at,
            updated_at=orm.updated_at,
        )
