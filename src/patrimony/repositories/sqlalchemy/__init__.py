"""SQLAlchemy repository implementations."""

from patrimony.repositories.sqlalchemy.database import (
    create_db_engine,
    get_engine,
    get_session_factory,
    get_session,
    init_db,
    init_db_with_url,
    reset_database,
    Base,
)
from patrimony.repositories.sqlalchemy.price_cache_repo import SqlAlchemyPriceCacheRepository
from patrimony.repositories.sqlalchemy.asset_repo import SqlAlchemyAssetRepository
from patrimony.repositories.sqlalchemy.stakeholder_repo import SqlAlchemyStakeholderRepository
from patrimony.repositories.sqlalchemy.ownership_repo import SqlAlchemyOwnershipRepository

__all__ = [
    "create_db_engine",
    "get_engine",
    "get_session_factory",
    "get_session",
    "init_db",
    "init_db_with_url",
    "reset_database",
    "Base",
    "SqlAlchemyPriceCacheRepository",
    "SqlAlchemyAssetRepository",
    "SqlAlchemyStakeholderRepository",
    "SqlAlchemyOwnershipRepository",
]
