"""SQLAlchemy implementation of OwnershipRepository."""

from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from patrimony.core.exceptions import NotFoundError
from patrimony.domain.models import OwnershipShare
from patrimony.repositories.sqlalchemy.orm_models import OwnershipShareORM


class SqlAlchemyOwnershipRepository:
    """SQLAlchemy-backed ownership share repository."""

    def __init__(self, db: Session):
        self._db = db

    def get(self, asset_id: str, stakeholder_id: str) -> Optional[OwnershipShare]:
        """Retrieve the share of a stakeholder in an asset."""
        orm_share = self._share_query(asset_id, stakeholder_id).first()
        return self._to_domain(orm_share) if orm_share else None

    def list_by_asset(self, asset_id: str) -> list[OwnershipShare]:
        """List all shares of an asset."""
        orm_shares = (
            self._db.query(OwnershipShareORM)
            .filter(OwnershipShareORM.asset_id == asset_id)
            .order_by(OwnershipShareORM.created_at, OwnershipShareORM.stakeholder_id)
            .all()
        )
        return [self._to_domain(s) for s in orm_shares]

    def list_by_stakeholder(self, stakeholder_id: str) -> list[OwnershipShare]:
        """List all shares held by a stakeholder."""
        orm_shares = (
            self._db.query(OwnershipShareORM)
            .filter(OwnershipShareORM.stakeholder_id == stakeholder_id)
            .order_by(OwnershipShareORM.created_at, OwnershipShareORM.asset_id)
            .all()
        )
        return [self._to_domain(s) for s in orm_shares]

    def total_percentage(
        self,
        asset_id: str,
        exclude_stakeholder_id: Optional[str] = None,
    ) -> Decimal:
        """Sum of share percentages on an asset, optionally excluding one holder."""
        # Summed in Python: SQLite SUM() over NUMERIC returns floats
        return sum(
            (
                s.percentage
                for s in self.list_by_asset(asset_id)
                if s.stakeholder_id != exclude_stakeholder_id
            ),
            Decimal("0"),
        )

    def create(self, share: OwnershipShare) -> OwnershipShare:
        """Persist a new share."""
        orm_share = self._to_orm(share)
        self._db.add(orm_share)
        self._db.commit()
        self._db.refresh(orm_share)
        return self._to_domain(orm_share)

    def update(self, share: OwnershipShare) -> OwnershipShare:
        """Update the percentage of an existing share."""
        orm_share = self._share_query(share.asset_id, share.stakeholder_id).first()
        if not orm_share:
            raise NotFoundError("OwnershipShare", f"{share.asset_id}/{share.stakeholder_id}")
        orm_share.percentage = share.percentage
        orm_share.updated_at = share.updated_at
        self._db.commit()
        self._db.refresh(orm_share)
        return self._to_domain(orm_share)

    def delete(self, asset_id: str, stakeholder_id: str) -> None:
        """Delete a share."""
        self._share_query(asset_id, stakeholder_id).delete()
        self._db.commit()

    def replace_group_shares(
        self,
        asset_id: str,
        remove_stakeholder_ids: list[str],
        new_shares: list[OwnershipShare],
    ) -> list[OwnershipShare]:
        """Delete shares of the given holders and insert new ones in one commit."""
        if remove_stakeholder_ids:
            self._db.query(OwnershipShareORM).filter(
                OwnershipShareORM.asset_id == asset_id,
                OwnershipShareORM.stakeholder_id.in_(remove_stakeholder_ids),
            ).delete(synchronize_session="fetch")
            self._db.flush()

        orm_shares = [self._to_orm(s) for s in new_shares]
        self._db.add_all(orm_shares)
        self._db.commit()
        for orm_share in orm_shares:
            self._db.refresh(orm_share)
        return [self._to_domain(s) for s in orm_shares]

    def _share_query(self, asset_id: str, stakeholder_id: str):
        return self._db.query(OwnershipShareORM).filter(
            OwnershipShareORM.asset_id == asset_id,
            OwnershipShareORM.stakeholder_id == stakeholder_id,
        )

    @staticmethod
    def _to_orm(share: OwnershipShare) -> OwnershipShareORM:
        return OwnershipShareORM(
            asset_id=share.asset_id,
            stakeholder_id=share.stakeholder_id,
            percentage=share.percentage,
            created_at=share.created_at,
            updated_at=share.updated_at,
        )

    @staticmethod
    def _to_domain(orm: OwnershipShareORM) -> OwnershipShare:
        """Convert ORM model to domain model."""
        return OwnershipShare(
            asset_id=orm.asset_id,
            stakeholder_id=orm.stakeholder_id,
            percentage=Decimal(str(orm.percentage)) if orm.percentage is not None else Decimal("0"),
            created_at=orm.created_at,
            updated_at=orm.updated_at,
        )
