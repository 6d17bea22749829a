"""SQLAlchemy implementation of StakeholderRepository."""

from typing import Optional

from sqlalchemy.orm import Session

from patrimony.core.exceptions import NotFoundError
from patrimony.domain.models import Stakeholder, StakeholderRole
from patrimony.repositories.sqlalchemy.orm_models import StakeholderORM


class SqlAlchemyStakeholderRepository:
    """SQLAlchemy-backed stakeholder repository."""

    def __init__(self, db: Session):
        self._db = db

    def create(self, stakeholder: Stakeholder) -> Stakeholder:
        """Persist a new stakeholder."""
        orm_stakeholder = StakeholderORM(
            stakeholder_id=stakeholder.stakeholder_id,
            name=stakeholder.name,
            role=stakeholder.role,
            is_active=stakeholder.is_active,
            created_at=stakeholder.created_at,
        )
        self._db.add(orm_stakeholder)
        self._db.commit()
        self._db.refresh(orm_stakeholder)
        return self._to_domain(orm_stakeholder)

    def get_by_id(self, stakeholder_id: str) -> Optional[Stakeholder]:
        """Retrieve stakeholder by ID."""
        orm_stakeholder = self._db.query(StakeholderORM).filter(
            StakeholderORM.stakeholder_id == stakeholder_id
        ).first()
        return self._to_domain(orm_stakeholder) if orm_stakeholder else None

    def list_all(self) -> list[Stakeholder]:
        """List all stakeholders."""
        orm_stakeholders = (
            self._db.query(StakeholderORM)
            .order_by(StakeholderORM.created_at, StakeholderORM.stakeholder_id)
            .all()
        )
        return [self._to_domain(s) for s in orm_stakeholders]

    def list_by_role(
        self,
        role: StakeholderRole,
        active_only: bool = True,
    ) -> list[Stakeholder]:
        """List stakeholders of a role ordered by (created_at, stakeholder_id)."""
        query = self._db.query(StakeholderORM).filter(StakeholderORM.role == role)
        if active_only:
            query = query.filter(StakeholderORM.is_active.is_(True))
        orm_stakeholders = query.order_by(
            StakeholderORM.created_at, StakeholderORM.stakeholder_id
        ).all()
        return [self._to_domain(s) for s in orm_stakeholders]

    def update(self, stakeholder: Stakeholder) -> Stakeholder:
        """Update an existing stakeholder."""
        orm_stakeholder = self._db.query(StakeholderORM).filter(
            StakeholderORM.stakeholder_id == stakeholder.stakeholder_id
        ).first()
        if not orm_stakeholder:
            raise NotFoundError("Stakeholder", stakeholder.stakeholder_id)
        orm_stakeholder.name = stakeholder.name
        orm_stakeholder.role = stakeholder.role
        orm_stakeholder.is_active = stakeholder.is_active
        self._db.commit()
        self._db.refresh(orm_stakeholder)
        return self._to_domain(orm_stakeholder)

    @staticmethod
    def _to_domain(orm: StakeholderORM) -> Stakeholder:
        """Convert ORM model to domain model."""
        return Stakeholder(
            stakeholder_id=orm.stakeholder_id,
            name=orm.name,
            role=orm.role,
            is_active=bool(orm.is_active),
            created_at=orm.created_at,
        )
