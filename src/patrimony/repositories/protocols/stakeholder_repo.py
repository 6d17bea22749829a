"""Stakeholder repository protocol."""

from typing import Optional, Protocol

from patrimony.domain.models import Stakeholder, StakeholderRole


class StakeholderRepository(Protocol):
    """Interface for stakeholder data access."""

    def create(self, stakeholder: Stakeholder) -> Stakeholder:
        """Persist a new stakeholder."""
        ...

    def get_by_id(self, stakeholder_id: str) -> Optional[Stakeholder]:
        """Retrieve stakeholder by ID."""
        ...

    def list_all(self) -> list[Stakeholder]:
        """List all stakeholders."""
        ...

    def list_by_role(
        self,
        role: StakeholderRole,
        active_only: bool = True,
    ) -> list[Stakeholder]:
        """List stakeholders of a role ordered by (created_at, stakeholder_id)."""
        ...

    def update(self, stakeholder: Stakeholder) -> Stakeholder:
        """Update an existing stakeholder."""
        ...
