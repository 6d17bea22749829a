"""Ownership share repository protocol."""

from decimal import Decimal
from typing import Optional, Protocol

from patrimony.domain.models import OwnershipShare


class OwnershipRepository(Protocol):
    """Interface for ownership share data access."""

    def get(self, asset_id: str, stakeholder_id: str) -> Optional[OwnershipShare]:
        """Retrieve the share of a stakeholder in an asset."""
        ...

    def list_by_asset(self, asset_id: str) -> list[OwnershipShare]:
        """List all shares of an asset."""
        ...

    def list_by_stakeholder(self, stakeholder_id: str) -> list[OwnershipShare]:
        """List all shares held by a stakeholder."""
        ...

    def total_percentage(
        self,
        asset_id: str,
        exclude_stakeholder_id: Optional[str] = None,
    ) -> Decimal:
        """Sum of share percentages on an asset, optionally excluding one holder."""
        ...

    def create(self, share: OwnershipShare) -> OwnershipShare:
        """Persist a new share."""
        ...

    def update(self, share: OwnershipShare) -> OwnershipShare:
        """Update the percentage of an existing share."""
        ...

    def delete(self, asset_id: str, stakeholder_id: str) -> None:
        """Delete a share."""
        ...

    def replace_group_shares(
        self,
        asset_id: str,
        remove_stakeholder_ids: list[str],
        new_shares: list[OwnershipShare],
    ) -> list[OwnershipShare]:
        """Delete shares of the given holders and insert new ones in one commit."""
        ...
