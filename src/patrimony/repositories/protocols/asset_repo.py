"""Asset repository protocol."""

from typing import Optional, Protocol

from patrimony.domain.models import Asset


class AssetRepository(Protocol):
    """Interface for asset data access."""

    def create(self, asset: Asset) -> Asset:
        """Persist a new asset."""
        ...

    def get_by_id(self, asset_id: str) -> Optional[Asset]:
        """Retrieve asset by ID."""
        ...

    def list_all(self) -> list[Asset]:
        """List all assets."""
        ...

    def list_collective(self) -> list[Asset]:
        """List assets flagged as collectively owned."""
        ...

    def update(self, asset: Asset) -> Asset:
        """Update an existing asset."""
        ...

    def delete(self, asset_id: str) -> None:
        """Delete an asset (hard delete)."""
        ...
