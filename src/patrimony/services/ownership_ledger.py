"""Ownership ledger: shares, the 100% invariant and equal distribution."""

import logging
import uuid
from decimal import Decimal, ROUND_DOWN
from typing import Callable, Optional, Union

from patrimony.core.exceptions import ConflictError, NotFoundError, ValidationError
from patrimony.core.timezone import now_local
from patrimony.domain.models import Asset, OwnershipShare, Stakeholder, StakeholderRole
from patrimony.repositories.protocols import (
    AssetRepository,
    OwnershipRepository,
    StakeholderRepository,
)

logger = logging.getLogger(__name__)

MAX_PERCENTAGE = Decimal("100")
PERCENTAGE_STEP = Decimal("0.01")
# 100 / N must stay at least one step
MAX_GROUP_MEMBERS = 10000


class OwnershipLedger:
    """
    Service holding who owns which fraction of every asset.

    For a fixed asset the share percentages sum to at most 100. Collective
    assets are split equally among the active members of the group role,
    and that split is regenerated whenever the group roster changes.
    """

    def __init__(
        self,
        asset_repo: AssetRepository,
        stakeholder_repo: StakeholderRepository,
        ownership_repo: OwnershipRepository,
        group_role: StakeholderRole = StakeholderRole.PARTNER,
        clock: Callable = now_local,
    ):
        self._asset_repo = asset_repo
        self._stakeholder_repo = stakeholder_repo
        self._ownership_repo = ownership_repo
        self._group_role = group_role
        self._clock = clock

    @property
    def group_role(self) -> StakeholderRole:
        return self._group_role

    # Shares

    def add_share(
        self,
        asset_id: str,
        stakeholder_id: str,
        percentage: Union[Decimal, int, str],
    ) -> OwnershipShare:
        """
        Grant a stakeholder a share of an asset.

        Raises ConflictError if the pair already has a share or if the
        asset's total would exceed 100%.
        """
        percentage = self._validate_percentage(percentage)
        self.get_asset(asset_id)
        self.get_stakeholder(stakeholder_id)

        if self._ownership_repo.get(asset_id, stakeholder_id):
            raise ConflictError(
                f"Stakeholder {stakeholder_id} already holds a share of asset {asset_id}"
            )
        self._check_total(asset_id, percentage)

        now = self._clock()
        share = self._ownership_repo.create(
            OwnershipShare(
                asset_id=asset_id,
                stakeholder_id=stakeholder_id,
                percentage=percentage,
                created_at=now,
                updated_at=now,
            )
        )
        logger.info("Share created: %s holds %s%% of %s", stakeholder_id, percentage, asset_id)
        return share

    def update_share(
        self,
        asset_id: str,
        stakeholder_id: str,
        new_percentage: Union[Decimal, int, str],
    ) -> OwnershipShare:
        """Change a share percentage; the 100% check excludes the row itself."""
        percentage = self._validate_percentage(new_percentage)
        share = self.get_share(asset_id, stakeholder_id)
        self._check_manual_edit(asset_id, stakeholder_id)
        self._check_total(asset_id, percentage, exclude_stakeholder_id=stakeholder_id)

        share.percentage = percentage
        share.updated_at = self._clock()
        return self._ownership_repo.update(share)

    def remove_share(self, asset_id: str, stakeholder_id: str) -> None:
        """Revoke a stakeholder's share of an asset."""
        self.get_share(asset_id, stakeholder_id)
        self._check_manual_edit(asset_id, stakeholder_id)
        self._ownership_repo.delete(asset_id, stakeholder_id)
        logger.info("Share removed: %s no longer holds %s", stakeholder_id, asset_id)

    def get_share(self, asset_id: str, stakeholder_id: str) -> OwnershipShare:
        share = self._ownership_repo.get(asset_id, stakeholder_id)
        if not share:
            raise NotFoundError("OwnershipShare", f"{asset_id}/{stakeholder_id}")
        return share

    def get_asset_shares(self, asset_id: str) -> list[OwnershipShare]:
        return self._ownership_repo.list_by_asset(asset_id)

    def get_stakeholder_shares(self, stakeholder_id: str) -> list[OwnershipShare]:
        return self._ownership_repo.list_by_stakeholder(stakeholder_id)

    def total_percentage(self, asset_id: str) -> Decimal:
        return self._ownership_repo.total_percentage(asset_id)

    # Equal distribution

    @staticmethod
    def equal_split(member_count: int) -> list[Decimal]:
        """
        Split 100% into member_count parts that sum to exactly 100.

        Every part is 100/N rounded down to cents; the first part also
        takes the remainder. Raises ValidationError above MAX_GROUP_MEMBERS,
        where a part would round down to zero.
        """
        if member_count <= 0:
            return []
        if member_count > MAX_GROUP_MEMBERS:
            raise ValidationError(
                f"Cannot split 100% among {member_count} members (at most {MAX_GROUP_MEMBERS})"
            )
        base = (MAX_PERCENTAGE / member_count).quantize(PERCENTAGE_STEP, rounding=ROUND_DOWN)
        remainder = MAX_PERCENTAGE - base * member_count
        return [base + remainder] + [base] * (member_count - 1)

    def distribute_equally_among_group(
        self,
        asset_id: str,
        group_role: Optional[StakeholderRole] = None,
    ) -> list[OwnershipShare]:
        """
        Regenerate the shares of a collective asset as an equal split.

        Existing shares of any member of the role (active or not) are
        replaced; the first active member (by creation order) absorbs the
        rounding remainder. Stakeholders outside the role must not hold
        shares of the asset.
        """
        role = group_role or self._group_role
        asset = self.get_asset(asset_id)
        if not asset.is_collective:
            raise ValidationError(f"Asset {asset_id} is not collectively owned")

        members = self._stakeholder_repo.list_by_role(role, active_only=False)
        member_ids = {m.stakeholder_id for m in members}
        active = [m for m in members if m.is_active]

        outside_total = self._outside_total(asset_id, member_ids)
        if active and outside_total > 0:
            raise ConflictError(
                f"Asset {asset_id} has {outside_total}% held outside the {role.value} group"
            )

        now = self._clock()
        new_shares = [
            OwnershipShare(
                asset_id=asset_id,
                stakeholder_id=member.stakeholder_id,
                percentage=percentage,
                created_at=now,
                updated_at=now,
            )
            for member, percentage in zip(active, self.equal_split(len(active)))
        ]
        shares = self._ownership_repo.replace_group_shares(
            asset_id,
            sorted(member_ids),
            new_shares,
        )

        if not active:
            logger.warning("No active %s members to share asset %s", role.value, asset_id)
        else:
            logger.info(
                "Asset %s split among %d %s members (%s%% each)",
                asset_id,
                len(active),
                role.value,
                new_shares[-1].percentage,
            )
        return shares

    def clear_group_shares(
        self,
        asset_id: str,
        group_role: Optional[StakeholderRole] = None,
    ) -> None:
        """Remove the automatic shares of the group role from an asset."""
        role = group_role or self._group_role
        member_ids = [
            m.stakeholder_id for m in self._stakeholder_repo.list_by_role(role, active_only=False)
        ]
        self._ownership_repo.replace_group_shares(asset_id, member_ids, [])

    def redistribute_group(self, group_role: Optional[StakeholderRole] = None) -> int:
        """Regenerate the equal split of every collective asset; return the asset count."""
        role = group_role or self._group_role
        assets = self._asset_repo.list_collective()
        for asset in assets:
            self.distribute_equally_among_group(asset.asset_id, role)
        return len(assets)

    # Stakeholder roster

    def add_stakeholder(
        self,
        name: str,
        role: Union[StakeholderRole, str] = StakeholderRole.INVESTOR,
        is_active: bool = True,
        stakeholder_id: Optional[str] = None,
    ) -> Stakeholder:
        """Register a stakeholder; joining the group role triggers redistribution."""
        if not name or not name.strip():
            raise ValidationError("Stakeholder name cannot be empty")
        role = StakeholderRole(role)
        if role == self._group_role and is_active:
            self._check_roster_change(len(self.list_members(role)) + 1)
        stakeholder = self._stakeholder_repo.create(
            Stakeholder(
                stakeholder_id=stakeholder_id or str(uuid.uuid4()),
                name=name.strip(),
                role=role,
                is_active=is_active,
                created_at=self._clock(),
            )
        )
        if stakeholder.role == self._group_role and stakeholder.is_active:
            self.redistribute_group()
        return stakeholder

    def deactivate_stakeholder(self, stakeholder_id: str) -> Stakeholder:
        """Mark a stakeholder inactive; leaving the group role triggers redistribution."""
        return self._set_active(stakeholder_id, False)

    def activate_stakeholder(self, stakeholder_id: str) -> Stakeholder:
        """Mark a stakeholder active; joining the group role triggers redistribution."""
        return self._set_active(stakeholder_id, True)

    def get_stakeholder(self, stakeholder_id: str) -> Stakeholder:
        stakeholder = self._stakeholder_repo.get_by_id(stakeholder_id)
        if not stakeholder:
            raise NotFoundError("Stakeholder", stakeholder_id)
        return stakeholder

    def list_stakeholders(self) -> list[Stakeholder]:
        return self._stakeholder_repo.list_all()

    def list_members(self, role: StakeholderRole, active_only: bool = True) -> list[Stakeholder]:
        return self._stakeholder_repo.list_by_role(role, active_only=active_only)

    # Assets (read side)

    def get_asset(self, asset_id: str) -> Asset:
        asset = self._asset_repo.get_by_id(asset_id)
        if not asset:
            raise NotFoundError("Asset", asset_id)
        return asset

    def list_assets(self) -> list[Asset]:
        return self._asset_repo.list_all()

    def list_collective_assets(self) -> list[Asset]:
        return self._asset_repo.list_collective()

    # Helpers

    def _set_active(self, stakeholder_id: str, is_active: bool) -> Stakeholder:
        stakeholder = self.get_stakeholder(stakeholder_id)
        if stakeholder.is_active == is_active:
            return stakeholder
        if stakeholder.role == self._group_role:
            active_count = len(self.list_members(stakeholder.role))
            self._check_roster_change(active_count + 1 if is_active else active_count - 1)
        stakeholder.is_active = is_active
        updated = self._stakeholder_repo.update(stakeholder)
        logger.info(
            "Stakeholder %s is now %s",
            stakeholder_id,
            "active" if is_active else "inactive",
        )
        if updated.role == self._group_role:
            self.redistribute_group()
        return updated

    def _check_roster_change(self, active_after: int) -> None:
        """
        Raise before a group roster write whose redistribution would fail.

        Redistribution runs per asset after the roster is saved, so every
        collective asset is checked up front.
        """
        if active_after <= 0:
            return
        if active_after > MAX_GROUP_MEMBERS:
            raise ValidationError(
                f"The {self._group_role.value} group cannot exceed {MAX_GROUP_MEMBERS} active members"
            )
        member_ids = {m.stakeholder_id for m in self.list_members(self._group_role, active_only=False)}
        for asset in self._asset_repo.list_collective():
            outside_total = self._outside_total(asset.asset_id, member_ids)
            if outside_total > 0:
                raise ConflictError(
                    f"Asset {asset.asset_id} has {outside_total}% held outside the "
                    f"{self._group_role.value} group; remove those shares first"
                )

    def _check_manual_edit(self, asset_id: str, stakeholder_id: str) -> None:
        """Automatic group shares of a collective asset only change through redistribution."""
        asset = self.get_asset(asset_id)
        if not asset.is_collective:
            return
        if self.get_stakeholder(stakeholder_id).role == self._group_role:
            raise ConflictError(
                f"Share of {stakeholder_id} in collective asset {asset_id} is managed by "
                f"equal distribution; use distribute_equally_among_group"
            )

    def _outside_total(self, asset_id: str, member_ids: set[str]) -> Decimal:
        return sum(
            (
                s.percentage
                for s in self._ownership_repo.list_by_asset(asset_id)
                if s.stakeholder_id not in member_ids
            ),
            Decimal("0"),
        )

    def _check_total(
        self,
        asset_id: str,
        percentage: Decimal,
        exclude_stakeholder_id: Optional[str] = None,
    ) -> None:
        current = self._ownership_repo.total_percentage(
            asset_id,
            exclude_stakeholder_id=exclude_stakeholder_id,
        )
        if current + percentage > MAX_PERCENTAGE:
            raise ConflictError(
                f"Shares of asset {asset_id} would total {current + percentage}%, "
                f"above {MAX_PERCENTAGE}% (currently {current}%)"
            )

    @staticmethod
    def _validate_percentage(value: Union[Decimal, int, str]) -> Decimal:
        try:
            percentage = Decimal(str(value))
        except ArithmeticError:
            raise ValidationError(f"Invalid percentage: {value!r}")
        if not percentage.is_finite() or percentage <= 0 or percentage > MAX_PERCENTAGE:
            raise ValidationError(f"Percentage must be in (0, 100]: {value}")
        if percentage != percentage.quantize(PERCENTAGE_STEP):
            raise ValidationError(f"Percentage supports at most two decimals: {value}")
        return percentage
