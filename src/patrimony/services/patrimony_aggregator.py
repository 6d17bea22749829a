"""Patrimony aggregation: shares x resolved prices -> per-stakeholder totals."""

import logging
from collections import defaultdict
from decimal import Decimal
from typing import Callable, Optional

from patrimony.core.formatters import format_brl
from patrimony.core.timezone import now_local
from patrimony.domain.models import Asset, ResolutionSource, Stakeholder, StakeholderRole
from patrimony.domain.views import (
    AssetShareView,
    CollectiveMemberShare,
    CollectivePatrimony,
    GroupPatrimony,
    PatrimonyReport,
    PriceResolution,
    StakeholderPatrimony,
)
from patrimony.services.ownership_ledger import OwnershipLedger
from patrimony.services.price_resolver import PriceResolver

logger = logging.getLogger(__name__)

_HUNDRED = Decimal("100")
_CENTS = Decimal("0.01")


class _PriceMemo:
    """Resolve each asset at most once per aggregation call."""

    def __init__(self, resolver: PriceResolver):
        self._resolver = resolver
        self._resolutions: dict[str, PriceResolution] = {}

    def get(self, asset: Asset) -> PriceResolution:
        if asset.asset_id not in self._resolutions:
            self._resolutions[asset.asset_id] = self._resolver.resolve(asset.lookup_key)
        return self._resolutions[asset.asset_id]


class PatrimonyAggregator:
    """
    Service composing ownership shares with resolved prices.

    share value = price x percentage / 100. Unpriced assets (source=none)
    contribute zero and are listed separately so reports can flag them.
    """

    def __init__(
        self,
        ledger: OwnershipLedger,
        resolver: PriceResolver,
        clock: Callable = now_local,
    ):
        self._ledger = ledger
        self._resolver = resolver
        self._clock = clock

    def stakeholder_patrimony(self, stakeholder_id: str) -> StakeholderPatrimony:
        """
        Valuate every share held by a stakeholder.

        Raises NotFoundError for unknown stakeholders; a stakeholder without
        shares gets a zero total and no assets.
        """
        stakeholder = self._ledger.get_stakeholder(stakeholder_id)
        return self._stakeholder_patrimony(stakeholder, _PriceMemo(self._resolver))

    def group_patrimony(self, group_role: StakeholderRole) -> GroupPatrimony:
        """Patrimony of every active member of a role with sum, average and ranking."""
        memo = _PriceMemo(self._resolver)
        members = [
            self._stakeholder_patrimony(s, memo)
            for s in self._ledger.list_members(StakeholderRole(group_role), active_only=True)
        ]
        return self._group(StakeholderRole(group_role), members)

    def collective_asset_patrimony(self) -> CollectivePatrimony:
        """Total value of collective assets and each holder's part of it."""
        return self._collective(_PriceMemo(self._resolver))

    def full_report(self) -> PatrimonyReport:
        """
        Every stakeholder, every role group and the collective breakdown.

        grand_total is the sum over assets of price x (total share
        percentage) / 100, which equals the sum of stakeholder totals.
        """
        memo = _PriceMemo(self._resolver)

        stakeholders = [
            self._stakeholder_patrimony(s, memo) for s in self._ledger.list_stakeholders()
        ]
        by_id = {p.stakeholder_id: p for p in stakeholders}

        groups: dict[StakeholderRole, GroupPatrimony] = {}
        for role in StakeholderRole:
            active_ids = [s.stakeholder_id for s in self._ledger.list_members(role, active_only=True)]
            if active_ids:
                groups[role] = self._group(role, [by_id[i] for i in active_ids])

        collective = self._collective(memo)

        grand_total = Decimal("0")
        individual_value = Decimal("0")
        unpriced: list[str] = []
        assets = self._ledger.list_assets()
        for asset in assets:
            resolution = memo.get(asset)
            if not resolution.is_priced:
                unpriced.append(asset.asset_id)
            distributed = self._ledger.total_percentage(asset.asset_id)
            value = resolution.price * distributed / _HUNDRED
            grand_total += value
            if not asset.is_collective:
                individual_value += value

        logger.info(
            "Patrimony report: %d assets, grand total %s (%d unpriced)",
            len(assets),
            format_brl(grand_total),
            len(unpriced),
        )
        return PatrimonyReport(
            stakeholders=stakeholders,
            groups=groups,
            collective=collective,
            grand_total=grand_total,
            individual_value=individual_value,
            asset_count=len(assets),
            unpriced_asset_ids=unpriced,
            generated_at=self._clock(),
        )

    def _stakeholder_patrimony(
        self,
        stakeholder: Stakeholder,
        memo: _PriceMemo,
    ) -> StakeholderPatrimony:
        result = StakeholderPatrimony(
            stakeholder_id=stakeholder.stakeholder_id,
            name=stakeholder.name,
            role=stakeholder.role,
        )

        for share in self._ledger.get_stakeholder_shares(stakeholder.stakeholder_id):
            asset = self._ledger.get_asset(share.asset_id)
            resolution = memo.get(asset)
            value = resolution.price * share.percentage / _HUNDRED

            if not resolution.is_priced:
                result.unpriced_asset_ids.append(asset.asset_id)
            if asset.is_collective:
                result.collective_value += value
            else:
                result.individual_value += value
            result.total += value

            result.assets.append(
                AssetShareView(
                    asset_id=asset.asset_id,
                    display_name=asset.display_name,
                    is_collective=asset.is_collective,
                    percentage=share.percentage,
                    price=resolution.price,
                    value=value,
                    source=resolution.source,
                    reference_period=resolution.reference_period,
                    brand_name=asset.brand_name,
                    model_name=asset.model_name,
                    display_year=asset.display_year,
                    display_fuel=asset.display_fuel,
                )
            )

        logger.debug(
            "Patrimony of %s: %s over %d assets",
            stakeholder.stakeholder_id,
            format_brl(result.total),
            len(result.assets),
        )
        return result

    @staticmethod
    def _group(role: StakeholderRole, members: list[StakeholderPatrimony]) -> GroupPatrimony:
        ranked = sorted(members, key=lambda m: (-m.total, m.name, m.stakeholder_id))
        total = sum((m.total for m in ranked), Decimal("0"))
        average = (total / len(ranked)).quantize(_CENTS) if ranked else Decimal("0")
        return GroupPatrimony(role=role, members=ranked, total=total, average=average)

    def _collective(self, memo: _PriceMemo) -> CollectivePatrimony:
        result = CollectivePatrimony()
        values: dict[str, Decimal] = defaultdict(lambda: Decimal("0"))

        assets = self._ledger.list_collective_assets()
        for asset in assets:
            resolution = memo.get(asset)
            if resolution.source == ResolutionSource.NONE:
                result.unpriced_asset_ids.append(asset.asset_id)
            result.total_value += resolution.price
            for share in self._ledger.get_asset_shares(asset.asset_id):
                values[share.stakeholder_id] += resolution.price * share.percentage / _HUNDRED

        result.asset_count = len(assets)
        for stakeholder_id, value in values.items():
            stakeholder = self._ledger.get_stakeholder(stakeholder_id)
            participation: Optional[Decimal] = None
            if result.total_value > 0:
                participation = (value / result.total_value * _HUNDRED).quantize(_CENTS)
            result.members.append(
                CollectiveMemberShare(
                    stakeholder_id=stakeholder_id,
                    name=stakeholder.name,
                    value=value,
                    participation_percentage=participation,
                )
            )
        result.members.sort(key=lambda m: (-m.value, m.name))
        return result
