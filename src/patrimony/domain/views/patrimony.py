"""View models for patrimony aggregation outputs."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from patrimony.domain.models import ResolutionSource, StakeholderRole


@dataclass
class AssetShareView:
    """One stakeholder's slice of one asset."""

    asset_id: str
    display_name: str
    is_collective: bool
    percentage: Decimal
    price: Decimal
    value: Decimal
    source: ResolutionSource
    reference_period: str = "N/A"
    brand_name: Optional[str] = None
    model_name: Optional[str] = None
    display_year: Optional[int] = None
    display_fuel: Optional[str] = None


@dataclass
class StakeholderPatrimony:
    """Monetary valuation of a stakeholder's shares."""

    stakeholder_id: str
    name: str
    role: StakeholderRole
    total: Decimal = field(default_factory=lambda: Decimal("0"))
    individual_value: Decimal = field(default_factory=lambda: Decimal("0"))
    collective_value: Decimal = field(default_factory=lambda: Decimal("0"))
    assets: list[AssetShareView] = field(default_factory=list)
    unpriced_asset_ids: list[str] = field(default_factory=list)


@dataclass
class GroupPatrimony:
    """Patrimony of every active member of a role, ranked by total descending."""

    role: StakeholderRole
    members: list[StakeholderPatrimony] = field(default_factory=list)
    total: Decimal = field(default_factory=lambda: Decimal("0"))
    average: Decimal = field(default_factory=lambda: Decimal("0"))

    @property
    def member_count(self) -> int:
        return len(self.members)

    @property
    def ranking(self) -> list[str]:
        return [m.stakeholder_id for m in self.members]


@dataclass
class CollectiveMemberShare:
    """A stakeholder's part of the collectively owned assets."""

    stakeholder_id: str
    name: str
    value: Decimal
    participation_percentage: Optional[Decimal] = None


@dataclass
class CollectivePatrimony:
    """Valuation of every collectively owned asset."""

    total_value: Decimal = field(default_factory=lambda: Decimal("0"))
    asset_count: int = 0
    members: list[CollectiveMemberShare] = field(default_factory=list)
    unpriced_asset_ids: list[str] = field(default_factory=list)


@dataclass
class PatrimonyReport:
    """Complete patrimony report."""

    stakeholders: list[StakeholderPatrimony] = field(default_factory=list)
    groups: dict[StakeholderRole, GroupPatrimony] = field(default_factory=dict)
    collective: CollectivePatrimony = field(default_factory=CollectivePatrimony)
    grand_total: Decimal = field(default_factory=lambda: Decimal("0"))
    individual_value: Decimal = field(default_factory=lambda: Decimal("0"))
    asset_count: int = 0
    unpriced_asset_ids: list[str] = field(default_factory=list)
    generated_at: Optional[datetime] = None
