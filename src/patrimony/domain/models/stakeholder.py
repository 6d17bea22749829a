"""Stakeholder domain model."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from patrimony.domain.models.enums import StakeholderRole


@dataclass
class Stakeholder:
    """A person holding ownership shares."""

    stakeholder_id: str
    name: str
    role: StakeholderRole = StakeholderRole.INVESTOR
    is_active: bool = True
    created_at: Optional[datetime] = field(default=None)

    def __post_init__(self) -> None:
        if isinstance(self.role, str):
            self.role = StakeholderRole(self.role)
