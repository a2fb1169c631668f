"""
Data models for the pricing engine.

Uses frozen dataclasses so a scenario and its recap are immutable values.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


class CostType(str, Enum):
    """What a cost line buys. Informational only."""
    ROOM = "ROOM"
    VISA = "VISA"
    TRANSFER = "TRANSFER"
    EXCURSION = "EXCURSION"
    TICKET = "TICKET"
    SERVICE_FEE = "SERVICE_FEE"
    OTHER = "OTHER"


class ApplyRule(str, Enum):
    """Multiplier base of a cost line."""
    PER_PAX = "PER_PAX"
    PER_ROOM = "PER_ROOM"
    PER_NIGHT = "PER_NIGHT"
    PER_STAY = "PER_STAY"
    PER_GROUP = "PER_GROUP"


class PaxCategory(str, Enum):
    SINGLE = "SINGLE"
    DOUBLE = "DOUBLE"
    TRIPLE = "TRIPLE"
    CHD_PLUS6 = "CHD_PLUS6"
    CHD_MINUS6 = "CHD_MINUS6"
    INF = "INF"


class RateSource(str, Enum):
    AUTO = "AUTO"
    MANUAL = "MANUAL"


ALL_PAX = "ALL"


@dataclass(frozen=True)
class PaxCounts:
    """Passenger headcount per pricing category."""
    single: int = 0
    double: int = 0
    triple: int = 0
    chd_plus6: int = 0
    chd_minus6: int = 0
    infant: int = 0

    @property
    def total(self) -> int:
        return (
            self.single + self.double + self.triple
            + self.chd_plus6 + self.chd_minus6 + self.infant
        )


@dataclass(frozen=True)
class Rooms:
    """Resolved room allocation used by PER_ROOM lines."""
    single_rooms: int = 0
    double_rooms: int = 0
    triple_rooms: int = 0

    @property
    def total(self) -> int:
        return self.single_rooms + self.double_rooms + self.triple_rooms


@dataclass(frozen=True)
class DerivedRooms:
    """Rooms are derived from the passenger mix."""


@dataclass(frozen=True)
class ExplicitRooms:
    """Operator-supplied allocation. Unset room types count as zero."""
    single_rooms: int = 0
    double_rooms: int = 0
    triple_rooms: int = 0


RoomAllocation = Union[DerivedRooms, ExplicitRooms]


@dataclass(frozen=True)
class CostLine:
    """A single priceable item of a scenario, in source currency."""
    id: str
    label: str
    apply_rule: ApplyRule
    amount: float
    type: CostType = CostType.OTHER
    quantity: int = 1
    applies_to: Union[str, tuple[PaxCategory, ...]] = ALL_PAX
    optional: bool = False


@dataclass(frozen=True)
class ExchangeRate:
    """Source currency → local currency rate."""
    rate: float
    source: RateSource = RateSource.AUTO
    timestamp: Optional[str] = None


@dataclass(frozen=True)
class MarginConfig:
    """Flat per-head margin in local currency."""
    single: float
    double: float
    triple: float
    chd_plus6: float
    chd_minus6: float
    infant: float


@dataclass(frozen=True)
class CommissionConfig:
    """Banded per-passenger commission amounts."""
    tier1: float
    tier2: float
    tier3: float
    tier4: float
    include_infants: bool = False
    include_in_sales: bool = True

    def amount_for(self, tier: str) -> float:
        return getattr(self, tier)


@dataclass(frozen=True)
class ScenarioInput:
    """Everything the engine needs to price one scenario."""
    nights: int
    pax_counts: PaxCounts
    cost_lines: tuple[CostLine, ...]
    exchange_rate: ExchangeRate
    margin: MarginConfig
    commission: CommissionConfig
    room_allocation: RoomAllocation = field(default_factory=DerivedRooms)


@dataclass(frozen=True)
class TraceStep:
    """A single step in the calculation trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass(frozen=True)
class LineResult:
    """Priced cost line."""
    id: str
    label: str
    amount_source: float
    amount_dzd: float
    optional: bool
    apply_rule: str


@dataclass(frozen=True)
class CalculationResult:
    """Complete priced recap of a scenario."""
    total_cost_source: float
    total_cost_dzd: float
    margin_total: float
    margin_percent: float
    commission_total: float
    sales_total: float
    per_pax_price: float
    selected_rate: float
    line_results: tuple[LineResult, ...]

    commission_included: bool = True
    commission_tier: str = "tier1"
    commission_base_pax: int = 0
    rooms: Rooms = field(default_factory=Rooms)
    trace: tuple[TraceStep, ...] = ()

    def get_trace_text(self) -> str:
        """Get human-readable calculation trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"• {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"• {t.step}: {t.description}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        """Render the recap payload consumed by exports and screens."""
        return {
            "totalCostSource": self.total_cost_source,
            "totalCostDzd": self.total_cost_dzd,
            "marginTotal": self.margin_total,
            "marginPercent": self.margin_percent,
            "commissionTotal": self.commission_total,
            "salesTotal": self.sales_total,
            "perPaxPrice": self.per_pax_price,
            "commissionIncluded": self.commission_included,
            "commissionTier": self.commission_tier,
            "commissionBasePax": self.commission_base_pax,
            "selectedRate": self.selected_rate,
            "rooms": {
                "singleRooms": self.rooms.single_rooms,
                "doubleRooms": self.rooms.double_rooms,
                "tripleRooms": self.rooms.triple_rooms,
            },
            "lineResults": [
                {
                    "id": line.id,
                    "label": line.label,
                    "amountSource": line.amount_source,
                    "amountDzd": line.amount_dzd,
                    "optional": line.optional,
                    "applyRule": line.apply_rule,
                }
                for line in self.line_results
            ],
        }
