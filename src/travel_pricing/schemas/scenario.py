"""
Scenario payload schemas - validation boundary for untrusted input.

Payloads use the camelCase field names of the back office and are
converted to engine value objects with ``to_input()``.
"""
import uuid
from datetime import datetime, timezone
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from ..config.settings import Settings, get_settings
from ..engine.models import (
    ApplyRule,
    CommissionConfig,
    CostLine,
    CostType,
    DerivedRooms,
    ExchangeRate,
    ExplicitRooms,
    MarginConfig,
    PaxCategory,
    PaxCounts,
    RateSource,
    ScenarioInput,
)


# Scenario ids double as store keys (file names)
SCENARIO_ID_PATTERN = r"^[A-Za-z0-9_-]+$"


class ScenarioValidationError(ValueError):
    """Raised when a scenario payload is rejected at the boundary."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("Invalid scenario: " + "; ".join(errors))


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", allow_inf_nan=False)


class PaxCountsPayload(_Payload):
    single: int = Field(ge=0)
    double: int = Field(ge=0)
    triple: int = Field(ge=0)
    chd_plus6: int = Field(ge=0, alias="chdPlus6")
    chd_minus6: int = Field(ge=0, alias="chdMinus6")
    infant: int = Field(ge=0)

    def to_counts(self) -> PaxCounts:
        return PaxCounts(**self.model_dump())


class RoomAllocationPayload(_Payload):
    """Partial room override. Any field present makes the whole override explicit."""
    single_rooms: Optional[int] = Field(default=None, ge=0, alias="singleRooms")
    double_rooms: Optional[int] = Field(default=None, ge=0, alias="doubleRooms")
    triple_rooms: Optional[int] = Field(default=None, ge=0, alias="tripleRooms")

    @property
    def is_explicit(self) -> bool:
        return any(v is not None for v in (self.single_rooms, self.double_rooms, self.triple_rooms))

    def to_allocation(self):
        if not self.is_explicit:
            return DerivedRooms()
        return ExplicitRooms(
            single_rooms=self.single_rooms or 0,
            double_rooms=self.double_rooms or 0,
            triple_rooms=self.triple_rooms or 0,
        )


class CostLinePayload(_Payload):
    id: Optional[str] = None
    label: str
    type: CostType
    apply_rule: ApplyRule = Field(alias="applyRule")
    amount: float = Field(ge=0)
    quantity: int = Field(default=1, gt=0)
    applies_to: Union[Literal["ALL"], list[PaxCategory]] = Field(default="ALL", alias="appliesTo")
    optional: bool = False

    @model_validator(mode="after")
    def _assign_id(self):
        if not self.id:
            self.id = uuid.uuid4().hex
        return self

    def to_line(self) -> CostLine:
        applies_to = self.applies_to if self.applies_to == "ALL" else tuple(self.applies_to)
        return CostLine(
            id=self.id,
            label=self.label,
            type=self.type,
            apply_rule=self.apply_rule,
            amount=self.amount,
            quantity=self.quantity,
            applies_to=applies_to,
            optional=self.optional,
        )


class ExchangeRatePayload(_Payload):
    source: RateSource
    rate: float = Field(gt=0)
    timestamp: str = Field(default_factory=utc_now_iso)

    def to_rate(self) -> ExchangeRate:
        return ExchangeRate(rate=self.rate, source=self.source, timestamp=self.timestamp)


class MarginPayload(_Payload):
    single: float = Field(ge=0)
    double: float = Field(ge=0)
    triple: float = Field(ge=0)
    chd_plus6: float = Field(ge=0, alias="chdPlus6")
    chd_minus6: float = Field(ge=0, alias="chdMinus6")
    infant: float = Field(ge=0)

    def to_margin(self) -> MarginConfig:
        return MarginConfig(**self.model_dump())


class CommissionPayload(_Payload):
    tier1: float = Field(ge=0)
    tier2: float = Field(ge=0)
    tier3: float = Field(ge=0)
    tier4: float = Field(ge=0)
    include_infants: bool = Field(alias="includeInfants")
    include_in_sales: bool = Field(alias="includeInSales")

    def to_commission(self) -> CommissionConfig:
        return CommissionConfig(**self.model_dump())


class ScenarioPayload(_Payload):
    """A pricing scenario as submitted by the back office."""
    id: Optional[str] = Field(default=None, pattern=SCENARIO_ID_PATTERN)
    name: str = Field(min_length=2)
    destination: str = Field(min_length=2)
    notes: Optional[str] = None
    nights: int = Field(ge=1)
    start_date: Optional[str] = Field(default=None, alias="startDate")
    end_date: Optional[str] = Field(default=None, alias="endDate")
    currency: str = Field(min_length=3)
    pax_counts: PaxCountsPayload = Field(alias="paxCounts")
    room_allocation: Optional[RoomAllocationPayload] = Field(default=None, alias="roomAllocation")
    exchange_rate: ExchangeRatePayload = Field(alias="exchangeRate")
    cost_lines: list[CostLinePayload] = Field(min_length=1, alias="costLines")
    margin: MarginPayload
    commission: CommissionPayload
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")

    @model_validator(mode="after")
    def _unique_line_ids(self):
        seen = set()
        for line in self.cost_lines:
            if line.id in seen:
                raise ValueError(f"duplicate cost line id '{line.id}'")
            seen.add(line.id)
        return self

    def to_input(self) -> ScenarioInput:
        """Convert to the engine's immutable input."""
        allocation = self.room_allocation.to_allocation() if self.room_allocation else DerivedRooms()
        return ScenarioInput(
            nights=self.nights,
            pax_counts=self.pax_counts.to_counts(),
            room_allocation=allocation,
            cost_lines=tuple(line.to_line() for line in self.cost_lines),
            exchange_rate=self.exchange_rate.to_rate(),
            margin=self.margin.to_margin(),
            commission=self.commission.to_commission(),
        )

    def to_record(self) -> dict:
        """JSON-safe dict using the camelCase field names."""
        return self.model_dump(mode="json", by_alias=True)


def _format_errors(exc: ValidationError) -> list[str]:
    messages = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err["loc"]) or "scenario"
        messages.append(f"{loc}: {err['msg']}")
    return messages


def apply_defaults(data: dict, settings: Settings) -> dict:
    """Fill the policy records a scenario lacks with the configured defaults."""
    data = dict(data)
    for key, default in (
        ("margin", settings.default_margin),
        ("commission", settings.default_commission),
        ("exchangeRate", settings.default_exchange_rate),
    ):
        if data.get(key) is None:
            data[key] = dict(default)
    if data.get("currency") is None:
        data["currency"] = settings.default_currency
    return data


def parse_scenario(data, settings: Optional[Settings] = None) -> ScenarioPayload:
    """
    Validate an untrusted scenario submission.

    Missing margin, commission, exchange rate and currency take the
    defaults of ``settings`` (the built-in defaults when omitted).

    Raises:
        ScenarioValidationError: listing every rejected field
    """
    if isinstance(data, ScenarioPayload):
        return data
    if isinstance(data, dict):
        data = apply_defaults(data, settings or get_settings())
    try:
        return ScenarioPayload.model_validate(data)
    except ValidationError as e:
        raise ScenarioValidationError(_format_errors(e)) from e
