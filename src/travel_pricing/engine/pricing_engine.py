"""
Pricing Engine - turns a scenario into a priced recap.

Pipeline:
- Resolve rooms (explicit allocation or derived from the pax mix)
- Price every cost line in source currency, convert at the scenario rate
- Add the flat per-head margin
- Select the commission tier from the billable group size
- Compose the sale total and the rounded per-passenger price

The calculation is pure: no I/O, no mutation of the input, and identical
input always yields an identical result.
"""
import logging
import math
from typing import Optional

from .commission import commission_base_pax, commission_total
from .models import (
    ApplyRule,
    CalculationResult,
    CostLine,
    LineResult,
    MarginConfig,
    PaxCounts,
    ScenarioInput,
    TraceStep,
)
from .rooms import derive_rooms, relevant_pax

logger = logging.getLogger(__name__)

PRICE_ROUNDING_STEP = 1000


def _rule_name(rule) -> str:
    return getattr(rule, "value", rule)


def price_line(line: CostLine, nights: int, room_count: int, pax: int) -> float:
    """Source-currency total of a single cost line."""
    qty = max(1, line.quantity)
    rule = _rule_name(line.apply_rule)

    if rule == ApplyRule.PER_NIGHT.value:
        return line.amount * nights * qty
    elif rule in (ApplyRule.PER_STAY.value, ApplyRule.PER_GROUP.value):
        return line.amount * qty
    elif rule == ApplyRule.PER_ROOM.value:
        return line.amount * room_count * qty
    elif rule == ApplyRule.PER_PAX.value:
        return line.amount * pax * qty
    return line.amount * qty


def margin_total(pax_counts: PaxCounts, margin: MarginConfig) -> float:
    return (
        pax_counts.single * margin.single
        + pax_counts.double * margin.double
        + pax_counts.triple * margin.triple
        + pax_counts.chd_plus6 * margin.chd_plus6
        + pax_counts.chd_minus6 * margin.chd_minus6
        + pax_counts.infant * margin.infant
    )


def _check_rounding_step(step) -> None:
    if step <= 0:
        raise ValueError(f"Rounding step must be positive, got {step}")


def round_price(value: float, step: int = PRICE_ROUNDING_STEP) -> float:
    """Round to the nearest step, halves going up."""
    return float(math.floor(value / step + 0.5) * step)


def calculate_scenario(scenario: ScenarioInput, rounding_step: int = PRICE_ROUNDING_STEP) -> CalculationResult:
    """
    Price a scenario.

    Args:
        scenario: Fully validated scenario input
        rounding_step: Granularity of the per-passenger price

    Returns:
        CalculationResult with totals, per-line breakdown and trace
    """
    _check_rounding_step(rounding_step)
    trace = []
    rate = scenario.exchange_rate.rate
    pax_counts = scenario.pax_counts

    rooms = derive_rooms(pax_counts, scenario.room_allocation)
    trace.append(TraceStep(
        "Rooms",
        f"{type(scenario.room_allocation).__name__}: "
        f"{rooms.single_rooms} single / {rooms.double_rooms} double / {rooms.triple_rooms} triple",
        str(rooms.total),
    ))

    total_cost_source = 0.0
    line_results = []
    for line in scenario.cost_lines:
        pax = relevant_pax(pax_counts, line.applies_to)
        amount_source = price_line(line, scenario.nights, rooms.total, pax)
        total_cost_source += amount_source
        line_results.append(LineResult(
            id=line.id,
            label=line.label,
            amount_source=amount_source,
            amount_dzd=amount_source * rate,
            optional=line.optional,
            apply_rule=_rule_name(line.apply_rule),
        ))
        trace.append(TraceStep(
            "Cost Line",
            f"{line.label} ({_rule_name(line.apply_rule)} × {max(1, line.quantity)})",
            f"{amount_source:g}",
        ))

    total_cost_dzd = total_cost_source * rate
    trace.append(TraceStep("Conversion", f"{total_cost_source:g} × {rate:g}", f"{total_cost_dzd:g}"))

    margin = margin_total(pax_counts, scenario.margin)
    margin_percent = (margin / total_cost_dzd) * 100 if total_cost_dzd else 0.0
    trace.append(TraceStep("Margin", f"Flat per-head margin for {pax_counts.total} pax", f"{margin:g}"))

    base_pax = commission_base_pax(pax_counts, scenario.commission)
    tier, commission = commission_total(base_pax, scenario.commission)
    trace.append(TraceStep("Commission", f"{tier} for {base_pax} billable pax", f"{commission:g}"))

    base_sales = total_cost_dzd + margin
    include_commission = scenario.commission.include_in_sales
    sales_total = base_sales + commission if include_commission else base_sales
    per_pax_price = round_price(sales_total / max(1, base_pax), rounding_step)
    trace.append(TraceStep("Sales", "Commission included" if include_commission else "Commission excluded",
                           f"{sales_total:g}"))
    trace.append(TraceStep("Per Pax", f"Rounded to nearest {rounding_step}", f"{per_pax_price:g}"))

    return CalculationResult(
        total_cost_source=total_cost_source,
        total_cost_dzd=total_cost_dzd,
        margin_total=margin,
        margin_percent=margin_percent,
        commission_total=commission,
        sales_total=sales_total,
        per_pax_price=per_pax_price,
        selected_rate=rate,
        line_results=tuple(line_results),
        commission_included=include_commission,
        commission_tier=tier,
        commission_base_pax=base_pax,
        rooms=rooms,
        trace=tuple(trace),
    )


class PricingEngine:
    """
    Pricing engine bound to a rounding policy.

    Stateless apart from its settings, so one instance can serve
    any number of concurrent callers.
    """

    def __init__(self, rounding_step: Optional[int] = None):
        if rounding_step is None:
            rounding_step = PRICE_ROUNDING_STEP
        _check_rounding_step(rounding_step)
        self.rounding_step = rounding_step

    def calculate(self, scenario: ScenarioInput) -> CalculationResult:
        """Calculate a recap with full traceability."""
        result = calculate_scenario(scenario, rounding_step=self.rounding_step)
        logger.debug(
            "Priced scenario: %d lines, sales %.2f, per pax %.0f",
            len(result.line_results), result.sales_total, result.per_pax_price,
        )
        return result
