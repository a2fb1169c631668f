"""Commission tiering by billable group size."""
from .models import CommissionConfig, PaxCounts


# Inclusive upper bound of each band; anything above the last is tier4
TIER_BOUNDARIES = (
    (5, "tier1"),
    (9, "tier2"),
    (15, "tier3"),
)
TOP_TIER = "tier4"


def commission_base_pax(pax_counts: PaxCounts, commission: CommissionConfig) -> int:
    """Passengers that count toward commission. Infants only when configured."""
    if commission.include_infants:
        return pax_counts.total
    return pax_counts.total - pax_counts.infant


def select_commission_tier(base_pax: int) -> str:
    for upper, tier in TIER_BOUNDARIES:
        if base_pax <= upper:
            return tier
    return TOP_TIER


def commission_total(base_pax: int, commission: CommissionConfig) -> tuple[str, float]:
    """
    Flat per-passenger commission for the whole group.

    Returns (tier_name, total). The selected tier's amount applies to every
    passenger; it is not graduated across bands.
    """
    tier = select_commission_tier(base_pax)
    return tier, commission.amount_for(tier) * base_pax
