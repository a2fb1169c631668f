import sys
import os

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from travel_pricing.engine import CommissionConfig, DerivedRooms, ExplicitRooms, PaxCategory, PaxCounts
from travel_pricing.engine.commission import commission_base_pax, commission_total, select_commission_tier
from travel_pricing.engine.rooms import derive_rooms, relevant_pax

COUNTS = PaxCounts(single=2, double=2, triple=1, chd_plus6=1, chd_minus6=3, infant=1)


def test_derive_rooms_from_pax_mix():
    """3 singles, 5 doubles, 4 triples → 3 / 3 / 2 rooms."""
    rooms = derive_rooms(PaxCounts(single=3, double=5, triple=4), DerivedRooms())
    assert (rooms.single_rooms, rooms.double_rooms, rooms.triple_rooms) == (3, 3, 2)
    assert rooms.total == 8


def test_children_and_infants_add_no_rooms():
    rooms = derive_rooms(PaxCounts(double=2, chd_plus6=2, chd_minus6=1, infant=1))
    assert rooms.total == 1


def test_negative_counts_are_clamped():
    rooms = derive_rooms(PaxCounts(single=-1, double=-3, triple=-2))
    assert rooms.total == 0


def test_explicit_allocation_replaces_derivation():
    """Only doubles set: singles and triples are forced to zero."""
    rooms = derive_rooms(PaxCounts(single=3, double=5, triple=4), ExplicitRooms(double_rooms=4))
    assert (rooms.single_rooms, rooms.double_rooms, rooms.triple_rooms) == (0, 4, 0)


def test_relevant_pax_all():
    assert relevant_pax(COUNTS, "ALL") == 10


def test_relevant_pax_by_category():
    assert relevant_pax(COUNTS, (PaxCategory.SINGLE, PaxCategory.DOUBLE, PaxCategory.TRIPLE)) == 5
    assert relevant_pax(COUNTS, [PaxCategory.CHD_PLUS6, PaxCategory.CHD_MINUS6]) == 4
    assert relevant_pax(COUNTS, ["INF"]) == 1


def test_relevant_pax_empty_or_unknown():
    assert relevant_pax(COUNTS, ()) == 0
    assert relevant_pax(COUNTS, ["SENIOR", "DOUBLE"]) == 2


@pytest.mark.parametrize("base_pax,tier", [
    (0, "tier1"),
    (5, "tier1"),
    (6, "tier2"),
    (9, "tier2"),
    (10, "tier3"),
    (15, "tier3"),
    (16, "tier4"),
    (40, "tier4"),
])
def test_commission_tier_boundaries(base_pax, tier):
    assert select_commission_tier(base_pax) == tier


def test_commission_base_excludes_infants_by_default():
    config = CommissionConfig(tier1=1000, tier2=1500, tier3=2000, tier4=2500)
    assert commission_base_pax(COUNTS, config) == 9


def test_commission_base_with_infants():
    config = CommissionConfig(tier1=1000, tier2=1500, tier3=2000, tier4=2500, include_infants=True)
    assert commission_base_pax(COUNTS, config) == 10


def test_commission_is_flat_across_the_group():
    """Tier amount applies to every passenger, not per band."""
    config = CommissionConfig(tier1=1000, tier2=1500, tier3=2000, tier4=2500)
    assert commission_total(16, config) == ("tier4", 2500 * 16)
    assert commission_total(10, config) == ("tier3", 2000 * 10)
