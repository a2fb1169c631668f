"""
Room derivation and passenger filtering.

Used by the pricing engine to resolve the multiplier of PER_ROOM
and PER_PAX cost lines.
"""
import math
from typing import Iterable, Union

from .models import ALL_PAX, DerivedRooms, ExplicitRooms, PaxCounts, RoomAllocation, Rooms


# Category token → PaxCounts attribute
PAX_CATEGORY_FIELDS = {
    "SINGLE": "single",
    "DOUBLE": "double",
    "TRIPLE": "triple",
    "CHD_PLUS6": "chd_plus6",
    "CHD_MINUS6": "chd_minus6",
    "INF": "infant",
}


def derive_rooms(pax_counts: PaxCounts, allocation: RoomAllocation = DerivedRooms()) -> Rooms:
    """
    Resolve the rooms of each type for a passenger mix.

    An explicit allocation is used as-is. Otherwise singles get one room
    each, doubles share by two and triples by three. Children and infants
    share with adults and never add rooms.
    """
    if isinstance(allocation, ExplicitRooms):
        return Rooms(
            single_rooms=allocation.single_rooms,
            double_rooms=allocation.double_rooms,
            triple_rooms=allocation.triple_rooms,
        )

    return Rooms(
        single_rooms=max(0, pax_counts.single),
        double_rooms=math.ceil(max(0, pax_counts.double) / 2),
        triple_rooms=math.ceil(max(0, pax_counts.triple) / 3),
    )


def relevant_pax(pax_counts: PaxCounts, applies_to: Union[str, Iterable]) -> int:
    """Count the passengers a PER_PAX line applies to."""
    if isinstance(applies_to, str) and applies_to == ALL_PAX:
        return pax_counts.total

    total = 0
    for category in applies_to:
        token = getattr(category, "value", category)
        attr = PAX_CATEGORY_FIELDS.get(token)
        if attr is None:
            # Unmapped tokens are rejected upstream
            continue
        total += getattr(pax_counts, attr)
    return total
