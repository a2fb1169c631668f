#!/usr/bin/env python
"""
Price a scenario JSON file and print the recap.

Usage:
    python scripts/price_scenario.py data/examples/istanbul_family.json
"""
import json
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from travel_pricing.schemas.scenario import ScenarioValidationError, parse_scenario
from travel_pricing.engine import PricingEngine
from travel_pricing.services.recap_service import lines_frame, summary_frame


def main():
    if len(sys.argv) != 2:
        print("Usage: python scripts/price_scenario.py <scenario.json>")
        sys.exit(1)

    path = Path(sys.argv[1])
    if not path.exists():
        print(f"ERROR: scenario file not found at {path}")
        sys.exit(1)

    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    try:
        payload = parse_scenario(data)
    except ScenarioValidationError as e:
        print("❌ INVALID SCENARIO")
        for error in e.errors:
            print(f"  ERROR: {error}")
        sys.exit(1)

    result = PricingEngine().calculate(payload.to_input())

    print("=" * 60)
    print(f"{payload.name} ({payload.destination}, {payload.nights} nights)")
    print("=" * 60)
    print()
    print(lines_frame(result).to_string(index=False))
    print()
    print(summary_frame(result).T.to_string(header=False))
    print()
    print("Trace:")
    print(result.get_trace_text())


if __name__ == "__main__":
    main()
