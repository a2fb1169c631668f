"""
Recap Service - tabular views of priced scenarios.

Builds pandas DataFrames for line breakdowns, totals and the side-by-side
comparison of scenario variants.
"""
from typing import Iterable

import pandas as pd

from ..engine import CalculationResult


LINE_COLUMNS = ['id', 'label', 'apply_rule', 'optional', 'amount_source', 'amount_dzd', 'share_pct']

COMPARE_COLUMNS = [
    'sales_total', 'per_pax_price', 'margin_total', 'margin_percent',
    'commission_total', 'selected_rate',
]


def lines_frame(result: CalculationResult) -> pd.DataFrame:
    """One row per cost line with its share of the total cost."""
    df = pd.DataFrame(
        [
            {
                'id': line.id,
                'label': line.label,
                'apply_rule': line.apply_rule,
                'optional': line.optional,
                'amount_source': line.amount_source,
                'amount_dzd': line.amount_dzd,
            }
            for line in result.line_results
        ],
        columns=LINE_COLUMNS[:-1],
    )

    if result.total_cost_dzd:
        df['share_pct'] = df['amount_dzd'] / result.total_cost_dzd * 100
    else:
        df['share_pct'] = 0.0
    return df


def summary_frame(result: CalculationResult) -> pd.DataFrame:
    """Single-row totals table."""
    return pd.DataFrame([{
        'total_cost_source': result.total_cost_source,
        'total_cost_dzd': result.total_cost_dzd,
        'margin_total': result.margin_total,
        'margin_percent': result.margin_percent,
        'commission_tier': result.commission_tier,
        'commission_total': result.commission_total,
        'commission_included': result.commission_included,
        'sales_total': result.sales_total,
        'per_pax_price': result.per_pax_price,
        'selected_rate': result.selected_rate,
    }])


def compare_scenarios(named_results: Iterable[tuple[str, CalculationResult]]) -> pd.DataFrame:
    """
    Compare priced variants side by side.

    Args:
        named_results: (scenario name, result) pairs

    Returns:
        DataFrame indexed by scenario name
    """
    rows = []
    names = []
    for name, result in named_results:
        names.append(name)
        rows.append({col: getattr(result, col) for col in COMPARE_COLUMNS})

    df = pd.DataFrame(rows, index=pd.Index(names, name='scenario'), columns=COMPARE_COLUMNS)
    return df
