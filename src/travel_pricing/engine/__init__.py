"""Engine subpackage - core pricing calculation."""
from .pricing_engine import PricingEngine, calculate_scenario
from .models import (
    ApplyRule,
    CalculationResult,
    CommissionConfig,
    CostLine,
    CostType,
    DerivedRooms,
    ExchangeRate,
    ExplicitRooms,
    LineResult,
    MarginConfig,
    PaxCategory,
    PaxCounts,
    RateSource,
    Rooms,
    ScenarioInput,
)

__all__ = [
    'PricingEngine', 'calculate_scenario',
    'ApplyRule', 'CalculationResult', 'CommissionConfig', 'CostLine', 'CostType',
    'DerivedRooms', 'ExchangeRate', 'ExplicitRooms', 'LineResult', 'MarginConfig',
    'PaxCategory', 'PaxCounts', 'RateSource', 'Rooms', 'ScenarioInput',
]
