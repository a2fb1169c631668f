"""
Centralized settings, paths and pricing defaults for the pricing tool.
"""
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional


# Defaults applied when a stored scenario lacks margin/commission/rate records
DEFAULT_MARGIN = {
    "single": 40000,
    "double": 40000,
    "triple": 40000,
    "chdPlus6": 20000,
    "chdMinus6": 15000,
    "infant": 10000,
}

DEFAULT_COMMISSION = {
    "tier1": 1000,
    "tier2": 1500,
    "tier3": 2000,
    "tier4": 2500,
    "includeInfants": False,
    "includeInSales": True,
}

DEFAULT_EXCHANGE_RATE = {
    "source": "AUTO",
    "rate": 1,
}


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists():
            return parent
    # Fallback to 3 levels up from this file
    return Path(__file__).resolve().parent.parent.parent.parent


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Project paths
    project_root: Path

    # Scenario store (one JSON file per scenario)
    scenarios_dir: Path

    # Pricing policy
    rounding_step: int = 1000
    default_currency: str = "EUR"

    default_margin: dict = field(default_factory=lambda: dict(DEFAULT_MARGIN))
    default_commission: dict = field(default_factory=lambda: dict(DEFAULT_COMMISSION))
    default_exchange_rate: dict = field(default_factory=lambda: dict(DEFAULT_EXCHANGE_RATE))

    @classmethod
    def load(cls, project_root: Optional[Path] = None) -> 'Settings':
        """Load settings from the project structure."""
        root = project_root or get_project_root()

        return cls(
            project_root=root,
            scenarios_dir=root / 'data' / 'scenarios',
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings
