"""
Scenario Service - storage, validation and pricing of scenarios.

Scenarios are stored through a repository (JSON files on disk by default)
and priced on demand with the pricing engine.
"""
import json
import logging
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from ..config.settings import Settings, get_settings
from ..engine import CalculationResult, PricingEngine
from ..engine.models import ExplicitRooms
from ..engine.rooms import derive_rooms
from .recap_service import compare_scenarios
from ..schemas.scenario import (
    ScenarioPayload,
    ScenarioValidationError,
    parse_scenario,
    utc_now_iso,
)

logger = logging.getLogger(__name__)


class ScenarioNotFoundError(LookupError):
    """Raised when a scenario id is unknown to the repository."""

    def __init__(self, scenario_id: str):
        self.scenario_id = scenario_id
        super().__init__(f"Scenario '{scenario_id}' not found")


@dataclass
class ValidationResult:
    """Result of scenario validation."""
    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


class ScenarioRepository:
    """Storage seam for scenarios. Subclasses implement the four primitives."""

    def load_scenario(self, scenario_id: str) -> ScenarioPayload:
        raise NotImplementedError

    def save_scenario(self, payload: ScenarioPayload) -> str:
        raise NotImplementedError

    def list_scenarios(self) -> list[ScenarioPayload]:
        raise NotImplementedError

    def delete_scenario(self, scenario_id: str) -> None:
        raise NotImplementedError

    @staticmethod
    def _stamp(payload: ScenarioPayload) -> ScenarioPayload:
        """Assign an id and timestamps before a write."""
        now = utc_now_iso()
        return payload.model_copy(update={
            "id": payload.id or uuid.uuid4().hex,
            "created_at": payload.created_at or now,
            "updated_at": now,
        })


class InMemoryScenarioRepository(ScenarioRepository):
    """Dict-backed repository for tests and embedding callers."""

    def __init__(self):
        self._records: dict[str, dict] = {}

    def load_scenario(self, scenario_id: str) -> ScenarioPayload:
        if scenario_id not in self._records:
            raise ScenarioNotFoundError(scenario_id)
        return ScenarioPayload.model_validate(self._records[scenario_id])

    def save_scenario(self, payload: ScenarioPayload) -> str:
        stamped = self._stamp(payload)
        self._records[stamped.id] = stamped.to_record()
        return stamped.id

    def list_scenarios(self) -> list[ScenarioPayload]:
        return [ScenarioPayload.model_validate(r) for r in self._records.values()]

    def delete_scenario(self, scenario_id: str) -> None:
        if self._records.pop(scenario_id, None) is None:
            raise ScenarioNotFoundError(scenario_id)


class JsonScenarioRepository(ScenarioRepository):
    """One ``<id>.json`` file per scenario in a directory."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def _path(self, scenario_id: str) -> Path:
        # Ids are used as file names; keep them inside the store
        if not scenario_id or Path(scenario_id).name != scenario_id:
            raise ScenarioNotFoundError(scenario_id)
        return self.directory / f"{scenario_id}.json"

    def load_scenario(self, scenario_id: str) -> ScenarioPayload:
        path = self._path(scenario_id)
        if not path.exists():
            raise ScenarioNotFoundError(scenario_id)
        with open(path, 'r', encoding='utf-8') as f:
            return ScenarioPayload.model_validate(json.load(f))

    def save_scenario(self, payload: ScenarioPayload) -> str:
        stamped = self._stamp(payload)
        path = self._path(stamped.id)
        self.directory.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(stamped.to_record(), f, indent=2)
        logger.info("Saved scenario %s (%s)", stamped.id, stamped.name)
        return stamped.id

    def list_scenarios(self) -> list[ScenarioPayload]:
        if not self.directory.exists():
            return []
        scenarios = []
        for path in sorted(self.directory.glob('*.json')):
            with open(path, 'r', encoding='utf-8') as f:
                scenarios.append(ScenarioPayload.model_validate(json.load(f)))
        # Newest first
        scenarios.sort(key=lambda s: s.created_at or "", reverse=True)
        return scenarios

    def delete_scenario(self, scenario_id: str) -> None:
        path = self._path(scenario_id)
        if not path.exists():
            raise ScenarioNotFoundError(scenario_id)
        path.unlink()
        logger.info("Deleted scenario %s", scenario_id)


class ScenarioService:
    """Service for managing and pricing scenarios."""

    def __init__(self, repository: Optional[ScenarioRepository] = None, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.repository = repository or JsonScenarioRepository(self.settings.scenarios_dir)
        self.engine = PricingEngine(rounding_step=self.settings.rounding_step)

    def validate_scenario(self, data) -> ValidationResult:
        """Validate a submission without saving it."""
        result = ValidationResult(valid=True)
        try:
            payload = parse_scenario(data, self.settings)
        except ScenarioValidationError as e:
            result.valid = False
            result.errors.extend(e.errors)
            return result

        for line in payload.cost_lines:
            if line.applies_to != "ALL" and not line.applies_to:
                result.warnings.append(
                    f"Cost line '{line.label}' applies to no passenger category and adds nothing"
                )
            if line.amount == 0:
                result.warnings.append(f"Cost line '{line.label}' has a zero amount")

        if payload.room_allocation and payload.room_allocation.is_explicit:
            explicit = payload.room_allocation.to_allocation()
            needed = derive_rooms(payload.pax_counts.to_counts())
            if isinstance(explicit, ExplicitRooms) and (
                explicit.single_rooms < needed.single_rooms
                or explicit.double_rooms < needed.double_rooms
                or explicit.triple_rooms < needed.triple_rooms
            ):
                result.warnings.append(
                    "Room allocation is smaller than the passenger mix needs "
                    f"({needed.single_rooms}/{needed.double_rooms}/{needed.triple_rooms})"
                )

        return result

    def create_scenario(self, data) -> ScenarioPayload:
        """Validate and store a new scenario (or overwrite one with the same id)."""
        payload = parse_scenario(data, self.settings)
        scenario_id = self.repository.save_scenario(payload)
        return self.repository.load_scenario(scenario_id)

    def get_scenario(self, scenario_id: str) -> ScenarioPayload:
        return self.repository.load_scenario(scenario_id)

    def list_scenarios(self) -> list[ScenarioPayload]:
        return self.repository.list_scenarios()

    def update_scenario(self, scenario_id: str, updates: dict) -> ScenarioPayload:
        """Apply camelCase field updates to a stored scenario and re-validate."""
        current = self.repository.load_scenario(scenario_id).to_record()
        current.update(updates)
        current["id"] = scenario_id
        payload = parse_scenario(current, self.settings)
        self.repository.save_scenario(payload)
        return self.repository.load_scenario(scenario_id)

    def delete_scenario(self, scenario_id: str) -> bool:
        self.repository.delete_scenario(scenario_id)
        return True

    def duplicate_scenario(self, scenario_id: str, name: Optional[str] = None) -> ScenarioPayload:
        """Store a variant copy of a scenario under a new id."""
        source = self.repository.load_scenario(scenario_id)
        variant = source.model_copy(update={
            "id": None,
            "name": name or f"{source.name} (variant)",
            "created_at": None,
            "updated_at": None,
        })
        new_id = self.repository.save_scenario(variant)
        logger.info("Duplicated scenario %s as %s", scenario_id, new_id)
        return self.repository.load_scenario(new_id)

    def price(self, data) -> CalculationResult:
        """Price a submission without storing it."""
        return self.engine.calculate(parse_scenario(data, self.settings).to_input())

    def price_scenario(self, scenario_id: str) -> CalculationResult:
        """Price a stored scenario."""
        return self.engine.calculate(self.repository.load_scenario(scenario_id).to_input())

    def build_recap(self, scenario_id: str) -> dict:
        """Recap payload handed to screens and exporters."""
        scenario = self.repository.load_scenario(scenario_id)
        result = self.engine.calculate(scenario.to_input())
        return {
            "scenarioId": scenario.id,
            "name": scenario.name,
            "destination": scenario.destination,
            "nights": scenario.nights,
            "currency": scenario.currency,
            "recap": result.to_dict(),
        }

    def compare_scenarios(self, scenario_ids: list[str]):
        """Price several stored variants and tabulate them side by side."""
        named = []
        for scenario_id in scenario_ids:
            scenario = self.repository.load_scenario(scenario_id)
            named.append((scenario.name, self.engine.calculate(scenario.to_input())))
        return compare_scenarios(named)

    def get_stats(self) -> dict:
        """Get statistics about stored scenarios."""
        scenarios = self.repository.list_scenarios()
        by_destination = {}
        for s in scenarios:
            by_destination[s.destination] = by_destination.get(s.destination, 0) + 1

        return {
            'total': len(scenarios),
            'by_destination': by_destination,
        }
