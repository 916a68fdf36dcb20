"""
Negotiation policy configuration.

Every numeric constant used by the evaluator, leverage model and event rules
lives here so that a game can retune negotiations without code changes.
Overrides can be loaded from JSON; keys that are missing fall back to the
defaults below.

Example JSON:
    {
        "acceptance": {"base_threshold": 0.93},
        "events": {"max_rounds": 10}
    }
"""

import json
import logging
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Union

from contract_negotiation.exceptions import InvalidConfigError
from contract_negotiation.models import AgentMood

logger = logging.getLogger(__name__)


def _check_range(owner: str, name: str, value: Any, low: float, high: float) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidConfigError(f"{owner}.{name} must be a number", f"{owner}.{name}", value)
    if not low <= value <= high:
        raise InvalidConfigError(
            f"{owner}.{name} must be between {low} and {high}, got {value}",
            f"{owner}.{name}",
            value,
        )


def _check_positive_int(owner: str, name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise InvalidConfigError(
            f"{owner}.{name} must be a positive integer, got {value}",
            f"{owner}.{name}",
            value,
        )


def _check_mood_table(owner: str, name: str, table: Dict[str, float], low: float, high: float):
    missing = [mood.name for mood in AgentMood if mood.name not in table]
    if missing:
        raise InvalidConfigError(
            f"{owner}.{name} is missing moods: {', '.join(missing)}", f"{owner}.{name}", table
        )
    for mood_name, value in table.items():
        if mood_name not in AgentMood.__members__:
            raise InvalidConfigError(
                f"{owner}.{name} has unknown mood {mood_name}", f"{owner}.{name}", mood_name
            )
        _check_range(owner, f"{name}.{mood_name}", value, low, high)


@dataclass
class AcceptancePolicy:
    """
    Offer evaluation constants.

    threshold = base_threshold * (1 - leverage_sensitivity * (user - agent) / 2)
                + archetype offset + mood offset,
    clamped to [min_threshold, max_threshold].

    A Shark counters any offer guaranteeing less than shark_guarantee_floor
    of its total value and asks for shark_guarantee_demand.
    """

    base_threshold: float = 0.95
    leverage_sensitivity: float = 0.05
    min_threshold: float = 0.80
    max_threshold: float = 0.975
    near_miss_floor: float = 0.80
    lowball_line: float = 0.70
    guarantee_line: float = 0.60
    volatile_mood_line: float = 0.65
    shark_guarantee_floor: float = 0.85
    shark_guarantee_demand: float = 0.87
    mood_offsets: Dict[str, float] = field(
        default_factory=lambda: {
            "EXCITED": -0.03,
            "INTERESTED": -0.01,
            "NEUTRAL": 0.0,
            "ANGRY": 0.04,
        }
    )

    def __post_init__(self):
        owner = "acceptance"
        for name in ("base_threshold", "min_threshold", "max_threshold", "near_miss_floor",
                     "lowball_line", "guarantee_line", "volatile_mood_line",
                     "leverage_sensitivity"):
            _check_range(owner, name, getattr(self, name), 0.0, 1.5)
        for name in ("shark_guarantee_floor", "shark_guarantee_demand"):
            _check_range(owner, name, getattr(self, name), 0.0, 1.0)
        if self.shark_guarantee_demand < self.shark_guarantee_floor:
            raise InvalidConfigError(
                "acceptance.shark_guarantee_demand cannot be below shark_guarantee_floor",
                "acceptance.shark_guarantee_demand",
                self.shark_guarantee_demand,
            )
        if self.min_threshold > self.max_threshold:
            raise InvalidConfigError(
                "acceptance.min_threshold cannot exceed max_threshold",
                "acceptance.min_threshold",
                self.min_threshold,
            )
        if self.lowball_line > self.near_miss_floor:
            raise InvalidConfigError(
                "acceptance.lowball_line cannot exceed near_miss_floor",
                "acceptance.lowball_line",
                self.lowball_line,
            )
        _check_mood_table(owner, "mood_offsets", self.mood_offsets, -0.5, 0.5)

    def mood_offset(self, mood: AgentMood) -> float:
        return self.mood_offsets[mood.name]


@dataclass
class LeverageWeights:
    """Weights for each leverage factor. Both sides are clamped to [0, 1]."""

    agent_base: float = 0.15
    cap_squeeze: float = 0.35
    scarcity: float = 0.35
    ideal_depth: int = 3
    agent_fatigue: float = 0.10
    fatigue_cap_rounds: int = 5
    young_age: int = 25
    young_premium: float = 0.05
    veteran_age: int = 30
    veteran_discount_per_year: float = 0.03
    veteran_discount_cap: float = 0.15
    user_base: float = 0.15
    cap_margin: float = 0.35
    contender_bonus: float = 0.20
    press_leak_pressure: float = 0.15
    press_leak_cap: int = 3
    user_fatigue: float = 0.05

    def __post_init__(self):
        owner = "leverage"
        for f in fields(self):
            value = getattr(self, f.name)
            if f.type is int or f.type == "int":
                _check_positive_int(owner, f.name, value)
            else:
                _check_range(owner, f.name, value, 0.0, 1.0)


@dataclass
class EventPolicy:
    """Probabilities, cooldowns and caps for special negotiation events."""

    press_leak_min_round: int = 2
    press_leak_base: float = 0.05
    press_leak_round_step: float = 0.03
    press_leak_max_probability: float = 0.90
    press_leak_mood_factors: Dict[str, float] = field(
        default_factory=lambda: {
            "ANGRY": 0.35,
            "NEUTRAL": 0.15,
            "INTERESTED": 0.05,
            "EXCITED": 0.0,
        }
    )
    phone_dead_trigger: int = 2
    phone_dead_cooldown_rounds: int = 2
    days_per_round: int = 7
    shadow_leverage_gate: float = 0.55
    shadow_base_probability: float = 0.04
    shadow_demand_multiplier: float = 1.15
    shadow_deadline_rounds: int = 2
    report_distrust_penalty: float = 0.05
    max_rounds: int = 12

    def __post_init__(self):
        owner = "events"
        for name in ("press_leak_min_round", "phone_dead_trigger", "phone_dead_cooldown_rounds",
                     "days_per_round", "shadow_deadline_rounds", "max_rounds"):
            _check_positive_int(owner, name, getattr(self, name))
        for name in ("press_leak_base", "press_leak_round_step", "press_leak_max_probability",
                     "shadow_leverage_gate", "shadow_base_probability",
                     "report_distrust_penalty"):
            _check_range(owner, name, getattr(self, name), 0.0, 1.0)
        _check_range(owner, "shadow_demand_multiplier", self.shadow_demand_multiplier, 1.0, 3.0)
        _check_mood_table(owner, "press_leak_mood_factors", self.press_leak_mood_factors, 0.0, 1.0)


@dataclass
class NegotiationConfig:
    """
    Complete negotiation policy.

    Attributes:
        acceptance: Offer evaluation constants
        leverage: Leverage factor weights
        events: Special event probabilities and caps
    """

    acceptance: AcceptancePolicy = field(default_factory=AcceptancePolicy)
    leverage: LeverageWeights = field(default_factory=LeverageWeights)
    events: EventPolicy = field(default_factory=EventPolicy)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NegotiationConfig":
        """
        Create from dictionary. Missing sections or keys use defaults.

        Raises:
            InvalidConfigError: On unknown keys or out-of-range values
        """
        return cls(
            acceptance=_build_section(AcceptancePolicy, "acceptance", data.get("acceptance")),
            leverage=_build_section(LeverageWeights, "leverage", data.get("leverage")),
            events=_build_section(EventPolicy, "events", data.get("events")),
        )

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "NegotiationConfig":
        """
        Load overrides from a JSON file.

        Raises:
            FileNotFoundError: If the file does not exist
            InvalidConfigError: If the JSON is malformed or values are invalid
        """
        config_path = Path(path)
        with open(config_path, "r") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise InvalidConfigError(
                    f"Invalid JSON in negotiation config: {e}", "path", str(config_path)
                ) from e
        if not isinstance(data, dict):
            raise InvalidConfigError("Negotiation config must be a JSON object", "path", str(config_path))
        logger.debug(f"Loaded negotiation config from {config_path}")
        return cls.from_dict(data)


def _build_section(section_cls, name: str, data: Any):
    if data is None:
        return section_cls()
    if not isinstance(data, dict):
        raise InvalidConfigError(f"{name} must be an object", name, data)

    known = {f.name for f in fields(section_cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise InvalidConfigError(
            f"Unknown {name} settings: {', '.join(unknown)}", name, unknown
        )

    kwargs = dict(data)
    defaults = section_cls()
    for f in fields(section_cls):
        # Partial mood tables are merged over the defaults
        default_value = getattr(defaults, f.name)
        if isinstance(default_value, dict) and isinstance(kwargs.get(f.name), dict):
            kwargs[f.name] = {**default_value, **kwargs[f.name]}
    return section_cls(**kwargs)
