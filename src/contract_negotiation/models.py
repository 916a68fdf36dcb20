"""
Core data models for the Contract Negotiation core.

Provides enums and dataclasses for:
- AgentArchetype / ArchetypeProfile: Agent behavioral profiles
- AgentMood: Ordered agent mood (ANGRY < NEUTRAL < INTERESTED < EXCITED)
- PlayerPersonality / PlayerProfile: Player input consumed by the engine
- Agent: Immutable agent generated for a player
- ContractOffer: Offer value object with structural validation
- Leverage: Bilateral negotiating power
- TeamContext: Team situation supplied by the caller
- PressLeak / ShadowAdvisorEvent: Special negotiation events
- NegotiationResponse / RoundRecord: Per-round outputs and history
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Tuple, Union

from contract_negotiation.exceptions import InvalidOfferError

Money = Union[int, float]


# ============================================================================
# ENUMS
# ============================================================================


@dataclass(frozen=True)
class ArchetypeProfile:
    """
    Base behavior values for an agent archetype.

    Per-player agents jitter patience, volatility and max length around
    these values; the remaining fields are used as-is by the leverage model,
    evaluator and event rules.
    """

    patience: float
    mood_volatility: float
    max_contract_length: int
    lowball_tolerance: int
    press_leak_propensity: float
    shadow_advisor_propensity: float
    contender_sensitivity: float
    temperament: float
    counter_premium: float
    acceptance_offset: float = 0.0
    near_miss_floor: Optional[float] = None
    name_pool: Tuple[str, ...] = ()


class AgentArchetype(Enum):
    """
    Agent behavioral profile governing patience and risk tolerance.

    Archetypes:
    - SHARK: Maximum money, quick to anger, aggressive counters
    - FAMILY_FRIEND: Security and fit over peak APY
    - BRAND_BUILDER: Marketability first, likes contenders and guarantees
    - SELF_REPRESENTED: Most literal evaluator, no theatrics
    """

    SHARK = "The Shark"
    FAMILY_FRIEND = "Uncle/Family Friend"
    BRAND_BUILDER = "Brand Builder"
    SELF_REPRESENTED = "Self-Represented"

    def profile(self) -> ArchetypeProfile:
        """Get the base behavior values for this archetype."""
        return _ARCHETYPE_PROFILES[self]

    def get_description(self) -> str:
        """Get human-readable description of this archetype."""
        descriptions = {
            AgentArchetype.SHARK: "Maximum guaranteed money. No compromises.",
            AgentArchetype.FAMILY_FRIEND: "Prioritizes player happiness, security and fit.",
            AgentArchetype.BRAND_BUILDER: "Short deals for a quick return to free agency; chases contenders and big guarantees.",
            AgentArchetype.SELF_REPRESENTED: "Reads the numbers literally. Takes little personally.",
        }
        return descriptions[self]

    @classmethod
    def from_string(cls, value: str) -> Optional["AgentArchetype"]:
        """
        Create archetype from its value or member name.

        Args:
            value: "The Shark", "SHARK", "shark", ...

        Returns:
            AgentArchetype if recognized, None otherwise
        """
        try:
            return cls(value)
        except ValueError:
            return cls.__members__.get(value.upper().replace(" ", "_"))


_ARCHETYPE_PROFILES: Dict[AgentArchetype, ArchetypeProfile] = {
    AgentArchetype.SHARK: ArchetypeProfile(
        patience=0.25,
        mood_volatility=0.80,
        max_contract_length=10,
        lowball_tolerance=2,
        press_leak_propensity=1.5,
        shadow_advisor_propensity=2.0,
        contender_sensitivity=0.5,
        temperament=0.10,
        counter_premium=1.05,
        name_pool=("Drew Rosenhaus", "Scott Boras", "Joel Segal"),
    ),
    AgentArchetype.FAMILY_FRIEND: ArchetypeProfile(
        patience=0.80,
        mood_volatility=0.20,
        max_contract_length=7,
        lowball_tolerance=4,
        press_leak_propensity=0.3,
        shadow_advisor_propensity=0.5,
        contender_sensitivity=1.0,
        temperament=0.0,
        counter_premium=1.0,
        acceptance_offset=-0.03,
        name_pool=("{last}'s Uncle", "Family Friend", "Local Attorney"),
    ),
    AgentArchetype.BRAND_BUILDER: ArchetypeProfile(
        patience=0.55,
        mood_volatility=0.45,
        max_contract_length=2,
        lowball_tolerance=3,
        press_leak_propensity=1.0,
        shadow_advisor_propensity=1.5,
        contender_sensitivity=1.25,
        temperament=0.05,
        counter_premium=1.02,
        name_pool=("Tom Condon", "Jimmy Sexton", "David Mulugheta"),
    ),
    AgentArchetype.SELF_REPRESENTED: ArchetypeProfile(
        patience=0.90,
        mood_volatility=0.30,
        max_contract_length=6,
        lowball_tolerance=1,
        press_leak_propensity=0.8,
        shadow_advisor_propensity=0.5,
        contender_sensitivity=0.75,
        temperament=0.05,
        counter_premium=1.0,
        near_miss_floor=0.90,
        name_pool=("{first} {last} (Self-Rep)",),
    ),
}


class AgentMood(Enum):
    """
    Agent mood, ordered worst to best: ANGRY < NEUTRAL < INTERESTED < EXCITED.

    Drives evaluator thresholds and display.
    """

    ANGRY = "Angry"
    NEUTRAL = "Neutral"
    INTERESTED = "Interested"
    EXCITED = "Excited"

    @property
    def rank(self) -> int:
        """Position in the worst-to-best ordering (ANGRY == 0)."""
        return _MOOD_ORDER.index(self)

    def __lt__(self, other: "AgentMood") -> bool:
        if not isinstance(other, AgentMood):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: "AgentMood") -> bool:
        if not isinstance(other, AgentMood):
            return NotImplemented
        return self.rank <= other.rank

    def step_toward(self, target: "AgentMood", steps: int = 1) -> "AgentMood":
        """Move up to `steps` positions toward `target` (never past it)."""
        current = self.rank
        goal = target.rank
        if current < goal:
            current = min(goal, current + steps)
        elif current > goal:
            current = max(goal, current - steps)
        return _MOOD_ORDER[current]

    def improved(self, steps: int = 1) -> "AgentMood":
        return self.step_toward(AgentMood.EXCITED, steps)

    def worsened(self, steps: int = 1) -> "AgentMood":
        return self.step_toward(AgentMood.ANGRY, steps)


_MOOD_ORDER = (AgentMood.ANGRY, AgentMood.NEUTRAL, AgentMood.INTERESTED, AgentMood.EXCITED)


class CashReserveTier(Enum):
    """Owner cash reserve classification supplied by the finance system."""

    WEALTHY = "wealthy"
    COMFORTABLE = "comfortable"
    TIGHT = "tight"
    CRISIS = "crisis"


class ShadowAdvisorAction(Enum):
    """User response to a shadow advisor approach."""

    ENGAGE = "engage"
    REPORT = "report"


class NegotiationOutcome(Enum):
    """Kind of result produced by a single offer submission."""

    ACCEPTED = "accepted"
    COUNTER = "counter"
    REJECTED = "rejected"
    CAP_INFEASIBLE = "cap_infeasible"
    PHONE_DEAD = "phone_dead"
    LOCKED_OUT = "locked_out"
    DEAL_AGREED = "deal_agreed"


class SessionStatus(Enum):
    """Top-level session lifecycle state."""

    ACTIVE = "active"
    ACCEPTED = "accepted"
    LOCKED_OUT = "locked_out"


class SessionPhase(Enum):
    """Fine-grained session state, including ACTIVE sub-states."""

    NORMAL = "normal"
    PHONE_DEAD = "phone_dead"
    SHADOW_PENDING = "shadow_pending"
    ACCEPTED = "accepted"
    LOCKED_OUT = "locked_out"


# ============================================================================
# PLAYER INPUT
# ============================================================================


@dataclass
class PlayerPersonality:
    """
    Player personality traits used to pick an agent archetype.

    All traits are on a 0-100 scale.
    """

    ego: int = 50
    loyalty: int = 50
    marketability: int = 50
    discipline: int = 50
    leadership: int = 50
    motivation: int = 50
    team_player: int = 50
    work_ethic: int = 50

    def __post_init__(self):
        """Validate trait ranges."""
        for field_name in (
            "ego", "loyalty", "marketability", "discipline",
            "leadership", "motivation", "team_player", "work_ethic",
        ):
            value = getattr(self, field_name)
            if not isinstance(value, (int, float)) or not 0 <= value <= 100:
                raise ValueError(f"{field_name} must be between 0 and 100, got {value}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlayerPersonality":
        """Create from dictionary, ignoring unknown keys."""
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**known)


@dataclass
class PlayerProfile:
    """
    Player information consumed by the negotiation engine.

    Attributes:
        player_id: Stable player identifier (seeds the agent)
        first_name: Player first name
        last_name: Player last name
        position: Position abbreviation (e.g., "QB", "WR")
        age: Player age
        overall: Overall rating 0-99
        years_pro: Accrued seasons (for market value)
        personality: Optional personality traits for archetype selection
    """

    player_id: Union[int, str]
    first_name: str = ""
    last_name: str = ""
    position: str = ""
    age: int = 27
    overall: int = 75
    years_pro: int = 4
    personality: Optional[PlayerPersonality] = None

    def __post_init__(self):
        """Validate identifying fields."""
        if self.player_id is None or self.player_id == "":
            raise ValueError("player_id is required")
        if not isinstance(self.age, int) or self.age < 0:
            raise ValueError(f"age must be a non-negative integer, got {self.age}")
        if isinstance(self.personality, dict):
            self.personality = PlayerPersonality.from_dict(self.personality)

    @property
    def full_name(self) -> str:
        name = f"{self.first_name} {self.last_name}".strip()
        return name or f"Player {self.player_id}"


# ============================================================================
# AGENT / LEVERAGE / TEAM
# ============================================================================


@dataclass(frozen=True)
class Agent:
    """
    Player agent generated once per player and reused within a season.

    Attributes:
        name: Display name
        archetype: Behavioral profile
        patience: 0.0-1.0 (higher = slower to escalate)
        max_contract_length: Longest deal the agent will sign
        mood_volatility: 0.0-1.0 (higher = mood swings harder on rejection)
        lowball_tolerance: Insulting offers tolerated before walking away
    """

    name: str
    archetype: AgentArchetype
    patience: float
    max_contract_length: int
    mood_volatility: float
    lowball_tolerance: int = 3

    def __post_init__(self):
        """Validate ranges."""
        if not isinstance(self.archetype, AgentArchetype):
            raise TypeError(f"archetype must be AgentArchetype, got {type(self.archetype)}")
        for attr in ("patience", "mood_volatility"):
            value = getattr(self, attr)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{attr} must be 0.0-1.0, got {value}")
        if not isinstance(self.max_contract_length, int) or self.max_contract_length < 1:
            raise ValueError(
                f"max_contract_length must be a positive integer, got {self.max_contract_length}"
            )
        if self.lowball_tolerance < 1:
            raise ValueError(f"lowball_tolerance must be >= 1, got {self.lowball_tolerance}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "archetype": self.archetype.name,
            "patience": self.patience,
            "max_contract_length": self.max_contract_length,
            "mood_volatility": self.mood_volatility,
            "lowball_tolerance": self.lowball_tolerance,
        }


@dataclass(frozen=True)
class Leverage:
    """
    Bilateral negotiating power.

    Each side is computed independently and the two are not required to
    sum to 1.0.
    """

    user_leverage: float = 0.5
    agent_leverage: float = 0.5

    def __post_init__(self):
        for attr in ("user_leverage", "agent_leverage"):
            value = getattr(self, attr)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{attr} must be 0.0-1.0, got {value}")

    def dominant_party(self) -> str:
        """Return "User", "Agent" or "Balanced" (0.2 margin)."""
        if self.user_leverage > self.agent_leverage + 0.2:
            return "User"
        elif self.agent_leverage > self.user_leverage + 0.2:
            return "Agent"
        return "Balanced"

    def gap(self) -> float:
        return abs(self.user_leverage - self.agent_leverage)

    def to_dict(self) -> Dict[str, float]:
        return {
            "user_leverage": self.user_leverage,
            "agent_leverage": self.agent_leverage,
        }


@dataclass(frozen=True)
class TeamContext:
    """
    Team situation supplied by the caller on each call.

    Attributes:
        cap_space: Available cap space in dollars (negative if over the cap)
        position_depth: Rostered players at the negotiating player's position
        is_contender: Whether the team is a contender this season
        cash_reserve_tier: Finance tier, informational for callers
    """

    cap_space: Money
    position_depth: int = 0
    is_contender: bool = False
    cash_reserve_tier: CashReserveTier = CashReserveTier.COMFORTABLE

    def __post_init__(self):
        if not isinstance(self.position_depth, int) or self.position_depth < 0:
            raise ValueError(
                f"position_depth must be a non-negative integer, got {self.position_depth}"
            )
        if not isinstance(self.cash_reserve_tier, CashReserveTier):
            raise TypeError("cash_reserve_tier must be a CashReserveTier")


# ============================================================================
# CONTRACT OFFER
# ============================================================================


def _is_money(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value >= 0


def _generate_offer_id() -> str:
    return f"offer_{uuid.uuid4().hex[:9]}"


@dataclass(frozen=True)
class ContractOffer:
    """
    Proposed contract terms. Never mutated after construction.

    Attributes:
        years: Contract length (on-field seasons), must be > 0
        base_salary_per_year: One base salary per contract year
        signing_bonus: Lump-sum bonus, prorated for cap purposes
        guaranteed_money: Total guarantees (cannot exceed total value)
        ltbe_incentives: Likely-to-be-earned incentive amounts
        nltbe_incentives: Not-likely-to-be-earned incentive amounts
        void_years: Dummy seasons that only spread bonus proration
        offset_language: Whether guarantees offset against a new contract
        id: Offer identifier
    """

    years: int
    base_salary_per_year: Sequence[Money]
    signing_bonus: Money = 0
    guaranteed_money: Money = 0
    ltbe_incentives: Sequence[Money] = ()
    nltbe_incentives: Sequence[Money] = ()
    void_years: int = 0
    offset_language: bool = False
    id: str = field(default_factory=_generate_offer_id)

    def __post_init__(self):
        """Normalize sequences to tuples and validate structure."""
        for attr in ("base_salary_per_year", "ltbe_incentives", "nltbe_incentives"):
            value = getattr(self, attr)
            if isinstance(value, (str, bytes)) or not hasattr(value, "__iter__"):
                raise InvalidOfferError(f"{attr} must be a sequence", attr, value)
            object.__setattr__(self, attr, tuple(value))

        self._validate_years()
        self._validate_base_salaries()
        self._validate_money()
        self._validate_void_years()
        self._validate_guaranteed()

    def _validate_years(self):
        if isinstance(self.years, bool) or not isinstance(self.years, int) or self.years <= 0:
            raise InvalidOfferError(
                f"years must be a positive integer, got {self.years}", "years", self.years
            )

    def _validate_base_salaries(self):
        if len(self.base_salary_per_year) != self.years:
            raise InvalidOfferError(
                f"base_salary_per_year has {len(self.base_salary_per_year)} entries "
                f"for a {self.years}-year contract",
                "base_salary_per_year",
                self.base_salary_per_year,
            )
        for salary in self.base_salary_per_year:
            if not _is_money(salary):
                raise InvalidOfferError(
                    f"base salaries must be non-negative amounts, got {salary}",
                    "base_salary_per_year",
                    salary,
                )

    def _validate_money(self):
        for attr in ("signing_bonus", "guaranteed_money"):
            value = getattr(self, attr)
            if not _is_money(value):
                raise InvalidOfferError(
                    f"{attr} must be a non-negative amount, got {value}", attr, value
                )
        for attr in ("ltbe_incentives", "nltbe_incentives"):
            for value in getattr(self, attr):
                if not _is_money(value):
                    raise InvalidOfferError(
                        f"{attr} must contain non-negative amounts, got {value}", attr, value
                    )

    def _validate_void_years(self):
        if (
            isinstance(self.void_years, bool)
            or not isinstance(self.void_years, int)
            or self.void_years < 0
        ):
            raise InvalidOfferError(
                f"void_years must be a non-negative integer, got {self.void_years}",
                "void_years",
                self.void_years,
            )

    def _validate_guaranteed(self):
        total = sum(self.base_salary_per_year) + self.signing_bonus
        if self.guaranteed_money > total:
            raise InvalidOfferError(
                f"guaranteed_money ({self.guaranteed_money}) cannot exceed "
                f"total value ({total})",
                "guaranteed_money",
                self.guaranteed_money,
            )

    @classmethod
    def create_flat(
        cls,
        years: int,
        apy: Money,
        signing_bonus: Money = 0,
        guaranteed_pct: float = 0.0,
        void_years: int = 0,
        offset_language: bool = False,
        offer_id: Optional[str] = None,
    ) -> "ContractOffer":
        """
        Build a level-salary offer whose average per year equals `apy`.

        Base salaries are (apy * years - signing_bonus) spread evenly, with
        any rounding remainder added to the final year.

        Args:
            years: Contract length
            apy: Target average per year (base salaries + bonus) / years
            signing_bonus: Signing bonus amount
            guaranteed_pct: Fraction (0.0-1.0) of total value guaranteed
            void_years: Void years for bonus proration
            offset_language: Offset clause flag
            offer_id: Optional explicit id

        Raises:
            InvalidOfferError: If terms are inconsistent
        """
        if isinstance(years, bool) or not isinstance(years, int) or years <= 0:
            raise InvalidOfferError(f"years must be a positive integer, got {years}", "years", years)
        if not 0.0 <= guaranteed_pct <= 1.0:
            raise InvalidOfferError(
                f"guaranteed_pct must be 0.0-1.0, got {guaranteed_pct}",
                "guaranteed_pct",
                guaranteed_pct,
            )
        total = int(round(apy * years))
        salary_pool = total - int(round(signing_bonus))
        if salary_pool < 0:
            raise InvalidOfferError(
                "signing_bonus cannot exceed the contract's total value",
                "signing_bonus",
                signing_bonus,
            )
        per_year = salary_pool // years
        salaries = [per_year] * years
        salaries[-1] += salary_pool - per_year * years

        kwargs: Dict[str, Any] = {}
        if offer_id is not None:
            kwargs["id"] = offer_id
        return cls(
            years=years,
            base_salary_per_year=salaries,
            signing_bonus=int(round(signing_bonus)),
            guaranteed_money=int(total * guaranteed_pct),
            void_years=void_years,
            offset_language=offset_language,
            **kwargs,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "years": self.years,
            "base_salary_per_year": list(self.base_salary_per_year),
            "signing_bonus": self.signing_bonus,
            "guaranteed_money": self.guaranteed_money,
            "ltbe_incentives": list(self.ltbe_incentives),
            "nltbe_incentives": list(self.nltbe_incentives),
            "void_years": self.void_years,
            "offset_language": self.offset_language,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ContractOffer":
        """Create from dictionary."""
        kwargs: Dict[str, Any] = {}
        if data.get("id"):
            kwargs["id"] = data["id"]
        return cls(
            years=data["years"],
            base_salary_per_year=data["base_salary_per_year"],
            signing_bonus=data.get("signing_bonus", 0),
            guaranteed_money=data.get("guaranteed_money", 0),
            ltbe_incentives=data.get("ltbe_incentives", ()),
            nltbe_incentives=data.get("nltbe_incentives", ()),
            void_years=data.get("void_years", 0),
            offset_language=data.get("offset_language", False),
            **kwargs,
        )


# ============================================================================
# EVENTS / RESPONSES
# ============================================================================


@dataclass(frozen=True)
class PressLeak:
    """A leaked offer story that puts reputational pressure on the agent."""

    headline: str
    round: int
    player_name: str = ""
    offer_amount: Money = 0
    market_value: Money = 0


@dataclass(frozen=True)
class ShadowAdvisorEvent:
    """
    Off-book approach from a shadow advisor.

    Attributes:
        advisor_name: Who is advising the player
        player_name: Player being advised
        demand: Money figure the advisor is pushing
        raised_round: Negotiation round the approach happened in
        deadline_round: Round by which the user must respond
    """

    advisor_name: str
    player_name: str
    demand: Money
    raised_round: int = 1
    deadline_round: int = 3


@dataclass(frozen=True)
class NegotiationResponse:
    """
    Result of a single offer submission. Not stored by the engine.

    Attributes:
        accepted: Whether the agent accepted the offer
        new_mood: Agent mood after this round
        message: Agent's reply
        outcome: Kind of result
        counter_offer: Agent counter proposal, if any
        phone_dead_days: Days until the agent takes calls again
    """

    accepted: bool
    new_mood: AgentMood
    message: str
    outcome: NegotiationOutcome = NegotiationOutcome.REJECTED
    counter_offer: Optional[ContractOffer] = None
    phone_dead_days: int = 0

    @property
    def is_lockout(self) -> bool:
        return self.outcome == NegotiationOutcome.LOCKED_OUT


@dataclass(frozen=True)
class RoundRecord:
    """History entry for one evaluated round."""

    round: int
    offer_id: str
    average_per_year: float
    fit: float
    threshold: float
    outcome: NegotiationOutcome
    mood_after: AgentMood
