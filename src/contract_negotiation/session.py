"""
Negotiation session state.

A session's lifecycle state is a tagged union of small frozen dataclasses
rather than independent optional fields, so combinations such as
"locked out while the phone is dead" cannot be represented.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union

from contract_negotiation.models import (
    Agent,
    AgentMood,
    ContractOffer,
    Leverage,
    Money,
    PlayerProfile,
    PressLeak,
    RoundRecord,
    SessionPhase,
    SessionStatus,
    ShadowAdvisorEvent,
    TeamContext,
)


@dataclass(frozen=True)
class Normal:
    """Agent is taking offers."""


@dataclass(frozen=True)
class PhoneDead:
    """Agent refuses calls until `until_round`."""

    until_round: int


@dataclass(frozen=True)
class ShadowPending:
    """A shadow advisor approach is awaiting the user's response."""

    event: ShadowAdvisorEvent


@dataclass(frozen=True)
class LockedOut:
    """Terminal: negotiations are over."""

    reason: str


@dataclass(frozen=True)
class Accepted:
    """Terminal until the caller commits the signing and ends the session."""

    offer: ContractOffer


SessionState = Union[Normal, PhoneDead, ShadowPending, LockedOut, Accepted]


@dataclass
class NegotiationSession:
    """
    One negotiation between the user's team and a player's agent.

    Mutated only by the engine. Callers should treat sessions returned by
    NegotiationEngine.get_session() as snapshots and re-fetch after each call.

    Attributes:
        player: Player being negotiated with
        agent: Agent representing the player (fixed for the session)
        agent_mood: Current agent mood
        market_value: Market APY in dollars
        negotiation_round: Current round, starts at 1
        leverage: Most recent leverage reading
        team_context: Most recent team context supplied by the caller
        state: Lifecycle state (tagged union)
        press_leaks: Leaked stories so far
        history: One record per evaluated round
        lowball_strikes: Insulting offers received
        consecutive_angry_rejections: Rejections in a row while ANGRY
        agent_distrust: User leverage lost by reporting shadow advisors
    """

    player: PlayerProfile
    agent: Agent
    market_value: Money
    team_context: TeamContext
    leverage: Leverage = field(default_factory=Leverage)
    agent_mood: AgentMood = AgentMood.NEUTRAL
    negotiation_round: int = 1
    state: SessionState = field(default_factory=Normal)
    press_leaks: List[PressLeak] = field(default_factory=list)
    history: List[RoundRecord] = field(default_factory=list)
    lowball_strikes: int = 0
    consecutive_angry_rejections: int = 0
    agent_distrust: float = 0.0

    def __post_init__(self):
        if self.market_value <= 0:
            raise ValueError(f"market_value must be positive, got {self.market_value}")
        if self.negotiation_round < 1:
            raise ValueError(f"negotiation_round must be >= 1, got {self.negotiation_round}")

    @property
    def player_id(self):
        return self.player.player_id

    @property
    def is_locked_out(self) -> bool:
        return isinstance(self.state, LockedOut)

    @property
    def lockout_reason(self) -> Optional[str]:
        if isinstance(self.state, LockedOut):
            return self.state.reason
        return None

    @property
    def is_accepted(self) -> bool:
        return isinstance(self.state, Accepted)

    @property
    def accepted_offer(self) -> Optional[ContractOffer]:
        if isinstance(self.state, Accepted):
            return self.state.offer
        return None

    @property
    def phone_dead_until_round(self) -> Optional[int]:
        if isinstance(self.state, PhoneDead):
            return self.state.until_round
        return None

    @property
    def is_phone_dead(self) -> bool:
        """True while the cooldown window is still open."""
        return (
            isinstance(self.state, PhoneDead)
            and self.negotiation_round < self.state.until_round
        )

    @property
    def pending_shadow_event(self) -> Optional[ShadowAdvisorEvent]:
        if isinstance(self.state, ShadowPending):
            return self.state.event
        return None

    @property
    def status(self) -> SessionStatus:
        if isinstance(self.state, LockedOut):
            return SessionStatus.LOCKED_OUT
        if isinstance(self.state, Accepted):
            return SessionStatus.ACCEPTED
        return SessionStatus.ACTIVE

    @property
    def phase(self) -> SessionPhase:
        if isinstance(self.state, LockedOut):
            return SessionPhase.LOCKED_OUT
        if isinstance(self.state, Accepted):
            return SessionPhase.ACCEPTED
        if isinstance(self.state, PhoneDead):
            return SessionPhase.PHONE_DEAD
        if isinstance(self.state, ShadowPending):
            return SessionPhase.SHADOW_PENDING
        return SessionPhase.NORMAL

    @property
    def is_active(self) -> bool:
        return self.status == SessionStatus.ACTIVE

    def lock_out(self, reason: str) -> None:
        self.state = LockedOut(reason)

    def get_summary(self) -> str:
        """Single-line summary for logs."""
        return (
            f"{self.player.full_name} | {self.agent.name} ({self.agent.archetype.value}) | "
            f"round {self.negotiation_round} | mood {self.agent_mood.value} | "
            f"{self.phase.value}"
        )
