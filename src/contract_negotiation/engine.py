"""
Negotiation Engine - Main orchestrator.

Owns the session registry. AgentProfileFactory runs once at begin; every
offer then runs LeverageModel (for that offer and the current team context)
-> OfferEvaluator -> EventScheduler, with leverage recomputed once more for
the next round after the decision.

Each submit works on a copy of the stored session and replaces the stored
one only after the whole evaluate -> schedule sequence succeeds, so a
failed call never leaves a half-mutated session behind. Sessions handed
out by get_session() are therefore snapshots; fetch again after each call.
"""

import copy
import logging
import random
from dataclasses import replace
from typing import Dict, List, Optional, Union

from contract_negotiation.agent_profiles import AgentProfileFactory
from contract_negotiation.config import NegotiationConfig
from contract_negotiation.evaluator import OfferEvaluator
from contract_negotiation.events import EventContext, EventScheduler
from contract_negotiation.exceptions import InvalidOfferError, SessionNotFoundError
from contract_negotiation.leverage import LeverageModel
from contract_negotiation.market_value import MarketValueCalculator
from contract_negotiation.models import (
    AgentArchetype,
    CashReserveTier,
    ContractOffer,
    Money,
    NegotiationOutcome,
    NegotiationResponse,
    PlayerProfile,
    ShadowAdvisorAction,
    TeamContext,
)
from contract_negotiation.session import NegotiationSession, Normal, ShadowPending

PlayerId = Union[int, str]


class NegotiationEngine:
    """
    In-process negotiation engine. One session per player at a time.

    Usage:
        engine = NegotiationEngine(seed=42)
        engine.begin_negotiation(player, cap_space=40_000_000, position_depth=1,
                                 is_contender=True)
        response = engine.submit_offer(player.player_id, offer)
        if response.accepted:
            commit_signing(player.player_id, offer)   # roster collaborator
            engine.end_negotiation(player.player_id)
    """

    def __init__(
        self,
        config: Optional[NegotiationConfig] = None,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        agent_factory: Optional[AgentProfileFactory] = None,
        leverage_model: Optional[LeverageModel] = None,
        evaluator: Optional[OfferEvaluator] = None,
        scheduler: Optional[EventScheduler] = None,
        market_value_calculator: Optional[MarketValueCalculator] = None,
    ):
        """
        Initialize engine.

        Args:
            config: Negotiation policy (defaults if None)
            rng: Random source for event rolls (wins over seed)
            seed: Seed for a private random.Random when rng is None
            agent_factory: Agent generator (shared across sessions)
            leverage_model: Leverage calculator
            evaluator: Offer evaluator
            scheduler: Event scheduler
            market_value_calculator: Used when begin_negotiation gets no market value
        """
        self.config = config or NegotiationConfig()
        self.rng = rng if rng is not None else random.Random(seed)
        self.agent_factory = agent_factory or AgentProfileFactory()
        self.leverage_model = leverage_model or LeverageModel(self.config.leverage)
        self.evaluator = evaluator or OfferEvaluator(
            self.config.acceptance,
            self.leverage_model,
            self.config.events.days_per_round,
        )
        self.scheduler = scheduler or EventScheduler(self.config.events)
        self.market_value_calculator = market_value_calculator or MarketValueCalculator()

        self._sessions: Dict[PlayerId, NegotiationSession] = {}
        self._logger = logging.getLogger(__name__)

    # ========================================================================
    # SESSION LIFECYCLE
    # ========================================================================

    def begin_negotiation(
        self,
        player: PlayerProfile,
        cap_space: Money,
        position_depth: int,
        is_contender: bool,
        cash_reserve_tier: CashReserveTier = CashReserveTier.COMFORTABLE,
        market_value: Optional[Money] = None,
        archetype: Optional[AgentArchetype] = None,
    ) -> NegotiationSession:
        """
        Open a session for a player. Idempotent.

        If a session already exists for player.player_id it is returned
        untouched (no mood, leverage or agent reset).

        Args:
            player: Player being negotiated with
            cap_space: Team cap space in dollars
            position_depth: Rostered players at the player's position
            is_contender: Contender status
            cash_reserve_tier: Finance tier (carried for callers)
            market_value: Market APY; estimated from the player if None
            archetype: Force an agent archetype (e.g., scripted scenarios)

        Returns:
            The player's session
        """
        existing = self._sessions.get(player.player_id)
        if existing is not None:
            self._logger.debug(f"Session already open for player {player.player_id}")
            return existing

        team_context = TeamContext(
            cap_space=cap_space,
            position_depth=position_depth,
            is_contender=is_contender,
            cash_reserve_tier=cash_reserve_tier,
        )
        if market_value is None:
            market_value = self.market_value_calculator.calculate_market_value(player)

        agent = self.agent_factory.create_agent(
            player.player_id, archetype=archetype, player=player
        )
        session = NegotiationSession(
            player=player,
            agent=agent,
            market_value=market_value,
            team_context=team_context,
        )
        session.leverage = self.leverage_model.compute_leverage(session, None, team_context)

        self._sessions[player.player_id] = session
        self._logger.info(f"Negotiation opened: {session.get_summary()}")
        return session

    def end_negotiation(self, player_id: PlayerId) -> bool:
        """
        Remove a session (signing committed or talks abandoned).

        Returns:
            True if a session was removed
        """
        session = self._sessions.pop(player_id, None)
        if session is None:
            return False
        self._logger.info(
            f"Negotiation closed for player {player_id} ({session.status.value})"
        )
        return True

    def close_negotiation_window(self) -> int:
        """
        Drop every session (e.g., on a season phase transition).

        Returns:
            Number of sessions removed
        """
        count = len(self._sessions)
        self._sessions.clear()
        self._logger.info(f"Negotiation window closed, {count} sessions removed")
        return count

    def start_new_season(self) -> int:
        """Close the window and forget generated agents."""
        count = self.close_negotiation_window()
        self.agent_factory.clear_cache()
        return count

    # ========================================================================
    # OFFERS
    # ========================================================================

    def submit_offer(
        self,
        player_id: PlayerId,
        offer: ContractOffer,
        team_context: Optional[TeamContext] = None,
    ) -> NegotiationResponse:
        """
        Submit an offer and return the agent's response.

        Args:
            player_id: Player with an open session
            offer: Proposed contract
            team_context: Fresh team context, replaces the stored one

        Returns:
            NegotiationResponse (domain outcomes are never raised)

        Raises:
            SessionNotFoundError: No session for player_id
            InvalidOfferError: offer is not a ContractOffer
        """
        stored = self._require_session(player_id, "submit_offer")
        if not isinstance(offer, ContractOffer):
            raise InvalidOfferError(
                "offer must be a ContractOffer", "offer", type(offer).__name__
            )

        session = copy.deepcopy(stored)
        if team_context is not None and session.is_active:
            session.team_context = team_context

        evaluated_round = session.negotiation_round
        response = self.evaluator.evaluate(session, offer, session.team_context)
        response, fired = self.scheduler.run(
            session, EventContext(offer, response, evaluated_round), self.rng
        )

        self._sessions[player_id] = session

        if response.outcome == NegotiationOutcome.ACCEPTED:
            self._logger.info(f"Deal agreed: {session.get_summary()} offer {offer.id}")
        elif response.outcome == NegotiationOutcome.LOCKED_OUT and "lockout" in fired:
            self._logger.info(f"Locked out: {session.get_summary()} ({session.lockout_reason})")
        return response

    def respond_to_shadow_advisor(
        self,
        player_id: PlayerId,
        action: Union[ShadowAdvisorAction, str],
    ) -> bool:
        """
        Resolve a pending shadow advisor approach.

        ENGAGE: market value rises to the advisor's demand, event cleared.
        REPORT: event cleared, mood improves one step, user leverage drops
        by the distrust penalty now and in every later leverage reading.

        Returns:
            True if an event was resolved, False if none was pending

        Raises:
            SessionNotFoundError: No session for player_id
            ValueError: Unknown action
        """
        stored = self._require_session(player_id, "respond_to_shadow_advisor")
        action = ShadowAdvisorAction(action)

        if not isinstance(stored.state, ShadowPending):
            self._logger.debug(f"No shadow advisor pending for player {player_id}")
            return False

        session = copy.deepcopy(stored)
        event = session.state.event
        session.state = Normal()

        if action == ShadowAdvisorAction.ENGAGE:
            session.market_value = max(session.market_value, event.demand)
        else:
            session.agent_mood = session.agent_mood.improved()
            penalty = self.config.events.report_distrust_penalty
            session.agent_distrust += penalty
            session.leverage = replace(
                session.leverage,
                user_leverage=max(0.0, session.leverage.user_leverage - penalty),
            )

        self._sessions[player_id] = session
        self._logger.info(
            f"Shadow advisor {event.advisor_name} resolved ({action.value}) for player {player_id}"
        )
        return True

    # ========================================================================
    # QUERIES
    # ========================================================================

    def get_session(self, player_id: PlayerId) -> Optional[NegotiationSession]:
        return self._sessions.get(player_id)

    def has_session(self, player_id: PlayerId) -> bool:
        return player_id in self._sessions

    def active_sessions(self) -> List[NegotiationSession]:
        """Sessions still in the ACTIVE state."""
        return [session for session in self._sessions.values() if session.is_active]

    def _require_session(self, player_id: PlayerId, operation: str) -> NegotiationSession:
        session = self._sessions.get(player_id)
        if session is None:
            self._logger.warning(f"{operation}: no session for player {player_id}")
            raise SessionNotFoundError(player_id, operation)
        return session
