"""
Leverage Model

Computes bilateral negotiating power. Each side is built from its own
factors and clamped to [0, 1]; the two are not required to sum to 1.

Agent leverage rises with:
- Market value exceeding the team's cap space (cap squeeze)
- Thin depth at the player's position (scarcity)
- Negotiation rounds dragging on (capped fatigue)
- Youth, and the agent's archetype temperament

User leverage rises with:
- Cap space margin over the offer's year-1 cap hit
- Contender status, moderated by how much the archetype cares
- Press leaks against the player (capped)
- Negotiation rounds dragging on (capped fatigue)

and falls by the distrust the agent holds after a reported shadow advisor.
"""

import logging
from typing import Optional

from contract_negotiation.config import LeverageWeights
from contract_negotiation.economics import cap_hit_year1
from contract_negotiation.models import ContractOffer, Leverage, TeamContext
from contract_negotiation.session import NegotiationSession


class LeverageModel:
    """
    Stateless leverage calculator.

    Depends only on the current session fields, the evaluated offer and the
    team context, so it is recomputed from scratch every round.
    """

    def __init__(self, weights: Optional[LeverageWeights] = None):
        self.weights = weights or LeverageWeights()
        self._logger = logging.getLogger(__name__)

    def compute_leverage(
        self,
        session: NegotiationSession,
        offer: Optional[ContractOffer] = None,
        team_context: Optional[TeamContext] = None,
    ) -> Leverage:
        """
        Compute leverage for the session.

        Args:
            session: Negotiation session
            offer: Offer being evaluated (None before the first offer)
            team_context: Team context (defaults to the session's)

        Returns:
            Leverage with both sides clamped to [0, 1]
        """
        context = team_context or session.team_context

        agent_leverage = _clamp(
            self.weights.agent_base
            + self._cap_squeeze(session.market_value, context.cap_space)
            + self._scarcity(context.position_depth)
            + self._fatigue(session.negotiation_round, self.weights.agent_fatigue)
            + self._age_adjustment(session.player.age)
            + session.agent.archetype.profile().temperament
        )

        user_leverage = _clamp(
            self.weights.user_base
            + self._cap_margin(context.cap_space, offer)
            + self._contender_bonus(session, context)
            + self._press_pressure(len(session.press_leaks))
            + self._fatigue(session.negotiation_round, self.weights.user_fatigue)
            - session.agent_distrust
        )

        leverage = Leverage(user_leverage=user_leverage, agent_leverage=agent_leverage)
        self._logger.debug(
            f"Leverage for player {session.player_id} round {session.negotiation_round}: "
            f"user={user_leverage:.3f}, agent={agent_leverage:.3f} ({leverage.dominant_party()})"
        )
        return leverage

    # ========================================================================
    # AGENT FACTORS
    # ========================================================================

    def _cap_squeeze(self, market_value: float, cap_space: float) -> float:
        """Ratio of market value to cap space, capped at 2x."""
        if cap_space <= 0:
            ratio = 2.0
        else:
            ratio = min(market_value / cap_space, 2.0)
        return ratio / 2.0 * self.weights.cap_squeeze

    def _scarcity(self, position_depth: int) -> float:
        shortfall = max(0.0, 1.0 - position_depth / self.weights.ideal_depth)
        return shortfall * self.weights.scarcity

    def _age_adjustment(self, age: int) -> float:
        if age <= self.weights.young_age:
            return self.weights.young_premium
        if age > self.weights.veteran_age:
            discount = (age - self.weights.veteran_age) * self.weights.veteran_discount_per_year
            return -min(discount, self.weights.veteran_discount_cap)
        return 0.0

    # ========================================================================
    # USER FACTORS
    # ========================================================================

    def _cap_margin(self, cap_space: float, offer: Optional[ContractOffer]) -> float:
        if cap_space <= 0:
            return 0.0
        cap_hit = cap_hit_year1(offer) if offer is not None else 0.0
        margin = _clamp((cap_space - cap_hit) / cap_space)
        return margin * self.weights.cap_margin

    def _contender_bonus(self, session: NegotiationSession, context: TeamContext) -> float:
        if not context.is_contender:
            return 0.0
        sensitivity = session.agent.archetype.profile().contender_sensitivity
        return self.weights.contender_bonus * sensitivity

    def _press_pressure(self, leak_count: int) -> float:
        capped = min(leak_count, self.weights.press_leak_cap)
        return capped / self.weights.press_leak_cap * self.weights.press_leak_pressure

    # ========================================================================
    # SHARED
    # ========================================================================

    def _fatigue(self, negotiation_round: int, weight: float) -> float:
        rounds = min(max(0, negotiation_round - 1), self.weights.fatigue_cap_rounds)
        return rounds / self.weights.fatigue_cap_rounds * weight


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))
