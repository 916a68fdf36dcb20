"""
Offer Evaluator

The accept / counter / reject decision for a single offer.

Evaluation order:
1. Locked out -> LOCKED_OUT (no mutation)
2. Already accepted -> DEAL_AGREED (no mutation)
3. Phone dead -> PHONE_DEAD (round advances, nothing else changes)
4. Leverage recomputed for this offer and the current team context
5. fit = APY / market value, threshold from leverage, archetype and mood
6. Years beyond the agent's max length -> REJECTED
7. Year-1 cap hit beyond cap space -> CAP_INFEASIBLE
8. fit >= threshold -> ACCEPTED (a Shark short on guarantees -> COUNTER)
9. Near miss -> COUNTER
10. Otherwise -> REJECTED

Every evaluated call advances the round, recomputes leverage again for
the next round and appends a RoundRecord.
"""

import logging
from typing import Dict, Optional

from contract_negotiation.config import AcceptancePolicy
from contract_negotiation.economics import (
    average_per_year,
    cap_hit_year1,
    format_money,
    guaranteed_percentage,
)
from contract_negotiation.leverage import LeverageModel
from contract_negotiation.models import (
    AgentArchetype,
    AgentMood,
    ContractOffer,
    NegotiationOutcome,
    NegotiationResponse,
    RoundRecord,
    TeamContext,
)
from contract_negotiation.session import (
    Accepted,
    LockedOut,
    NegotiationSession,
    Normal,
    PhoneDead,
)


class OfferEvaluator:
    """
    Decides how an agent responds to an offer and applies the result to the
    session it is given.

    The engine passes a working copy of the session, so a failure part way
    through never leaks into the registry.
    """

    # Threshold discounts by archetype (subtracted from the threshold)
    CONTENDER_DISCOUNT: Dict[AgentArchetype, float] = {
        AgentArchetype.FAMILY_FRIEND: 0.02,
        AgentArchetype.BRAND_BUILDER: 0.02,
    }
    GUARANTEE_DISCOUNT: Dict[AgentArchetype, float] = {
        AgentArchetype.BRAND_BUILDER: 0.02,
    }
    # Archetypes that value an open starting spot as much as a contender
    STARTING_ROLE_ARCHETYPES = (AgentArchetype.FAMILY_FRIEND,)

    ACCEPT_LINES: Dict[AgentArchetype, str] = {
        AgentArchetype.SHARK: "My client accepts. Don't expect a discount next time.",
        AgentArchetype.FAMILY_FRIEND: "He's happy here. Let's get it signed.",
        AgentArchetype.BRAND_BUILDER: "This is a deal that builds his brand. We accept.",
        AgentArchetype.SELF_REPRESENTED: "The numbers work. I accept.",
    }
    REJECT_LINES: Dict[AgentArchetype, str] = {
        AgentArchetype.SHARK: "That's an insult to my client.",
        AgentArchetype.FAMILY_FRIEND: "We were hoping for something closer to his value.",
        AgentArchetype.BRAND_BUILDER: "That number doesn't fit the player he's becoming.",
        AgentArchetype.SELF_REPRESENTED: "That's below what I'm worth. No.",
    }

    def __init__(
        self,
        policy: Optional[AcceptancePolicy] = None,
        leverage_model: Optional[LeverageModel] = None,
        days_per_round: int = 7,
    ):
        """
        Initialize evaluator.

        Args:
            policy: Acceptance constants (defaults if None)
            leverage_model: Model used to recompute leverage each round
            days_per_round: Calendar days represented by one round
        """
        self.policy = policy or AcceptancePolicy()
        self.leverage_model = leverage_model or LeverageModel()
        self.days_per_round = days_per_round
        self._logger = logging.getLogger(__name__)

    # ========================================================================
    # PUBLIC API
    # ========================================================================

    def evaluate(
        self,
        session: NegotiationSession,
        offer: ContractOffer,
        team_context: Optional[TeamContext] = None,
    ) -> NegotiationResponse:
        """
        Evaluate an offer and mutate the session accordingly.

        Args:
            session: Session to evaluate against (mutated)
            offer: Offer being proposed
            team_context: Current team context (defaults to the session's)

        Returns:
            NegotiationResponse describing the agent's reply
        """
        if isinstance(session.state, LockedOut):
            return NegotiationResponse(
                accepted=False,
                new_mood=session.agent_mood,
                message=f"Negotiations terminated: {session.state.reason}",
                outcome=NegotiationOutcome.LOCKED_OUT,
            )

        if isinstance(session.state, Accepted):
            return NegotiationResponse(
                accepted=False,
                new_mood=session.agent_mood,
                message="We already have a deal. Send the paperwork.",
                outcome=NegotiationOutcome.DEAL_AGREED,
            )

        if isinstance(session.state, PhoneDead):
            if session.negotiation_round < session.state.until_round:
                days = (session.state.until_round - session.negotiation_round) * self.days_per_round
                session.negotiation_round += 1
                return NegotiationResponse(
                    accepted=False,
                    new_mood=session.agent_mood,
                    message=f"{session.agent.name} is not taking calls. Try again in {days} days.",
                    outcome=NegotiationOutcome.PHONE_DEAD,
                    phone_dead_days=days,
                )
            session.state = Normal()

        context = team_context or session.team_context
        session.leverage = self.leverage_model.compute_leverage(session, offer, context)
        fit = self.calculate_fit(session, offer)
        threshold = self.calculate_threshold(session, offer, context)

        outcome, new_mood, message, counter = self._decide(session, offer, context, fit, threshold)

        evaluated_round = session.negotiation_round
        session.agent_mood = new_mood
        if outcome == NegotiationOutcome.ACCEPTED:
            session.state = Accepted(offer)
        if outcome == NegotiationOutcome.REJECTED and new_mood == AgentMood.ANGRY:
            session.consecutive_angry_rejections += 1
        else:
            session.consecutive_angry_rejections = 0

        session.negotiation_round += 1
        session.leverage = self.leverage_model.compute_leverage(session, offer, context)
        session.history.append(
            RoundRecord(
                round=evaluated_round,
                offer_id=offer.id,
                average_per_year=average_per_year(offer),
                fit=fit,
                threshold=threshold,
                outcome=outcome,
                mood_after=new_mood,
            )
        )

        self._logger.debug(
            f"Round {evaluated_round} for player {session.player_id}: "
            f"fit={fit:.3f} threshold={threshold:.3f} -> {outcome.value} ({new_mood.value})"
        )

        return NegotiationResponse(
            accepted=outcome == NegotiationOutcome.ACCEPTED,
            new_mood=new_mood,
            message=message,
            outcome=outcome,
            counter_offer=counter,
        )

    def calculate_fit(self, session: NegotiationSession, offer: ContractOffer) -> float:
        """Offer APY as a fraction of market value."""
        return average_per_year(offer) / session.market_value

    def calculate_threshold(
        self,
        session: NegotiationSession,
        offer: ContractOffer,
        team_context: TeamContext,
    ) -> float:
        """
        Minimum fit the agent accepts this round.

        Formula:
            base * (1 - sensitivity * (user - agent) / 2)
            - archetype discounts + mood offset,
            clamped to [min_threshold, max_threshold]
        """
        policy = self.policy
        leverage = session.leverage
        archetype = session.agent.archetype

        threshold = policy.base_threshold * (
            1 - policy.leverage_sensitivity * (leverage.user_leverage - leverage.agent_leverage) / 2
        )
        threshold += archetype.profile().acceptance_offset
        if team_context.is_contender or self._offers_starting_role(archetype, team_context):
            threshold -= self.CONTENDER_DISCOUNT.get(archetype, 0.0)
        if guaranteed_percentage(offer) >= policy.guarantee_line:
            threshold -= self.GUARANTEE_DISCOUNT.get(archetype, 0.0)
        threshold += policy.mood_offset(session.agent_mood)

        return max(policy.min_threshold, min(policy.max_threshold, threshold))

    def near_miss_floor(self, session: NegotiationSession) -> float:
        override = session.agent.archetype.profile().near_miss_floor
        return override if override is not None else self.policy.near_miss_floor

    def build_counter_offer(
        self,
        session: NegotiationSession,
        offer: ContractOffer,
        threshold: float,
        target_apy: Optional[float] = None,
    ) -> ContractOffer:
        """
        Scale the offer toward market value x threshold x counter premium.

        Years, void years and incentives are unchanged. Salaries, bonus and
        guarantees scale by the same factor, so the guaranteed share holds,
        except that a Shark raises a short guarantee to its demand.

        Args:
            target_apy: Ask for this APY instead (never below the offer's)
        """
        current_apy = average_per_year(offer)
        if target_apy is None:
            premium = session.agent.archetype.profile().counter_premium
            target_apy = session.market_value * threshold * premium
        target_apy = max(target_apy, current_apy)
        factor = target_apy / current_apy

        salaries = [int(round(salary * factor)) for salary in offer.base_salary_per_year]
        bonus = int(round(offer.signing_bonus * factor))
        guaranteed = min(int(round(offer.guaranteed_money * factor)), sum(salaries) + bonus)
        if self._short_on_guarantees(session, offer):
            guaranteed = int((sum(salaries) + bonus) * self.policy.shark_guarantee_demand)

        return ContractOffer(
            id=f"{offer.id}_counter_{session.negotiation_round}",
            years=offer.years,
            base_salary_per_year=salaries,
            signing_bonus=bonus,
            guaranteed_money=guaranteed,
            ltbe_incentives=offer.ltbe_incentives,
            nltbe_incentives=offer.nltbe_incentives,
            void_years=offer.void_years,
            offset_language=offer.offset_language,
        )

    # ========================================================================
    # DECISION
    # ========================================================================

    def _decide(self, session, offer, context, fit, threshold):
        agent = session.agent
        mood = session.agent_mood

        if offer.years > agent.max_contract_length:
            return (
                NegotiationOutcome.REJECTED,
                mood,
                f"My client won't sign for more than {agent.max_contract_length} years.",
                None,
            )

        cap_hit = cap_hit_year1(offer)
        if cap_hit > context.cap_space:
            return (
                NegotiationOutcome.CAP_INFEASIBLE,
                mood,
                f"You can't fit a {format_money(cap_hit)} year-one cap hit under "
                f"{format_money(context.cap_space)} of cap space.",
                None,
            )

        if fit >= threshold:
            if self._short_on_guarantees(session, offer):
                counter = self.build_counter_offer(
                    session, offer, threshold, target_apy=average_per_year(offer)
                )
                return (
                    NegotiationOutcome.COUNTER,
                    mood.step_toward(AgentMood.INTERESTED),
                    f"The money works. Guarantee {self.policy.shark_guarantee_demand:.0%} "
                    f"of it and we have a deal.",
                    counter,
                )
            return (
                NegotiationOutcome.ACCEPTED,
                AgentMood.EXCITED,
                self.ACCEPT_LINES[agent.archetype],
                None,
            )

        if fit >= self.near_miss_floor(session):
            counter = self.build_counter_offer(session, offer, threshold)
            return (
                NegotiationOutcome.COUNTER,
                mood.step_toward(AgentMood.INTERESTED),
                f"We're close. Get to {format_money(average_per_year(counter))} a year "
                f"and we have a deal.",
                counter,
            )

        if fit < self.policy.lowball_line:
            session.lowball_strikes += 1

        return (
            NegotiationOutcome.REJECTED,
            self._rejected_mood(session),
            self.REJECT_LINES[agent.archetype],
            None,
        )

    def _short_on_guarantees(self, session: NegotiationSession, offer: ContractOffer) -> bool:
        return (
            session.agent.archetype == AgentArchetype.SHARK
            and guaranteed_percentage(offer) < self.policy.shark_guarantee_floor
        )

    def _offers_starting_role(self, archetype: AgentArchetype, team_context: TeamContext) -> bool:
        return archetype in self.STARTING_ROLE_ARCHETYPES and team_context.position_depth == 0

    def _rejected_mood(self, session: NegotiationSession) -> AgentMood:
        steps = 2 if session.agent.mood_volatility >= self.policy.volatile_mood_line else 1
        new_mood = session.agent_mood.worsened(steps)
        if session.agent.archetype == AgentArchetype.SELF_REPRESENTED and new_mood < AgentMood.NEUTRAL:
            return AgentMood.NEUTRAL
        return new_mood
