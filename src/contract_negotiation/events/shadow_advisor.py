"""
Shadow advisor event.

An unofficial third party starts steering the player with a demand above
market value. Only happens while talks are Normal and the agent already
holds strong leverage; Sharks and Brand Builders attract advisors most.
"""

import random

from contract_negotiation.events.base import EventContext, NegotiationEvent
from contract_negotiation.models import ShadowAdvisorEvent
from contract_negotiation.session import NegotiationSession, Normal, ShadowPending


class ShadowAdvisorApproachEvent(NegotiationEvent):
    """Moves a Normal session to ShadowPending with a demand."""

    ADVISOR_NAMES = ("Saint Omni", "Business Partner", "Uncle")

    @property
    def event_name(self) -> str:
        return "shadow_advisor"

    def calculate_probability(self, session: NegotiationSession) -> float:
        propensity = session.agent.archetype.profile().shadow_advisor_propensity
        return min(1.0, self.policy.shadow_base_probability * propensity)

    def should_trigger(self, session: NegotiationSession, context: EventContext, rng: random.Random) -> bool:
        if context.response.accepted or not isinstance(session.state, Normal):
            return False
        if session.leverage.agent_leverage < self.policy.shadow_leverage_gate:
            return False
        return rng.random() < self.calculate_probability(session)

    def apply(self, session: NegotiationSession, context: EventContext, rng: random.Random) -> str:
        event = ShadowAdvisorEvent(
            advisor_name=rng.choice(self.ADVISOR_NAMES),
            player_name=session.player.full_name,
            demand=int(round(session.market_value * self.policy.shadow_demand_multiplier)),
            raised_round=session.negotiation_round,
            deadline_round=session.negotiation_round + self.policy.shadow_deadline_rounds,
        )
        session.state = ShadowPending(event)
        return f"{event.advisor_name} is advising {event.player_name} (demand {event.demand:,})"
