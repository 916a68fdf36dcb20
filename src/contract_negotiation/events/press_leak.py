"""
Press leak event.

Leaks get more likely as the agent's mood sours and talks drag on. Impatient
agents and archetypes that work the media leak more often. Each leak adds
reputational pressure that shows up as user leverage in later rounds.
"""

import random

from contract_negotiation.economics import average_per_year, format_money
from contract_negotiation.events.base import EventContext, NegotiationEvent
from contract_negotiation.models import PressLeak
from contract_negotiation.session import NegotiationSession


class PressLeakEvent(NegotiationEvent):
    """Appends a PressLeak with a templated headline."""

    HEADLINES = (
        "Sources: {player} camp unhappy with {offer}/yr offer",
        "{player} seeking {market}/yr, well above the team's {offer} offer",
        "Talks between {player} and the team have stalled, per league sources",
        "{agent} blasts the team's {offer} offer for {player}",
    )

    @property
    def event_name(self) -> str:
        return "press_leak"

    def calculate_probability(self, session: NegotiationSession) -> float:
        """
        Leak probability for the coming round.

        Formula:
            (base + mood factor + round step * rounds past minimum)
            * archetype propensity * (1.5 - patience), capped
        """
        policy = self.policy
        rounds_past = max(0, session.negotiation_round - policy.press_leak_min_round)
        raw = (
            policy.press_leak_base
            + policy.press_leak_mood_factors[session.agent_mood.name]
            + policy.press_leak_round_step * rounds_past
        )
        propensity = session.agent.archetype.profile().press_leak_propensity
        probability = raw * propensity * (1.5 - session.agent.patience)
        return max(0.0, min(policy.press_leak_max_probability, probability))

    def should_trigger(self, session, context: EventContext, rng: random.Random) -> bool:
        if context.response.accepted or not session.is_active:
            return False
        if session.negotiation_round <= self.policy.press_leak_min_round:
            return False
        return rng.random() < self.calculate_probability(session)

    def apply(self, session, context: EventContext, rng: random.Random) -> str:
        offer_apy = average_per_year(context.offer)
        headline = rng.choice(self.HEADLINES).format(
            player=session.player.full_name,
            agent=session.agent.name,
            offer=format_money(offer_apy),
            market=format_money(session.market_value),
        )
        session.press_leaks.append(
            PressLeak(
                headline=headline,
                round=context.evaluated_round,
                player_name=session.player.full_name,
                offer_amount=offer_apy,
                market_value=session.market_value,
            )
        )
        return headline
