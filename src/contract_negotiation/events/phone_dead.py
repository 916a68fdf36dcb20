"""
Phone dead event.

After enough consecutive rejections while ANGRY, the agent stops taking
calls for a fixed number of rounds.
"""

import random
from dataclasses import replace

from contract_negotiation.events.base import EventContext, NegotiationEvent
from contract_negotiation.session import NegotiationSession, Normal, PhoneDead


class PhoneDeadEvent(NegotiationEvent):
    """Moves a Normal session to PhoneDead(round + cooldown)."""

    @property
    def event_name(self) -> str:
        return "phone_dead"

    def should_trigger(self, session: NegotiationSession, context: EventContext, rng: random.Random) -> bool:
        return (
            isinstance(session.state, Normal)
            and session.consecutive_angry_rejections >= self.policy.phone_dead_trigger
        )

    def apply(self, session: NegotiationSession, context: EventContext, rng: random.Random) -> str:
        cooldown = self.policy.phone_dead_cooldown_rounds
        session.state = PhoneDead(until_round=session.negotiation_round + cooldown)
        session.consecutive_angry_rejections = 0

        days = cooldown * self.policy.days_per_round
        description = f"{session.agent.name} stopped taking calls for {days} days"
        context.response = replace(
            context.response,
            message=f"{context.response.message} {session.agent.name} hung up.",
            phone_dead_days=days,
        )
        return description
