"""
Lockout event.

Deterministic and terminal. Fires when:
- A shadow advisor approach is still unanswered past its deadline
- Lowball offers reach the agent's tolerance
- The round count exceeds the hard cap
"""

import random
from dataclasses import replace
from typing import Optional

from contract_negotiation.events.base import EventContext, NegotiationEvent
from contract_negotiation.models import NegotiationOutcome
from contract_negotiation.session import NegotiationSession, ShadowPending


class LockoutEvent(NegotiationEvent):
    """Moves the session to LockedOut(reason)."""

    @property
    def event_name(self) -> str:
        return "lockout"

    def lockout_reason(self, session: NegotiationSession) -> Optional[str]:
        """First matching lockout reason, or None."""
        if (
            isinstance(session.state, ShadowPending)
            and session.negotiation_round > session.state.event.deadline_round
        ):
            return (
                f"Shadow advisor {session.state.event.advisor_name} was mishandled; "
                f"{session.player.full_name} cut off talks"
            )
        if session.lowball_strikes >= session.agent.lowball_tolerance:
            strikes = session.lowball_strikes
            plural = "" if strikes == 1 else "s"
            return f"{session.agent.name} walked away after {strikes} lowball offer{plural}"
        if session.negotiation_round > self.policy.max_rounds:
            return f"No deal after {self.policy.max_rounds} rounds"
        return None

    def should_trigger(self, session: NegotiationSession, context: EventContext, rng: random.Random) -> bool:
        if not session.is_active:
            return False
        return self.lockout_reason(session) is not None

    def apply(self, session: NegotiationSession, context: EventContext, rng: random.Random) -> str:
        reason = self.lockout_reason(session)
        session.lock_out(reason)
        context.response = replace(
            context.response,
            accepted=False,
            outcome=NegotiationOutcome.LOCKED_OUT,
            message=f"{context.response.message} Negotiations terminated: {reason}.",
            phone_dead_days=0,
        )
        return reason
