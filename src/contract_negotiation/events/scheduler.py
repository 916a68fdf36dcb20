"""
Event scheduler.

Runs the event chain once per evaluated offer, after the evaluator has
mutated the session. Events are applied in order and each is gated
independently:
1. PressLeakEvent
2. PhoneDeadEvent
3. ShadowAdvisorApproachEvent
4. LockoutEvent
"""

import logging
import random
from typing import List, Optional, Tuple

from contract_negotiation.config import EventPolicy
from contract_negotiation.events.base import EventContext, NegotiationEvent
from contract_negotiation.models import NegotiationOutcome, NegotiationResponse
from contract_negotiation.session import NegotiationSession

# Outcomes after which no event may fire
SKIP_OUTCOMES = frozenset({
    NegotiationOutcome.ACCEPTED,
    NegotiationOutcome.PHONE_DEAD,
    NegotiationOutcome.LOCKED_OUT,
    NegotiationOutcome.DEAL_AGREED,
})


def create_default_event_chain(policy: Optional[EventPolicy] = None) -> List[NegotiationEvent]:
    """
    Create the default event chain.

    Returns:
        List of events in application order:
        1. PressLeakEvent
        2. PhoneDeadEvent
        3. ShadowAdvisorApproachEvent
        4. LockoutEvent
    """
    from contract_negotiation.events.press_leak import PressLeakEvent
    from contract_negotiation.events.phone_dead import PhoneDeadEvent
    from contract_negotiation.events.shadow_advisor import ShadowAdvisorApproachEvent
    from contract_negotiation.events.lockout import LockoutEvent

    policy = policy or EventPolicy()
    return [
        PressLeakEvent(policy),
        PhoneDeadEvent(policy),
        ShadowAdvisorApproachEvent(policy),
        LockoutEvent(policy),
    ]


class EventScheduler:
    """
    Applies negotiation events in order.

    Example:
        scheduler = EventScheduler()
        response, fired = scheduler.run(session, EventContext(offer, response, 1), rng)
    """

    def __init__(
        self,
        policy: Optional[EventPolicy] = None,
        events: Optional[List[NegotiationEvent]] = None,
    ):
        self.policy = policy or EventPolicy()
        self.events = events if events is not None else create_default_event_chain(self.policy)
        self._logger = logging.getLogger(__name__)

    def run(
        self,
        session: NegotiationSession,
        event_context: EventContext,
        rng: random.Random,
    ) -> Tuple[NegotiationResponse, List[str]]:
        """
        Run every event against the session.

        Args:
            session: Session already mutated by the evaluator
            event_context: Offer, evaluator response and evaluated round
            rng: Injected random source for probability rolls

        Returns:
            Tuple of:
            - response: Evaluator response, amended by any fired events
            - fired: Names of the events that fired, in order
        """
        if event_context.response.outcome in SKIP_OUTCOMES:
            return event_context.response, []

        fired: List[str] = []
        for event in self.events:
            if not event.should_trigger(session, event_context, rng):
                continue
            description = event.apply(session, event_context, rng)
            fired.append(event.event_name)
            self._logger.info(
                f"Event {event.event_name} for player {session.player_id}: {description}"
            )

        return event_context.response, fired
