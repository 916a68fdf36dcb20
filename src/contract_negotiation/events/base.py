"""
Abstract base class for negotiation events.

Provides the interface that all special events (press leaks, phone-dead
cooldowns, shadow advisors, lockouts) must implement.
"""

import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from contract_negotiation.config import EventPolicy
from contract_negotiation.models import ContractOffer, NegotiationResponse
from contract_negotiation.session import NegotiationSession


@dataclass
class EventContext:
    """
    Inputs shared by every event in one scheduler run.

    Attributes:
        offer: Offer evaluated this round
        response: Evaluator response; events may replace it with an
            amended copy (e.g., to report phone-dead days or a lockout)
        evaluated_round: Round the offer was evaluated in
    """

    offer: ContractOffer
    response: NegotiationResponse
    evaluated_round: int


class NegotiationEvent(ABC):
    """
    Abstract base class for negotiation events.

    Subclasses must implement:
    - event_name: Unique identifier for this event
    - should_trigger(): Gate and probability roll
    - apply(): Mutate the session and return a description

    Events run after the evaluator has already mutated the session, so
    session.negotiation_round is the round that comes next.
    """

    def __init__(self, policy: Optional[EventPolicy] = None):
        self.policy = policy or EventPolicy()

    @property
    @abstractmethod
    def event_name(self) -> str:
        """
        Unique identifier for this event.

        Should be lowercase with underscores (e.g., "press_leak").
        """
        pass

    @abstractmethod
    def should_trigger(
        self,
        session: NegotiationSession,
        context: EventContext,
        rng: random.Random,
    ) -> bool:
        """
        Decide whether the event fires this round.

        Probability rolls must use `rng` and only after the deterministic
        gates pass, so seeded replays draw the same numbers.
        """
        pass

    @abstractmethod
    def apply(
        self,
        session: NegotiationSession,
        context: EventContext,
        rng: random.Random,
    ) -> str:
        """
        Apply the event to the session.

        Returns:
            Human-readable description of what happened
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
