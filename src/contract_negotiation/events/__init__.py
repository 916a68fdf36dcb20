"""
Special negotiation events.

Events fire after an offer is evaluated and can leak offers to the press,
cut off the agent's phone, bring in a shadow advisor, or end talks.
"""

from .base import EventContext, NegotiationEvent
from .press_leak import PressLeakEvent
from .phone_dead import PhoneDeadEvent
from .shadow_advisor import ShadowAdvisorApproachEvent
from .lockout import LockoutEvent
from .scheduler import EventScheduler, create_default_event_chain

__all__ = [
    'EventContext',
    'NegotiationEvent',
    'PressLeakEvent',
    'PhoneDeadEvent',
    'ShadowAdvisorApproachEvent',
    'LockoutEvent',
    'EventScheduler',
    'create_default_event_chain',
]
