"""
Contract Negotiation Core.

Round-by-round agent negotiation (accept / counter / reject, mood, leverage,
special events) plus the contract economics that feed it.

Usage:
    from contract_negotiation import (
        NegotiationEngine,
        PlayerProfile,
        ContractOffer,
        economics,
    )

Example:
    engine = NegotiationEngine(seed=7)
    player = PlayerProfile(player_id=101, first_name="Marcus", last_name="Hill",
                           position="WR", age=26, overall=88)
    engine.begin_negotiation(player, cap_space=35_000_000, position_depth=1,
                             is_contender=False, market_value=20_000_000)
    response = engine.submit_offer(101, ContractOffer.create_flat(years=4, apy=19_500_000))
    print(response.outcome, response.message)
"""

from contract_negotiation import economics

# Main engine
from contract_negotiation.engine import NegotiationEngine

# Components
from contract_negotiation.agent_profiles import AgentProfileFactory
from contract_negotiation.leverage import LeverageModel
from contract_negotiation.evaluator import OfferEvaluator
from contract_negotiation.events import EventScheduler, NegotiationEvent
from contract_negotiation.market_value import MarketValueCalculator

# Configuration
from contract_negotiation.config import (
    AcceptancePolicy,
    EventPolicy,
    LeverageWeights,
    NegotiationConfig,
)

# Core models
from contract_negotiation.models import (
    Agent,
    AgentArchetype,
    AgentMood,
    CashReserveTier,
    ContractOffer,
    Leverage,
    NegotiationOutcome,
    NegotiationResponse,
    PlayerPersonality,
    PlayerProfile,
    PressLeak,
    RoundRecord,
    SessionPhase,
    SessionStatus,
    ShadowAdvisorAction,
    ShadowAdvisorEvent,
    TeamContext,
)
from contract_negotiation.session import (
    Accepted,
    LockedOut,
    NegotiationSession,
    Normal,
    PhoneDead,
    ShadowPending,
)

# Exceptions
from contract_negotiation.exceptions import (
    InvalidConfigError,
    InvalidOfferError,
    NegotiationException,
    SessionNotFoundError,
)

__all__ = [
    # Main engine
    'NegotiationEngine',
    # Components
    'AgentProfileFactory',
    'LeverageModel',
    'OfferEvaluator',
    'EventScheduler',
    'NegotiationEvent',
    'MarketValueCalculator',
    'economics',
    # Configuration
    'NegotiationConfig',
    'AcceptancePolicy',
    'LeverageWeights',
    'EventPolicy',
    # Models
    'Agent',
    'AgentArchetype',
    'AgentMood',
    'CashReserveTier',
    'ContractOffer',
    'Leverage',
    'NegotiationOutcome',
    'NegotiationResponse',
    'PlayerPersonality',
    'PlayerProfile',
    'PressLeak',
    'RoundRecord',
    'SessionPhase',
    'SessionStatus',
    'ShadowAdvisorAction',
    'ShadowAdvisorEvent',
    'TeamContext',
    # Session state
    'NegotiationSession',
    'Normal',
    'PhoneDead',
    'ShadowPending',
    'LockedOut',
    'Accepted',
    # Exceptions
    'NegotiationException',
    'SessionNotFoundError',
    'InvalidOfferError',
    'InvalidConfigError',
]
