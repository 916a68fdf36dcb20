"""
Tests for negotiation events and the EventScheduler.
"""

import random

import pytest

from contract_negotiation.config import EventPolicy
from contract_negotiation.events import (
    EventContext,
    EventScheduler,
    LockoutEvent,
    PhoneDeadEvent,
    PressLeakEvent,
    ShadowAdvisorApproachEvent,
    create_default_event_chain,
)
from contract_negotiation.models import (
    Agent,
    AgentArchetype,
    AgentMood,
    ContractOffer,
    Leverage,
    NegotiationOutcome,
    NegotiationResponse,
    ShadowAdvisorEvent,
    TeamContext,
)
from contract_negotiation.session import (
    LockedOut,
    NegotiationSession,
    Normal,
    PhoneDead,
    ShadowPending,
)


class FixedRandom(random.Random):
    """Random source whose random() always returns the same value."""

    def __init__(self, value):
        super().__init__(0)
        self.value = value

    def random(self):
        return self.value


ALWAYS = FixedRandom(0.0)
NEVER = FixedRandom(0.999999)


@pytest.fixture
def make_session(player):
    def _make(archetype=AgentArchetype.SHARK, round_=4, mood=AgentMood.NEUTRAL):
        profile = archetype.profile()
        agent = Agent(
            name="Drew Rosenhaus",
            archetype=archetype,
            patience=profile.patience,
            max_contract_length=profile.max_contract_length,
            mood_volatility=profile.mood_volatility,
            lowball_tolerance=profile.lowball_tolerance,
        )
        return NegotiationSession(
            player=player,
            agent=agent,
            market_value=20_000_000,
            team_context=TeamContext(cap_space=60_000_000, position_depth=1),
            agent_mood=mood,
            negotiation_round=round_,
        )

    return _make


@pytest.fixture
def offer():
    return ContractOffer.create_flat(years=4, apy=12_000_000)


def rejected_context(offer, round_=3, mood=AgentMood.ANGRY):
    response = NegotiationResponse(
        accepted=False,
        new_mood=mood,
        message="No.",
        outcome=NegotiationOutcome.REJECTED,
    )
    return EventContext(offer=offer, response=response, evaluated_round=round_)


# ===== Press leak =====


class TestPressLeak:
    def test_probability_formula(self, make_session):
        session = make_session(mood=AgentMood.ANGRY, round_=4)
        # (0.05 + 0.35 + 0.03 * 2) * 1.5 * (1.5 - 0.25)
        assert PressLeakEvent().calculate_probability(session) == pytest.approx(0.8625)

    def test_probability_capped(self, make_session):
        session = make_session(mood=AgentMood.ANGRY, round_=12)
        assert PressLeakEvent().calculate_probability(session) == pytest.approx(0.90)

    def test_family_friend_leaks_less(self, make_session):
        shark = make_session(AgentArchetype.SHARK)
        family = make_session(AgentArchetype.FAMILY_FRIEND)
        event = PressLeakEvent()
        assert event.calculate_probability(family) < event.calculate_probability(shark)

    def test_not_before_minimum_round(self, make_session, offer):
        session = make_session(round_=2)
        assert not PressLeakEvent().should_trigger(session, rejected_context(offer), ALWAYS)

    def test_not_after_acceptance(self, make_session, offer):
        session = make_session()
        context = rejected_context(offer)
        context.response = NegotiationResponse(
            accepted=True, new_mood=AgentMood.EXCITED, message="Deal",
            outcome=NegotiationOutcome.ACCEPTED,
        )
        assert not PressLeakEvent().should_trigger(session, context, ALWAYS)

    def test_apply_appends_leak(self, make_session, offer):
        session = make_session()
        event = PressLeakEvent()
        context = rejected_context(offer)

        assert event.should_trigger(session, context, ALWAYS)
        headline = event.apply(session, context, ALWAYS)

        assert len(session.press_leaks) == 1
        leak = session.press_leaks[0]
        assert leak.headline == headline
        assert "Marcus Hill" in headline
        assert leak.round == 3
        assert leak.offer_amount == pytest.approx(12_000_000)
        assert leak.market_value == 20_000_000

    def test_roll_can_miss(self, make_session, offer):
        session = make_session()
        assert not PressLeakEvent().should_trigger(session, rejected_context(offer), NEVER)


# ===== Phone dead =====


class TestPhoneDead:
    def test_triggers_after_consecutive_angry_rejections(self, make_session, offer):
        session = make_session(round_=4)
        session.consecutive_angry_rejections = 2
        event = PhoneDeadEvent()
        context = rejected_context(offer)

        assert event.should_trigger(session, context, ALWAYS)
        event.apply(session, context, ALWAYS)

        assert session.state == PhoneDead(until_round=6)
        assert session.consecutive_angry_rejections == 0
        assert context.response.phone_dead_days == 14

    def test_single_rejection_not_enough(self, make_session, offer):
        session = make_session()
        session.consecutive_angry_rejections = 1
        assert not PhoneDeadEvent().should_trigger(session, rejected_context(offer), ALWAYS)

    def test_only_from_normal(self, make_session, offer):
        session = make_session()
        session.consecutive_angry_rejections = 3
        session.state = ShadowPending(ShadowAdvisorEvent("Uncle", "Marcus Hill", 1, 1, 3))
        assert not PhoneDeadEvent().should_trigger(session, rejected_context(offer), ALWAYS)


# ===== Shadow advisor =====


class TestShadowAdvisor:
    def test_gated_on_agent_leverage(self, make_session, offer):
        session = make_session()
        session.leverage = Leverage(0.5, 0.4)
        assert not ShadowAdvisorApproachEvent().should_trigger(
            session, rejected_context(offer), ALWAYS
        )

    def test_probability_by_archetype(self, make_session):
        event = ShadowAdvisorApproachEvent()
        assert event.calculate_probability(make_session(AgentArchetype.SHARK)) == pytest.approx(0.08)
        assert event.calculate_probability(
            make_session(AgentArchetype.BRAND_BUILDER)
        ) == pytest.approx(0.06)
        assert event.calculate_probability(
            make_session(AgentArchetype.FAMILY_FRIEND)
        ) == pytest.approx(0.02)

    def test_apply_sets_pending_event(self, make_session, offer):
        session = make_session(round_=4)
        session.leverage = Leverage(0.3, 0.7)
        event = ShadowAdvisorApproachEvent()
        context = rejected_context(offer)

        assert event.should_trigger(session, context, ALWAYS)
        event.apply(session, context, ALWAYS)

        pending = session.pending_shadow_event
        assert pending is not None
        assert pending.advisor_name in ShadowAdvisorApproachEvent.ADVISOR_NAMES
        assert pending.player_name == "Marcus Hill"
        assert pending.demand == 23_000_000
        assert pending.raised_round == 4
        assert pending.deadline_round == 6

    def test_not_while_phone_dead(self, make_session, offer):
        session = make_session()
        session.leverage = Leverage(0.3, 0.9)
        session.state = PhoneDead(until_round=9)
        assert not ShadowAdvisorApproachEvent().should_trigger(
            session, rejected_context(offer), ALWAYS
        )


# ===== Lockout =====


class TestLockout:
    def test_round_cap(self, make_session, offer):
        session = make_session(round_=13)
        event = LockoutEvent()
        context = rejected_context(offer)

        assert event.should_trigger(session, context, NEVER)
        event.apply(session, context, NEVER)

        assert session.is_locked_out
        assert "12 rounds" in session.lockout_reason
        assert context.response.outcome == NegotiationOutcome.LOCKED_OUT
        assert context.response.is_lockout

    def test_round_cap_not_reached(self, make_session, offer):
        session = make_session(round_=12)
        assert not LockoutEvent().should_trigger(session, rejected_context(offer), NEVER)

    def test_lowball_strikes(self, make_session, offer):
        session = make_session(AgentArchetype.SHARK)
        session.lowball_strikes = 3
        event = LockoutEvent()
        assert event.should_trigger(session, rejected_context(offer), NEVER)
        assert "lowball" in event.lockout_reason(session)

    def test_mishandled_shadow_advisor(self, make_session, offer):
        session = make_session(round_=7)
        session.state = ShadowPending(ShadowAdvisorEvent("Saint Omni", "Marcus Hill", 1, 4, 6))
        event = LockoutEvent()
        context = rejected_context(offer)

        assert event.should_trigger(session, context, NEVER)
        event.apply(session, context, NEVER)

        assert isinstance(session.state, LockedOut)
        assert "mishandled" in session.lockout_reason

    def test_shadow_advisor_within_deadline(self, make_session, offer):
        session = make_session(round_=6)
        session.state = ShadowPending(ShadowAdvisorEvent("Saint Omni", "Marcus Hill", 1, 4, 6))
        assert not LockoutEvent().should_trigger(session, rejected_context(offer), NEVER)


# ===== Scheduler =====


class TestEventScheduler:
    def test_default_chain_order(self):
        names = [event.event_name for event in create_default_event_chain()]
        assert names == ["press_leak", "phone_dead", "shadow_advisor", "lockout"]

    @pytest.mark.parametrize(
        "outcome",
        [
            NegotiationOutcome.PHONE_DEAD,
            NegotiationOutcome.LOCKED_OUT,
            NegotiationOutcome.DEAL_AGREED,
        ],
    )
    def test_skipped_after_short_circuit(self, make_session, offer, outcome):
        session = make_session(round_=20, mood=AgentMood.ANGRY)
        session.leverage = Leverage(0.1, 0.9)
        context = rejected_context(offer)
        context.response = NegotiationResponse(
            accepted=False, new_mood=AgentMood.ANGRY, message="...", outcome=outcome
        )

        response, fired = EventScheduler().run(session, context, ALWAYS)

        assert fired == []
        assert response is context.response
        assert session.press_leaks == []
        assert isinstance(session.state, Normal)

    def test_phone_dead_blocks_shadow_in_same_round(self, make_session, offer):
        session = make_session(round_=4, mood=AgentMood.ANGRY)
        session.leverage = Leverage(0.1, 0.9)
        session.consecutive_angry_rejections = 2

        response, fired = EventScheduler().run(session, rejected_context(offer), ALWAYS)

        assert fired == ["press_leak", "phone_dead"]
        assert isinstance(session.state, PhoneDead)
        assert response.phone_dead_days == 14

    def test_lockout_overrides_phone_dead(self, make_session, offer):
        session = make_session(round_=13, mood=AgentMood.ANGRY)
        session.consecutive_angry_rejections = 2

        response, fired = EventScheduler().run(session, rejected_context(offer), NEVER)

        assert fired == ["phone_dead", "lockout"]
        assert session.is_locked_out
        assert response.outcome == NegotiationOutcome.LOCKED_OUT
        assert response.phone_dead_days == 0

    def test_custom_policy(self, make_session, offer):
        policy = EventPolicy(max_rounds=3)
        session = make_session(round_=4)

        _, fired = EventScheduler(policy).run(session, rejected_context(offer), NEVER)

        assert fired == ["lockout"]
