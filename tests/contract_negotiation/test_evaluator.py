"""
Tests for OfferEvaluator.

Covers the accept / counter / reject decision, mood transitions, round
bookkeeping and every short-circuit.
"""

import pytest

from contract_negotiation.economics import average_per_year, guaranteed_percentage
from contract_negotiation.evaluator import OfferEvaluator
from contract_negotiation.models import (
    Agent,
    AgentArchetype,
    AgentMood,
    ContractOffer,
    Leverage,
    NegotiationOutcome,
    TeamContext,
)
from contract_negotiation.session import (
    Accepted,
    LockedOut,
    NegotiationSession,
    Normal,
    PhoneDead,
)

MARKET = 20_000_000
# Clears the Shark's guarantee floor
SHARK_GUARANTEE = 0.9


def make_agent(archetype, **overrides):
    profile = archetype.profile()
    fields = {
        "name": "Test Agent",
        "archetype": archetype,
        "patience": profile.patience,
        "max_contract_length": profile.max_contract_length,
        "mood_volatility": profile.mood_volatility,
        "lowball_tolerance": profile.lowball_tolerance,
    }
    fields.update(overrides)
    return Agent(**fields)


@pytest.fixture
def make_session(player):
    def _make(archetype=AgentArchetype.SHARK, cap_space=60_000_000, is_contender=False,
              position_depth=2, **agent_overrides):
        return NegotiationSession(
            player=player,
            agent=make_agent(archetype, **agent_overrides),
            market_value=MARKET,
            team_context=TeamContext(
                cap_space=cap_space, position_depth=position_depth, is_contender=is_contender
            ),
            leverage=Leverage(0.5, 0.5),
        )

    return _make


@pytest.fixture
def evaluator():
    return OfferEvaluator()


def offer_at(apy, years=4, **kwargs):
    return ContractOffer.create_flat(years=years, apy=apy, **kwargs)


class TestThreshold:
    def test_balanced_neutral_threshold(self, evaluator, make_session):
        session = make_session()
        assert evaluator.calculate_threshold(
            session, offer_at(MARKET), session.team_context
        ) == pytest.approx(0.95)

    def test_agent_leverage_raises_threshold(self, evaluator, make_session):
        session = make_session()
        session.leverage = Leverage(0.2, 0.8)
        threshold = evaluator.calculate_threshold(session, offer_at(MARKET), session.team_context)
        assert threshold > 0.95

    def test_mood_offsets(self, evaluator, make_session):
        session = make_session()
        offer = offer_at(MARKET)
        session.agent_mood = AgentMood.EXCITED
        excited = evaluator.calculate_threshold(session, offer, session.team_context)
        session.agent_mood = AgentMood.ANGRY
        angry = evaluator.calculate_threshold(session, offer, session.team_context)
        assert excited < 0.95 < angry

    def test_threshold_clamped(self, evaluator, make_session):
        session = make_session()
        session.leverage = Leverage(0.0, 1.0)
        session.agent_mood = AgentMood.ANGRY
        threshold = evaluator.calculate_threshold(session, offer_at(MARKET), session.team_context)
        assert threshold == pytest.approx(evaluator.policy.max_threshold)

    def test_family_friend_contender_discount(self, evaluator, make_session):
        plain = make_session(AgentArchetype.FAMILY_FRIEND)
        contender = make_session(AgentArchetype.FAMILY_FRIEND, is_contender=True)
        offer = offer_at(MARKET)
        assert evaluator.calculate_threshold(
            contender, offer, contender.team_context
        ) < evaluator.calculate_threshold(plain, offer, plain.team_context) < 0.95

    def test_family_friend_open_starting_spot_discount(self, evaluator, make_session):
        offer = offer_at(MARKET)
        backup = make_session(AgentArchetype.FAMILY_FRIEND, position_depth=2)
        starter = make_session(AgentArchetype.FAMILY_FRIEND, position_depth=0)
        contender_starter = make_session(
            AgentArchetype.FAMILY_FRIEND, position_depth=0, is_contender=True
        )

        backup_threshold = evaluator.calculate_threshold(backup, offer, backup.team_context)
        starter_threshold = evaluator.calculate_threshold(starter, offer, starter.team_context)

        assert starter_threshold == pytest.approx(backup_threshold - 0.02)
        # Contender and starting spot do not stack
        assert evaluator.calculate_threshold(
            contender_starter, offer, contender_starter.team_context
        ) == pytest.approx(starter_threshold)

    def test_open_starting_spot_ignored_by_other_archetypes(self, evaluator, make_session):
        offer = offer_at(MARKET)
        backup = make_session(AgentArchetype.BRAND_BUILDER, position_depth=2)
        starter = make_session(AgentArchetype.BRAND_BUILDER, position_depth=0)
        assert evaluator.calculate_threshold(
            starter, offer, starter.team_context
        ) == pytest.approx(evaluator.calculate_threshold(backup, offer, backup.team_context))

    def test_brand_builder_guarantee_discount(self, evaluator, make_session):
        session = make_session(AgentArchetype.BRAND_BUILDER)
        low = offer_at(MARKET, guaranteed_pct=0.2)
        high = offer_at(MARKET, guaranteed_pct=0.7)
        assert evaluator.calculate_threshold(
            session, high, session.team_context
        ) < evaluator.calculate_threshold(session, low, session.team_context)


class TestDecisions:
    def test_accept(self, evaluator, make_session):
        session = make_session()
        offer = offer_at(19_500_000, guaranteed_pct=SHARK_GUARANTEE)

        response = evaluator.evaluate(session, offer)

        assert response.accepted
        assert response.outcome == NegotiationOutcome.ACCEPTED
        assert response.new_mood == AgentMood.EXCITED
        assert session.state == Accepted(offer)
        assert session.negotiation_round == 2

    def test_counter(self, evaluator, make_session):
        session = make_session()
        offer = offer_at(17_000_000, signing_bonus=8_000_000, guaranteed_pct=0.5)

        response = evaluator.evaluate(session, offer)

        assert not response.accepted
        assert response.outcome == NegotiationOutcome.COUNTER
        assert response.new_mood == AgentMood.INTERESTED
        counter = response.counter_offer
        assert counter.years == offer.years
        assert counter.id == f"{offer.id}_counter_1"
        # Shark asks for market x threshold x 1.05 and its guarantee demand
        threshold = session.history[0].threshold
        assert average_per_year(counter) == pytest.approx(MARKET * threshold * 1.05, rel=1e-6)
        assert guaranteed_percentage(counter) == pytest.approx(0.87, abs=1e-6)
        assert isinstance(session.state, Normal)

    def test_counter_keeps_guarantee_share(self, evaluator, make_session):
        session = make_session(AgentArchetype.BRAND_BUILDER)
        offer = offer_at(17_000_000, years=2, signing_bonus=4_000_000, guaranteed_pct=0.5)

        response = evaluator.evaluate(session, offer)

        assert response.outcome == NegotiationOutcome.COUNTER
        assert guaranteed_percentage(response.counter_offer) == pytest.approx(0.5, abs=1e-6)

    def test_shark_counters_thin_guarantees_at_market(self, evaluator, make_session):
        session = make_session()
        offer = offer_at(19_500_000)

        response = evaluator.evaluate(session, offer)

        assert not response.accepted
        assert response.outcome == NegotiationOutcome.COUNTER
        assert response.new_mood == AgentMood.INTERESTED
        counter = response.counter_offer
        assert average_per_year(counter) == pytest.approx(average_per_year(offer))
        assert guaranteed_percentage(counter) == pytest.approx(0.87, abs=1e-6)
        assert isinstance(session.state, Normal)

    def test_shark_accepts_at_guarantee_floor(self, evaluator, make_session):
        session = make_session()
        offer = ContractOffer(
            years=4, base_salary_per_year=[19_500_000] * 4, guaranteed_money=66_300_000
        )
        assert evaluator.evaluate(session, offer).accepted

    def test_guarantee_floor_is_shark_only(self, evaluator, make_session):
        session = make_session(AgentArchetype.SELF_REPRESENTED)
        response = evaluator.evaluate(session, offer_at(19_500_000))
        assert response.accepted

    def test_evaluates_with_leverage_for_current_offer(self, evaluator, make_session):
        session = make_session()
        # Stale reading that favors the team
        session.leverage = Leverage(1.0, 0.0)
        offer = offer_at(18_800_000, guaranteed_pct=SHARK_GUARANTEE)
        stale = evaluator.calculate_threshold(session, offer, session.team_context)
        assert evaluator.calculate_fit(session, offer) >= stale

        response = evaluator.evaluate(session, offer)

        assert response.outcome == NegotiationOutcome.COUNTER
        assert session.history[0].threshold > stale

    def test_reject_volatile_agent_drops_two_steps(self, evaluator, make_session):
        session = make_session()
        session.agent_mood = AgentMood.INTERESTED

        response = evaluator.evaluate(session, offer_at(12_000_000))

        assert response.outcome == NegotiationOutcome.REJECTED
        assert response.new_mood == AgentMood.ANGRY
        assert session.lowball_strikes == 1
        assert session.consecutive_angry_rejections == 1

    def test_reject_calm_agent_drops_one_step(self, evaluator, make_session):
        session = make_session(AgentArchetype.FAMILY_FRIEND)
        session.agent_mood = AgentMood.INTERESTED

        response = evaluator.evaluate(session, offer_at(15_000_000))

        assert response.outcome == NegotiationOutcome.REJECTED
        assert response.new_mood == AgentMood.NEUTRAL
        assert session.lowball_strikes == 0
        assert session.consecutive_angry_rejections == 0

    def test_lowball_line_is_strict(self, evaluator, make_session):
        session = make_session()
        evaluator.evaluate(session, offer_at(14_000_000))
        assert session.lowball_strikes == 0

    def test_self_represented_never_angry(self, evaluator, make_session):
        session = make_session(AgentArchetype.SELF_REPRESENTED)
        for _ in range(3):
            response = evaluator.evaluate(session, offer_at(10_000_000))
        assert response.new_mood == AgentMood.NEUTRAL

    def test_self_represented_narrow_near_miss(self, evaluator, make_session):
        session = make_session(AgentArchetype.SELF_REPRESENTED)
        response = evaluator.evaluate(session, offer_at(17_000_000))
        assert response.outcome == NegotiationOutcome.REJECTED

    def test_years_beyond_max_rejected(self, evaluator, make_session):
        session = make_session(AgentArchetype.SHARK, max_contract_length=5)

        response = evaluator.evaluate(
            session, offer_at(25_000_000, years=6, guaranteed_pct=SHARK_GUARANTEE)
        )

        assert response.outcome == NegotiationOutcome.REJECTED
        assert not response.accepted
        assert response.new_mood == AgentMood.NEUTRAL

    def test_brand_builder_wants_short_deals(self, evaluator, make_session):
        session = make_session(AgentArchetype.BRAND_BUILDER)

        three_years = evaluator.evaluate(session, offer_at(MARKET, years=3))
        assert three_years.outcome == NegotiationOutcome.REJECTED
        assert "2 years" in three_years.message

        two_years = evaluator.evaluate(session, offer_at(MARKET, years=2))
        assert two_years.accepted

    def test_cap_infeasible_overrides_fit(self, evaluator, make_session):
        session = make_session(cap_space=10_000_000)

        response = evaluator.evaluate(session, offer_at(19_500_000))

        assert response.outcome == NegotiationOutcome.CAP_INFEASIBLE
        assert not response.accepted
        assert response.new_mood == AgentMood.NEUTRAL
        assert "cap" in response.message
        assert session.negotiation_round == 2
        assert isinstance(session.state, Normal)

    def test_fresh_team_context_used(self, evaluator, make_session):
        session = make_session(cap_space=10_000_000)
        response = evaluator.evaluate(
            session,
            offer_at(19_500_000, guaranteed_pct=SHARK_GUARANTEE),
            TeamContext(cap_space=50_000_000),
        )
        assert response.accepted


class TestBookkeeping:
    def test_round_and_history(self, evaluator, make_session):
        session = make_session()
        evaluator.evaluate(session, offer_at(12_000_000))
        evaluator.evaluate(session, offer_at(17_000_000))

        assert session.negotiation_round == 3
        assert [record.round for record in session.history] == [1, 2]
        assert session.history[0].outcome == NegotiationOutcome.REJECTED
        assert session.history[1].outcome == NegotiationOutcome.COUNTER
        assert session.history[0].fit == pytest.approx(0.6)

    def test_leverage_recomputed(self, evaluator, make_session):
        session = make_session()
        evaluator.evaluate(session, offer_at(12_000_000))
        assert session.leverage != Leverage(0.5, 0.5)


class TestShortCircuits:
    def test_locked_out(self, evaluator, make_session):
        session = make_session()
        session.state = LockedOut("walked away")
        session.agent_mood = AgentMood.ANGRY

        response = evaluator.evaluate(session, offer_at(30_000_000))

        assert response.outcome == NegotiationOutcome.LOCKED_OUT
        assert response.is_lockout
        assert not response.accepted
        assert session.negotiation_round == 1
        assert session.leverage == Leverage(0.5, 0.5)
        assert session.agent_mood == AgentMood.ANGRY

    def test_deal_agreed(self, evaluator, make_session):
        session = make_session()
        offer = offer_at(19_500_000, guaranteed_pct=SHARK_GUARANTEE)
        evaluator.evaluate(session, offer)

        response = evaluator.evaluate(session, offer_at(25_000_000))

        assert response.outcome == NegotiationOutcome.DEAL_AGREED
        assert not response.accepted
        assert session.negotiation_round == 2

    def test_phone_dead(self, evaluator, make_session):
        session = make_session()
        session.state = PhoneDead(until_round=3)

        response = evaluator.evaluate(session, offer_at(19_500_000))

        assert response.outcome == NegotiationOutcome.PHONE_DEAD
        assert response.phone_dead_days == 14
        assert session.negotiation_round == 2
        assert session.leverage == Leverage(0.5, 0.5)
        assert session.history == []

    def test_phone_dead_expires(self, evaluator, make_session):
        session = make_session()
        session.state = PhoneDead(until_round=3)
        evaluator.evaluate(session, offer_at(19_500_000))
        second = evaluator.evaluate(session, offer_at(19_500_000))
        assert second.outcome == NegotiationOutcome.PHONE_DEAD
        assert second.phone_dead_days == 7

        third = evaluator.evaluate(session, offer_at(19_500_000, guaranteed_pct=SHARK_GUARANTEE))

        assert third.accepted
