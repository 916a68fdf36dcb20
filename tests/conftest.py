"""
Pytest configuration for test discovery and imports.

Provides fixtures for testing including:
- Player profiles and team contexts
- Event-free negotiation configs (no random events)
- Seeded negotiation engines
"""

import random
import sys
from pathlib import Path

import pytest


# Determine paths
project_root = Path(__file__).parent.parent
src_path = project_root / "src"
tests_path = project_root / "tests"


def pytest_configure(config):
    """Configure pytest - runs very early in startup.

    src/ must come first so the installed-or-not package resolves the same way.
    """
    seen = set()
    new_path = []
    for p in sys.path:
        if p not in seen and p != str(tests_path):
            seen.add(p)
            new_path.append(p)

    if str(src_path) in new_path:
        new_path.remove(str(src_path))
    new_path.insert(0, str(src_path))

    sys.path[:] = new_path


# ============================================================================
# PLAYER / TEAM FIXTURES
# ============================================================================

@pytest.fixture
def make_player():
    """Factory for PlayerProfile instances with sensible defaults."""
    from contract_negotiation.models import PlayerProfile

    def _make(player_id=101, **overrides):
        fields = {
            "first_name": "Marcus",
            "last_name": "Hill",
            "position": "WR",
            "age": 27,
            "overall": 88,
            "years_pro": 5,
        }
        fields.update(overrides)
        return PlayerProfile(player_id=player_id, **fields)

    return _make


@pytest.fixture
def player(make_player):
    """Default 27-year-old WR."""
    return make_player()


@pytest.fixture
def team_context():
    """Team with ample cap space and average depth."""
    from contract_negotiation.models import TeamContext

    return TeamContext(cap_space=60_000_000, position_depth=2, is_contender=False)


# ============================================================================
# ENGINE FIXTURES
# ============================================================================

@pytest.fixture
def quiet_config():
    """Negotiation config with press leaks and shadow advisors disabled.

    Phone-dead and lockout rules are deterministic and stay active.
    """
    from contract_negotiation.config import EventPolicy, NegotiationConfig

    events = EventPolicy(
        press_leak_base=0.0,
        press_leak_round_step=0.0,
        press_leak_mood_factors={"ANGRY": 0.0, "NEUTRAL": 0.0, "INTERESTED": 0.0, "EXCITED": 0.0},
        shadow_base_probability=0.0,
    )
    return NegotiationConfig(events=events)


@pytest.fixture
def engine(quiet_config):
    """Seeded engine without random events."""
    from contract_negotiation.engine import NegotiationEngine

    return NegotiationEngine(config=quiet_config, rng=random.Random(1234))


@pytest.fixture
def flat_offer():
    """Factory for level-salary offers."""
    from contract_negotiation.models import ContractOffer

    def _make(apy, years=4, **kwargs):
        return ContractOffer.create_flat(years=years, apy=apy, **kwargs)

    return _make
