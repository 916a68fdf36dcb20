"""
Agent Profile Factory

Deterministically derives the Agent representing a player. The same player
id always gets the same agent, so repeated negotiations within a season see
a consistent personality.
"""

import hashlib
import logging
import random
from typing import Dict, Optional, Tuple, Union

from contract_negotiation.models import (
    Agent,
    AgentArchetype,
    PlayerPersonality,
    PlayerProfile,
)


class AgentProfileFactory:
    """
    Factory for creating agents with per-player caching.

    Archetype selection order:
    1. Explicit archetype argument
    2. Player personality traits
    3. SHA-256 hash of the player id

    Patience, mood volatility and max contract length are the archetype's
    base values plus small jitter drawn from a generator seeded by the
    player id (never the global generator, never hash()).
    """

    PATIENCE_JITTER = 0.08
    VOLATILITY_JITTER = 0.08
    MAX_LENGTH_REDUCTION = 1
    # Jitter never cuts a max length below this (or below the base, if shorter)
    MIN_JITTERED_LENGTH = 2

    def __init__(self, seed_salt: str = "agent"):
        """
        Initialize factory.

        Args:
            seed_salt: Mixed into every per-player seed. Change it to deal a
                different set of agents (e.g., per save file).
        """
        self.seed_salt = seed_salt
        self._cache: Dict[Tuple[str, AgentArchetype], Agent] = {}
        self._logger = logging.getLogger(__name__)

    def create_agent(
        self,
        player_id: Union[int, str],
        player_traits: Optional[PlayerPersonality] = None,
        archetype: Optional[AgentArchetype] = None,
        player: Optional[PlayerProfile] = None,
    ) -> Agent:
        """
        Create (or fetch the cached) agent for a player.

        Args:
            player_id: Player identifier
            player_traits: Optional personality traits for archetype selection
            archetype: Optional explicit archetype (wins over traits)
            player: Optional player profile (age and names for the agent)

        Returns:
            Agent instance, identical for repeated calls with the same inputs
        """
        if player_traits is None and player is not None:
            player_traits = player.personality
        age = player.age if player is not None else None

        if archetype is None:
            archetype = self.select_archetype(player_id, player_traits, age)

        key = (str(player_id), archetype)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        agent = self._build_agent(player_id, archetype, player)
        self._cache[key] = agent
        self._logger.debug(
            f"Created agent {agent.name} ({archetype.value}) for player {player_id}: "
            f"patience={agent.patience:.2f}, volatility={agent.mood_volatility:.2f}, "
            f"max_years={agent.max_contract_length}"
        )
        return agent

    def select_archetype(
        self,
        player_id: Union[int, str],
        player_traits: Optional[PlayerPersonality] = None,
        age: Optional[int] = None,
    ) -> AgentArchetype:
        """Pick the archetype from traits when available, else from the id hash."""
        if player_traits is not None:
            return self.derive_archetype_from_personality(player_traits, age)
        archetypes = list(AgentArchetype)
        index = self._compute_seed(player_id, "archetype") % len(archetypes)
        return archetypes[index]

    @staticmethod
    def derive_archetype_from_personality(
        traits: PlayerPersonality,
        age: Optional[int] = None,
    ) -> AgentArchetype:
        """
        Map personality traits to the agent a player would hire.

        Rules (first match wins):
        - Self-Represented: leadership >= 75, motivation >= 75, loyalty < 50
        - Shark: marketability >= 70 and (team_player < 50 or loyalty < 40)
        - Brand Builder: marketability >= 65, age < 27, work_ethic >= 70
        - Family Friend: everyone else
        """
        if traits.leadership >= 75 and traits.motivation >= 75 and traits.loyalty < 50:
            return AgentArchetype.SELF_REPRESENTED

        if traits.marketability >= 70 and (traits.team_player < 50 or traits.loyalty < 40):
            return AgentArchetype.SHARK

        if (
            traits.marketability >= 65
            and age is not None
            and age < 27
            and traits.work_ethic >= 70
        ):
            return AgentArchetype.BRAND_BUILDER

        return AgentArchetype.FAMILY_FRIEND

    def clear_cache(self) -> None:
        """Forget generated agents (season rollover)."""
        self._cache.clear()

    def _build_agent(
        self,
        player_id: Union[int, str],
        archetype: AgentArchetype,
        player: Optional[PlayerProfile],
    ) -> Agent:
        profile = archetype.profile()
        rng = random.Random(self._compute_seed(player_id, archetype.name))

        patience = _clamp(profile.patience + rng.uniform(-self.PATIENCE_JITTER, self.PATIENCE_JITTER))
        volatility = _clamp(
            profile.mood_volatility + rng.uniform(-self.VOLATILITY_JITTER, self.VOLATILITY_JITTER)
        )
        max_length = max(
            min(profile.max_contract_length, self.MIN_JITTERED_LENGTH),
            profile.max_contract_length - rng.randint(0, self.MAX_LENGTH_REDUCTION),
        )

        return Agent(
            name=self._pick_name(rng, profile.name_pool, player_id, player),
            archetype=archetype,
            patience=round(patience, 3),
            max_contract_length=max_length,
            mood_volatility=round(volatility, 3),
            lowball_tolerance=profile.lowball_tolerance,
        )

    @staticmethod
    def _pick_name(rng: random.Random, pool, player_id, player: Optional[PlayerProfile]) -> str:
        first = player.first_name if player is not None else ""
        last = player.last_name if player is not None and player.last_name else f"Player {player_id}"
        template = rng.choice(pool) if pool else "Agent for {first} {last}"
        return template.format(first=first, last=last).strip()

    def _compute_seed(self, player_id: Union[int, str], purpose: str) -> int:
        raw = f"{self.seed_salt}|{purpose}|{player_id}"
        h = hashlib.sha256(raw.encode("utf-8")).digest()
        return int.from_bytes(h[:8], "big", signed=False)


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))
