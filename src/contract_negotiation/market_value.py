"""
Market Value Calculator

Estimates a player's market APY, the yardstick every offer is measured
against (fit = offer APY / market value). Used by the engine when the
caller does not supply a market value.

Market APY = position base x rating multiplier x age curve x experience.
"""

import logging
from typing import Any, Dict

from contract_negotiation.models import ContractOffer, PlayerProfile


class MarketValueCalculator:
    """
    Calculates market value in dollars.

    Based on:
    - Position market rates (85 overall baseline)
    - Overall rating
    - Age curve around a per-position peak
    - Years of experience
    """

    # Base APY for an 85 overall player by position (dollars)
    POSITION_BASE_APY = {
        # Premium
        'QB': 45_000_000,
        'EDGE': 25_000_000,
        'LT': 22_000_000,
        'RT': 20_000_000,
        # High value
        'WR': 20_000_000,
        'CB': 18_000_000,
        'DT': 15_000_000,
        'C': 14_000_000,
        # Standard
        'LB': 14_000_000,
        'G': 14_000_000,
        'S': 13_000_000,
        'RB': 12_000_000,
        'TE': 11_000_000,
        # Specialists
        'K': 4_000_000,
        'P': 3_000_000,
    }
    DEFAULT_BASE_APY = 10_000_000

    POSITION_ALIASES = {
        'QUARTERBACK': 'QB',
        'DE': 'EDGE',
        'DEFENSIVE_END': 'EDGE',
        'OLB': 'LB',
        'MLB': 'LB',
        'ILB': 'LB',
        'LINEBACKER': 'LB',
        'LEFT_TACKLE': 'LT',
        'RIGHT_TACKLE': 'RT',
        'OT': 'LT',
        'WIDE_RECEIVER': 'WR',
        'CORNERBACK': 'CB',
        'CENTER': 'C',
        'LG': 'G',
        'RG': 'G',
        'OG': 'G',
        'LEFT_GUARD': 'G',
        'RIGHT_GUARD': 'G',
        'FS': 'S',
        'SS': 'S',
        'SAFETY': 'S',
        'HB': 'RB',
        'RUNNING_BACK': 'RB',
        'TIGHT_END': 'TE',
        'NT': 'DT',
        'DEFENSIVE_TACKLE': 'DT',
        'KICKER': 'K',
        'PUNTER': 'P',
    }

    # Typical deal length by position (years)
    TYPICAL_CONTRACT_LENGTH = {
        'QB': 4,
        'EDGE': 4,
        'LT': 4,
        'RT': 4,
        'WR': 3,
        'CB': 3,
        'RB': 2,
    }

    PEAK_AGE = {
        'QB': 28,
        'RB': 26,
        'WR': 27,
        'EDGE': 27,
        'LT': 28,
        'RT': 28,
        'CB': 27,
        'K': 30,
        'P': 30,
    }

    PREMIUM_POSITIONS = ('QB', 'EDGE', 'LT', 'RT')
    LEAGUE_MINIMUM = 795_000

    def __init__(self):
        self._logger = logging.getLogger(__name__)

    def normalize_position(self, position: str) -> str:
        """Map long names and variants ("left_tackle", "OLB") to a table key."""
        key = (position or "").strip().upper().replace(" ", "_")
        return self.POSITION_ALIASES.get(key, key)

    def calculate_market_value(self, player: PlayerProfile) -> int:
        """
        Market APY for a player in dollars.

        Never below the league minimum, so fit is always well defined.
        """
        estimate = self.calculate_player_value(
            player.position, player.overall, player.age, player.years_pro
        )
        self._logger.debug(
            f"Market value for {player.full_name} ({player.position}, {player.overall} OVR, "
            f"age {player.age}): ${estimate['apy']:,}"
        )
        return estimate['apy']

    def calculate_player_value(
        self,
        position: str,
        overall: int,
        age: int,
        years_pro: int,
    ) -> Dict[str, Any]:
        """
        Calculate estimated contract terms for a player.

        Returns:
            Dict with:
            - apy: Market average per year (dollars)
            - years: Typical contract length
            - total_value: apy x years
            - guaranteed: Guaranteed money (dollars)
            - signing_bonus: Signing bonus (dollars)
            - guarantee_percentage: Guaranteed share (0.0-1.0)
        """
        key = self.normalize_position(position)
        base_apy = self.POSITION_BASE_APY.get(key, self.DEFAULT_BASE_APY)

        apy = (
            base_apy
            * self._calculate_rating_multiplier(overall)
            * self._calculate_age_multiplier(key, age)
            * self._calculate_experience_multiplier(years_pro)
        )
        apy = max(self.LEAGUE_MINIMUM, int(round(apy, -3)))

        years = self.TYPICAL_CONTRACT_LENGTH.get(key, 3)
        if age > 30:
            years = min(years, 2)
        elif age > 28:
            years = min(years, 3)

        total_value = apy * years
        guarantee_percentage = self._calculate_guarantee_percentage(overall, key)

        return {
            'apy': apy,
            'years': years,
            'total_value': total_value,
            'guaranteed': int(total_value * guarantee_percentage),
            'signing_bonus': int(total_value * 0.35),
            'guarantee_percentage': round(guarantee_percentage, 2),
        }

    def suggested_offer(self, player: PlayerProfile) -> ContractOffer:
        """Level-salary offer at market value with the typical structure."""
        estimate = self.calculate_player_value(
            player.position, player.overall, player.age, player.years_pro
        )
        return ContractOffer.create_flat(
            years=estimate['years'],
            apy=estimate['apy'],
            signing_bonus=estimate['signing_bonus'],
            guaranteed_pct=estimate['guarantee_percentage'],
        )

    def _calculate_rating_multiplier(self, overall: int) -> float:
        """
        85 overall = 1.0x (baseline)
        95 overall = 2.0x (elite)
        75 overall = 0.5x (below average starter)
        65 overall = 0.2x (backup)
        """
        if overall >= 90:
            return 1.5 + ((overall - 90) / 10) * 1.0
        elif overall >= 85:
            return 1.0 + ((overall - 85) / 5) * 0.5
        elif overall >= 75:
            return 0.5 + ((overall - 75) / 10) * 0.5
        elif overall >= 65:
            return 0.2 + ((overall - 65) / 10) * 0.3
        else:
            return 0.1 + (max(0, overall) / 65) * 0.1

    def _calculate_age_multiplier(self, position: str, age: int) -> float:
        """Full value within a year of peak; discounts for youth and decline."""
        peak = self.PEAK_AGE.get(position, 27)

        if age <= peak:
            years_before_peak = peak - age
            if years_before_peak <= 1:
                return 1.0
            return max(0.85, 1.0 - (years_before_peak * 0.05))

        years_past_peak = age - peak
        if years_past_peak <= 2:
            return max(0.85, 1.0 - (years_past_peak * 0.05))
        elif years_past_peak <= 5:
            return max(0.6, 0.85 - ((years_past_peak - 2) * 0.08))
        return max(0.3, 0.6 - ((years_past_peak - 5) * 0.1))

    def _calculate_experience_multiplier(self, years_pro: int) -> float:
        if years_pro <= 1:
            return 0.8
        elif years_pro <= 4:
            return 0.9
        elif years_pro <= 8:
            return 1.0
        return 0.95

    def _calculate_guarantee_percentage(self, overall: int, position: str) -> float:
        if overall >= 90:
            base = 0.65
        elif overall >= 85:
            base = 0.55
        elif overall >= 80:
            base = 0.45
        elif overall >= 75:
            base = 0.35
        else:
            base = 0.25

        if position in self.PREMIUM_POSITIONS:
            base += 0.05

        return min(0.75, base)
