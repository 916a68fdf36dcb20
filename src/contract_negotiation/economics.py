"""
Contract Economics

Pure functions that turn an offer's raw terms into the cap-accounting
figures used by the negotiation engine and by the rest of the simulation:
- Average per year and guaranteed percentage
- Signing bonus proration across contract and void years
- Year-by-year cap hits
- Dead money on release and on restructure

Simplified policy: the signing bonus is prorated evenly over
years + void_years with no 5-year maximum, and incentives do not count
toward the cap hit. Every function is total for any valid ContractOffer.
"""

from typing import Any, Dict, List

from contract_negotiation.models import ContractOffer, Money


# ============================================================================
# VALUE
# ============================================================================


def total_value(offer: ContractOffer) -> Money:
    """Sum of base salaries plus signing bonus (incentives excluded)."""
    return sum(offer.base_salary_per_year) + offer.signing_bonus


def average_per_year(offer: ContractOffer) -> float:
    """
    Average per year (APY).

    Formula:
        (sum(base_salary_per_year) + signing_bonus) / years
    """
    return total_value(offer) / offer.years


def guaranteed_percentage(offer: ContractOffer) -> float:
    """Guaranteed money as a fraction of total value (0.0 when total is 0)."""
    total = total_value(offer)
    if total == 0:
        return 0.0
    return offer.guaranteed_money / total


def ltbe_total(offer: ContractOffer) -> Money:
    return sum(offer.ltbe_incentives)


def nltbe_total(offer: ContractOffer) -> Money:
    return sum(offer.nltbe_incentives)


def max_contract_value(offer: ContractOffer) -> Money:
    """Total value if every incentive is earned."""
    return total_value(offer) + ltbe_total(offer) + nltbe_total(offer)


# ============================================================================
# CAP HITS
# ============================================================================


def _proration_seasons(offer: ContractOffer) -> int:
    return max(1, offer.years + offer.void_years)


def signing_bonus_proration(offer: ContractOffer) -> float:
    """
    Annual cap charge of the signing bonus.

    Void years spread the bonus over additional seasons without extending
    the on-field commitment.

    Examples:
        - 3-year, $6M bonus, no void years -> $2M/year
        - 3-year, $6M bonus, 1 void year -> $1.5M/year
    """
    return offer.signing_bonus / _proration_seasons(offer)


def cap_hit_year1(offer: ContractOffer) -> float:
    """First season cap hit: year-1 base salary plus bonus proration."""
    return offer.base_salary_per_year[0] + signing_bonus_proration(offer)


def cap_hit_by_year(offer: ContractOffer) -> List[float]:
    """
    Cap charge for every season, including void seasons.

    Returns:
        List of length years + void_years. Void seasons carry proration only.
    """
    proration = signing_bonus_proration(offer)
    hits = [salary + proration for salary in offer.base_salary_per_year]
    hits.extend([proration] * offer.void_years)
    return hits


# ============================================================================
# GUARANTEES / DEAD MONEY
# ============================================================================


def guaranteed_base_salary_by_year(offer: ContractOffer) -> List[Money]:
    """
    Guaranteed base salary per contract year.

    Guarantees first cover the signing bonus; whatever is left is applied
    to base salaries front to back.
    """
    remaining = max(0, offer.guaranteed_money - offer.signing_bonus)
    guaranteed = []
    for salary in offer.base_salary_per_year:
        portion = min(salary, remaining)
        guaranteed.append(portion)
        remaining -= portion
    return guaranteed


def dead_cap_on_release(offer: ContractOffer, years_elapsed: int = 0) -> float:
    """
    Dead money from releasing the player after `years_elapsed` seasons.

    Dead money consists of:
    1. Unamortized signing bonus proration for every remaining season
       (contract and void seasons)
    2. Guaranteed base salary not yet paid

    With offset language the figure is advisory only; any offset reduction
    is applied by whoever performs the release.

    Args:
        offer: Contract being released
        years_elapsed: Seasons already played, clamped into range

    Returns:
        Dead money in dollars
    """
    seasons = _proration_seasons(offer)
    elapsed = min(max(0, years_elapsed), seasons)

    remaining_proration = signing_bonus_proration(offer) * (seasons - elapsed)
    unpaid_guarantees = sum(guaranteed_base_salary_by_year(offer)[elapsed:])

    return remaining_proration + unpaid_guarantees


def _restructure_terms(offer: ContractOffer, converted_amount: Money, years_elapsed: int):
    elapsed = min(max(0, years_elapsed), offer.years - 1)
    current_base = offer.base_salary_per_year[elapsed]
    converted = min(max(0, converted_amount), current_base)
    remaining_seasons = offer.years - elapsed + offer.void_years
    new_proration = converted / remaining_seasons
    return converted, remaining_seasons, new_proration


def dead_cap_on_restructure(
    offer: ContractOffer,
    converted_amount: Money,
    years_elapsed: int = 0,
) -> float:
    """
    Additional dead money created by converting base salary to bonus.

    The converted amount (clamped to the current season's base salary) is
    prorated over the remaining seasons, years - years_elapsed + void_years.
    The returned liability is what would accelerate on a release after the
    current season.

    Example:
        Convert $12M base with 3 years left:
        - New proration: $12M / 3 = $4M/year
        - Dead money increase: 2 x $4M = $8M
    """
    _, remaining_seasons, new_proration = _restructure_terms(
        offer, converted_amount, years_elapsed
    )
    return new_proration * (remaining_seasons - 1)


def restructure_impact(
    offer: ContractOffer,
    converted_amount: Money,
    years_elapsed: int = 0,
) -> Dict[str, Any]:
    """
    Cap impact of a restructure.

    Returns:
        Dict with:
        - cap_savings_current_year: Immediate cap savings
        - annual_increase_future_years: Added cap hit per future season
        - dead_money_increase: Additional dead money if cut later
        - new_proration: New annual proration amount
        - remaining_years: Seasons the conversion is spread over
    """
    converted, remaining_seasons, new_proration = _restructure_terms(
        offer, converted_amount, years_elapsed
    )
    return {
        "cap_savings_current_year": converted - new_proration,
        "annual_increase_future_years": new_proration,
        "dead_money_increase": new_proration * (remaining_seasons - 1),
        "new_proration": new_proration,
        "remaining_years": remaining_seasons,
    }


def dead_cap_risk(offer: ContractOffer) -> Money:
    """
    Worst-case dead money exposure shown on the offer sheet.

    The whole signing bonus when void years exist, otherwise the
    guaranteed money.
    """
    if offer.void_years > 0:
        return offer.signing_bonus
    return offer.guaranteed_money


# ============================================================================
# FORMATTING
# ============================================================================


def format_money(amount: Money) -> str:
    """
    Format an amount for agent messages and headlines.

    Examples:
        19_500_000 -> "$19.5M", 750_000 -> "$750,000", -2_000_000 -> "-$2M"
    """
    sign = "-" if amount < 0 else ""
    amount = abs(amount)
    if amount >= 1_000_000:
        millions = f"{amount / 1_000_000:.2f}".rstrip("0").rstrip(".")
        return f"{sign}${millions}M"
    return f"{sign}${int(round(amount)):,}"
