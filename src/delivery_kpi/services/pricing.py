"""Tiered dispatcher pricing rules."""

STANDARD_BASE_FEE = 75.0
STANDARD_STOP_FEE = 10.0
PACKATOR_BASE_FEE = 95.0
PACKATOR_STOP_FEE = 13.0
DISPATCH_BASE_FEE = 50.0
DISPATCH_STOP_FEE = 10.0
FREE_STOPS = 2
BASE_TIER_STOPS = 4

JOZEF_DAY_FEE = 130.0
ALI_DAY_FEE = 110.0
PICKUP_FEE = 10.0
COORDINATION_FEE = 15.0
INTERNAL_STAFF_DAY_RATE = 110.0


def _tiered_cost(stops: float, base_fee: float, stop_fee: float) -> float:
    if stops <= FREE_STOPS:
        return 0.0
    if stops <= BASE_TIER_STOPS:
        return base_fee
    return base_fee + (stops - BASE_TIER_STOPS) * stop_fee


def standard_cost(stops: float) -> float:
    """Free up to 2 stops, 75 for 3-4, then 10 per extra stop."""
    return _tiered_cost(stops, STANDARD_BASE_FEE, STANDARD_STOP_FEE)


def packator_cost(stops: float) -> float:
    """Free up to 2 stops, 95 for 3-4, then 13 per extra stop."""
    return _tiered_cost(stops, PACKATOR_BASE_FEE, PACKATOR_STOP_FEE)


def dispatch_cost(stops: float) -> float:
    """Dispatching base of 50 plus 10 per stop, nothing when idle."""
    if stops <= 0:
        return 0.0
    return DISPATCH_BASE_FEE + stops * DISPATCH_STOP_FEE


def day_fee(stops: float, fee: float) -> float:
    """Flat fee charged once when the driver had any stop."""
    return fee if stops > 0 else 0.0


def pickup_cost(pickups: float) -> float:
    """Flat surcharge per pickup."""
    return pickups * PICKUP_FEE


def coordination_cost(*unit_stops: float) -> float:
    """Fee for every dispatch unit that worked that day."""
    active_units = sum(1 for stops in unit_stops if stops > 0)
    return active_units * COORDINATION_FEE
