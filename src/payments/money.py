"""Conversion between major currency units and the gateway's minor units."""


def to_minor_units(amount: float) -> int:
    """120.5 -> 12050. Rounded to the nearest integer."""
    return int(round(amount * 100))


def from_minor_units(amount: int) -> float:
    return amount / 100
