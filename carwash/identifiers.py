"""
Generators for plate numbers and record numbers.
"""
import random
import string
from datetime import date
from typing import Optional

PLATE_PREFIXES = ["RAB", "RCA", "RBA", "RCB", "RAC", "RBC"]

_rng = random.Random()


def generate_plate_number(rng: Optional[random.Random] = None) -> str:
    """Rwandan plate number such as ``RAB 123A``."""
    rng = rng or _rng
    prefix = rng.choice(PLATE_PREFIXES)
    digits = rng.randint(100, 999)
    letter = rng.choice(string.ascii_uppercase)
    return f"{prefix} {digits}{letter}"


def _record_number(kind: str, rng: Optional[random.Random], year: Optional[int]) -> str:
    rng = rng or _rng
    year = year or date.today().year
    return f"{kind}-{year}-{rng.randrange(9999):04d}"


def generate_package_number(rng: Optional[random.Random] = None, year: Optional[int] = None) -> str:
    return _record_number("PKG", rng, year)


def generate_service_number(rng: Optional[random.Random] = None, year: Optional[int] = None) -> str:
    return _record_number("SRV", rng, year)


def generate_payment_number(rng: Optional[random.Random] = None, year: Optional[int] = None) -> str:
    return _record_number("PAY", rng, year)
