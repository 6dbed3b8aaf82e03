from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Literal

LATITUDE_RANGE = (-90.0, 90.0)
LONGITUDE_RANGE = (-180.0, 180.0)
MIN_PASSWORD_LENGTH = 8

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

NOT_A_NUMBER_MESSAGE = "Please enter valid numbers"
LATITUDE_RANGE_MESSAGE = "Latitude must be between -90 and 90"
LONGITUDE_RANGE_MESSAGE = "Longitude must be between -180 and 180"

MISSING_FIELDS_MESSAGE = "Please fill in all fields"
INVALID_EMAIL_MESSAGE = "Please enter a valid email"
SHORT_PASSWORD_MESSAGE = f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
PASSWORD_MISMATCH_MESSAGE = "Passwords do not match"


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float


class CoordinateValidationError(ValueError):
    def __init__(self, reason: Literal["not_a_number", "out_of_range"], message: str):
        super().__init__(message)
        self.reason = reason
        self.message = message


class CredentialValidationError(ValueError):
    pass


def _to_finite_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        stripped = value.strip()
        if not stripped or "_" in stripped:
            return None
        try:
            number = float(stripped)
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def parse_coordinates(latitude: Any, longitude: Any) -> Coordinate:
    """Turn raw form input into a coordinate the scoring engine can use.

    Numbers are checked before ranges, so ``("abc", 500)`` reports the
    non-numeric value rather than the longitude range.
    """
    lat = _to_finite_float(latitude)
    lon = _to_finite_float(longitude)
    if lat is None or lon is None:
        raise CoordinateValidationError("not_a_number", NOT_A_NUMBER_MESSAGE)

    if not LATITUDE_RANGE[0] <= lat <= LATITUDE_RANGE[1]:
        raise CoordinateValidationError("out_of_range", LATITUDE_RANGE_MESSAGE)
    if not LONGITUDE_RANGE[0] <= lon <= LONGITUDE_RANGE[1]:
        raise CoordinateValidationError("out_of_range", LONGITUDE_RANGE_MESSAGE)

    return Coordinate(latitude=lat, longitude=lon)


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_PATTERN.match(value))


def validate_sign_in(email: str, password: str) -> None:
    if not email or not password:
        raise CredentialValidationError(MISSING_FIELDS_MESSAGE)
    if not is_valid_email(email):
        raise CredentialValidationError(INVALID_EMAIL_MESSAGE)


def validate_sign_up(email: str, password: str, confirm_password: str) -> None:
    if not email or not password or not confirm_password:
        raise CredentialValidationError(MISSING_FIELDS_MESSAGE)
    if not is_valid_email(email):
        raise CredentialValidationError(INVALID_EMAIL_MESSAGE)
    if len(password) < MIN_PASSWORD_LENGTH:
        raise CredentialValidationError(SHORT_PASSWORD_MESSAGE)
    if password != confirm_password:
        raise CredentialValidationError(PASSWORD_MISMATCH_MESSAGE)
