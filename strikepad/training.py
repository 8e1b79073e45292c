"""Training sequence generation and user-type detection."""

from __future__ import annotations

import random
from collections.abc import Iterable, Mapping, Sequence
from enum import Enum
from itertools import accumulate
from bisect import bisect_right

ZONE_COUNT = 7


class UserType(str, Enum):
    """Fighter profile that drives the length and shape of a fast training."""

    KNOCKOUT = "нокаутер"
    TEMPO = "темповик"
    PLAYER = "игровик"


_SERIES_LENGTHS = {
    UserType.KNOCKOUT: 10,
    UserType.PLAYER: 15,
    UserType.TEMPO: 20,
}
_DEFAULT_SERIES_LENGTH = 10

_ZONE_WEIGHTS = {
    UserType.KNOCKOUT: (1, 1, 3, 1, 1, 1, 3),
    UserType.TEMPO: (2, 2, 1, 2, 2, 1, 1),
    UserType.PLAYER: (1, 2, 1, 2, 2, 1, 2),
}
_DEFAULT_WEIGHTS = (1,) * ZONE_COUNT


def _as_user_type(user_type: UserType | str | None) -> UserType | None:
    if isinstance(user_type, UserType):
        return user_type
    try:
        return UserType(user_type)
    except ValueError:
        return None


def series_length(user_type: UserType | str) -> int:
    """Number of strikes in a fast training for the given user type."""
    kind = _as_user_type(user_type)
    return _SERIES_LENGTHS.get(kind, _DEFAULT_SERIES_LENGTH)


def zone_weights(user_type: UserType | str) -> tuple[int, ...]:
    """Relative weights of zones 1..7 for the given user type."""
    kind = _as_user_type(user_type)
    return _ZONE_WEIGHTS.get(kind, _DEFAULT_WEIGHTS)


def generate_training_sequence(
    user_type: UserType | str, rng: random.Random | None = None
) -> list[int]:
    """Draw a weighted random sequence of zones (1..7) for the user type."""
    rng = rng or random.Random()
    weights = zone_weights(user_type)
    bounds = list(accumulate(weights))
    total = bounds[-1]
    sequence = []
    for _ in range(series_length(user_type)):
        value = rng.randrange(total)
        index = bisect_right(bounds, value)
        sequence.append(index + 1 if index < len(bounds) else 1)
    return sequence


def random_sequence(length: int = 10, rng: random.Random | None = None) -> list[int]:
    """Uniformly random sequence of zones in the range 1..7."""
    if length < 0:
        raise ValueError("length must not be negative")
    rng = rng or random.Random()
    return [rng.randint(1, ZONE_COUNT) for _ in range(length)]


def sequence_to_string(sequence: Iterable[int]) -> str:
    """Encode a zone sequence the way the receiver expects it: digits joined."""
    return "".join(str(zone) for zone in sequence)


def _json_string(value: object) -> str:
    return value if isinstance(value, str) else ""


def detect_user_type(
    trainings: Sequence[object], username: str
) -> UserType:
    """Return the type from the user's last typed record, or PLAYER if unknown."""
    found = ""
    for entry in trainings:
        if not isinstance(entry, Mapping):
            continue
        if _json_string(entry.get("username")) == username and "type" in entry:
            found = _json_string(entry["type"]).lower().strip()
    return _as_user_type(found) or UserType.PLAYER