"""Comparison of the latest training against the user's history."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from strikepad.training import ZONE_COUNT, UserType

INSUFFICIENT_DATA = "Недостаточно данных для анализа"

_TYPE_DESCRIPTIONS = {
    UserType.KNOCKOUT: "Тип: Нокаутер (короткая тренировка 10 ударов)\n\n",
    UserType.PLAYER: "Тип: Игровик (средняя тренировка 15 ударов)\n\n",
    UserType.TEMPO: "Тип: Темповик (длинная тренировка 20 ударов)\n\n",
}


def _as_object(value: object) -> Mapping:
    return value if isinstance(value, Mapping) else {}


def _as_int(value: object) -> int:
    """JSON value as int: integral numbers only, anything else is 0."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if isinstance(value, float) and not value.is_integer():
        return 0
    return int(value)


def _as_float(value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value)


def _as_str(value: object) -> str:
    return value if isinstance(value, str) else ""


def _zone_key(zone: int) -> str:
    return f"zone{zone}"


def _trunc_div(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return quotient if (a >= 0) == (b > 0) else -quotient


@dataclass
class ZoneStats:
    """Accumulated impact and time of one zone over several trainings."""

    total_impact: int = 0
    total_time: float = 0.0
    count: int = 0

    def add(self, impact: int, time: float) -> None:
        self.total_impact += impact
        self.total_time += time
        self.count += 1

    @property
    def average_impact(self) -> int:
        # Whole-number average: the impact total is divided as an integer.
        return _trunc_div(self.total_impact, self.count)

    @property
    def average_time(self) -> float:
        return self.total_time / self.count


@dataclass
class ZoneAnalysis:
    message: str = ""
    needs_attention: bool = False


@dataclass
class TrainingAnalysis:
    zones: list[ZoneAnalysis] = field(
        default_factory=lambda: [ZoneAnalysis() for _ in range(ZONE_COUNT)]
    )
    overall_message: str = ""


def _zone_message(zone: int, stats: ZoneStats, impact: int, time: float) -> str | None:
    avg_impact = stats.average_impact
    avg_time = stats.average_time
    impact_worse = impact < avg_impact * 0.9
    time_worse = time > avg_time * 1.1
    if not (impact_worse or time_worse):
        return None
    prefix = f"Обратите внимание на зону {zone}: "
    if impact_worse and time_worse:
        detail = (
            f"удар стал слабее (было {avg_impact:.0f}, сейчас {impact}) "
            f"и медленнее (было {avg_time:.2f}с, сейчас {time:.2f}с)"
        )
    elif impact_worse:
        detail = f"удар стал слабее (было {avg_impact:.0f}, сейчас {impact})"
    else:
        detail = f"удар стал медленнее (было {avg_time:.2f}с, сейчас {time:.2f}с)"
    return prefix + detail


def analyze_training(trainings: Sequence[Mapping]) -> TrainingAnalysis:
    """Flag zones where the last training is >10% weaker or slower than before."""
    analysis = TrainingAnalysis()
    if len(trainings) < 2:
        analysis.overall_message = INSUFFICIENT_DATA
        return analysis

    *previous, last = trainings
    history = [ZoneStats() for _ in range(ZONE_COUNT)]
    for training in previous:
        zones = _as_object(training.get("zones"))
        for zone, stats in enumerate(history, start=1):
            key = _zone_key(zone)
            if key in zones:
                data = _as_object(zones[key])
                stats.add(_as_int(data.get("impact")), _as_float(data.get("time")))

    last_zones = _as_object(last.get("zones"))
    for zone, (stats, result) in enumerate(zip(history, analysis.zones), start=1):
        key = _zone_key(zone)
        if key not in last_zones or stats.count == 0:
            continue
        current = _as_object(last_zones[key])
        message = _zone_message(
            zone, stats, _as_int(current.get("impact")), _as_float(current.get("time"))
        )
        if message is not None:
            result.needs_attention = True
            result.message = message
    return analysis


def describe_user_type(user_type: UserType | str) -> str:
    """Heading text for a user type, or an empty string if it is unknown."""
    try:
        kind = UserType(user_type)
    except ValueError:
        return ""
    return _TYPE_DESCRIPTIONS[kind]


def build_analysis_message(
    trainings: Sequence[Mapping], analysis: TrainingAnalysis
) -> str:
    """Compose the text shown under the statistics charts."""
    message = ""
    if trainings and "type" in trainings[-1]:
        message = describe_user_type(_as_str(trainings[-1]["type"]))
    if analysis.overall_message:
        message = analysis.overall_message
    for zone in analysis.zones:
        if zone.needs_attention:
            message += "\n\n" + zone.message
    return message


def zone_averages(trainings: Sequence[Mapping]) -> tuple[list[float], list[float]]:
    """Mean impact and mean time per zone; zones never hit average to 0."""
    impacts = [0.0] * ZONE_COUNT
    times = [0.0] * ZONE_COUNT
    counts = [0] * ZONE_COUNT
    for training in trainings:
        zones = _as_object(training.get("zones"))
        for index in range(ZONE_COUNT):
            key = _zone_key(index + 1)
            if key in zones:
                data = _as_object(zones[key])
                impacts[index] += _as_float(data.get("impact"))
                times[index] += _as_float(data.get("time"))
                counts[index] += 1
    for index, count in enumerate(counts):
        if count:
            impacts[index] /= count
            times[index] /= count
    return impacts, times


def filter_user_trainings(trainings: Sequence[object], username: str) -> list[Mapping]:
    """Keep the training objects that belong to the given user, in order."""
    return [
        entry
        for entry in trainings
        if isinstance(entry, Mapping) and _as_str(entry.get("username")) == username
    ]