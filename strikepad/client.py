"""HTTP client for the strike-pad receiver and parsers for its replies."""

from __future__ import annotations

import http.client
import json
import logging
from collections.abc import Iterable, Mapping
from urllib.parse import unquote_to_bytes, urlencode
from urllib.request import Request, urlopen

from strikepad.training import ZONE_COUNT, sequence_to_string

log = logging.getLogger(__name__)

DEFAULT_HOST = "192.168.4.1"
DEFAULT_PORT = 80
DEFAULT_TIMEOUT = 5.0


class EspError(Exception):
    """The receiver could not be reached or answered with unusable data."""


def _as_object(value: object) -> Mapping:
    return value if isinstance(value, Mapping) else {}


def _as_int(value: object) -> int:
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


def _load_document(payload: bytes | str) -> object:
    """Parse a JSON document; only arrays and objects count as documents."""
    try:
        document = json.loads(payload)
    except ValueError as exc:
        raise EspError(f"invalid JSON: {exc}") from exc
    if not isinstance(document, (list, dict)):
        raise EspError("JSON document must be an array or an object")
    return document


def parse_latest_zones(payload: bytes | str) -> dict[int, tuple[int, float]]:
    """Zone results of the latest training in a /result reply.

    The reply is an array of trainings, each an array whose first element maps
    ``zoneN`` to ``{"impact": ..., "time": ...}``. Returns ``{zone: (impact, time)}``.
    """
    document = _load_document(payload)
    if not isinstance(document, list):
        raise EspError("expected an array of trainings")
    if not document:
        raise EspError("the array of trainings is empty")
    inner = document[-1] if isinstance(document[-1], list) else []
    if not inner:
        raise EspError("the latest training holds no data")
    zone_data = _as_object(inner[0])
    results = {}
    for zone in range(1, ZONE_COUNT + 1):
        key = f"zone{zone}"
        if key in zone_data:
            data = _as_object(zone_data[key])
            results[zone] = (_as_int(data.get("impact")), _as_float(data.get("time")))
    return results


def parse_trainings(payload: bytes | str) -> list:
    """The array of training records in a /readfile reply."""
    document = _load_document(payload)
    if not isinstance(document, list):
        raise EspError("expected an array of trainings")
    return document


def format_zone_result(impact: int, time: float) -> str:
    """Button caption for one zone's result."""
    return f"Сила: {impact}\nВремя: {time:.2f}с"


def parse_statistic_dump(
    payload: bytes | str,
) -> list[tuple[str, dict[str, tuple[int, float]]]]:
    """Decode a percent-encoded statistics array.

    Returns ``(username, {zone_key: (impact, time)})`` per record, with zone
    keys in sorted order.
    """
    raw = payload.encode("utf-8") if isinstance(payload, str) else payload
    text = raw.decode("utf-8", errors="replace")
    decoded = unquote_to_bytes(text.encode("utf-8"))
    document = _load_document(decoded)
    if not isinstance(document, list):
        raise EspError("expected an array, got an object")
    records = []
    for value in document:
        stats = _as_object(value)
        zones = _as_object(stats.get("zones"))
        parsed = {}
        for key in sorted(zones):
            zone = _as_object(zones[key])
            parsed[key] = (_as_int(zone.get("impact")), _as_float(zone.get("time")))
        records.append((_as_str(stats.get("username")), parsed))
    return records


class EspClient:
    """Talks to the receiver over plain HTTP with JSON bodies."""

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.host = host
        self.port = port
        self.timeout = timeout

    def _url(self, path: str, username: str | None = None) -> str:
        netloc = self.host if self.port == DEFAULT_PORT else f"{self.host}:{self.port}"
        query = "" if username is None else "?" + urlencode({"username": username})
        return f"http://{netloc}{path}{query}"

    def _request(
        self, path: str, *, username: str | None = None, body: dict | None = None
    ) -> bytes:
        url = self._url(path, username)
        if body is None:
            request = Request(url, method="GET")
        else:
            request = Request(
                url,
                data=json.dumps(body, ensure_ascii=False).encode("utf-8"),
                headers={"Content-Type": "application/json"},
                method="POST",
            )
        try:
            with urlopen(request, timeout=self.timeout) as response:
                reply = response.read()
        except (OSError, http.client.HTTPException) as exc:
            raise EspError(f"request to {url} failed: {exc}") from exc
        log.debug("reply from %s: %r", url, reply)
        return reply

    def login(self, username: str) -> bytes:
        """Announce the user to the receiver and return its raw reply."""
        return self._request("/login", body={"username": username})

    def send_sequence(self, username: str, sequence: Iterable[int] | str) -> bytes:
        """Send a lamp sequence, as a string of zone digits, for the user."""
        encoded = sequence if isinstance(sequence, str) else sequence_to_string(sequence)
        return self._request(
            "/sequence", body={"username": username, "sequence": encoded}
        )

    def poll_result(self, username: str) -> dict[int, tuple[int, float]]:
        """Fetch and parse the latest zone results for the user."""
        return parse_latest_zones(self._request("/result", username=username))

    def read_file(self, username: str) -> list:
        """Fetch and parse the stored training records."""
        return parse_trainings(self._request("/readfile", username=username))