import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import parse_qs, quote, urlsplit

import pytest

from strikepad.client import (
    EspClient,
    EspError,
    format_zone_result,
    parse_latest_zones,
    parse_statistic_dump,
    parse_trainings,
)


@pytest.fixture
def receiver():
    state = {"requests": [], "responses": {}}

    class Handler(BaseHTTPRequestHandler):
        def _reply(self, body):
            split = urlsplit(self.path)
            state["requests"].append(
                {
                    "method": self.command,
                    "path": split.path,
                    "query": parse_qs(split.query),
                    "content_type": self.headers.get("Content-Type"),
                    "body": body,
                }
            )
            status, payload = state["responses"].get(split.path, (200, b"ok"))
            self.send_response(status)
            self.send_header("Content-Length", str(len(payload)))
            self.end_headers()
            self.wfile.write(payload)

        def do_GET(self):
            self._reply(b"")

        def do_POST(self):
            length = int(self.headers.get("Content-Length", 0))
            self._reply(self.rfile.read(length))

        def log_message(self, *args):
            pass

    server = ThreadingHTTPServer(("127.0.0.1", 0), Handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    state["port"] = server.server_address[1]
    yield state
    server.shutdown()
    server.server_close()


def test_login_posts_username_as_json(receiver):
    client = EspClient("127.0.0.1", receiver["port"], 5.0)
    reply = client.login("Иван")
    assert reply == b"ok"
    request = receiver["requests"][0]
    assert request["method"] == "POST"
    assert request["path"] == "/login"
    assert request["content_type"] == "application/json"
    assert json.loads(request["body"]) == {"username": "Иван"}


def test_send_sequence_encodes_digits(receiver):
    client = EspClient("127.0.0.1", receiver["port"], 5.0)
    reply = client.send_sequence("anna", [1, 7, 3])
    assert reply == b"ok"
    body = json.loads(receiver["requests"][0]["body"])
    assert body == {"username": "anna", "sequence": "173"}
    assert receiver["requests"][0]["path"] == "/sequence"


def test_send_sequence_accepts_string(receiver):
    client = EspClient("127.0.0.1", receiver["port"], 5.0)
    reply = client.send_sequence("anna", "555")
    assert reply == b"ok"
    assert json.loads(receiver["requests"][0]["body"])["sequence"] == "555"


def test_poll_result_parses_reply_and_encodes_username(receiver):
    payload = json.dumps([[{"zone2": {"impact": 30, "time": 0.75}}]]).encode()
    receiver["responses"]["/result"] = (200, payload)
    client = EspClient("127.0.0.1", receiver["port"], 5.0)
    zones = client.poll_result("Иван Петров")
    assert zones == {2: (30, 0.75)}
    request = receiver["requests"][0]
    assert request["method"] == "GET"
    assert request["query"] == {"username": ["Иван Петров"]}


def test_read_file_returns_records(receiver):
    records = [{"username": "anna", "type": "нокаутер"}]
    receiver["responses"]["/readfile"] = (200, json.dumps(records).encode())
    client = EspClient("127.0.0.1", receiver["port"], 5.0)
    assert client.read_file("anna") == records
    assert receiver["requests"][0]["path"] == "/readfile"


def test_http_error_status_raises(receiver):
    receiver["responses"]["/readfile"] = (500, b"fail")
    client = EspClient("127.0.0.1", receiver["port"], 5.0)
    with pytest.raises(EspError):
        client.read_file("anna")


def test_unreachable_host_raises():
    client = EspClient("127.0.0.1", 1, 0.5)
    with pytest.raises(EspError):
        client.login("anna")


def test_parse_latest_zones_uses_last_training_first_entry():
    payload = json.dumps(
        [
            [{"zone1": {"impact": 10, "time": 0.5}}],
            [
                {"zone3": {"impact": 42, "time": 1.25}, "zone9": {"impact": 1}},
                {"zone4": {"impact": 99, "time": 2.0}},
            ],
        ]
    )
    assert parse_latest_zones(payload) == {3: (42, 1.25)}


def test_parse_latest_zones_non_integral_impact_becomes_zero():
    payload = json.dumps([[{"zone1": {"impact": 2.5, "time": 1}}]])
    assert parse_latest_zones(payload) == {1: (0, 1.0)}


@pytest.mark.parametrize(
    "payload",
    [b"", b"not json", b'{"zone1": {}}', b"[]", b"[[]]", b"[{}]", b"7"],
)
def test_parse_latest_zones_rejects_bad_shapes(payload):
    with pytest.raises(EspError):
        parse_latest_zones(payload)


def test_parse_trainings_requires_array():
    assert parse_trainings(b'[{"username": "a"}, 3]') == [{"username": "a"}, 3]
    with pytest.raises(EspError):
        parse_trainings(b'{"username": "a"}')
    with pytest.raises(EspError):
        parse_trainings(b"{broken")


def test_format_zone_result_pins_caption():
    assert format_zone_result(120, 1.5) == "Сила: 120\nВремя: 1.50с"


def test_format_zone_result_rounds_to_two_places():
    caption = format_zone_result(7, 0.125)
    impact_line, time_line = caption.split("\n")
    assert impact_line == "Сила: 7"
    assert time_line.endswith("с")
    assert len(time_line.split(": ")[1].rstrip("с").split(".")[1]) == 2


def test_parse_statistic_dump_decodes_percent_encoding_and_sorts_keys():
    document = [
        {
            "username": "Иван",
            "zones": {
                "zone2": {"impact": 5, "time": 0.25},
                "zone1": {"impact": 8, "time": 0.5},
            },
        }
    ]
    payload = quote(json.dumps(document, ensure_ascii=False)).encode()
    records = parse_statistic_dump(payload)
    assert records == [("Иван", {"zone1": (8, 0.5), "zone2": (5, 0.25)})]
    assert list(records[0][1]) == ["zone1", "zone2"]


def test_parse_statistic_dump_rejects_object_and_garbage():
    with pytest.raises(EspError):
        parse_statistic_dump(b'{"username": "a"}')
    with pytest.raises(EspError):
        parse_statistic_dump(b"%%%")