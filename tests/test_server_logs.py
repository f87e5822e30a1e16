import json

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from server_logs import endpoints
from server_logs.chooseLogType import get_logger
from server_logs.base import Logger
from server_logs.sinks import CompositeLogger, FileLogger, JSONLogger, StdoutLogger


def test_dev_mode_logs_to_stdout():
    assert isinstance(get_logger(mode="dev", log_type="decks"), StdoutLogger)


def test_prod_mode_logs_to_file_and_json(tmp_path):
    logger = get_logger(mode="prod", log_type="decks", base_path=tmp_path)
    assert isinstance(logger, CompositeLogger)
    assert [type(l) for l in logger.loggers] == [FileLogger, JSONLogger]


def test_stdout_logger(capsys):
    StdoutLogger(log_type="decks").warning("deck_card_not_found", deck_id="aggro")
    out = capsys.readouterr().out
    assert "[decks] WARN deck_card_not_found" in out
    assert "'deck_id': 'aggro'" in out


def test_json_logger(capsys):
    JSONLogger(log_type="reference").error("reference_fetch_failed", status=502)
    record = json.loads(capsys.readouterr().out)
    assert record["level"] == "ERROR"
    assert record["event"] == "reference_fetch_failed"
    assert record["data"] == {"status": 502}


def test_file_logger_writes_json_lines(tmp_path):
    logger = FileLogger(log_type="decks", base_path=tmp_path)
    logger.info("deck_card_added", deck_id="aggro", deck_size=1)
    logger.error("deck_save_failed", deck_id="aggro")
    lines = (tmp_path / "decks.log").read_text(encoding="utf-8").splitlines()
    records = [json.loads(line) for line in lines]
    assert [r["level"] for r in records] == ["INFO", "ERROR"]
    assert records[0]["deck_id"] == "aggro"
    assert records[0]["log_type"] == "decks"


def test_composite_fans_out():
    calls = []

    class Recorder(Logger):
        def __init__(self, log_type):
            self.log_type = log_type

        def emit(self, level, msg, data):
            calls.append((self.log_type, level, msg, data))

    CompositeLogger(Recorder("a"), Recorder("b")).debug("event", x=1)
    assert calls == [("a", "DEBUG", "event", {"x": 1}), ("b", "DEBUG", "event", {"x": 1})]


def test_bind_adds_context(tmp_path):
    logger = FileLogger(log_type="decks", base_path=tmp_path)
    bound = logger.bind(deck_id="aggro", req_id="abc")
    bound.info("deck_card_added", req_id="override")
    record = json.loads((tmp_path / "decks.log").read_text(encoding="utf-8"))
    assert record["deck_id"] == "aggro"
    assert record["req_id"] == "override"
    assert bound.log_type == "decks"


class TestLogEndpoints:

    @pytest.fixture
    def client(self, tmp_path, monkeypatch):
        monkeypatch.setattr(endpoints, "LOG_DIR", tmp_path)
        logger = FileLogger(log_type="decks", base_path=tmp_path)
        for i in range(5):
            logger.info("deck_card_added", deck_id=f"deck{i}")
        logger.warning("deck_card_not_found", deck_id="deck9")
        app = FastAPI()
        app.include_router(endpoints.router)
        return TestClient(app)

    def test_tail(self, client):
        r = client.get("/admin/logs/tail", params={"log_type": "decks", "lines": 2})
        body = r.json()
        assert body["count"] == 6
        assert len(body["lines"]) == 2
        assert "deck_card_not_found" in body["lines"][-1]

    def test_head(self, client):
        r = client.get("/admin/logs/head", params={"log_type": "decks", "lines": 1})
        assert "deck0" in r.json()["lines"][0]

    def test_search_by_level(self, client):
        r = client.get("/admin/logs/search", params={"log_type": "decks", "level": "WARN"})
        assert r.json()["count"] == 1

    def test_search_contains(self, client):
        r = client.get("/admin/logs/search", params={"log_type": "decks", "contains": "DECK3"})
        assert r.json()["count"] == 1

    def test_missing_log(self, client):
        r = client.get("/admin/logs/tail", params={"log_type": "reference"})
        assert r.json()["lines"] == []

    def test_unknown_log_type(self, client):
        assert client.get("/admin/logs/tail", params={"log_type": "auction"}).status_code == 422
        assert client.get("/admin/logs/raw/auction").status_code == 400

    def test_available(self, client):
        names = [log["name"] for log in client.get("/admin/logs/available").json()["logs"]]
        assert names == ["decks"]

    def test_raw(self, client):
        r = client.get("/admin/logs/raw/decks")
        assert r.status_code == 200
        assert r.text.count("\n") == 6
        assert client.get("/admin/logs/raw/server").status_code == 404
