import json

from crawler.logging_utils import _format, get_logger


def test_key_value_line(capsys, monkeypatch):
    monkeypatch.delenv("CRAWLER_LOG_JSON", raising=False)
    get_logger("crawler.test").info(event="move", character_id=3, blocked=False, note="north wall", skip=None)
    line = capsys.readouterr().out.strip()
    assert line.startswith("level=info ts=")
    assert "logger=crawler.test" in line
    assert "event=move" in line
    assert "character_id=3" in line
    assert "blocked=false" in line
    assert "note=north_wall" in line
    assert "skip" not in line


def test_threshold_from_environment(capsys, monkeypatch):
    log = get_logger("crawler.test")
    monkeypatch.setenv("CRAWLER_LOG_LEVEL", "info")
    log.debug(event="hidden")
    assert capsys.readouterr().out == ""
    monkeypatch.setenv("CRAWLER_LOG_LEVEL", "debug")
    log.debug(event="shown")
    assert "event=shown" in capsys.readouterr().out
    monkeypatch.setenv("CRAWLER_LOG_LEVEL", "error")
    log.warn(event="quiet")
    assert capsys.readouterr().out == ""


def test_errors_go_to_stderr(capsys):
    get_logger("crawler.test").error(event="data_integrity", dungeon_id=9)
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "event=data_integrity" in captured.err


def test_json_mode(capsys, monkeypatch):
    monkeypatch.setenv("CRAWLER_LOG_JSON", "1")
    get_logger("crawler.test").info(event="descend", depth=2, level=2)
    rec = json.loads(capsys.readouterr().out)
    assert rec["level"] == "info"
    assert rec["depth"] == 2
    assert rec["event"] == "descend"
    assert rec["logger"] == "crawler.test"


def test_bind_adds_context(capsys, monkeypatch):
    monkeypatch.delenv("CRAWLER_LOG_JSON", raising=False)
    base = get_logger("crawler.test")
    bound = base.bind(character_id=7)
    bound.info(event="ascend")
    assert "character_id=7" in capsys.readouterr().out
    base.info(event="plain")
    assert "character_id" not in capsys.readouterr().out


def test_logger_cache():
    assert get_logger("crawler.same") is get_logger("crawler.same")


def test_format_keeps_numbers(monkeypatch):
    monkeypatch.delenv("CRAWLER_LOG_JSON", raising=False)
    line = _format("warn", {"runtime_ms": 1.5, "attempt": 2, "level": 3})
    assert "runtime_ms=1.5" in line and "attempt=2" in line
    assert line.count("level=") == 1
