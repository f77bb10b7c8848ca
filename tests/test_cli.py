import importlib
import os
import sys

import pytest

# run.py is imported as a module; parse_args + main are exercised with patched
# crawler.server entry points so no server is started.


@pytest.fixture()
def run_module():
    # Clean import each time (run.py reads VERSION once)
    if "run" in sys.modules:
        del sys.modules["run"]
    return importlib.import_module("run")


@pytest.fixture()
def fake_server(monkeypatch):
    import crawler.server as server_mod

    calls = {}

    def fake_start_server(host, port, debug):
        calls["server"] = {"host": host, "port": port, "debug": debug}

    def fake_init_db():
        calls["init_db"] = True

    monkeypatch.setattr(server_mod, "start_server", fake_start_server)
    monkeypatch.setattr(server_mod, "init_db", fake_init_db)
    # main() installs a SIGINT handler; keep pytest's own
    monkeypatch.setattr("signal.signal", lambda *a, **k: None)
    return calls


def test_version_flag_outputs_version(run_module, capsys):
    with pytest.raises(SystemExit) as exc:
        run_module.parse_args(["--version"])
    assert exc.value.code == 0
    out = capsys.readouterr().out
    assert run_module.__version__ in out
    assert "Dungeon Crawler Server" in out


def test_version_read_from_file(run_module):
    assert run_module.__version__ == (run_module.ROOT_DIR / "VERSION").read_text().strip()


def test_default_command_is_server(run_module):
    assert run_module.parse_args([]).command == "server"


def test_server_uses_environment(monkeypatch, run_module, fake_server, capsys):
    monkeypatch.setenv("PORT", "5555")
    monkeypatch.setenv("HOST", "127.0.0.1")
    assert run_module.main(["server"]) == 0
    assert fake_server["server"] == {"host": "127.0.0.1", "port": 5555, "debug": False}
    assert "Dungeon Crawler Bootup" in capsys.readouterr().out


def test_server_flags_win(monkeypatch, run_module, fake_server):
    monkeypatch.setenv("PORT", "5555")
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    run_module.main(["server", "--port", "8080", "--host", "0.0.0.0", "--debug", "--db", "sqlite://"])
    assert fake_server["server"] == {"host": "0.0.0.0", "port": 8080, "debug": True}


def test_init_db_command(run_module, fake_server, capsys):
    assert run_module.main(["init-db"]) == 0
    assert fake_server.get("init_db") is True
    assert "server" not in fake_server
    assert "Database initialised" in capsys.readouterr().out


def test_env_file_argument(monkeypatch, tmp_path, run_module, fake_server):
    # work on a copy so values loaded from the file do not leak into other tests
    monkeypatch.setattr("os.environ", {k: v for k, v in os.environ.items() if k != "PORT"})
    env_file = tmp_path / ".env"
    env_file.write_text("PORT=6001\n")
    run_module.main(["--env-file", str(env_file), "server"])
    assert fake_server["server"]["port"] == 6001


def test_generate_preview_prints_maze(run_module, capsys):
    assert run_module.main(["generate-preview", "--width", "5", "--height", "3", "--seed", "42", "--metrics"]) == 0
    out = capsys.readouterr().out
    lines = out.splitlines()
    assert lines[0] == "Level 1  5x3  seed=42"
    grid = lines[1:8]
    assert all(len(line) == 21 for line in grid)
    assert "passages: 14" in out
    assert "perfect: True" in out


def test_generate_preview_rejects_bad_size(run_module, capsys):
    assert run_module.main(["generate-preview", "--width", "1", "--height", "3"]) == 1
    assert "[ERROR]" in capsys.readouterr().out
