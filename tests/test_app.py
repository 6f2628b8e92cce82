"""
Config, logging, the command line entry point and the build script.
"""
import importlib.util
import json
import logging
import os
import sys

import pytest

import main
from utils import load_config, resolve_server_address, setup_logging

ROOT_DIR = os.path.dirname(os.path.dirname(os.path.realpath(__file__)))

_spec = importlib.util.spec_from_file_location("site_build", os.path.join(ROOT_DIR, "scripts", "build.py"))
build = importlib.util.module_from_spec(_spec)
_spec.loader.exec_module(build)


class TestConfig:
    def test_repository_config_loads(self):
        config = load_config(os.path.join(ROOT_DIR, "config.json"))
        assert config["particle_field"]["particle_count"] == 48
        assert config["particle_field"]["link_threshold"] == 90.0

    def test_missing_config_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "nope.json"))

    def test_bad_json_raises(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(json.JSONDecodeError):
            load_config(str(path))

    def test_non_object_config_raises(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")
        with pytest.raises(ValueError):
            load_config(str(path))

    def test_port_from_environment_wins(self):
        config = {"server": {"host": "127.0.0.1", "port": 8000}}
        assert resolve_server_address(config, {"PORT": "4321"}) == ("127.0.0.1", 4321)
        assert resolve_server_address(config, {}) == ("127.0.0.1", 8000)

    def test_default_address(self):
        assert resolve_server_address({}, {}) == ("0.0.0.0", 3000)

    def test_bad_port_raises(self):
        with pytest.raises(ValueError):
            resolve_server_address({}, {"PORT": "eighty"})


def test_setup_logging_creates_log_dir(tmp_path):
    log_file = tmp_path / "logs" / "site.log"
    setup_logging({"logging": {"level": "debug", "log_file": str(log_file)}})
    try:
        logging.info("hello")
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 2
        assert log_file.exists()
    finally:
        for handler in logging.getLogger().handlers:
            handler.close()
        logging.getLogger().handlers.clear()


def test_main_reports_missing_config(tmp_path, capsys):
    assert main.main(["--config", str(tmp_path / "missing.json"), "export"]) == 1
    assert "FATAL" in capsys.readouterr().out


def test_export_site(tmp_path):
    written = main.export_site({}, str(tmp_path))
    assert len(written) == 4
    index = tmp_path / "index.html"
    assert index.exists()
    assert "WEB ARCHITECTURE, CORRECTED." in index.read_text(encoding="utf-8")
    assert (tmp_path / "manifesto" / "index.html").exists()
    assert (tmp_path / "public" / "styles.css").exists()


def test_parser_commands():
    parser = main.build_parser()
    args = parser.parse_args(["serve", "--port", "5000"])
    assert args.command == "serve" and args.port == 5000
    assert parser.parse_args(["export", "--out", "x"]).out == "x"


class TestBuildScript:
    def test_steps_cover_compile_and_export(self):
        names = [name for name, _ in build.build_steps("python")]
        assert names == ["compile", "export"]

    def test_run_steps_success(self, tmp_path):
        build.run_steps([("a", [sys.executable, "-c", "pass"]),
                         ("b", [sys.executable, "-c", "pass"])], cwd=str(tmp_path))

    def test_run_steps_reports_every_failure(self, tmp_path):
        with pytest.raises(RuntimeError) as excinfo:
            build.run_steps([("ok", [sys.executable, "-c", "pass"]),
                             ("bad", [sys.executable, "-c", "raise SystemExit(3)"])],
                            cwd=str(tmp_path))
        assert "bad failed with code 3" in str(excinfo.value)
        assert "ok" not in str(excinfo.value)

    def test_main_logs_through_project_config(self, tmp_path, monkeypatch):
        log_file = tmp_path / "logs" / "build.log"
        config = tmp_path / "config.json"
        config.write_text(json.dumps({"logging": {"level": "INFO", "log_file": str(log_file)}}))
        monkeypatch.setattr(build, "run_steps", lambda steps: None)
        try:
            assert build.main(str(config)) == 0
            assert "Build complete!" in log_file.read_text()
        finally:
            for handler in logging.getLogger().handlers:
                handler.close()
            logging.getLogger().handlers.clear()

    def test_main_reports_missing_config(self, tmp_path, capsys):
        assert build.main(str(tmp_path / "missing.json")) == 1
        assert "FATAL" in capsys.readouterr().out
