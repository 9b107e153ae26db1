import sys
from pathlib import Path

import pytest
from typer.testing import CliRunner

from serverhub import handler
from serverhub.cli import app
from serverhub.handler import Registry

runner = CliRunner()

APP_CODE = """
def application(environ, start_response):
    start_response("200 OK", [])
    return [b"ok"]
"""


class RecordingHandler:
    calls: list = []

    @classmethod
    def run(cls, app, options=None):
        cls.calls.append((app, dict(options or {})))


@pytest.fixture
def registry(monkeypatch: pytest.MonkeyPatch) -> Registry:
    fresh = Registry()
    monkeypatch.setattr(handler, "REGISTRY", fresh)
    RecordingHandler.calls = []
    return fresh


@pytest.fixture
def app_reference(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    module_name = "serverhub_cli_app"
    (tmp_path / f"{module_name}.py").write_text(APP_CODE, encoding="utf-8")
    monkeypatch.syspath_prepend(str(tmp_path))
    yield f"{module_name}:application"
    sys.modules.pop(module_name, None)


def test_which_prints_first_available_handler(registry: Registry) -> None:
    result = runner.invoke(app, ["which", "boom", "cgi"])

    assert result.exit_code == 0
    assert "serverhub.handler.cgi.CGI" in result.output


def test_which_fails_when_nothing_resolves(registry: Registry) -> None:
    result = runner.invoke(app, ["which", "boom", "not_existing"])

    assert result.exit_code == 1


def test_handlers_lists_registrations(registry: Registry) -> None:
    result = runner.invoke(app, ["handlers"])

    assert result.exit_code == 0
    assert "cgi -> serverhub.handler.cgi.CGI" in result.output
    assert "wsgiref -> serverhub.handler.wsgiref.WSGIRef" in result.output


def test_serve_runs_picked_handler(registry: Registry, app_reference: str) -> None:
    registry.register("recording", RecordingHandler)

    result = runner.invoke(app, ["serve", app_reference, "-s", "boom", "-s", "recording", "--port", "9001"])

    assert result.exit_code == 0
    assert len(RecordingHandler.calls) == 1
    served_app, options = RecordingHandler.calls[0]
    assert served_app.__name__ == "application"
    assert options == {"port": 9001}


def test_serve_uses_environment_default(
    registry: Registry, app_reference: str, monkeypatch: pytest.MonkeyPatch
) -> None:
    registry.register("recording", RecordingHandler)
    monkeypatch.delenv("PHP_FCGI_CHILDREN", raising=False)
    monkeypatch.delenv("REQUEST_METHOD", raising=False)
    monkeypatch.setenv("SERVERHUB_HANDLER", "recording")

    result = runner.invoke(app, ["serve", app_reference, "--host", "127.0.0.1"])

    assert result.exit_code == 0
    assert RecordingHandler.calls[0][1] == {"host": "127.0.0.1"}


def test_serve_with_config_registers_handlers(registry: Registry, app_reference: str, tmp_path: Path) -> None:
    cfg_path = tmp_path / "handlers.yaml"
    cfg_path.write_text(
        f"handlers:\n  recording: {RecordingHandler.__module__}.RecordingHandler\n",
        encoding="utf-8",
    )

    result = runner.invoke(app, ["serve", app_reference, "--config", str(cfg_path), "--server", "recording"])

    assert result.exit_code == 0
    assert "recording" in registry
    assert len(RecordingHandler.calls) == 1


def test_serve_fails_for_unknown_handler(registry: Registry, app_reference: str) -> None:
    result = runner.invoke(app, ["serve", app_reference, "--server", "boom"])

    assert result.exit_code == 1


def test_serve_fails_for_missing_application(registry: Registry) -> None:
    result = runner.invoke(app, ["serve", "serverhub_missing_app:application", "--server", "cgi"])

    assert result.exit_code == 1


class FailingHandler:
    @classmethod
    def run(cls, app, options=None):
        raise OSError(98, "Address already in use")


def test_serve_reports_server_failure(registry: Registry, app_reference: str) -> None:
    registry.register("failing", FailingHandler)

    result = runner.invoke(app, ["serve", app_reference, "--server", "failing"])

    assert result.exit_code == 1
    assert not isinstance(result.exception, OSError)
