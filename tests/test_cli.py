from __future__ import annotations

from typer.testing import CliRunner

from adapters.cloud import Cloud
from cli import main as cli_main
from conftest import NETWORK_ENDPOINT, NETWORK_ROOT, FakeExecutor, port_record, version_document
from core.config import _parse_env_lines, get_user_env_file
from core.session import Session

runner = CliRunner()


class _ClosingFake(FakeExecutor):
    def close(self) -> None:
        pass

    def __enter__(self) -> "_ClosingFake":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _fake_executor() -> _ClosingFake:
    fake = _ClosingFake()
    fake.add("GET", NETWORK_ENDPOINT, 200, {"versions": [version_document(NETWORK_ROOT)]})
    return fake


def test_discover(monkeypatch):
    fake = _fake_executor()
    monkeypatch.setattr(cli_main, "_build_executor", lambda settings: fake)

    result = runner.invoke(cli_main.app, ["discover", NETWORK_ENDPOINT])

    assert result.exit_code == 0, result.output
    assert NETWORK_ROOT in result.output


def test_discover_failure_exits_non_zero(monkeypatch):
    fake = _ClosingFake()
    monkeypatch.setattr(cli_main, "_build_executor", lambda settings: fake)

    result = runner.invoke(cli_main.app, ["discover", "https://cloud.test/nothing"])

    assert result.exit_code == 1
    assert "was not found" in result.output


def test_ports(monkeypatch):
    fake = _fake_executor()
    fake.add("GET", NETWORK_ROOT + "ports", 200, {"ports": [port_record("port-1", name="web")]})
    monkeypatch.setattr(
        cli_main,
        "_build_cloud",
        lambda settings: Cloud(Session(fake, {"network": NETWORK_ENDPOINT})),
    )

    result = runner.invoke(cli_main.app, ["ports", "--name", "web", "--limit", "5"])

    assert result.exit_code == 0, result.output
    assert "port-1" in result.output
    (call,) = fake.calls_to("GET", NETWORK_ROOT + "ports")
    assert call.query == [("name", "web"), ("limit", "5")]


def test_configure_writes_user_env(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

    result = runner.invoke(
        cli_main.app,
        ["configure", "--token", "tok", "--endpoint", "network=https://cloud.test:9696/"],
    )

    assert result.exit_code == 0, result.output
    env_file = get_user_env_file()
    assert env_file == tmp_path / "nimbus" / ".env"
    values = _parse_env_lines(env_file.read_text(encoding="utf-8"))
    assert values["NIMBUS_AUTH_TOKEN"] == "tok"
    assert values["NIMBUS_ENDPOINTS"] == '{"network": "https://cloud.test:9696/"}'


def test_configure_rejects_malformed_endpoint(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

    result = runner.invoke(cli_main.app, ["configure", "--endpoint", "network"])

    assert result.exit_code != 0

