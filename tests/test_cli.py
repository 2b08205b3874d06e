"""
Tests for the command-line entrypoint (nosscan.cli and the root main.py shim).
"""

from __future__ import annotations

import json

import pytest

import main
from nosscan import cli


class _RecordingClient:
    """Stands in for SolanaRpcClient and records how it was built."""

    instances = []

    def __init__(self, url, timeout):
        self.url = url
        _RecordingClient.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        pass


@pytest.fixture
def recording_client(monkeypatch):
    monkeypatch.setattr(cli, "SolanaRpcClient", _RecordingClient)
    _RecordingClient.instances = []
    return _RecordingClient


@pytest.fixture
def empty_config(tmp_path):
    cfg = tmp_path / "config.json"
    cfg.write_text(json.dumps([]))
    return str(cfg)


def test_bad_config_is_fatal(tmp_path, recording_client, caplog):
    rc = cli.main(["--config", str(tmp_path / "missing.json")])

    assert rc == 1
    assert recording_client.instances == []
    assert any("Error reading config file" in r.getMessage() for r in caplog.records)


@pytest.mark.parametrize("value", ["nan", "inf", "1e20"])
def test_bad_stale_hours_is_fatal(empty_config, recording_client, monkeypatch, caplog, value):
    monkeypatch.setenv("NOSSCAN_STALE_HOURS", value)

    rc = cli.main(["--config", empty_config])

    assert rc == 1
    assert recording_client.instances == []
    assert any("NOSSCAN_STALE_HOURS" in r.getMessage() for r in caplog.records)


def test_run_with_empty_account_list(empty_config, recording_client, capsys):
    rc = cli.main(["--config", empty_config, "--rpc-url", "http://rpc.test", "--delay", "0"])

    assert rc == 0
    assert [c.url for c in recording_client.instances] == ["http://rpc.test"]
    assert "Last Update" in capsys.readouterr().out


def test_parse_args_defaults():
    args = cli.parse_args([])
    assert args.config == "config.json"
    assert args.rpc_url is None
    assert args.pacing_seconds is None
    assert args.log_level == "INFO"


def test_delay_flag():
    assert cli.parse_args(["--delay", "2.5"]).pacing_seconds == 2.5


@pytest.mark.parametrize("value", ["-1", "nan", "inf", "soon"])
def test_delay_flag_rejects_bad_values(value, capsys):
    with pytest.raises(SystemExit) as info:
        cli.parse_args(["--delay", value])
    assert info.value.code == 2
    assert "--delay" in capsys.readouterr().err


def test_root_main_is_the_cli_entrypoint():
    assert main.main is cli.main
