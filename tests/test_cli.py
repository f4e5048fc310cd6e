# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Eul Bite

"""Tests for the loganalytics-sdk command line."""

import io
import json

import pytest

from loganalytics_client import cli
from loganalytics_client.signing import build_string_to_sign, compute_signature

from conftest import RecordingTransport

WORKSPACE_ID = "cli-workspace"
FIXED_DATE = "Fri, 20 Jul 2018 16:28:59 GMT"


@pytest.fixture
def env(monkeypatch, workspace_key):
    monkeypatch.setenv("LOG_ANALYTICS_WORKSPACE_ID", WORKSPACE_ID)
    monkeypatch.setenv("LOG_ANALYTICS_WORKSPACE_KEY", workspace_key)


@pytest.fixture
def fake_transport(monkeypatch):
    """Replace the default aiohttp transport the client would build."""
    transport = RecordingTransport()
    monkeypatch.setattr(
        "loganalytics_client.client.AiohttpTransport",
        lambda timeout_ms: transport,
    )
    return transport


# =============================================================================
# sign
# =============================================================================


def test_sign_prints_signature(env, workspace_key, capsys):
    code = cli.main(["sign", "--date", FIXED_DATE, "--length", "2"])
    out = capsys.readouterr().out

    expected = compute_signature(workspace_key, build_string_to_sign(2, FIXED_DATE))
    assert code == 0
    assert f"Signature:      {expected}" in out
    assert f"Authorization:  SharedKey {WORKSPACE_ID}:{expected}" in out
    assert "POST\\n2\\napplication/json" in out


def test_sign_body_uses_utf8_length(env, workspace_key, capsys):
    cli.main(["sign", "--date", FIXED_DATE, "--body", "é"])
    out = capsys.readouterr().out
    expected = compute_signature(workspace_key, build_string_to_sign(2, FIXED_DATE))
    assert expected in out


def test_sign_check(env, workspace_key, capsys):
    signature = compute_signature(workspace_key, build_string_to_sign(2, FIXED_DATE))

    assert cli.main(["sign", "--date", FIXED_DATE, "--length", "2", "--check", signature]) == 0
    assert "VALID" in capsys.readouterr().out

    assert cli.main(["sign", "--date", FIXED_DATE, "--length", "3", "--check", signature]) == 1
    assert "INVALID" in capsys.readouterr().out


def test_sign_requires_key(monkeypatch, capsys):
    monkeypatch.delenv("LOG_ANALYTICS_WORKSPACE_KEY", raising=False)
    assert cli.main(["sign", "--length", "2"]) == 2


def test_sign_bad_key(capsys):
    code = cli.main(["--workspace-key", "not base64!!", "sign", "--length", "2"])
    assert code == 2
    assert "not valid base64" in capsys.readouterr().err


# =============================================================================
# send
# =============================================================================


def test_send_positional_body(env, fake_transport, capsys):
    code = cli.main(["send", "--log-type", "CliTest", "--time-field", "ts", '[{"a": 1}]'])

    assert code == 0
    request = fake_transport.last
    assert request.body == b'[{"a": 1}]'
    assert request.headers["Log-Type"] == "CliTest"
    assert request.headers["time-generated-field"] == "ts"
    assert request.headers["Authorization"].startswith(f"SharedKey {WORKSPACE_ID}:")
    assert "Sent 10 bytes to CliTest" in capsys.readouterr().out


def test_send_from_file(env, fake_transport, tmp_path):
    records = [{"message": "from file", "level": "info"}]
    path = tmp_path / "records.json"
    path.write_text(json.dumps(records), encoding="utf-8")

    assert cli.main(["send", "--log-type", "CliTest", "--file", str(path)]) == 0
    assert json.loads(fake_transport.last.body) == records


def test_send_from_stdin(env, fake_transport, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO('{"stdin": true}'))
    assert cli.main(["send", "--log-type", "CliTest", "-"]) == 0
    assert fake_transport.last.body == b'{"stdin": true}'


def test_send_missing_file(env, fake_transport, tmp_path, capsys):
    code = cli.main(["send", "--log-type", "CliTest", "--file", str(tmp_path / "nope.json")])
    assert code == 2
    assert fake_transport.requests == []


def test_send_rejected(env, fake_transport, capsys):
    fake_transport.status_code = 403
    fake_transport.reason = "Forbidden"

    assert cli.main(["send", "--log-type", "CliTest", "{}"]) == 1
    assert "Forbidden (403)" in capsys.readouterr().err


def test_send_blank_body(env, fake_transport, capsys):
    assert cli.main(["send", "--log-type", "CliTest", "   "]) == 1
    assert fake_transport.requests == []


def test_send_without_credentials(monkeypatch, fake_transport, capsys):
    monkeypatch.delenv("LOG_ANALYTICS_WORKSPACE_ID", raising=False)
    monkeypatch.delenv("LOG_ANALYTICS_WORKSPACE_KEY", raising=False)

    assert cli.main(["send", "--log-type", "CliTest", "{}"]) == 2
    assert "workspace_id" in capsys.readouterr().err


def test_no_command_prints_help(capsys):
    assert cli.main([]) == 0
    assert "loganalytics-sdk" in capsys.readouterr().out
