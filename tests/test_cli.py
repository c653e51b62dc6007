"""Tests for the doit command-line interface, run in-process against a fake transport."""

import json

import pytest
from conftest import request_json, request_path

from doit_console import cli
from doit_console.sdk import DoitClient


@pytest.fixture
def use_client(monkeypatch, client):
    """Route DoitClient.from_env to the fake-transport client."""
    captured = {}

    def from_env(**kwargs):
        captured.update(kwargs)
        return client

    monkeypatch.setattr(DoitClient, "from_env", staticmethod(from_env))
    return captured


def run(capsys, *args):
    """Run the CLI and return (exit_code, parsed stdout)."""
    code = 0
    try:
        cli.main(list(args))
    except SystemExit as e:
        code = e.code or 0
    out = capsys.readouterr().out
    return code, json.loads(out) if out.strip() else None


def test_get(capsys, use_client, opener):
    opener.queue(200, {"id": "attr-1", "name": "prod", "formula": "A", "components": []})

    code, output = run(capsys, "attribution", "get", "attr-1")

    assert code == 0
    assert output["id"] == "attr-1"
    assert request_path(opener.last) == "/analytics/v1/attributions/attr-1/"


def test_create_from_file(capsys, use_client, opener, tmp_path):
    body = tmp_path / "group.json"
    body.write_text(json.dumps({"name": "envs", "attributions": ["a1", "a2"]}))
    opener.queue(201, {"id": "grp-1", "name": "envs", "attributions": ["a1", "a2"]})

    code, output = run(capsys, "attribution-group", "create", str(body))

    assert code == 0
    assert output == {"id": "grp-1", "name": "envs", "attributions": ["a1", "a2"]}
    assert request_json(opener.last) == {"name": "envs", "attributions": ["a1", "a2"]}


def test_update_reads_back(capsys, use_client, opener, tmp_path):
    body = tmp_path / "report.json"
    body.write_text(json.dumps({"name": "renamed", "config": {"currency": "EUR"}}))
    opener.queue(200, {"id": "rep-1"})
    opener.queue(200, {"id": "rep-1", "name": "renamed", "config": {"currency": "EUR"}})

    code, output = run(capsys, "report", "update", "rep-1", str(body))

    assert code == 0
    assert [r.get_method() for r in opener.requests] == ["PATCH", "GET"]
    assert request_json(opener.requests[0])["id"] == "rep-1"
    assert request_path(opener.last) == "/analytics/v1/reports/rep-1/config"
    assert output["config"] == {"currency": "EUR"}


def test_delete(capsys, use_client, opener):
    opener.queue(200)

    code, output = run(capsys, "report", "delete", "rep-1")

    assert code == 0
    assert output["success"] is True


def test_api_error_exits_with_json(capsys, use_client, opener):
    opener.queue(404, "missing")

    code, output = run(capsys, "attribution", "get", "nope")

    assert code == 1
    assert output["type"] == "APIError"
    assert output["status"] == 404


def test_missing_file_is_reported(capsys, use_client, opener, tmp_path):
    code, output = run(capsys, "attribution", "create", str(tmp_path / "absent.json"))

    assert code == 1
    assert "File not found" in output["error"]
    assert opener.requests == []


def test_unreadable_path_is_reported(capsys, use_client, opener, tmp_path):
    code, output = run(capsys, "report", "create", str(tmp_path))

    assert code == 1
    assert output["type"] == "DoitError"
    assert "Could not read" in output["error"]
    assert opener.requests == []


def test_non_utf8_file_is_reported(capsys, use_client, opener, tmp_path):
    body = tmp_path / "latin1.json"
    body.write_bytes(b"\xff\xfe{}")

    code, output = run(capsys, "attribution", "update", "attr-1", str(body))

    assert code == 1
    assert "not UTF-8" in output["error"]
    assert opener.requests == []


def test_global_options_are_passed_to_settings(capsys, use_client, opener):
    opener.queue(200)

    run(capsys, "--host", "https://h.test", "-c", "ctx-9", "report", "delete", "rep-1")

    assert use_client == {"host": "https://h.test", "customer_context": "ctx-9"}


def test_configuration_error_exits(capsys, monkeypatch):
    for var in ("DOIT_HOST", "DOIT_API_TOKEN", "DOIT_CUSTOMER_CONTEXT"):
        monkeypatch.delenv(var, raising=False)

    code, output = run(capsys, "attribution", "get", "attr-1")

    assert code == 1
    assert output["type"] == "ConfigurationError"


def test_no_command_prints_help(capsys):
    with pytest.raises(SystemExit) as exc_info:
        cli.main([])
    assert exc_info.value.code == 0
    assert "doit" in capsys.readouterr().out


def test_kind_without_verb_prints_help(capsys, monkeypatch):
    for var in ("DOIT_HOST", "DOIT_API_TOKEN", "DOIT_CUSTOMER_CONTEXT"):
        monkeypatch.delenv(var, raising=False)

    def from_env(**kwargs):
        raise AssertionError("no client should be built")

    monkeypatch.setattr(DoitClient, "from_env", staticmethod(from_env))

    with pytest.raises(SystemExit) as exc_info:
        cli.main(["attribution-group"])

    assert exc_info.value.code == 0
    out = capsys.readouterr().out
    assert "usage: doit attribution-group" in out
    assert "delete" in out
