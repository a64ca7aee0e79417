"""Command line entry point."""

from __future__ import annotations

import json

import pytest
from loguru import logger

from builders import ALICE, TON, toncenter_doc

from tonbath.config import Config
from tonbath.main import apply_args, build_parser, main

ENV_VARS = ["BATH_LOGLEVEL", "BATH_FOR_ACCOUNT", "BATH_DISABLED_STRAWS", "ADDRESS_BOOK_PATH", "BATH_OUTPUT",
            "BATH_INDENT"]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield
    # main() points the sink at the captured stderr of the test
    logger.remove()


def _write(path, doc) -> str:
    path.write_text(json.dumps(doc))
    return str(path)


def test_summarizes_files(tmp_path) -> None:
    trace = _write(tmp_path / "trace.json", toncenter_doc())
    out = tmp_path / "out.json"
    assert main([trace, "--output", str(out), "--account", ALICE.to_raw()]) == 0

    results = json.loads(out.read_text())
    assert len(results) == 1
    entry = results[0]
    assert entry["trace"] == "tx1"
    assert [a["type"] for a in entry["actions"]] == ["TonTransfer"]
    assert entry["actions"][0]["TonTransfer"]["comment"] == "hello"
    assert entry["extra"] == -TON
    assert entry["value_flow"][ALICE.to_raw()]["ton"] == -TON


def test_several_files_and_stdout(tmp_path, capsys) -> None:
    first = _write(tmp_path / "a.json", toncenter_doc())
    second = _write(tmp_path / "b.json", {"traces": [toncenter_doc()]})
    assert main([first, second, "--disable-straw", "ton_transfer"]) == 0
    results = json.loads(capsys.readouterr().out)
    assert [r["file"] for r in results] == [first, second]
    assert [a["type"] for a in results[0]["actions"]] == ["TonTransfer"]
    assert results[0]["actions"][0]["TonTransfer"]["comment"] == "hello"


def test_bad_trace_exits_with_error(tmp_path) -> None:
    bad = _write(tmp_path / "bad.json", {"trace": {"tx_hash": "nope"}, "transactions": {}})
    assert main([bad]) == 1

    not_json = tmp_path / "broken.json"
    not_json.write_text("{")
    assert main([str(not_json)]) == 1

    doc = toncenter_doc()
    doc["transactions"]["tx1"]["out_msgs"].append(42)
    assert main([_write(tmp_path / "odd.json", doc)]) == 1


def test_unknown_straw_exits_with_usage_error(tmp_path) -> None:
    trace = _write(tmp_path / "trace.json", toncenter_doc())
    assert main([trace, "--disable-straw", "bogus"]) == 2


def test_bad_environment_exits_with_usage_error(tmp_path, monkeypatch) -> None:
    trace = _write(tmp_path / "trace.json", toncenter_doc())
    monkeypatch.setenv("BATH_FOR_ACCOUNT", "not-an-address")
    assert main([trace]) == 2

    monkeypatch.delenv("BATH_FOR_ACCOUNT")
    monkeypatch.setenv("BATH_LOGLEVEL", "loud")
    assert main([trace]) == 2


def test_verbose_raises_the_configured_level() -> None:
    parser = build_parser()
    cfg = apply_args(Config(loglevel=0), parser.parse_args(["trace.json", "-v"]))
    assert cfg.log_level_name() == "INFO"

    cfg = apply_args(Config(), parser.parse_args(["trace.json", "-v"]))
    assert cfg.log_level_name() == "DEBUG"

    cfg = apply_args(Config(loglevel=0), parser.parse_args(["trace.json"]))
    assert cfg.log_level_name() == "WARNING"
