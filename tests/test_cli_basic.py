"""Basic tests for CLI entry point."""

import json
import sys
from unittest.mock import patch

import pytest

from powerpredict.cli.__main__ import run

FRIDGE = {
    "name": "Refrigerator",
    "category": "Kitchen",
    "wattage": 150,
    "hoursPerDay": 24,
    "daysPerMonth": 30,
}


@pytest.fixture
def appliance_file(tmp_path):
    def _write(data) -> str:
        path = tmp_path / "appliances.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return str(path)

    return _write


def _run(*argv: str) -> int:
    with patch.object(sys, "argv", ["powerpredict", *argv]):
        with pytest.raises(SystemExit) as excinfo:
            run()
    return excinfo.value.code


def test_cli_help():
    """Test that CLI help command works."""
    assert _run("--help") == 0


def test_cli_no_args():
    """Test that CLI without args shows help."""
    assert _run() != 0


def test_cli_version(capsys):
    assert _run("--version") == 0
    assert capsys.readouterr().out.startswith("powerpredict ")


def test_estimate(appliance_file, capsys):
    assert _run("estimate", appliance_file([FRIDGE])) == 0
    out = capsys.readouterr().out
    assert "Refrigerator" in out
    assert "$19.87" in out


def test_estimate_json(appliance_file, capsys):
    path = appliance_file({"appliances": [FRIDGE]})
    assert _run("estimate", path, "--json", "--season", "winter") == 0
    out = capsys.readouterr().out
    assert '"monthlyBill"' in out
    assert '"categoryBreakdown"' in out


def test_estimate_empty(appliance_file, capsys):
    assert _run("estimate", appliance_file([])) == 1
    assert "Nothing To Estimate" in capsys.readouterr().out


def test_estimate_invalid_appliance(appliance_file, capsys):
    bad = dict(FRIDGE, wattage=-150)
    assert _run("estimate", appliance_file([bad])) == 1
    assert "Invalid Appliance" in capsys.readouterr().out


def test_estimate_missing_file(tmp_path, capsys):
    assert _run("estimate", str(tmp_path / "nope.json")) == 1
    assert "Validation Error" in capsys.readouterr().out


def test_topics(capsys):
    assert _run("topics") == 0
    out = capsys.readouterr().out
    assert "cooling" in out
    assert "phantom" in out


def test_ask_topic(capsys):
    assert _run("ask", "Best AC temperature?") == 0
    assert "Ceiling fan benefits" in capsys.readouterr().out


def test_ask_about_bill(appliance_file, capsys):
    path = appliance_file([FRIDGE])
    assert _run("ask", "How do I reduce my bill?", "--appliances", path) == 0
    assert "Refrigerator" in capsys.readouterr().out


def test_ask_blank(capsys):
    assert _run("ask", "   ") == 1
    assert "Empty Question" in capsys.readouterr().out


def test_serve_uses_arguments():
    with patch("powerpredict.cli.commands.run_proxy") as run_proxy:
        with patch.object(
            sys, "argv", ["powerpredict", "serve", "--port", "8123"]
        ):
            run()

    host, port, config = run_proxy.call_args.args
    assert host == "127.0.0.1"
    assert port == 8123
