"""Tests for nordwg.reporter."""

import pytest

from nordwg.reporter import Reporter, flag_emoji, load_tier


def test_flag_emoji():
    assert flag_emoji("JP") == "\U0001F1EF\U0001F1F5"
    assert flag_emoji("kr") == "\U0001F1F0\U0001F1F7"
    assert flag_emoji("") == ""
    assert flag_emoji("USA") == ""
    assert flag_emoji("1A") == ""


@pytest.mark.parametrize(
    "load,tier",
    [(0, "info"), (10, "info"), (11, "success"), (30, "success"),
     (31, "warning"), (50, "warning"), (51, "error"), (100, "error")],
)
def test_load_tier(load, tier):
    assert load_tier(load) == tier


def test_report_lists_candidates(record, tmp_path):
    out = tmp_path / "out" / "servers.md"
    reporter = Reporter(out_path=str(out), limit=2)
    candidates = [record(id=i, hostname=f"jp{i}.nordvpn.com", load=i) for i in range(3)]

    report = reporter.generate(candidates, {"query": "jp", "p2p": True},
                               {"before": 5, "dropped": 1})

    assert out.read_text(encoding="utf-8") == report
    assert "| 0 | `JP0` | 0% | info | Tokyo |" in report
    assert "`JP1`" in report
    assert "`JP2`" not in report
    assert "_1 more not shown_" in report


def test_report_without_candidates():
    report = Reporter().generate([], {"query": "", "p2p": False}, {"before": 0, "dropped": 0})
    assert "No servers were found" in report
