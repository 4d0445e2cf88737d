"""Tests for the pingchart entry point."""

import logging

import pytest

from pingchart.__main__ import main, select_probe
from pingchart.config import RunConfiguration
from pingchart.fake_probe import FakeProbe
from pingchart.probe import PingProbe


@pytest.fixture(autouse=True)
def restore_root_logger(monkeypatch):
    """main() reconfigures logging; undo that after each test."""
    monkeypatch.delenv("PINGCHART_LOG_LEVEL", raising=False)
    monkeypatch.delenv("PINGCHART_PROBE", raising=False)
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


class TestMainStartupErrors:
    """Test invalid startup input ends the run with status 2."""

    @pytest.mark.parametrize("count", ["abc", "0", "-3", "2.5"])
    def test_bad_iteration_count(self, capsys, count):
        assert main(["example.com", count]) == 2

        err = capsys.readouterr().err
        assert "pingchart: error:" in err
        assert "iteration count" in err

    def test_missing_arguments(self, capsys):
        assert main([]) == 2
        assert "pingchart: error:" in capsys.readouterr().err

    def test_bad_log_level(self, capsys, monkeypatch):
        monkeypatch.setenv("PINGCHART_LOG_LEVEL", "loud")

        assert main(["example.com", "5"]) == 2
        assert "PINGCHART_LOG_LEVEL" in capsys.readouterr().err


class TestSelectProbe:
    """Test probe selection from the run configuration."""

    def test_fake_probe_when_requested(self):
        config = RunConfiguration(target_host="example.com", iteration_count=1, use_fake_probe=True)
        assert isinstance(select_probe(config), FakeProbe)

    def test_ping_probe_by_default(self):
        config = RunConfiguration(target_host="example.com", iteration_count=1)
        probe = select_probe(config)

        assert isinstance(probe, PingProbe)
        assert probe.timeout_ms is None

    def test_ping_probe_gets_timeout(self):
        config = RunConfiguration(target_host="example.com", iteration_count=1, timeout_ms=750)
        probe = select_probe(config)

        assert isinstance(probe, PingProbe)
        assert probe.timeout_ms == 750
