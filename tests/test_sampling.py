"""Tests for the sampling loop and SamplingWorker."""

import math

from pingchart.channel import SampleChannel
from pingchart.config import RunConfiguration
from pingchart.errors import NonUtf8OutputError, ProbeInvocationFailedError
from pingchart.fake_probe import FakeProbe
from pingchart.models import Measurement, Skipped
from pingchart.sampling import SamplingWorker, run_sampling_loop

SUMMARY = "round-trip min/avg/max/stddev = 10.1/{avg}/20.7/2.1 ms\n"


class ScriptedProbe:
    """Probe returning (or raising) prepared outcomes in order."""

    summary_marker = "min/avg/max/stddev"

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    def invoke(self, host):
        self.calls.append(host)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class ClosingChannel(SampleChannel):
    """Channel whose consumer disconnects after a number of items."""

    def __init__(self, close_after):
        super().__init__()
        self.close_after = close_after
        self.accepted = 0

    def send(self, item):
        ok = super().send(item)
        if ok:
            self.accepted += 1
            if self.accepted >= self.close_after:
                self.close()
        return ok


def config(count):
    return RunConfiguration(target_host="example.com", iteration_count=count)


class TestRunSamplingLoop:
    """Test run_sampling_loop() behavior."""

    def test_sends_every_iteration_on_success(self):
        """Test exactly iteration_count measurements are published."""
        probe = ScriptedProbe([SUMMARY.format(avg=v) for v in (15.3, 16.0, 17.5)])
        channel = SampleChannel()

        delivered = run_sampling_loop(config(3), probe, channel)

        results = channel.drain()
        assert delivered == 3
        assert [r.value_ms for r in results] == [15.3, 16.0, 17.5]
        assert all(isinstance(r, Measurement) for r in results)
        assert probe.calls == ["example.com"] * 3

    def test_timestamps_non_decreasing_and_utc(self):
        """Test measurements are stamped in UTC in order."""
        probe = ScriptedProbe([SUMMARY.format(avg=1.0)] * 4)
        channel = SampleChannel()

        run_sampling_loop(config(4), probe, channel)

        stamps = [r.observed_at for r in channel.drain()]
        assert stamps == sorted(stamps)
        assert all(ts.utcoffset().total_seconds() == 0 for ts in stamps)

    def test_probe_failure_becomes_skipped(self):
        """Test a failing probe is recorded as a gap and the loop continues."""
        probe = ScriptedProbe(
            [
                SUMMARY.format(avg=1.0),
                ProbeInvocationFailedError("exited with status 2", returncode=2),
                NonUtf8OutputError("bad bytes"),
                SUMMARY.format(avg=4.0),
            ]
        )
        channel = SampleChannel()

        delivered = run_sampling_loop(config(4), probe, channel)

        results = channel.drain()
        assert delivered == 4
        assert isinstance(results[1], Skipped)
        assert isinstance(results[2], Skipped)
        assert "status 2" in results[1].reason
        assert math.isnan(results[1].value_ms)
        assert results[3].value_ms == 4.0

    def test_parse_failure_becomes_skipped(self):
        """Test unparseable output is recorded as a gap."""
        probe = ScriptedProbe(["Request timed out.", "min/avg/max/stddev = 1/x/3/4", SUMMARY.format(avg=2.0)])
        channel = SampleChannel()

        run_sampling_loop(config(3), probe, channel)

        results = channel.drain()
        assert [type(r) for r in results] == [Skipped, Skipped, Measurement]

    def test_uses_probe_marker(self):
        """Test the probe's summary marker is passed to the parser."""
        probe = ScriptedProbe(["rtt min/avg/max/mdev = 1.0/2.0/3.0/0.1 ms"])
        probe.summary_marker = "min/avg/max/mdev"
        channel = SampleChannel()

        run_sampling_loop(config(1), probe, channel)

        assert channel.drain()[0].value_ms == 2.0

    def test_stops_when_consumer_disconnects(self):
        """Test no further probes or sends happen after close."""
        probe = ScriptedProbe([SUMMARY.format(avg=1.0)] * 10)
        channel = ClosingChannel(close_after=3)

        delivered = run_sampling_loop(config(10), probe, channel)

        assert delivered == 3
        # One extra probe ran whose send was refused
        assert len(probe.calls) == 4
        assert len(channel.drain()) == 3

    def test_closed_before_start(self):
        """Test an already closed channel ends the loop after one probe."""
        probe = ScriptedProbe([SUMMARY.format(avg=1.0)] * 5)
        channel = SampleChannel()
        channel.close()

        assert run_sampling_loop(config(5), probe, channel) == 0
        assert len(probe.calls) == 1

    def test_with_fake_probe(self):
        """Test the loop works end to end with simulated output."""
        channel = SampleChannel()
        delivered = run_sampling_loop(config(50), FakeProbe(seed=7), channel)

        results = channel.drain()
        assert delivered == 50
        assert len(results) == 50
        assert any(isinstance(r, Measurement) for r in results)


class TestSamplingWorker:
    """Test SamplingWorker run() in the calling thread."""

    def test_run_emits_finished_with_count(self):
        """Test finished carries the delivered count."""
        probe = ScriptedProbe([SUMMARY.format(avg=5.0)] * 2)
        channel = SampleChannel()
        worker = SamplingWorker(config(2), probe, channel)

        finished = []
        errors = []
        worker.signals.finished.connect(finished.append)
        worker.signals.error.connect(errors.append)

        worker.run()

        assert finished == [2]
        assert errors == []
        assert len(channel.drain()) == 2

    def test_run_reports_unexpected_exception(self):
        """Test unexpected errors are emitted and finished still fires."""
        probe = ScriptedProbe([RuntimeError("boom")])
        worker = SamplingWorker(config(1), probe, SampleChannel())

        finished = []
        errors = []
        worker.signals.finished.connect(finished.append)
        worker.signals.error.connect(errors.append)

        worker.run()

        assert errors == ["boom"]
        assert finished == [0]
