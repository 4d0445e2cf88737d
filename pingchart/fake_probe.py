"""Simulated probe for running pingchart without network access."""

import random

from pingchart.errors import ProbeInvocationFailedError
from pingchart.parser import DEFAULT_MARKER


class FakeProbe:
    """Produces synthetic macOS-style ping reports."""

    summary_marker = DEFAULT_MARKER

    def __init__(self, seed: int | None = None):
        """Initialize with optional random seed for deterministic behavior."""
        # Isolated random instance, the probe runs on a worker thread
        self._random = random.Random(seed)

        # Simulation parameters
        self.base_latency = 25.0  # Base latency in ms
        self.latency_variance = 5.0  # Normal variance
        self.spike_probability = 0.05  # 5% chance of latency spike
        self.spike_multiplier = 3.0  # Spike makes latency 3x higher
        self.loss_probability = 0.02  # 2% chance of packet loss

    def invoke(self, host: str) -> str:
        """Return a fake single-echo report for host."""
        if not host or not host.strip():
            raise ProbeInvocationFailedError("host must not be empty")

        if self._random.random() < self.loss_probability:
            raise ProbeInvocationFailedError(f"simulated loss for {host}", returncode=2)

        if self._random.random() < self.spike_probability:
            latency = self.base_latency * self.spike_multiplier + self._random.gauss(
                0, self.latency_variance
            )
        else:
            latency = self.base_latency + self._random.gauss(0, self.latency_variance)

        latency = round(max(0.1, latency), 3)
        return render_report(host, latency)


def render_report(host: str, latency: float) -> str:
    """Render a one-packet ping report in the BSD/macOS layout."""
    return (
        f"PING {host} ({host}): 56 data bytes\n"
        f"64 bytes from {host}: icmp_seq=0 ttl=56 time={latency:.3f} ms\n"
        "\n"
        f"--- {host} ping statistics ---\n"
        "1 packets transmitted, 1 packets received, 0.0% packet loss\n"
        f"round-trip {DEFAULT_MARKER} = "
        f"{latency:.3f}/{latency:.3f}/{latency:.3f}/0.000 ms\n"
    )
