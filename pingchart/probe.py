"""Probe abstraction and the system ping implementation."""

import logging
import platform
import subprocess
from math import ceil
from typing import Protocol

from pingchart.errors import NonUtf8OutputError, ProbeInvocationFailedError
from pingchart.parser import DEFAULT_MARKER

logger = logging.getLogger(__name__)

LINUX_MARKER = "min/avg/max/mdev"


class Probe(Protocol):
    """Protocol for anything that can run one latency probe."""

    summary_marker: str

    def invoke(self, host: str) -> str:
        """Run one probe against host and return its full text report."""
        ...


class PingProbe:
    """Probe that runs the OS ping command once per invocation.

    The report is returned untouched; extracting the latency is the
    parser's job. Linux (iputils) labels the summary line
    "min/avg/max/mdev" while macOS/BSD use "min/avg/max/stddev", so
    ``summary_marker`` follows the platform.

    **Timeout:** with ``timeout_ms=None`` (the default) a hung ping blocks
    the caller indefinitely.
    """

    def __init__(self, timeout_ms: int | None = None):
        """Initialize ping probe.

        Args:
            timeout_ms: Optional hard limit for one ping run in milliseconds.
        """
        if timeout_ms is not None and timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive")

        self.timeout_ms = timeout_ms
        self.system = platform.system()
        self.summary_marker = LINUX_MARKER if self.system == "Linux" else DEFAULT_MARKER

        logger.debug(
            "PingProbe initialized: timeout_ms=%s, system=%s, marker=%s",
            timeout_ms,
            self.system,
            self.summary_marker,
        )

    @property
    def timeout_seconds(self) -> float | None:
        if self.timeout_ms is None:
            return None
        return self.timeout_ms / 1000.0

    def invoke(self, host: str) -> str:
        """Ping host once and return the decoded report.

        Raises:
            ProbeInvocationFailedError: ping could not be started, timed out
                or exited with a non-zero status
            NonUtf8OutputError: the report is not valid UTF-8
        """
        if not host or not host.strip():
            raise ProbeInvocationFailedError("host must not be empty")

        cmd = self._build_ping_command(host)
        logger.debug("Executing ping: %s", cmd)

        subprocess_timeout = None
        if self.timeout_seconds is not None:
            subprocess_timeout = self.timeout_seconds + 0.5

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                timeout=subprocess_timeout,
                shell=False,
            )
        except subprocess.TimeoutExpired as e:
            raise ProbeInvocationFailedError(f"ping to {host} timed out") from e
        except OSError as e:
            raise ProbeInvocationFailedError(f"could not run ping: {e}") from e

        logger.debug("Ping completed: host=%s, returncode=%d", host, result.returncode)

        if result.returncode != 0:
            raise ProbeInvocationFailedError(
                f"ping to {host} exited with status {result.returncode}",
                returncode=result.returncode,
            )

        try:
            return result.stdout.decode("utf-8")
        except UnicodeDecodeError as e:
            raise NonUtf8OutputError(f"ping output is not valid UTF-8: {e}") from e

    def _build_ping_command(self, host: str) -> list[str]:
        """Build platform-specific single-echo ping command."""
        if self.system == "Windows":
            cmd = ["ping", "-n", "1"]
            if self.timeout_ms is not None:
                cmd += ["-w", str(self.timeout_ms)]
            return cmd + [host]

        cmd = ["ping", "-c", "1"]
        if self.system == "Linux" and self.timeout_ms is not None:
            # -W takes whole seconds
            cmd += ["-W", str(max(1, ceil(self.timeout_seconds)))]
        # macOS -W has different semantics, so rely on the subprocess timeout
        return cmd + [host]
