"""Exception hierarchy for pingchart."""


class PingChartError(Exception):
    """Base class for all pingchart errors."""


class ParseError(PingChartError):
    """Ping output could not be turned into a measurement."""


class MarkerNotFoundError(ParseError):
    """The statistics marker (e.g. "min/avg/max/stddev") is absent."""


class StatsSegmentMissingError(ParseError):
    """The marker was found but no " = " statistics segment follows it."""


class MalformedNumberError(ParseError):
    """The average field is missing or is not a valid latency."""


class ProbeError(PingChartError):
    """A single probe invocation failed."""


class ProbeInvocationFailedError(ProbeError):
    """The ping command could not be run or reported failure."""

    def __init__(self, message: str, returncode: int | None = None):
        super().__init__(message)
        self.returncode = returncode


class NonUtf8OutputError(ProbeError):
    """The ping command produced output that is not valid UTF-8."""


class DestinationAlreadyExistsError(PingChartError, FileExistsError):
    """Export refused because the target path already exists."""


class InvalidStartupArgumentError(PingChartError, ValueError):
    """A command-line argument is missing or malformed."""
