class ProbeError(Exception):
    """Base class for every error surfaced by tcprobe."""


class ConnectionUnreachable(ProbeError):
    """
    The TCP connection could not be established: name resolution failed,
    the peer refused the handshake, or the network is unreachable.
    """


class TimeoutConfigFailed(ProbeError):
    """The requested idle-read timeout was rejected by the socket layer."""


class ConfigurationIncomplete(ProbeError):
    """A session was run before its host, port and responder were all set."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(f"Session configuration is incomplete, missing: {', '.join(missing)}")
