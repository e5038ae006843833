from dataclasses import dataclass

from tcprobe.core.ports.responder import Responder


@dataclass(frozen=True)
class SessionConfig:
    """
    Parameters of a read-respond session.

    Every field is optional so that a configuration can be assembled
    step by step; completeness is only checked when the session runs.
    """
    host: str | None = None
    """
    Host name or address of the remote service.
    """

    port: int | None = None
    """
    TCP port of the remote service.
    """

    timeout_ms: int | None = None
    """
    Idle-read timeout in milliseconds. The connection default applies when unset.
    """

    responder: Responder | None = None
    """
    Decision function called with each drained burst.
    """

    def missing(self) -> list[str]:
        """Return the names of the required fields that are still unset."""
        required = {
            "host": self.host,
            "port": self.port,
            "responder": self.responder,
        }
        return [name for name, value in required.items() if value is None]
