import dataclasses
import logging

from tcprobe.core.connection import Connection, DEFAULT_TIMEOUT_MS
from tcprobe.core.errors import ConfigurationIncomplete
from tcprobe.core.models.config import SessionConfig
from tcprobe.core.ports.responder import Responder

logger = logging.getLogger("core.session")


def respond(connection: Connection, responder: Responder) -> str:
    """
    Drive the read-respond protocol over an open connection.

    Each drained burst is handed to the responder. A reply is written
    back and the loop continues; None terminates it. After termination
    one last drain collects whatever the peer sent concurrently with or
    after the final reply, and the unconsumed text is returned.
    """
    while True:
        data = connection.drain_read()
        logger.debug(f"Received:\n{data}")

        answer = responder(data)
        if answer is None:
            break

        logger.debug(f"Answered: {answer}")
        connection.write_line(answer)

    return data + connection.drain_read()


def run_session(
    host: str,
    port: int,
    responder: Responder,
    timeout_ms: int | None = None
) -> str:
    """
    Connect to ``host:port`` and run the read-respond protocol until the
    responder returns None. Connection errors are propagated unchanged.
    """
    timeout = DEFAULT_TIMEOUT_MS if timeout_ms is None else timeout_ms

    with Connection.connect(host, port, timeout) as connection:
        return respond(connection, responder)


class SessionLoop:
    """
    Fluent builder around run_session.

    Setters never mutate the receiver: each returns a new SessionLoop,
    so partially configured loops can be shared and specialised.

        leftover = (
            SessionLoop.localhost(4000)
            .with_timeout(500)
            .with_responder(lambda data: "yes" if "?" in data else None)
            .run()
        )
    """
    def __init__(self, config: SessionConfig | None = None) -> None:
        self._config = config or SessionConfig()

    @classmethod
    def localhost(cls, port: int) -> "SessionLoop":
        return cls().with_host("localhost").with_port(port)

    @property
    def config(self) -> SessionConfig:
        return self._config

    def with_host(self, host: str) -> "SessionLoop":
        return SessionLoop(dataclasses.replace(self._config, host=host))

    def with_port(self, port: int) -> "SessionLoop":
        return SessionLoop(dataclasses.replace(self._config, port=port))

    def with_timeout(self, timeout_ms: int) -> "SessionLoop":
        return SessionLoop(dataclasses.replace(self._config, timeout_ms=timeout_ms))

    def with_responder(self, responder: Responder) -> "SessionLoop":
        return SessionLoop(dataclasses.replace(self._config, responder=responder))

    def run(self) -> str:
        """
        Validate the configuration, connect and run the session.

        Raises ConfigurationIncomplete, before any network I/O, when the
        host, port or responder is unset. Connection errors keep their
        original kind.
        """
        config = self._config
        missing = config.missing()
        if missing:
            raise ConfigurationIncomplete(missing)

        return run_session(
            host=config.host,  # type: ignore[arg-type]
            port=config.port,  # type: ignore[arg-type]
            responder=config.responder,  # type: ignore[arg-type]
            timeout_ms=config.timeout_ms,
        )
