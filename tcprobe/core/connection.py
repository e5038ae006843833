import codecs
import logging
import socket
from types import TracebackType

from tcprobe.core.errors import ConnectionUnreachable, TimeoutConfigFailed

READ_BUFFER_SIZE = 4096
DEFAULT_TIMEOUT_MS = 1000


class Connection:
    """
    Blocking TCP connection whose reads are delimited by silence.

    The remote services this client talks to do not frame their messages,
    so a burst is considered complete once the peer stays quiet for the
    configured idle timeout. A slow server and a finished server are
    indistinguishable: the timeout is the knob trading latency for
    completeness.

    Outgoing data is a single line: the text followed by one newline.
    Writes are best-effort; failures are logged and never raised, so a
    session loop is never aborted by a write.

    The connection is not reconnectable. Once closed (explicitly or by
    leaving a ``with`` block) it must be discarded.
    """
    def __init__(self, sock: socket.socket, timeout_ms: int) -> None:
        self._sock = sock
        self._timeout_ms = timeout_ms
        self._closed = False

        self._logger = logging.getLogger("core.connection")

    @classmethod
    def connect(cls, host: str, port: int, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> "Connection":
        """
        Open a TCP stream to ``host:port`` and configure its idle timeout.

        Raises ConnectionUnreachable when the handshake fails and
        TimeoutConfigFailed when the timeout cannot be applied. No retry
        is attempted.
        """
        try:
            sock = socket.create_connection((host, port))
        except (OSError, OverflowError) as ex:
            raise ConnectionUnreachable(f"Unable to connect to {host}:{port}: {ex}") from ex

        conn = cls(sock, timeout_ms)
        try:
            conn.set_timeout(timeout_ms)
        except TimeoutConfigFailed:
            conn.close()
            raise

        return conn

    @property
    def timeout_ms(self) -> int:
        return self._timeout_ms

    @property
    def closed(self) -> bool:
        return self._closed

    def set_timeout(self, timeout_ms: int) -> None:
        # A zero timeout would switch the socket to non-blocking mode.
        if timeout_ms <= 0:
            raise TimeoutConfigFailed(f"Invalid idle timeout: {timeout_ms}ms")

        try:
            self._sock.settimeout(timeout_ms / 1000)
        except (OSError, ValueError, OverflowError) as ex:
            raise TimeoutConfigFailed(f"Unable to set idle timeout to {timeout_ms}ms: {ex}") from ex

        self._timeout_ms = timeout_ms

    def drain_read(self) -> str:
        """
        Read until the peer closes or stays idle for the configured timeout.

        Invalid UTF-8 is replaced rather than rejected. Decoding is
        incremental, so a character split across two reads is rebuilt
        exactly as a single read would have produced it. Never raises:
        a timeout is the normal end-of-burst signal and any other read
        error simply ends the drain.
        """
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        parts: list[str] = []

        while True:
            try:
                chunk = self._sock.recv(READ_BUFFER_SIZE)
            except TimeoutError:
                break
            except OSError as ex:
                self._logger.debug(f"Read interrupted: {ex}")
                break

            if not chunk:
                break
            parts.append(decoder.decode(chunk))

        parts.append(decoder.decode(b"", final=True))
        return "".join(parts)

    def write_line(self, text: str) -> None:
        data = f"{text}\n".encode("utf-8")
        try:
            self._sock.sendall(data)
        except OSError as ex:
            self._logger.warning(f"Write of {len(data)} bytes failed: {ex}")

    def close(self) -> None:
        if self._closed:
            return

        try:
            self._sock.close()
        finally:
            self._closed = True

    def __enter__(self) -> "Connection":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
