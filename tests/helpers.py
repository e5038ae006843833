import socket
import threading
from collections.abc import Callable


class StubServer:
    """
    One-shot TCP server for integration tests.

    Accepts a single client on 127.0.0.1 and runs ``handler`` with the
    accepted socket in a background thread. The socket is closed when
    the handler returns.
    """
    def __init__(self, handler: Callable[[socket.socket], None]) -> None:
        self._handler = handler
        self._listener = socket.create_server(("127.0.0.1", 0))
        self._listener.settimeout(5)
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self.port: int = self._listener.getsockname()[1]
        self.error: BaseException | None = None

    def _serve(self) -> None:
        try:
            conn, _ = self._listener.accept()
        except OSError as ex:
            self.error = ex
            return

        with conn:
            try:
                self._handler(conn)
            except OSError as ex:
                self.error = ex

    def __enter__(self) -> "StubServer":
        self._thread.start()
        return self

    def __exit__(self, *exc) -> None:
        self._thread.join(timeout=5)
        self._listener.close()


def recv_line(conn: socket.socket) -> bytes:
    data = b""
    while not data.endswith(b"\n"):
        chunk = conn.recv(1)
        if not chunk:
            break
        data += chunk
    return data


def recv_all(conn: socket.socket) -> bytes:
    data = b""
    while chunk := conn.recv(4096):
        data += chunk
    return data


def unused_port() -> int:
    with socket.create_server(("127.0.0.1", 0)) as sock:
        return sock.getsockname()[1]
