class FakeSocket:
    """
    Scripted stand-in for socket.socket.

    ``incoming`` holds what successive recv() calls produce: bytes are
    returned as-is, exceptions are raised. Once exhausted, recv() times
    out as an idle peer would.
    """
    def __init__(self, incoming=None):
        self.incoming = list(incoming or [])
        self.sent: list[bytes] = []
        self.recv_sizes: list[int] = []
        self.timeouts: list[float] = []
        self.send_error: Exception | None = None
        self.timeout_error: Exception | None = None
        self.closed = False

    def recv(self, size):
        self.recv_sizes.append(size)
        if not self.incoming:
            raise TimeoutError("timed out")

        item = self.incoming.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def sendall(self, data):
        if self.send_error is not None:
            raise self.send_error
        self.sent.append(data)

    def settimeout(self, value):
        if self.timeout_error is not None:
            raise self.timeout_error
        self.timeouts.append(value)

    def close(self):
        self.closed = True
