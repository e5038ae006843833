import cmd
import shlex
from typing import IO

from tcprobe.core.connection import Connection, DEFAULT_TIMEOUT_MS
from tcprobe.core.errors import ProbeError
from tcprobe.core.helpers.utils import parse_timeout


class ProbeCmd(cmd.Cmd):
    """
    Interactive shell over a raw Connection.

    The user plays the responder: 'read' drains whatever the service
    sent, 'send' writes one line back. Errors are printed, never raised,
    so a typo does not end the session.
    """
    intro = "Entering tcprobe interactive mode. Type 'help' for commands, 'exit' or 'quit' to leave."
    prompt = "tcprobe> "

    def __init__(
        self,
        default_timeout_ms: int = DEFAULT_TIMEOUT_MS,
        stdin: IO[str] | None = None,
        stdout: IO[str] | None = None,
    ) -> None:
        super().__init__(stdin=stdin, stdout=stdout)
        if stdin is not None:
            self.use_rawinput = False

        self._default_timeout_ms = default_timeout_ms
        self._connection: Connection | None = None

    @property
    def connection(self) -> Connection | None:
        return self._connection

    def close(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None
        self.prompt = ProbeCmd.prompt

    def emptyline(self) -> bool:
        # cmd.Cmd repeats the last command by default, which would re-send a line.
        return False

    def postloop(self) -> None:
        self.close()

    def do_connect(self, line):
        """connect <host> <port> [timeout]: open a connection, closing the current one."""
        argv = shlex.split(line)
        if len(argv) not in (2, 3):
            self._print("Usage: connect <host> <port> [timeout]")
            return

        host = argv[0]
        try:
            port = int(argv[1])
            timeout_ms = parse_timeout(argv[2]) if len(argv) == 3 else self._default_timeout_ms
        except ValueError as ex:
            self._print(f"Invalid argument: {ex}")
            return

        self.close()
        try:
            self._connection = Connection.connect(host, port, timeout_ms)
        except ProbeError as ex:
            self._print(str(ex))
            return

        self.prompt = f"tcprobe({host}:{port})> "
        self._print(f"Connected to {host}:{port} (idle timeout {timeout_ms}ms)")

    def do_timeout(self, line):
        """timeout [value]: show or change the idle timeout, e.g. 500ms, 2s or 1500."""
        conn = self._require_connection()
        if conn is None:
            return

        if not line:
            self._print(f"{conn.timeout_ms}ms")
            return

        try:
            conn.set_timeout(parse_timeout(line))
        except (ValueError, ProbeError) as ex:
            self._print(str(ex))
            return

        self._print(f"Idle timeout set to {conn.timeout_ms}ms")

    def do_read(self, line):
        """read: print everything received until the service goes quiet."""
        conn = self._require_connection()
        if conn is None:
            return

        data = conn.drain_read()
        self._print(data if data else "(nothing received)")

    def do_send(self, line):
        """send <text>: send one line to the service."""
        conn = self._require_connection()
        if conn is None:
            return

        conn.write_line(line)

    def do_ask(self, line):
        """ask <text>: send one line, then read the answer."""
        conn = self._require_connection()
        if conn is None:
            return

        conn.write_line(line)
        self.do_read("")

    def do_close(self, line):
        """close: close the current connection."""
        self.close()

    def do_exit(self, arg):
        return True

    def do_quit(self, arg):
        return True

    def do_EOF(self, arg):
        self._print("")
        return True

    def _require_connection(self) -> Connection | None:
        if self._connection is None:
            self._print("Not connected. Use: connect <host> <port> [timeout]")
        return self._connection

    def _print(self, text: str) -> None:
        print(text, file=self.stdout)
