import argparse

from tcprobe.bootstrap.deps import get_dispatcher
from tcprobe.core.cmd import ProbeCmd

dispatcher = get_dispatcher()


@dispatcher.command("shell")
def cmd_shell(namespace: argparse.Namespace) -> None:
    _ = namespace
    shell = ProbeCmd()
    try:
        shell.cmdloop()
    finally:
        shell.close()
