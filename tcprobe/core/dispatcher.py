import argparse
import functools
from typing import Protocol


class CommandHandler(Protocol):
    def __call__(self, namespace: argparse.Namespace) -> None:
        ...


class CommandDispatcher:
    def __init__(self) -> None:
        self._commands: dict[str, CommandHandler] = {}

    @property
    def commands(self) -> list[str]:
        return list(self._commands)

    def dispatch(self, name: str, namespace: argparse.Namespace) -> None:
        command = self._commands.get(name)
        if command is None:
            raise RuntimeError(f"Unknown '{name}' Command")
        command(namespace)

    def command(self, name: str):
        def decorator(func: CommandHandler):

            @functools.wraps(func)
            def wrapper(namespace: argparse.Namespace) -> None:
                func(namespace)

            self._commands[name] = wrapper

            return wrapper

        return decorator
