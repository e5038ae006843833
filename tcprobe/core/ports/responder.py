from typing import Protocol


class Responder(Protocol):
    """
    Decision function driving a session loop.

    It receives everything the peer sent since the previous reply and
    returns either the next reply (the session continues) or None
    (the session terminates).

    Implementations are expected to encode their own stopping condition:
    a responder that never returns None keeps the session alive forever.
    """

    def __call__(self, data: str) -> str | None:
        ...
