import logging
import re
from dataclasses import dataclass

from tcprobe.core.ports.responder import Responder


def check_reply_template(expect: re.Pattern[str], reply: str) -> None:
    """
    Render ``reply`` against the fields ``expect`` can provide.

    Raises ValueError when the template refers to a field the pattern
    does not define (``{1}``, ``{name}``) or contains unescaped literal
    braces; those must be doubled, e.g. ``{{"cmd": "ls"}}``.
    """
    fields = {name: "" for name in expect.groupindex}
    try:
        reply.format("", **fields)
    except (KeyError, IndexError, ValueError, AttributeError, TypeError) as ex:
        raise ValueError(
            f"Reply template {reply!r} cannot be rendered for pattern {expect.pattern!r}: {ex!r}. "
            "Only '{0}' and the pattern's named groups are available; "
            "write literal braces as '{{' and '}}'."
        ) from ex


@dataclass(frozen=True)
class Rule:
    expect: re.Pattern[str]
    """
    Pattern searched anywhere in the drained input.
    """

    reply: str
    """
    str.format template rendered with the match: ``{0}`` is the whole
    match and named groups are available by name.
    """

    def __post_init__(self) -> None:
        check_reply_template(self.expect, self.reply)

    def render(self, match: re.Match[str]) -> str:
        return self.reply.format(match.group(0), **match.groupdict(default=""))


class ScriptedResponder(Responder):
    """
    Responder driven by an ordered list of rules.

    The first rule whose pattern matches the input provides the reply.
    The session terminates when no rule matches, when the input is empty
    (unless ``stop_on_empty`` is disabled) or once ``max_replies``
    replies have been sent.
    """
    def __init__(
        self,
        rules: list[Rule],
        max_replies: int | None = None,
        stop_on_empty: bool = True,
    ) -> None:
        self._rules = list(rules)
        self._max_replies = max_replies
        self._stop_on_empty = stop_on_empty
        self.replies = 0

        self._logger = logging.getLogger("infra.scripted_responder")

    def __call__(self, data: str) -> str | None:
        if not data and self._stop_on_empty:
            self._logger.info("Peer sent nothing, ending session")
            return None

        if self._max_replies is not None and self.replies >= self._max_replies:
            self._logger.info(f"Reply limit of {self._max_replies} reached, ending session")
            return None

        for rule in self._rules:
            match = rule.expect.search(data)
            if match is None:
                continue

            self.replies += 1
            return rule.render(match)

        self._logger.info("No rule matched, ending session")
        return None
