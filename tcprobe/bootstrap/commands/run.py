import argparse
import re

from tcprobe.bootstrap.config.settings import ScriptSettings
from tcprobe.bootstrap.deps import get_config, get_dispatcher
from tcprobe.core.errors import ProbeError
from tcprobe.core.helpers.utils import parse_timeout
from tcprobe.core.session import SessionLoop
from tcprobe.infra.scripted_responder import Rule, ScriptedResponder

dispatcher = get_dispatcher()


def build_responder(settings: ScriptSettings) -> ScriptedResponder:
    rules = [Rule(re.compile(rule.expect), rule.reply) for rule in settings.rules]
    return ScriptedResponder(
        rules=rules,
        max_replies=settings.max_replies,
        stop_on_empty=settings.stop_on_empty,
    )


def _target_overrides(namespace: argparse.Namespace) -> dict:
    overrides: dict = {}
    if namespace.host is not None:
        overrides["host"] = namespace.host
    if namespace.port is not None:
        overrides["port"] = namespace.port
    if namespace.timeout is not None:
        try:
            overrides["timeout_ms"] = parse_timeout(namespace.timeout)
        except ValueError:
            raise SystemExit(f"[run] Invalid timeout: '{namespace.timeout}'")
    return overrides


@dispatcher.command("run")
def cmd_run(namespace: argparse.Namespace) -> None:
    overrides = _target_overrides(namespace)
    config = get_config(target=overrides) if overrides else get_config()

    responder = build_responder(config.script)
    loop = (
        SessionLoop()
        .with_host(config.target.host)
        .with_port(config.target.port)
        .with_timeout(config.target.timeout_ms)
        .with_responder(responder)
    )

    try:
        leftover = loop.run()
    except ProbeError as ex:
        raise SystemExit(f"[run] {ex}")

    print(leftover, end="" if leftover.endswith("\n") else "\n")
