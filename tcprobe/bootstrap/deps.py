import json
from functools import lru_cache
from typing import Any

from pydantic import ValidationError

from tcprobe.bootstrap.config.settings import ProbeConfig
from tcprobe.core.dispatcher import CommandDispatcher


@lru_cache
def get_dispatcher() -> CommandDispatcher:
    return CommandDispatcher()


def get_config(**overrides: Any) -> ProbeConfig:
    try:
        return ProbeConfig(**overrides)  # type: ignore[call-arg]
    except ValidationError as ex:
        msg = ["Configuration validation failed:"]
        errs = json.loads(ex.json())
        for err in errs:
            msg.append(f"  {'.'.join(str(part) for part in err['loc'])}: {err['msg']}")
        raise SystemExit("\n".join(msg))
