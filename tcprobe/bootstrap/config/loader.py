import argparse
import os
from functools import lru_cache
from pathlib import Path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tcprobe",
        description=(
            "Probe a line-oriented TCP service.\n\n"
            "tcprobe reads whatever the service sends until it goes quiet,\n"
            "answers according to a script, and prints what is left once\n"
            "the script stops answering."
        ),
        formatter_class=argparse.RawTextHelpFormatter
    )

    parser.add_argument(
        "-c", "--config",
        type=str,
        help="Path to a tcprobe configuration file"
    )

    parser.add_argument(
        "-l", "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help=(
            "Logging verbosity.\n"
            "Choose among: DEBUG, INFO, WARNING, ERROR, CRITICAL.\n\n"
            "DEBUG    → every received burst and every reply.\n"
            "INFO     → why a scripted session ended.\n"
            "WARNING  → failed writes and errors (default).\n\n"
            "Example:\n"
            "  --log-level DEBUG"
        ),
    )

    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Run a scripted session and print the leftover output")
    run.add_argument("--host", type=str, help="Override target.host")
    run.add_argument("--port", type=int, help="Override target.port")
    run.add_argument(
        "--timeout",
        type=str,
        help="Override target.timeout_ms, e.g. 500ms, 2s or 1500"
    )

    sub.add_parser("shell", help="Open an interactive shell over a raw connection")

    return parser


@lru_cache
def get_cli_args() -> argparse.Namespace:
    return build_parser().parse_args()


def get_configfile(cli_path: str | None = None) -> Path | None:
    # Priority: CLI > ENV > default file in current working directory
    raw = cli_path or os.getenv("TCPROBECONFIG")

    if raw is None:
        file = Path.cwd() / "tcprobe.yaml"
        return file if file.is_file() else None

    file = Path(raw).expanduser()
    if not file.is_file():
        raise SystemExit(
            f"[config] Configuration file not found: '{file}'.\n"
            "  - Use --config <file.yaml>\n"
            "  - Or set the TCPROBECONFIG environment variable\n"
            "  - Or place a 'tcprobe.yaml' file in the current working directory."
        )

    return file
