from __future__ import annotations

import argparse
import logging
import traceback
from pathlib import Path

import numpy as np
from rich.console import Console
from rich.text import Text

from .config import DEFAULT_CONFIG_FILE, load_parameters, summary_lines
from .engine import generate
from .logging_utils import (
    configure_logging,
    debug_enabled,
    get_log_path,
    log_exception,
    log_exit,
    log_init,
)
from .writer import write_wav

_LOGGER = logging.getLogger("wavgen.cli")
_CONSOLE = Console()
_ERR_CONSOLE = Console(stderr=True, highlight=False)


def render_error(context: str, exc: BaseException, *, console: Console | None = None) -> None:
    """Echo the FATAL run-log line on stderr, pointing at the log for details."""
    target = console or _ERR_CONSOLE
    target.print(
        Text.assemble(("[FATAL] ", "bold red"), f"{context} failed: {type(exc).__name__}: {exc}")
    )
    target.print(Text(f"see {get_log_path()}", style="dim"))
    if debug_enabled():
        target.print(Text("".join(traceback.format_exception(type(exc), exc, exc.__traceback__))))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="wavgen")
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Synthesize tones into a wav file.")
    gen.add_argument("config", type=Path, nargs="?", default=Path(DEFAULT_CONFIG_FILE))
    gen.add_argument("--output", type=Path, default=None, help="Override the output file.")
    gen.add_argument("--seed", type=int, default=None, help="Seed the dither noise.")

    describe = sub.add_parser("describe", help="Show the parameters a config resolves to.")
    describe.add_argument("config", type=Path, nargs="?", default=Path(DEFAULT_CONFIG_FILE))
    return parser


def main(argv: list[str] | None = None) -> int:
    configure_logging()
    log_init()
    code = 1
    try:
        parser = build_parser()
        args = parser.parse_args(argv)

        if args.command == "describe":
            resolved = load_parameters(args.config)
            for line in summary_lines(resolved):
                _CONSOLE.print(line, highlight=False)
            code = 0
        elif args.command == "generate":
            resolved = load_parameters(args.config)
            output = args.output or resolved.output_path
            with _CONSOLE.status("Synthesizing"):
                result = generate(resolved.params, rng=np.random.default_rng(args.seed))
                path = write_wav(output, resolved.params, result)
            _LOGGER.info("wrote %d samples to '%s'", result.total_samples, path)
            _CONSOLE.print(f"Wrote {path} ({result.total_samples} samples)")
            code = 0
        else:
            parser.print_help()
    except Exception as exc:
        log_exception("wavgen CLI", exc)
        render_error("wavgen CLI", exc)
        code = 1

    log_exit(code)
    return code


if __name__ == "__main__":
    raise SystemExit(main())
