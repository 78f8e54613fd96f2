import argparse
import logging
import os
import sys
import time
from typing import List

from rich.console import Console
from rich.logging import RichHandler

from .engine import DiagnosticEngine
from .parsing import LOG_ENCODING, LOG_ERRORS, MessagePolicy, classify_output, split_lines
from .utils.config import ConfigManager
from .utils.highlighter import render_output
from .utils.state import DiagnosticState

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)


def _build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser."""
    parser = argparse.ArgumentParser(description="shaderdiag: classify glslang diagnostic output")
    parser.add_argument("file", nargs="?", help="Compiler log to read (stdin when omitted)")
    parser.add_argument("-Werror", dest="werror", action="store_true", help="Treat warnings as errors")
    parser.add_argument("-w", dest="no_warnings", action="store_true", help="Suppress all warnings")
    parser.add_argument("--source", dest="sources", action="append", default=[], metavar="NAME",
                        help="Name of a concatenated source string, in compile order (repeatable)")
    parser.add_argument("--watch", action="store_true", help="Re-classify the log every time it is saved")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    return parser


def _setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_time=False)],
    )


def _resolve_policy(args: argparse.Namespace, config: ConfigManager) -> MessagePolicy:
    # Command-line switches can only turn a policy on, never off
    base = config.policy()
    return MessagePolicy(
        warnings_as_errors=args.werror or base.warnings_as_errors,
        suppress_warnings=args.no_warnings or base.suppress_warnings,
    )


def _fail(message: str):
    err_console.print(f"Error: {message}", markup=False)
    sys.exit(1)


def _print_state(state: DiagnosticState):
    if state.internal_error:
        err_console.print(state.internal_error, style="bold red", markup=False)
        return
    console.print(render_output(state.pairs(), state.sources), soft_wrap=True)


def _watch(path: str, policy: MessagePolicy, sources: List[str]):
    engine = DiagnosticEngine(path, policy=policy, sources=sources)
    engine.on_update_callback = _print_state
    engine.start()
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        pass
    finally:
        engine.stop()


def run():
    parser = _build_parser()
    args = parser.parse_args()
    _setup_logging(args.verbose)

    config = ConfigManager()
    policy = _resolve_policy(args, config)
    sources = args.sources or config.sources()

    if args.watch:
        if not args.file:
            _fail("--watch needs a log file.")
        abs_path = os.path.abspath(args.file)
        if not os.path.isdir(os.path.dirname(abs_path)):
            _fail(f"Directory not found: {os.path.dirname(abs_path)}")
        _watch(abs_path, policy, sources)
        sys.exit(0)

    if args.file:
        abs_path = os.path.abspath(args.file)
        if not os.path.exists(abs_path):
            _fail(f"File not found: {abs_path}")
        with open(abs_path, "r", encoding=LOG_ENCODING, errors=LOG_ERRORS, newline="") as f:
            output = f.read()
    else:
        output = sys.stdin.read()

    lines = split_lines(output)
    state = DiagnosticState(log_path=args.file or "<stdin>", sources=sources)
    state.update_output(output, lines, classify_output(output, policy))
    _print_state(state)

    sys.exit(1 if state.has_errors else 0)


if __name__ == "__main__":
    run()
