"""
Command-line interface for tla_mbt.

Every command prints a single JSON object on stdout:

    {"status": "success", "result": ...}
    {"status": "error", "result": "<error message>"}

Logs go to stderr.
"""

import argparse
import json
import logging
import sys
from typing import Any, List, Optional

from . import pipeline
from .config import ConfigManager, ModelChecker, Workers
from .errors import ModelatorError
from .utils.fs import read_text
from .utils.logging_config import setup_logging
from .utils.setup_utils import check_tools_setup

logger = logging.getLogger(__name__)


def _success(result: Any) -> int:
    print(json.dumps({"status": "success", "result": result}, indent=2))
    return 0


def _error(message: str) -> int:
    print(json.dumps({"status": "error", "result": message}, indent=2))
    return 1


def _run_checker_test(args, runtime) -> Any:
    checker = ModelChecker.from_str(args.checker)
    runtime = runtime.with_model_checker(checker)
    traces = pipeline.test(args.tla_file, args.config_file, runtime)
    return [pipeline.trace_to_json(trace) for trace in traces]


def _run_traces(args, runtime) -> Any:
    results = pipeline.traces(args.tests_file, args.config_file, runtime, max_workers=args.jobs)
    return {
        test_name: result if not isinstance(result, ModelatorError) else {"error": str(result)}
        for test_name, result in results.items()
    }


def _run_next_states(args, runtime) -> Any:
    start_state = read_text(args.start_state).strip() if args.start_state else None
    states = pipeline.next_states(
        args.tla_file, args.config_file, runtime,
        start_state=start_state, skip=args.skip, count=args.count,
    )
    return [state.to_dict() for state in states]


def _required_checkers(args, runtime) -> List[ModelChecker]:
    """Model checkers a command is going to run."""
    if args.command == "next-states":
        # TLC answers the queries, Apalache extracts the variables
        return [ModelChecker.TLC, ModelChecker.APALACHE]
    if args.command == "traces":
        return [runtime.model_checker_runtime.model_checker]
    return [ModelChecker.from_str(args.checker)]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tla-mbt",
        description="Model-based testing with TLA+: generate traces with TLC or Apalache",
    )
    parser.add_argument("--config", help="YAML configuration file with a `runtime` section")
    parser.add_argument("--dir", help="tla_mbt directory holding jars and caches")
    parser.add_argument("--workers", help="TLC worker threads: `auto` or a positive number")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Log level (default: WARNING)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    for checker in ModelChecker:
        checker_parser = subparsers.add_parser(checker.value, help=f"Run {checker.value}")
        checker_commands = checker_parser.add_subparsers(dest="checker_command", required=True)
        test_parser = checker_commands.add_parser("test", help="Generate the traces of a test")
        test_parser.add_argument("tla_file", help="Generated test module (.tla)")
        test_parser.add_argument("config_file", help="Its configuration (.cfg)")
        test_parser.set_defaults(handler=_run_checker_test, checker=checker.value)

    traces_parser = subparsers.add_parser("traces", help="Generate the traces of every test in a tests module")
    traces_parser.add_argument("tests_file", help="TLA+ tests module")
    traces_parser.add_argument("config_file", help="Configuration the tests run with")
    traces_parser.add_argument("--jobs", type=int, help="Number of tests run concurrently")
    traces_parser.set_defaults(handler=_run_traces)

    next_parser = subparsers.add_parser("next-states", help="Get successors of a state")
    next_parser.add_argument("tla_file", help="TLA+ module to explore")
    next_parser.add_argument("config_file", help="Its configuration (.cfg)")
    next_parser.add_argument("--start-state", help="File holding the printed start state; defaults to the initial state")
    next_parser.add_argument("--skip", type=int, default=0, help="Number of successors to skip")
    next_parser.add_argument("--count", type=int, default=1, help="Number of successors wanted")
    next_parser.set_defaults(handler=_run_next_states)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the tla-mbt command."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(getattr(logging, args.log_level))

    try:
        runtime = ConfigManager(args.config).get_runtime()
        if args.dir:
            runtime = runtime.with_dir(args.dir)
        if args.workers:
            runtime = runtime.with_workers(Workers.from_str(args.workers))
        check_tools_setup(_required_checkers(args, runtime), runtime.dir)
        return _success(args.handler(args, runtime))
    except (ModelatorError, ValueError, FileNotFoundError) as e:
        logger.debug("Command failed", exc_info=True)
        return _error(str(e))


if __name__ == '__main__':
    sys.exit(main())
