"""
tla_mbt pipeline.

Entry points tying together test generation, the model checker backends,
the trace cache and the next-states explorer:

1. **test**: traces of one generated test, cached per (module, configuration)
2. **traces**: every test of a tests module, run concurrently
3. **next_states**: successors of a state, discovered incrementally with TLC
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .config import ModelatorRuntime
from .core.artifacts import TlaConfigFile, TlaFile, TlaFileSuite, TlaNextStates, TlaState, TlaTrace
from .core.cache import NextStatesCache, TraceCache, cache_key
from .core.cache.digest import DigestHandle
from .core.exploration import NextStatesExplorer
from .core.spec_processing import generate_tests, try_state_to_json
from .core.verification import ApalacheRunner, ModelCheckerBackend, TLCRunner, get_checker
from .errors import ModelatorError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]
TESTS_DIR = "tests"


def test(tla_file: PathLike, tla_config_file: PathLike, runtime: ModelatorRuntime,
         checker: Optional[ModelCheckerBackend] = None) -> List[TlaTrace]:
    """
    Generate the traces of a test, reusing cached ones.

    Args:
        tla_file: Generated test module
        tla_config_file: Its configuration
        runtime: Runtime settings
        checker: Backend to run on a cache miss; defaults to the configured one

    Returns:
        Traces of the test
    """
    suite = TlaFileSuite(TlaFile(tla_file), TlaConfigFile(tla_config_file))
    key = cache_key(suite.tla_file, suite.tla_config_file)
    cache = TraceCache(runtime.dir)

    cached = cache.get(key)
    if cached is not None:
        logger.info(f"Cache hit for {suite.tla_file.module_name} ({key})")
        return cached

    logger.info(f"Cache miss for {suite.tla_file.module_name} ({key})")
    if checker is None:
        checker = get_checker(runtime)
    traces = checker.test(suite)
    cache.put(key, traces)
    return traces


def tests_work_dir(tla_file: TlaFile, runtime: ModelatorRuntime) -> Path:
    """Stable directory the tests of a tests module are generated into."""
    digest = DigestHandle().update_text(str(tla_file.path)).hexdigest()[:16]
    return runtime.dir / TESTS_DIR / f"{tla_file.module_name}_{digest}"


def trace_to_json(trace: TlaTrace) -> List[Dict[str, Any]]:
    return [try_state_to_json(state) for state in trace]


def traces(tests_file: PathLike, config_file: PathLike, runtime: ModelatorRuntime,
           max_workers: Optional[int] = None) -> Dict[str, Union[List[List[Dict[str, Any]]], ModelatorError]]:
    """
    Generate the JSON traces of every test in a tests module.

    Tests run concurrently; a failing test does not stop the others. Each
    test writes its checker log to `<work dir>/<test name>.log`.

    Args:
        tests_file: TLA+ tests module
        config_file: Configuration the tests run with
        runtime: Runtime settings
        max_workers: Thread pool size; None lets the executor choose

    Returns:
        Mapping test name -> list of JSON traces, or the error raised for it
    """
    runtime.setup()
    suite = TlaFileSuite(TlaFile(tests_file), TlaConfigFile(config_file))
    work_dir = tests_work_dir(suite.tla_file, runtime)
    tests = generate_tests(suite, work_dir)

    def run_single_test(test_name: str, test_suite: TlaFileSuite):
        # one checker log per test, tests run concurrently
        test_runtime = runtime.with_log(work_dir / f"{test_name}.log")
        test_traces = test(test_suite.tla_file.path, test_suite.tla_config_file.path, test_runtime)
        return [trace_to_json(trace) for trace in test_traces]

    results: Dict[str, Union[List[List[Dict[str, Any]]], ModelatorError]] = {}
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        future_to_name = {
            executor.submit(run_single_test, test_name, test_suite): test_name
            for test_name, test_suite in tests
        }
        for future in as_completed(future_to_name):
            test_name = future_to_name[future]
            try:
                results[test_name] = future.result()
            except ModelatorError as e:
                logger.warning(f"Test {test_name} failed: {e}")
                results[test_name] = e

    # definition order
    return {test_name: results[test_name] for test_name, _ in tests}


def next_states(tla_file: PathLike, tla_config_file: PathLike, runtime: ModelatorRuntime,
                start_state: Optional[TlaState] = None, skip: int = 0,
                count: int = 1) -> TlaNextStates:
    """
    Get successors of a state, exploring with TLC as needed.

    Args:
        tla_file: Explored module
        tla_config_file: Its configuration
        runtime: Runtime settings
        start_state: State to explore from; defaults to the initial state
        skip: Number of successors to skip
        count: Number of successors wanted

    Returns:
        The requested successors with their JSON form
    """
    runtime.setup()
    suite = TlaFileSuite(TlaFile(tla_file), TlaConfigFile(tla_config_file))
    tlc = TLCRunner(runtime)
    apalache = ApalacheRunner(runtime)
    explorer = NextStatesExplorer(
        query_runner=lambda query_suite: tlc.check(query_suite, deadlock=True),
        variable_extractor=apalache.tla_variables,
        cache=NextStatesCache(runtime.dir),
    )
    return explorer.next_states(suite, start_state=start_state, skip=skip, count=count)
