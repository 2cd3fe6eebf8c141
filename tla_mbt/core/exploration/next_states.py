"""
Incremental next-states discovery.

The model checker is used as an oracle: every query asks it for one
successor of a start state that is not yet known. Discovered successors are
memoized in an ExplorationSession, persisted after every discovery, so later
requests for the same (module, configuration) pair resume where the previous
one stopped.
"""

import logging
import tempfile
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Set

from ..artifacts import (
    TlaAndJsonState,
    TlaConfigFile,
    TlaFile,
    TlaFileSuite,
    TlaNextStates,
    TlaState,
    TlaTrace,
    TlaVariables,
    strip_variable
)
from ..cache import NextStatesCache, cache_key
from ..spec_processing.tla_values import try_state_to_json
from ...errors import DeserializationError, NoTraceFoundError
from ...utils.fs import write_text
from .gen import (
    NEXT_STATES_VAR,
    ExplorerInvariant,
    explore_module_name,
    generate_explorer_config,
    generate_explorer_module
)
from .graph import NextStates
from .histories import Histories

logger = logging.getLogger(__name__)

QueryRunner = Callable[[TlaFileSuite], List[TlaTrace]]
VariableExtractor = Callable[[TlaFileSuite], TlaVariables]


@dataclass
class ExplorationSession:
    """Everything learned so far about one (module, configuration) pair."""
    variables: TlaVariables
    initial_state: TlaAndJsonState
    next_states: NextStates = field(default_factory=NextStates)
    # states whose successor list the checker proved exhaustive
    complete: Set[TlaState] = field(default_factory=set)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'variables': self.variables.to_list(),
            'initial_state': self.initial_state.to_dict(),
            'next_states': self.next_states.to_dict(),
            'complete': sorted(self.complete),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExplorationSession":
        try:
            return cls(
                variables=TlaVariables(data['variables']),
                initial_state=TlaAndJsonState.from_dict(data['initial_state']),
                next_states=NextStates.from_dict(data['next_states']),
                complete=set(data['complete']),
            )
        except (KeyError, TypeError) as e:
            raise DeserializationError(f"invalid exploration session: {e}") from e

    def histories(self) -> Histories:
        """
        Histories observed through the discovered transitions.

        Each discovered transition is recorded once, reached from the initial
        state by the shortest known path.
        """
        initial = self.initial_state.state
        histories = Histories(initial)
        histories.add_history([initial])

        paths = {initial: [initial]}
        pending = deque([initial])
        while pending:
            state = pending.popleft()
            for successor in self.next_states.get_next_states(state) or []:
                histories.add_history(paths[state] + [successor])
                if successor not in paths:
                    paths[successor] = paths[state] + [successor]
                    pending.append(successor)
        return histories


def with_json(states: List[TlaState]) -> TlaNextStates:
    return [TlaAndJsonState(state, try_state_to_json(state)) for state in states]


class NextStatesExplorer:
    """
    Discovers successors of states one model checker query at a time.
    """

    def __init__(self, query_runner: QueryRunner, variable_extractor: VariableExtractor,
                 cache: NextStatesCache):
        """
        Initialize the explorer.

        Args:
            query_runner: Runs a query suite with deadlock checking disabled
                and returns the counterexample traces
            variable_extractor: Returns the variables of a suite's module
            cache: Table the sessions are persisted to
        """
        self.query_runner = query_runner
        self.variable_extractor = variable_extractor
        self.cache = cache

    def _query(self, suite: TlaFileSuite, variables: TlaVariables,
               invariant: ExplorerInvariant, start_state: Optional[TlaState],
               known: List[TlaState]) -> Optional[TlaTrace]:
        name = explore_module_name()
        module = generate_explorer_module(
            name, suite.tla_file.module_name, variables, start_state, known)
        config = generate_explorer_config(suite.tla_config_file.content(), invariant)

        with tempfile.TemporaryDirectory(prefix="tla_mbt_explore_") as tmp:
            module_path = Path(tmp) / f"{name}.tla"
            config_path = Path(tmp) / f"{name}.cfg"
            write_text(module_path, module)
            write_text(config_path, config)
            query_suite = TlaFileSuite(
                TlaFile(module_path),
                TlaConfigFile(config_path),
                [suite.tla_file] + suite.dependencies,
            )
            logger.debug(f"Running {invariant} query {name}")
            traces = self.query_runner(query_suite)

        if not traces or traces[0].is_empty():
            return None
        return TlaTrace([strip_variable(state, NEXT_STATES_VAR) for state in traces[0]])

    def _bootstrap(self, suite: TlaFileSuite) -> ExplorationSession:
        variables = self.variable_extractor(suite)
        logger.info(f"Exploring {suite.tla_file.module_name} with variables {variables.to_list()}")
        trace = self._query(suite, variables, ExplorerInvariant.FIND_INITIAL_STATE, None, [])
        if trace is None:
            raise NoTraceFoundError(suite.tla_file.path)
        # [initial state, first successor]
        initial = trace[0]
        return ExplorationSession(variables, with_json([initial])[0])

    def load_session(self, suite: TlaFileSuite) -> ExplorationSession:
        """Resume the persisted session of a suite, bootstrapping it if needed."""
        key = cache_key(suite.tla_file, suite.tla_config_file)
        snapshot = self.cache.load(key)
        if snapshot is not None:
            logger.info(f"Resuming exploration session {key}")
            return ExplorationSession.from_dict(snapshot)
        session = self._bootstrap(suite)
        self._persist(key, session)
        return session

    def _persist(self, key: str, session: ExplorationSession) -> None:
        version = self.cache.persist(key, session.to_dict())
        logger.debug(f"Persisted exploration session {key} version {version}")

    def next_states(self, suite: TlaFileSuite, start_state: Optional[TlaState] = None,
                    skip: int = 0, count: int = 1) -> TlaNextStates:
        """
        Get successors of a state.

        Args:
            suite: Explored module and configuration
            start_state: State whose successors are wanted; defaults to the
                initial state
            skip: Number of successors to skip
            count: Number of successors wanted

        Returns:
            Up to `count` successors after the first `skip`; fewer when the
            state has no more successors
        """
        if skip < 0 or count < 1:
            raise ValueError(f"invalid skip={skip} count={count}")

        key = cache_key(suite.tla_file, suite.tla_config_file)
        session = self.load_session(suite)
        if start_state is None:
            start_state = session.initial_state.state

        while True:
            known = session.next_states.get_next_states(start_state) or []
            if len(known) - skip >= count:
                return with_json(known[skip:skip + count])
            if start_state in session.complete:
                return with_json(known[skip:])

            trace = self._query(
                suite, session.variables, ExplorerInvariant.EXPLORE, start_state, known)
            if trace is None:
                logger.info(f"All {len(known)} next state(s) found")
                session.complete.add(start_state)
                self._persist(key, session)
                return with_json(known[skip:])

            # [start state, new successor]
            successor = trace.last()
            logger.info(f"Found next state #{len(known) + 1}")
            session.next_states.add_next_state(start_state, successor)
            self._persist(key, session)
