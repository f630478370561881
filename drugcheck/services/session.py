from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass, replace
from typing import Callable, Optional, Sequence

from drugcheck.errors import AnalysisInProgressError, InteractionCheckError, UnknownProviderError
from drugcheck.models import AnalysisError, AnalysisResult
from drugcheck.services import roster as roster_ops
from drugcheck.services.roster import Roster

logger = logging.getLogger(__name__)

Analyzer = Callable[[Sequence[str]], AnalysisResult]


@dataclass(frozen=True)
class SessionState:
    roster: Roster = ()
    result: Optional[AnalysisResult] = None
    error: Optional[AnalysisError] = None
    loading: bool = False
    pending: Optional[str] = None    # id of the in-flight request
    roster_version: int = 0          # bumped on every roster change
    pending_version: int = 0         # roster_version when `pending` started


# ----------------------------
# Transitions (pure)
# ----------------------------
def _with_roster(state: SessionState, new_roster: Roster) -> SessionState:
    if new_roster is state.roster:
        return state
    return replace(
        state,
        roster=new_roster,
        result=None,
        error=None,
        roster_version=state.roster_version + 1,
    )


def add_drug(state: SessionState, name: str, id_factory: Callable[[], str] = roster_ops.new_drug_id) -> SessionState:
    return _with_roster(state, roster_ops.add(state.roster, name, id_factory))


def remove_drug(state: SessionState, drug_id: str) -> SessionState:
    return _with_roster(state, roster_ops.remove(state.roster, drug_id))


def clear_roster(state: SessionState) -> SessionState:
    # clears result and error even when the roster is already empty
    return replace(
        state,
        roster=roster_ops.clear(),
        result=None,
        error=None,
        roster_version=state.roster_version + 1,
    )


def start_analysis(state: SessionState, request_id: str) -> SessionState:
    if state.loading:
        raise AnalysisInProgressError()
    return replace(
        state,
        result=None,
        error=None,
        loading=True,
        pending=request_id,
        pending_version=state.roster_version,
    )


def _settle(state: SessionState, request_id: str, **outcome) -> SessionState:
    if request_id != state.pending:
        # a newer request owns the session; drop this reply
        return state
    settled = replace(state, loading=False, pending=None)
    if state.pending_version != state.roster_version:
        # roster edited while the request was in flight
        return settled
    return replace(settled, **outcome)


def finish_analysis(state: SessionState, request_id: str, result: AnalysisResult) -> SessionState:
    return _settle(state, request_id, result=result, error=None)


def fail_analysis(state: SessionState, request_id: str, error: InteractionCheckError) -> SessionState:
    stored = AnalysisError(category=error.category, message=error.message)
    return _settle(state, request_id, result=None, error=stored)


# ----------------------------
# Session holder
# ----------------------------
class Session:
    """
    Single in-memory session. Holds one SessionState and swaps it on every transition.
    The lock only guards the swap; it is never held across the provider call.
    """

    def __init__(self, analyzer: Analyzer, state: Optional[SessionState] = None):
        self._analyzer = analyzer
        self._state = state or SessionState()
        self._lock = threading.Lock()

    @property
    def state(self) -> SessionState:
        return self._state

    def _apply(self, transition, *args) -> SessionState:
        with self._lock:
            self._state = transition(self._state, *args)
            return self._state

    def add(self, name: str) -> SessionState:
        return self._apply(add_drug, name)

    def remove(self, drug_id: str) -> SessionState:
        return self._apply(remove_drug, drug_id)

    def clear(self) -> SessionState:
        return self._apply(clear_roster)

    def analyze(self) -> SessionState:
        request_id = uuid.uuid4().hex
        with self._lock:
            self._state = start_analysis(self._state, request_id)
            drugs = roster_ops.names(self._state.roster)

        try:
            result = self._analyzer(drugs)
        except InteractionCheckError as e:
            logger.info("Analysis %s failed: %s", request_id, e.category)
            return self._apply(fail_analysis, request_id, e)
        except Exception as e:
            # release the loading flag before propagating
            self._apply(fail_analysis, request_id, UnknownProviderError(str(e)))
            raise
        return self._apply(finish_analysis, request_id, result)

    def retry(self) -> SessionState:
        return self.analyze()
