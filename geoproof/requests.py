"""Single-worker FIFO queue for proof-solve requests."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Optional

from .config import ProofConfig
from .diagram import Diagram
from .solver import ProofSolver

logger = logging.getLogger(__name__)


@dataclass
class SolveRequest:
    diagram: Diagram
    on_completed: Optional[Callable[[ProofSolver], None]] = None
    config: Optional[ProofConfig] = None


class SolveRequestManager:
    """Runs solve requests one at a time, in submission order.

    Each request's diagram belongs to the worker until its future resolves;
    the completion callback runs on the worker before the next request
    starts.  Failures are delivered through the future and never retried.
    """

    def __init__(self, name: str = "geoproof-solve"):
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=name)
        self._lock = threading.Lock()
        self._submitted = 0
        self._completed = 0

    @property
    def pending(self) -> int:
        with self._lock:
            return self._submitted - self._completed

    def submit(self, request: SolveRequest) -> Future:
        with self._lock:
            self._submitted += 1
            number = self._submitted
        logger.info("Queued solve request #%d", number)
        return self._executor.submit(self._run, request, number)

    def _run(self, request: SolveRequest, number: int) -> ProofSolver:
        try:
            solver = ProofSolver(request.diagram, request.config)
            proved = solver.solve()
            logger.info("Solve request #%d finished: %s", number, "proved" if proved else "not proved")
            if request.on_completed is not None:
                request.on_completed(solver)
            return solver
        except Exception:
            logger.exception("Solve request #%d failed", number)
            raise
        finally:
            with self._lock:
                self._completed += 1

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "SolveRequestManager":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown(wait=True)
