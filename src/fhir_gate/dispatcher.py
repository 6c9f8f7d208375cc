"""
Dispatcher: the watch loop.

Each poll cycle lists the source, then for every discovered item (in discovery order):
1. Stop requested? -> end the cycle before starting the item
2. Claim the identifier in the processed set (skip if completed / in flight)
3. Run the error-handled read -> validate -> route sequence
4. Record the destination (or release the claim if the sink write failed)

No document-level exception escapes a cycle; the loop only ends on stop().
"""

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

import structlog

from fhir_gate.exceptions import SinkWriteError, SourceReadError
from fhir_gate.models.document import DocumentRef
from fhir_gate.models.outcome_models import RoutingResult
from fhir_gate.persistence.processed_set import BaseProcessedSet
from fhir_gate.persistence.sources import BaseSource
from fhir_gate.reporting import Reporter, StructlogReporter
from fhir_gate.routing.error_handler import ErrorHandler

logger = structlog.get_logger(__name__)


class AttemptStatus(str, Enum):
    ROUTED = "routed"
    SKIPPED = "skipped"
    PENDING = "pending"
    STOPPED = "stopped"


@dataclass
class Attempt:
    """What happened to one discovered item in one cycle."""

    ref: DocumentRef
    status: AttemptStatus
    result: Optional[RoutingResult] = None


@dataclass
class CycleStats:
    """Running totals across cycles (exposed for the --once summary)."""

    cycles: int = 0
    routed: int = 0
    skipped: int = 0
    pending: int = 0
    by_destination: dict[str, int] = field(default_factory=dict)


class Dispatcher:
    """
    Poll the source and drive each new item to a terminal sink exactly once.

    With concurrency > 1 items are handed to a bounded thread pool; the
    processed set's atomic claim keeps routing exactly-once, and results are
    still returned in discovery order.
    """

    def __init__(
        self,
        source: BaseSource,
        handler: ErrorHandler,
        processed: BaseProcessedSet,
        reporter: Optional[Reporter] = None,
        concurrency: int = 1,
        poll_interval: float = 5.0,
    ):
        """
        Initialize dispatcher.

        Args:
            source: Watched input location
            handler: Error-handled processing sequence
            processed: Exactly-once guard
            reporter: Reporting collaborator (default StructlogReporter)
            concurrency: Worker count per cycle (1 = sequential)
            poll_interval: Seconds between cycles in run_forever()
        """
        self.source = source
        self.handler = handler
        self.processed = processed
        self.reporter: Reporter = reporter or StructlogReporter()
        self.concurrency = max(1, concurrency)
        self.poll_interval = poll_interval
        self.stats = CycleStats()
        self._stop_event = threading.Event()

    def stop(self) -> None:
        """Request the loop to stop before the next item (never mid-item)."""
        self._stop_event.set()

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def run_forever(self) -> None:
        """Repeat poll cycles until stop() is called."""
        logger.info(
            "Dispatcher started",
            source=repr(self.source),
            concurrency=self.concurrency,
            poll_interval=self.poll_interval,
        )
        while not self._stop_event.is_set():
            try:
                self.run_once()
            except Exception:
                logger.exception("Poll cycle failed", cycles=self.stats.cycles)
            self._stop_event.wait(self.poll_interval)
        logger.info(
            "Dispatcher stopped",
            cycles=self.stats.cycles,
            routed=self.stats.routed,
            pending=self.stats.pending,
        )

    def run_once(self) -> list[RoutingResult]:
        """
        Run a single poll cycle.

        Returns:
            RoutingResults produced in this cycle, in discovery order
        """
        try:
            refs = self.source.poll()
        except SourceReadError as e:
            self._notify("poll_failed", e)
            return []

        if self.concurrency == 1:
            attempts = []
            for ref in refs:
                if self._stop_event.is_set():
                    break
                attempts.append(self._attempt(ref))
        else:
            with ThreadPoolExecutor(
                max_workers=self.concurrency, thread_name_prefix="fhir-gate"
            ) as pool:
                attempts = list(pool.map(self._attempt, refs))

        return self._finish_cycle(attempts)

    def _attempt(self, ref: DocumentRef) -> Attempt:
        if self._stop_event.is_set():
            return Attempt(ref, AttemptStatus.STOPPED)

        try:
            claimed = self.processed.claim(ref.identifier)
        except Exception as e:
            self._notify("attempt_failed", ref, e)
            return Attempt(ref, AttemptStatus.PENDING)

        if not claimed:
            self._notify("skipped", ref)
            return Attempt(ref, AttemptStatus.SKIPPED)

        started = time.monotonic()
        try:
            result = self.handler.handle(ref)
            self.processed.complete(ref.identifier, result.destination)
        except SinkWriteError as e:
            self._release(ref)
            self._notify("sink_failed", ref, e)
            return Attempt(ref, AttemptStatus.PENDING)
        except Exception as e:
            self._release(ref)
            self._notify("attempt_failed", ref, e)
            return Attempt(ref, AttemptStatus.PENDING)

        self._notify("routed", result, time.monotonic() - started)
        return Attempt(ref, AttemptStatus.ROUTED, result)

    def _release(self, ref: DocumentRef) -> None:
        try:
            self.processed.release(ref.identifier)
        except Exception as e:
            # Claim stays until it expires (Redis TTL); logged, never raised
            self._notify("attempt_failed", ref, e)

    def _notify(self, event: str, *args, **kwargs) -> None:
        try:
            getattr(self.reporter, event)(*args, **kwargs)
        except Exception:
            logger.exception("Reporter failed", reporter_event=event)

    def _finish_cycle(self, attempts: list[Attempt]) -> list[RoutingResult]:
        results = [a.result for a in attempts if a.result is not None]
        skipped = sum(1 for a in attempts if a.status is AttemptStatus.SKIPPED)
        pending = sum(1 for a in attempts if a.status is AttemptStatus.PENDING)

        self.stats.cycles += 1
        self.stats.routed += len(results)
        self.stats.skipped += skipped
        self.stats.pending += pending
        for result in results:
            key = result.destination.value
            self.stats.by_destination[key] = self.stats.by_destination.get(key, 0) + 1

        self._notify("cycle_finished", routed=len(results), skipped=skipped, pending=pending)
        return results
