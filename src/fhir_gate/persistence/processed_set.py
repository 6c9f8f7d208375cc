"""
Processed set: the exactly-once guard for terminal routing.

Per-identifier state machine:

    UNSEEN --claim--> IN_FLIGHT --complete--> COMPLETED_VALID | COMPLETED_INVALID
                          |
                          +--release--> UNSEEN   (sink write failed, retry next poll)

claim() is an atomic "claim if absent": two workers can never both observe
UNSEEN and route the same identifier. COMPLETED states are terminal.

Storage Strategy (Redis):
- One string key per identifier: "{prefix}{document_id}"
- IN_FLIGHT: value "in_flight" with TTL (a crashed worker's claim expires)
- COMPLETED: value "completed:valid" / "completed:invalid", no TTL
"""

import threading
from abc import ABC, abstractmethod

import structlog
from redis import Redis

from fhir_gate.config import Settings
from fhir_gate.exceptions import ProcessedSetConflict
from fhir_gate.models.enums import Destination, ProcessingState

logger = structlog.get_logger(__name__)


class BaseProcessedSet(ABC):
    """Mapping from document identifier to processing state."""

    @abstractmethod
    def claim(self, document_id: str) -> bool:
        """
        Atomically move UNSEEN -> IN_FLIGHT.

        Returns:
            True if the caller now owns the identifier; False if it is
            already in flight or completed
        """

    @abstractmethod
    def complete(self, document_id: str, destination: Destination) -> None:
        """
        Record the terminal destination.

        Completing again with the same destination is a no-op.

        Raises:
            ProcessedSetConflict: If already completed with another destination
        """

    @abstractmethod
    def release(self, document_id: str) -> None:
        """Drop an IN_FLIGHT claim (no effect on COMPLETED identifiers)."""

    @abstractmethod
    def state(self, document_id: str) -> ProcessingState:
        """Current state (UNSEEN if never claimed)."""

    def is_completed(self, document_id: str) -> bool:
        return self.state(document_id).is_completed


class InMemoryProcessedSet(BaseProcessedSet):
    """
    Process-local processed set.

    A single lock makes every check-then-act a critical section, which is
    enough for the dispatcher's thread pool. State is lost on restart; the
    idempotent sinks make re-routing after a restart harmless.
    """

    def __init__(self) -> None:
        self._states: dict[str, ProcessingState] = {}
        self._lock = threading.Lock()

    def claim(self, document_id: str) -> bool:
        with self._lock:
            if document_id in self._states:
                return False
            self._states[document_id] = ProcessingState.IN_FLIGHT
            return True

    def complete(self, document_id: str, destination: Destination) -> None:
        target = ProcessingState.completed(destination)
        with self._lock:
            current = self._states.get(document_id, ProcessingState.UNSEEN)
            if current.is_completed and current is not target:
                raise ProcessedSetConflict(document_id, current.value, target.value)
            self._states[document_id] = target

    def release(self, document_id: str) -> None:
        with self._lock:
            if self._states.get(document_id) is ProcessingState.IN_FLIGHT:
                del self._states[document_id]

    def state(self, document_id: str) -> ProcessingState:
        with self._lock:
            return self._states.get(document_id, ProcessingState.UNSEEN)

    def __len__(self) -> int:
        with self._lock:
            return sum(1 for s in self._states.values() if s.is_completed)


class RedisProcessedSet(BaseProcessedSet):
    """
    Redis-backed processed set shared by every gate instance on the location.

    claim() relies on SET NX, so the claim is atomic across processes and hosts.
    """

    def __init__(self, redis_client: Redis, key_prefix: str, claim_ttl_seconds: int = 300):
        """
        Initialize processed set.

        Args:
            redis_client: Redis client (decode_responses=True)
            key_prefix: Key namespace, e.g. "fhir_gate:processed:"
            claim_ttl_seconds: Expiry of IN_FLIGHT claims
        """
        self.redis = redis_client
        self.key_prefix = key_prefix
        self.claim_ttl = claim_ttl_seconds

    @classmethod
    def from_settings(cls, redis_client: Redis, settings: Settings) -> "RedisProcessedSet":
        return cls(redis_client, settings.PROCESSED_KEY_PREFIX, settings.CLAIM_TTL_SECONDS)

    def _key(self, document_id: str) -> str:
        return f"{self.key_prefix}{document_id}"

    def claim(self, document_id: str) -> bool:
        claimed = self.redis.set(
            self._key(document_id),
            ProcessingState.IN_FLIGHT.value,
            nx=True,
            ex=self.claim_ttl,
        )
        return bool(claimed)

    def complete(self, document_id: str, destination: Destination) -> None:
        target = ProcessingState.completed(destination)
        current = self.state(document_id)
        if current.is_completed and current is not target:
            raise ProcessedSetConflict(document_id, current.value, target.value)
        self.redis.set(self._key(document_id), target.value)
        logger.debug("Recorded completion", document_id=document_id, state=target.value)

    def release(self, document_id: str) -> None:
        # Only the claimant calls release, so get-then-delete cannot race a completion
        if self.state(document_id) is ProcessingState.IN_FLIGHT:
            self.redis.delete(self._key(document_id))

    def state(self, document_id: str) -> ProcessingState:
        value = self.redis.get(self._key(document_id))
        if value is None:
            return ProcessingState.UNSEEN
        return ProcessingState(value)


def build_processed_set(settings: Settings) -> BaseProcessedSet:
    """Create the processed set selected by PROCESSED_BACKEND."""
    if settings.PROCESSED_BACKEND == "redis":
        from fhir_gate.persistence.redis_client import RedisClient

        return RedisProcessedSet.from_settings(RedisClient.get_client(settings), settings)
    return InMemoryProcessedSet()
