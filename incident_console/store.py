# ============================================================
# store.py — Incident Collections
# ============================================================

import asyncio
import logging
from typing import Awaitable, Callable, Generic, List, TypeVar

from incident_console.client import ResourceClient
from incident_console.errors import PreconditionFailure, TransportError
from incident_console.models import OperationalIncident, ProjectIncident
from incident_console.session import SessionReader

logger = logging.getLogger(__name__)

T = TypeVar("T")


def require_credential(session: SessionReader) -> str:
    credential = session.current_credential()
    if not credential:
        raise PreconditionFailure("No session token present")
    return credential


class Collection(Generic[T]):
    """One server-backed list, replaced wholesale on every successful fetch.

    ``begin`` hands out a generation number; ``apply`` only accepts the
    result of the newest generation so a slow, older response can never
    overwrite a fresher one.
    """

    def __init__(self, name: str):
        self.name = name
        self.items: List[T] = []
        self.generation = 0

    def begin(self) -> int:
        self.generation += 1
        return self.generation

    def apply(self, generation: int, items: List[T]) -> bool:
        if generation != self.generation:
            logger.debug(
                f"Dropping stale {self.name} result "
                f"(generation {generation}, current {self.generation})"
            )
            return False
        self.items = list(items)
        return True


async def fetch_into(
    session: SessionReader,
    collection: Collection[T],
    call: Callable[[str], Awaitable[List[T]]],
) -> None:
    """Replace a collection with a fresh fetch; failures keep the old rows"""
    try:
        credential = require_credential(session)
    except PreconditionFailure:
        logger.debug(f"Skipping {collection.name} fetch: not signed in")
        return

    generation = collection.begin()
    try:
        items = await call(credential)
    except TransportError as e:
        logger.error(f"❌ Failed to fetch {collection.name}: {e}")
        return
    except Exception as e:
        logger.error(f"❌ Unexpected error while fetching {collection.name}: {e}")
        return

    if collection.apply(generation, items):
        logger.info(f"✅ Loaded {len(collection.items)} {collection.name}")


class IncidentCollections:
    """Operational and project incident lists plus the shared loading flag"""

    def __init__(self, client: ResourceClient, session: SessionReader):
        self.client = client
        self.session = session
        self.operational: Collection[OperationalIncident] = Collection("operational incidents")
        self.project: Collection[ProjectIncident] = Collection("project incidents")
        self._in_flight = 0

    @property
    def loading(self) -> bool:
        return self._in_flight > 0

    async def refresh_operational(self) -> None:
        await fetch_into(self.session, self.operational, self.client.list_operational_incidents)

    async def refresh_project(self) -> None:
        await fetch_into(self.session, self.project, self.client.list_project_incidents)

    async def refresh(self) -> None:
        """Fetch both collections concurrently; each fails on its own"""
        self._in_flight += 1
        try:
            await asyncio.gather(self.refresh_operational(), self.refresh_project())
        finally:
            self._in_flight -= 1
