"""Place enrichment gate.

Decides, per normalized record, whether it is exported at all and which
place details (if any) overlay its coarse fields.

## Rules

1. A record whose place id is in the exclusion set is skipped. This check
   comes first and does not depend on whether lookups are enabled.
2. With lookups disabled, no overlay is produced.
3. With lookups enabled, each place id involved is looked up once. A
   failed lookup leaves that slot empty; the record is still exported with
   its own fields.

## Concurrency

``enrich_all`` runs lookups concurrently, limited by a semaphore. Every
record is handled in its own task; a failure or timeout in one task never
affects another. Results come back in input order.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Collection, Iterable

import httpx

from timeline_ics.models.place import Enrichment, PlaceDetails
from timeline_ics.models.record import NormalizedRecord
from timeline_ics.places.base import PlaceLookup, PlaceLookupError

logger = logging.getLogger(__name__)


class PlaceEnrichmentGate:
    """Apply exclusions and optional place lookups to normalized records.

    Example:
        ```python
        gate = PlaceEnrichmentGate(lookup, enabled=True, exclusions={"ChIJ..."})
        pairs = await gate.enrich_all(records)
        ```
    """

    def __init__(
        self,
        lookup: PlaceLookup | None = None,
        enabled: bool = False,
        exclusions: Collection[str] = (),
        max_concurrency: int = 8,
    ):
        """Initialize the gate.

        Args:
            lookup: Place details provider; lookups are off without one
            enabled: Whether to call the provider at all
            exclusions: Place ids whose records are never exported
            max_concurrency: Upper bound on in-flight lookups
        """
        self.lookup = lookup
        self.enabled = enabled and lookup is not None
        self.exclusions = frozenset(exclusions)
        self.max_concurrency = max(1, max_concurrency)
        self._cache: dict[str, PlaceDetails | None] = {}
        self._pending: dict[str, asyncio.Future[PlaceDetails | None]] = {}

    def is_excluded(self, record: NormalizedRecord) -> bool:
        """Check whether the record must be skipped entirely."""
        return record.place_id is not None and record.place_id in self.exclusions

    async def _get_place(
        self,
        place_id: str,
        semaphore: asyncio.Semaphore | None,
    ) -> PlaceDetails | None:
        if place_id in self._cache:
            return self._cache[place_id]

        # Records sharing a place id wait on the same request
        pending = self._pending.get(place_id)
        if pending is None:
            pending = asyncio.ensure_future(self._fetch_place(place_id, semaphore))
            self._pending[place_id] = pending
        return await pending

    async def _fetch_place(
        self,
        place_id: str,
        semaphore: asyncio.Semaphore | None,
    ) -> PlaceDetails | None:
        if self.lookup is None:
            return None

        try:
            if semaphore is None:
                details = await self.lookup.get_place(place_id)
            else:
                async with semaphore:
                    details = await self.lookup.get_place(place_id)
        except (PlaceLookupError, httpx.HTTPError, TimeoutError) as e:
            logger.warning(f"Place lookup for {place_id} failed: {e}")
            details = None
        finally:
            self._pending.pop(place_id, None)

        self._cache[place_id] = details
        return details

    async def enrich(
        self,
        record: NormalizedRecord,
        semaphore: asyncio.Semaphore | None = None,
    ) -> Enrichment | None:
        """Look up place details for one record.

        Excluded records must be filtered out by the caller first (see
        ``is_excluded``).

        Returns:
            The overlay, or None when lookups are disabled or all failed
        """
        if not self.enabled:
            return None

        if record.segment is None:
            if not record.place_id:
                return None
            details = await self._get_place(record.place_id, semaphore)
            return Enrichment(place=details) if details is not None else None

        segment = record.segment

        async def slot(place_id: str | None) -> PlaceDetails | None:
            if not place_id:
                return None
            return await self._get_place(place_id, semaphore)

        start, end, first, last = await asyncio.gather(
            slot(segment.start.place_id),
            slot(segment.end.place_id),
            slot(segment.first_segment_place_id),
            slot(segment.last_segment_place_id),
        )
        enrichment = Enrichment(
            start=start,
            end=end,
            first_segment=first,
            last_segment=last,
        )
        return None if enrichment.is_empty else enrichment

    async def enrich_all(
        self,
        records: Iterable[NormalizedRecord],
    ) -> list[tuple[NormalizedRecord, Enrichment | None]]:
        """Drop excluded records and enrich the rest concurrently.

        Returns:
            ``(record, enrichment)`` pairs in input order
        """
        kept: list[NormalizedRecord] = []
        for record in records:
            if self.is_excluded(record):
                logger.debug(f"Skipping excluded place {record.place_id} ({record.id})")
                continue
            kept.append(record)

        if not self.enabled:
            return [(record, None) for record in kept]

        semaphore = asyncio.Semaphore(self.max_concurrency)
        results = await asyncio.gather(
            *(self.enrich(record, semaphore) for record in kept),
            return_exceptions=True,
        )

        pairs: list[tuple[NormalizedRecord, Enrichment | None]] = []
        for record, result in zip(kept, results):
            if isinstance(result, BaseException):
                logger.warning(f"Enrichment of {record.id} failed: {result!r}")
                pairs.append((record, None))
            else:
                pairs.append((record, result))
        return pairs
