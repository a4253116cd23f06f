# tracker_pkg/sync.py
import itertools
import logging
from functools import partial

from .celestial import make_satellite
from .constants import DEFAULT_SATELLITE_IDS
from .errors import DuplicateBodyError, TLEFetchError

logger = logging.getLogger(__name__)


class SyncListener:
    """No-op hooks; the UI overrides the ones it cares about."""
    def satellite_added(self, sat_id, record):
        pass

    def satellite_removed(self, sat_id):
        pass

    def satellite_failed(self, sat_id, error):
        pass


class BlockingFetcher:
    """
    Runs each lookup in the calling thread and reports straight away.
    Used headless and in tests; the GUI uses qt_viewer.ThreadedFetcher.
    """
    def __init__(self, manager):
        self.manager = manager

    def fetch(self, sat_id, on_resolved, on_failed):
        try:
            record = self.manager.lookup(sat_id)
        except TLEFetchError as e:
            on_failed(e)
            return
        except Exception as e:
            logger.exception("[BlockingFetcher] Unexpected error for %s", sat_id)
            on_failed(e)
            return
        on_resolved(record)


class SatelliteSync:
    """
    Module: SatelliteSync (Reconciliation)
    Responsibility: Bring the displayed satellites in line with the set of
    identifiers the user asked for.

    Per identifier: absent -> fetching -> displayed -> removed. Each fetch
    carries a generation token; a completion whose token is no longer the
    pending one is dropped, so removed identifiers never come back.
    """
    def __init__(self, registry, fetcher, factory, active_ids=DEFAULT_SATELLITE_IDS, listener=None):
        self.registry = registry
        self.fetcher = fetcher
        self.factory = factory
        self.listener = listener or SyncListener()

        self.active_ids = set(active_ids)       # desired set
        self.cache = {}                         # {sat_id: SatelliteRecord}
        self.displayed = {}                     # {sat_id: CelestialObject}
        self.pending = {}                       # {sat_id: generation token}
        self.failed = set()
        self._tokens = itertools.count(1)

    def tracked_ids(self) -> set:
        return set(self.cache) | set(self.pending)

    def reconcile(self, desired_ids=None):
        if desired_ids is not None and desired_ids is not self.active_ids:
            self.active_ids = set(desired_ids)
        desired = self.active_ids
        tracked = self.tracked_ids()

        to_remove = sorted(tracked - desired)
        for sat_id in to_remove:
            self._drop(sat_id)

        to_add = sorted(desired - tracked)
        for sat_id in to_add:
            self._request(sat_id)

        if to_remove or to_add:
            logger.info("Reconcile: removed %d, requested %d", len(to_remove), len(to_add))

    def add(self, sat_id) -> bool:
        """Search-box entry point. Returns False for blank or already active ids."""
        sat_id = str(sat_id).strip()
        if not sat_id or sat_id in self.active_ids:
            return False
        self.active_ids.add(sat_id)
        self.reconcile()
        return True

    def remove(self, sat_id):
        """Remove-control entry point."""
        self.active_ids.discard(sat_id)
        self.reconcile()

    def _request(self, sat_id):
        token = next(self._tokens)
        self.pending[sat_id] = token
        self.failed.discard(sat_id)
        logger.debug("Fetching TLE for %s (token %d)", sat_id, token)
        self.fetcher.fetch(
            sat_id,
            partial(self._on_resolved, sat_id, token),
            partial(self._on_failed, sat_id, token),
        )

    def _is_current(self, sat_id, token) -> bool:
        if self.pending.get(sat_id) != token:
            logger.debug("Discarding stale result for %s (token %d)", sat_id, token)
            return False
        return True

    def _on_resolved(self, sat_id, token, record):
        if not self._is_current(sat_id, token):
            return
        del self.pending[sat_id]

        name = record.name
        if name in self.registry:
            # display names are not unique across ids
            name = f"{record.name} ({sat_id})"
        body = make_satellite(name, record.longitude, record.latitude, self.factory)
        try:
            self.registry.register(body)
        except DuplicateBodyError as e:
            logger.error("Error adding satellite ID %s: %s", sat_id, e)
            self.failed.add(sat_id)
            self.listener.satellite_failed(sat_id, e)
            return

        self.cache[sat_id] = record
        self.displayed[sat_id] = body
        logger.info("Added satellite %s (%s) at lon %.3f, lat %.3f",
                    sat_id, record.name, record.longitude, record.latitude)
        self.listener.satellite_added(sat_id, record)

    def _on_failed(self, sat_id, token, error):
        if not self._is_current(sat_id, token):
            return
        del self.pending[sat_id]
        self.failed.add(sat_id)
        logger.error("Error adding satellite ID %s: %s", sat_id, error)
        self.listener.satellite_failed(sat_id, error)

    def _drop(self, sat_id):
        self.pending.pop(sat_id, None)
        body = self.displayed.pop(sat_id, None)
        if body is not None:
            self.registry.unregister(body.name)
        had_data = self.cache.pop(sat_id, None) is not None
        self.active_ids.discard(sat_id)
        self.failed.discard(sat_id)
        if had_data:
            logger.info("Removed satellite %s", sat_id)
            self.listener.satellite_removed(sat_id)
