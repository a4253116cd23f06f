"""
Test doubles for the scene and the TLE source. None of them touch Qt,
OpenGL or the network.
"""

from tracker_pkg.errors import TLEFetchError
from tracker_pkg.tle_manager import SatelliteRecord


class FakeView:
    """Stands in for GLViewWidget; records every scene mutation."""
    def __init__(self):
        self.items = []
        self.mutations = []

    def addItem(self, item):
        self.items.append(item)
        self.mutations.append(("add", item))

    def removeItem(self, item):
        self.items.remove(item)
        self.mutations.append(("remove", item))


class FakeMesh:
    def __init__(self, spec):
        self.spec = spec
        self.position = None


class FakeMeshFactory:
    def create(self, spec):
        return FakeMesh(spec)

    def place(self, item, position):
        item.position = position


class FakeManager:
    """
    lookup() answers from a dict; unknown ids fail like an HTTP 404 and
    ids in `broken` raise KeyError like a payload missing its TLE lines.
    """
    def __init__(self, records=None, broken=()):
        self.records = dict(records or {})
        self.broken = set(broken)
        self.calls = []

    def lookup(self, sat_id):
        self.calls.append(sat_id)
        if sat_id in self.broken:
            raise KeyError("line1")
        if sat_id not in self.records:
            raise TLEFetchError(sat_id, "Not Found", status_code=404)
        name, lon, lat = self.records[sat_id]
        return SatelliteRecord(sat_id, name, lon, lat)


class DeferredFetcher:
    """Holds requests until the test completes them, in any order."""
    def __init__(self, manager):
        self.manager = manager
        self.requests = {}

    def fetch(self, sat_id, on_resolved, on_failed):
        self.requests.setdefault(sat_id, []).append((on_resolved, on_failed))

    def complete(self, sat_id, index=-1):
        on_resolved, on_failed = self.requests[sat_id].pop(index)
        try:
            record = self.manager.lookup(sat_id)
        except TLEFetchError as e:
            on_failed(e)
            return
        on_resolved(record)

    def complete_all(self):
        for sat_id in list(self.requests):
            while self.requests[sat_id]:
                self.complete(sat_id, 0)


class RecordingListener:
    def __init__(self):
        self.added = []
        self.removed = []
        self.failed = []

    def satellite_added(self, sat_id, record):
        self.added.append((sat_id, record.name))

    def satellite_removed(self, sat_id):
        self.removed.append(sat_id)

    def satellite_failed(self, sat_id, error):
        self.failed.append(sat_id)
