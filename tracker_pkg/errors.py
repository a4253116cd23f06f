# tracker_pkg/errors.py


class TrackerError(Exception):
    """Base class for errors raised by tracker_pkg."""


class TLEFetchError(TrackerError):
    """A TLE lookup failed: transport error or non-2xx response."""

    def __init__(self, sat_id, message, status_code=None):
        super().__init__(f"Error fetching TLE data for satellite ID {sat_id}: {message}")
        self.sat_id = sat_id
        self.status_code = status_code


class DuplicateBodyError(TrackerError, ValueError):
    """A body with the same name is already registered."""

    def __init__(self, name):
        super().__init__(f"Body '{name}' is already registered")
        self.name = name
