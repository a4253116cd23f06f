# tracker_pkg/registry.py
import logging

from .celestial import BodyKind, CelestialObject
from .errors import DuplicateBodyError

logger = logging.getLogger(__name__)


class SceneRegistry:
    """
    Owns scene membership and the two lookup tables (name -> body,
    renderable -> name). Every table filled by register() is cleared
    by unregister().

    `view` is anything with addItem(item) / removeItem(item), e.g. a
    pyqtgraph GLViewWidget.
    """
    def __init__(self, view):
        self.view = view
        self._objects = {}           # {name: CelestialObject}
        self._names = {}             # {renderable: name}

    def register(self, body: CelestialObject):
        if body.name in self._objects:
            raise DuplicateBodyError(body.name)

        self._objects[body.name] = body
        self._names[body.renderable] = body.name
        self.view.addItem(body.renderable)
        logger.debug("Registered %s '%s'", body.kind.value, body.name)

    def unregister(self, name: str) -> CelestialObject:
        body = self._objects.pop(name)
        del self._names[body.renderable]
        self.view.removeItem(body.renderable)
        logger.debug("Unregistered '%s'", name)
        return body

    def resolve(self, renderable):
        """Name for a renderable handle, or None if it is not tracked."""
        return self._names.get(renderable)

    def get(self, name: str):
        return self._objects.get(name)

    def bodies(self):
        return list(self._objects.values())

    @property
    def primary(self):
        for body in self._objects.values():
            if body.kind is BodyKind.PRIMARY:
                return body
        return None

    def __contains__(self, name):
        return name in self._objects

    def __len__(self):
        return len(self._objects)
