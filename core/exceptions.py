class RoadmapError(Exception):
    """Base class for roadmap errors."""


class InputValidationError(RoadmapError, ValueError):
    """Raised when a host-supplied value is outside the recognized set."""


class StorageError(RoadmapError):
    """Raised by a store adapter when its backend fails."""


class CatalogMismatchError(RoadmapError, KeyError):
    """Raised when a checklist toggle references an unknown phase or item."""

    def __init__(self, phase, item_id):
        self.phase = phase
        self.item_id = item_id
        super().__init__(f"Item {item_id!r} is not in the phase {phase} checklist catalog")

    def __str__(self):
        return self.args[0]
