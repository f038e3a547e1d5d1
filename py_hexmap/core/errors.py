"""Exceptions raised when a generation run hits a broken precondition."""


class MapGenerationError(Exception):
    """Base class for fatal generation failures. The grid is undefined afterwards."""


class SearchPhaseError(MapGenerationError):
    """A frontier search was used without a live search phase."""


class RiverStateError(MapGenerationError):
    """A river edge would break the one-incoming/one-outgoing rule or flow uphill."""


class RegionPartitionError(MapGenerationError):
    """The map is too small for the requested borders and region count."""
