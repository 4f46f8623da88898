"""Exceptions raised while building maps and events."""


class MapObjectError(Exception):
    """A tile or object could not be generated; the whole map load fails."""


class MapLoadError(Exception):
    """A map file is missing something the engine needs."""


class CropError(Exception):
    """A tile set could not produce the image for a tile id."""


class EventError(Exception):
    """Base class for event property and listener problems."""


class IllegalArgumentFormatError(EventError):
    """The raw event property does not have enough comma separated tokens."""


class IllegalParamFormatError(EventError):
    """The placement bitmask is not four '0'/'1' characters."""


class InvalidPropertyError(EventError):
    """The parsed event property is unusable."""


class InvalidParamError(EventError):
    """An event factory rejected its arguments."""


class EventIdNotFoundError(EventError):
    """No factory is registered for the event type id."""
