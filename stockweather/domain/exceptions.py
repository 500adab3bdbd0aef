"""Domain exceptions."""


class StockWeatherError(Exception):
    """Base class for application errors."""


class DisclosureSourceError(StockWeatherError):
    """The disclosure source could not be reached or answered with an error."""


class NotFoundError(StockWeatherError):
    """A requested record does not exist."""

    def __init__(self, resource: str, key: object):
        super().__init__(f"{resource} '{key}' not found")
        self.resource = resource
        self.key = key


class NotConnectedError(StockWeatherError):
    """A realtime message was sent while the connection is not open."""
