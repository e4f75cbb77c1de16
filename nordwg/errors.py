"""
Errors raised by the server selection pipeline.

- NormalizationError: one catalog entry can't be turned into a ServerRecord
  (the batch drops the entry and moves on)
- EncodingError: the QR raster can't be built (the config text is still usable)
- CatalogFetchError: the directory answered with something that isn't a catalog
"""

from __future__ import annotations


class NordWGError(Exception):
    """Base class for all pipeline errors."""


class NormalizationError(NordWGError, ValueError):
    """Raw catalog entry rejected during normalization."""


class InvalidAddress(NormalizationError):
    def __init__(self, station: object):
        super().__init__(f"invalid station address: {station!r}")
        self.station = station


class MalformedHostname(NormalizationError):
    def __init__(self, hostname: object):
        super().__init__(f"malformed hostname: {hostname!r}")
        self.hostname = hostname


class EncodingError(NordWGError):
    """QR raster could not be produced."""


class PayloadTooLarge(EncodingError):
    def __init__(self, size: int, limit: int):
        super().__init__(f"payload is {size} bytes, QR capacity is {limit} bytes")
        self.size = size
        self.limit = limit


class CatalogFetchError(NordWGError):
    """Catalog response is not a JSON list of servers."""
