"""
nordwg: pick a NordVPN server and build a WireGuard config + QR code for it.

Modules:
- normalizer: raw directory entries -> ServerRecord
- filters: filter by criteria and rank by load
- synthesizer: WireGuard config text for one server
- qr: QR code PNG for the config text
- profile: config + QR bundle for one selection
- fetcher: download / load the server directory
- reporter: markdown listing of candidates
"""

from .errors import (
    CatalogFetchError,
    EncodingError,
    InvalidAddress,
    MalformedHostname,
    NordWGError,
    NormalizationError,
    PayloadTooLarge,
)
from .filters import FilterCriteria, pick, select
from .normalizer import ServerRecord, normalize, normalize_catalog
from .profile import Profile, build_profile
from .qr import encode
from .synthesizer import UserPreferences, synthesize

__all__ = [
    "CatalogFetchError",
    "EncodingError",
    "FilterCriteria",
    "InvalidAddress",
    "MalformedHostname",
    "NordWGError",
    "NormalizationError",
    "PayloadTooLarge",
    "Profile",
    "ServerRecord",
    "UserPreferences",
    "build_profile",
    "encode",
    "normalize",
    "normalize_catalog",
    "pick",
    "select",
    "synthesize",
]
