"""
Catalog normalizer: raw directory JSON entry -> ServerRecord.

All knowledge about the upstream record shape lives here:
  {id, name, station, hostname, load, status,
   locations: [{country: {name, code, city: {name}}}],
   technologies: [{identifier, metadata: [{name, value}]}],
   groups: [{identifier}]}
"""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .errors import InvalidAddress, MalformedHostname, NormalizationError

RawCatalogEntry = Dict[str, Any]

TARGET_PROTOCOL = "wireguard_udp"
P2P_GROUP = "legacy_p2p"
PUBLIC_KEY_META = "public_key"
ONLINE_STATUS = "online"


@dataclass(frozen=True)
class ServerRecord:
    """Canonical relay endpoint"""
    id: int
    name: str
    hostname: str
    identifier: str  # first label of hostname
    station: ipaddress.IPv4Address
    load: int  # 0..100
    online: bool
    country: str
    country_code: str
    city: str
    public_key: str
    supports_protocol: bool
    p2p: bool


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _as_int(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return default


class CatalogNormalizer:
    """Normalizer for directory catalog entries"""

    @staticmethod
    def parse_station(value: Any) -> ipaddress.IPv4Address:
        if not isinstance(value, str):
            raise InvalidAddress(value)
        try:
            return ipaddress.IPv4Address(value.strip())
        except ValueError as exc:
            raise InvalidAddress(value) from exc

    @staticmethod
    def parse_identifier(hostname: str) -> str:
        identifier = hostname.split(".", 1)[0]
        if not identifier:
            raise MalformedHostname(hostname)
        return identifier

    @staticmethod
    def find_location(raw: RawCatalogEntry) -> Tuple[str, str, str]:
        """(country, country_code, city) from the first location, or empty strings."""
        locations = _as_list(raw.get("locations"))
        if not locations:
            return "", "", ""
        country = _as_dict(_as_dict(locations[0]).get("country"))
        city = _as_dict(country.get("city"))
        return (
            _as_str(country.get("name")),
            _as_str(country.get("code")),
            _as_str(city.get("name")),
        )

    @staticmethod
    def find_technology(raw: RawCatalogEntry, identifier: str) -> Optional[Dict[str, Any]]:
        for tech in _as_list(raw.get("technologies")):
            tech = _as_dict(tech)
            if tech.get("identifier") == identifier:
                return tech
        return None

    @staticmethod
    def find_metadata(tech: Dict[str, Any], name: str) -> Optional[str]:
        for meta in _as_list(tech.get("metadata")):
            meta = _as_dict(meta)
            if meta.get("name") == name:
                return _as_str(meta.get("value"))
        return None

    @staticmethod
    def has_group(raw: RawCatalogEntry, identifier: str) -> bool:
        return any(
            _as_dict(group).get("identifier") == identifier
            for group in _as_list(raw.get("groups"))
        )

    @staticmethod
    def normalize(raw: RawCatalogEntry) -> ServerRecord:
        """
        Build a ServerRecord from one raw entry.
        Raises InvalidAddress / MalformedHostname; everything else defaults.
        """
        station = CatalogNormalizer.parse_station(raw.get("station"))

        hostname = _as_str(raw.get("hostname")).strip()
        identifier = CatalogNormalizer.parse_identifier(hostname)

        country, country_code, city = CatalogNormalizer.find_location(raw)

        tech = CatalogNormalizer.find_technology(raw, TARGET_PROTOCOL)
        public_key = CatalogNormalizer.find_metadata(tech, PUBLIC_KEY_META) if tech else None

        load = min(max(_as_int(raw.get("load"), 100), 0), 100)

        return ServerRecord(
            id=_as_int(raw.get("id"), 0),
            name=_as_str(raw.get("name")),
            hostname=hostname,
            identifier=identifier,
            station=station,
            load=load,
            online=raw.get("status") == ONLINE_STATUS,
            country=country,
            country_code=country_code,
            city=city,
            public_key=public_key or "",
            supports_protocol=public_key is not None,
            p2p=CatalogNormalizer.has_group(raw, P2P_GROUP),
        )

    def apply(self, entries: Iterable[Any]) -> Tuple[List[ServerRecord], Dict]:
        """
        Normalize a whole catalog, dropping entries that fail.
        Returns (records, stats); stats["errors"] holds (index, error) pairs.
        """
        records: List[ServerRecord] = []
        errors: List[Tuple[int, NormalizationError]] = []
        before = 0

        for i, raw in enumerate(entries):
            before += 1
            if not isinstance(raw, dict):
                errors.append((i, NormalizationError(f"entry is not an object: {type(raw).__name__}")))
                continue
            try:
                records.append(self.normalize(raw))
            except NormalizationError as exc:
                errors.append((i, exc))

        stats = {
            "before": before,
            "dropped": len(errors),
            "after": len(records),
            "errors": errors,
        }
        return records, stats


def normalize(raw: RawCatalogEntry) -> ServerRecord:
    return CatalogNormalizer.normalize(raw)


def normalize_catalog(entries: Iterable[Any]) -> List[ServerRecord]:
    records, _ = CatalogNormalizer().apply(entries)
    return records
