"""
Synthesizer:
- fills the WireGuard config template for one server
- user values (private key, DNS, MTU) are embedded verbatim
"""

from __future__ import annotations

from dataclasses import dataclass

from .normalizer import ServerRecord

INTERFACE_ADDRESS = "10.5.0.2/32"
ALLOWED_IPS = "0.0.0.0/0, ::/0"
ENDPOINT_PORT = 51820

DEFAULT_DNS = "103.86.96.100"
DEFAULT_MTU = "1420"

CONFIG_TEMPLATE = (
    "# Configuration for {hostname} ({station}) - {city}, {country}\n"
    "[Interface]\n"
    "Address = {address}\n"
    "PrivateKey = {private_key}\n"
    "DNS = {dns}\n"
    "MTU = {mtu}\n"
    "\n"
    "[Peer]\n"
    "PublicKey = {public_key}\n"
    "AllowedIPs = {allowed_ips}\n"
    "Endpoint = {hostname}:{port}"
)


@dataclass(frozen=True)
class UserPreferences:
    private_key: str = ""
    dns: str = DEFAULT_DNS
    mtu: str = DEFAULT_MTU


def synthesize(prefs: UserPreferences, server: ServerRecord) -> str:
    return CONFIG_TEMPLATE.format(
        hostname=server.hostname,
        station=server.station,
        city=server.city,
        country=server.country,
        address=INTERFACE_ADDRESS,
        private_key=prefs.private_key,
        dns=prefs.dns,
        mtu=prefs.mtu,
        public_key=server.public_key,
        allowed_ips=ALLOWED_IPS,
        port=ENDPOINT_PORT,
    )
