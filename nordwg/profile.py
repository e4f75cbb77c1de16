"""
Profile: everything produced for one selected server.
A profile without a QR code (payload too large) is still a valid result.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .errors import EncodingError
from .normalizer import ServerRecord
from .qr import encode
from .synthesizer import UserPreferences, synthesize


@dataclass(frozen=True)
class Profile:
    server_identifier: str
    config: str
    qrcode: Optional[bytes] = None
    error: Optional[EncodingError] = None

    @property
    def has_qrcode(self) -> bool:
        return self.qrcode is not None


def build_profile(prefs: UserPreferences, server: ServerRecord) -> Profile:
    config = synthesize(prefs, server)
    try:
        png = encode(config)
    except EncodingError as exc:
        return Profile(server_identifier=server.identifier, config=config, error=exc)
    return Profile(server_identifier=server.identifier, config=config, qrcode=png)
