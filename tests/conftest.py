"""Shared fixtures: raw directory entries in the upstream JSON shape."""

import ipaddress

import pytest

from nordwg.normalizer import ServerRecord


def make_raw(
    id=1,
    hostname="kr10.nordvpn.com",
    station="10.0.0.1",
    load=10,
    status="online",
    country="South Korea",
    code="KR",
    city="Seoul",
    public_key="PUBKEY=",
    wireguard=True,
    p2p=True,
    locations=None,
    technologies=None,
    groups=None,
):
    """Build a raw catalog entry; extra technologies/groups mimic real feed noise."""
    if locations is None:
        locations = [{"country": {"name": country, "code": code, "city": {"name": city}}}]
    if technologies is None:
        technologies = [
            {"identifier": "ikev2", "metadata": []},
            {"identifier": "openvpn_udp", "metadata": []},
        ]
        if wireguard:
            technologies.append(
                {
                    "identifier": "wireguard_udp",
                    "metadata": [{"name": "public_key", "value": public_key}],
                }
            )
    if groups is None:
        groups = [{"identifier": "legacy_standard"}]
        if p2p:
            groups.append({"identifier": "legacy_p2p"})
    return {
        "id": id,
        "name": f"Server #{id}",
        "station": station,
        "hostname": hostname,
        "load": load,
        "status": status,
        "locations": locations,
        "technologies": technologies,
        "groups": groups,
    }


def make_record(**kwargs):
    fields = dict(
        id=1,
        name="Server #1",
        hostname="jp5.nordvpn.com",
        identifier="jp5",
        station=ipaddress.IPv4Address("10.0.0.5"),
        load=5,
        online=True,
        country="Japan",
        country_code="JP",
        city="Tokyo",
        public_key="PUBKEY=",
        supports_protocol=True,
        p2p=True,
    )
    fields.update(kwargs)
    if "hostname" in kwargs and "identifier" not in kwargs:
        fields["identifier"] = kwargs["hostname"].split(".")[0]
    return ServerRecord(**fields)


@pytest.fixture
def raw_entry():
    return make_raw


@pytest.fixture
def record():
    return make_record
