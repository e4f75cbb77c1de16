#!/usr/bin/env python3
"""
pipeline.py
CLI for nordwg: pick a NordVPN server and write its WireGuard config + QR code.

Steps:
  1. Fetch     : server directory (API or local JSON file)
  2. Normalize : raw entries → ServerRecord[], invalid ones dropped
  3. Select    : online / wireguard / p2p / query filters, ranked by load
  4. Report    : markdown listing → out/servers.md
  5. Profile   : config text + QR PNG for the chosen server → out/
"""

from __future__ import annotations

import sys
import time
from pathlib import Path
from typing import Dict, List, Optional

import requests
import yaml

from nordwg.errors import NordWGError
from nordwg.fetcher import CatalogFetcher
from nordwg.filters import FilterCriteria, ServerFilter, pick
from nordwg.normalizer import CatalogNormalizer, ServerRecord
from nordwg.profile import Profile, build_profile
from nordwg.reporter import Reporter, flag_emoji
from nordwg.synthesizer import DEFAULT_DNS, DEFAULT_MTU, UserPreferences


def config_filename(identifier: str, suffix: str = ".conf") -> str:
    return f"nord-{identifier}{suffix}"


class NordWGPipeline:

    def __init__(self, config_path: str = "config.yaml", overrides: Optional[Dict] = None):
        self.config_path = config_path
        self.config = self._load_config()
        self._apply_overrides(overrides or {})

        app = self.config.get("app", {}) or {}
        self.debug = app.get("debug", False)

        filters_cfg = self.config.get("filters", {}) or {}
        self.criteria = FilterCriteria(
            query=str(filters_cfg.get("query") or ""),
            p2p=bool(filters_cfg.get("p2p", True)),
        )
        self.display_limit = self._int_setting(filters_cfg, "filters.display_limit", 100)
        self.server_index = self._int_setting(filters_cfg, "filters.server_index", 0)

        user_cfg = self.config.get("user", {}) or {}
        self.prefs = UserPreferences(
            private_key=str(user_cfg.get("private_key") or ""),
            dns=str(user_cfg.get("dns") or DEFAULT_DNS),
            mtu=str(user_cfg.get("mtu") or DEFAULT_MTU),
        )

        out_cfg = self.config.get("output", {}) or {}
        self.base_out = Path(out_cfg.get("base_path", "./out"))
        self.write_report = out_cfg.get("report", True)
        self.list_only = bool(out_cfg.get("list_only", False))

        self.fetcher = CatalogFetcher(self.config)
        self.normalizer = CatalogNormalizer()
        self.filterer = ServerFilter(self.criteria)
        self.reporter = Reporter(
            out_path=str(self.base_out / "servers.md") if self.write_report else None,
            limit=self.display_limit,
        )

        self.servers: List[ServerRecord] = []

    def run(self) -> Optional[Profile]:
        t_start = time.monotonic()
        self._banner("nordwg")

        raw = self._step1_fetch()
        catalog_stats = self._step2_normalize(raw)
        self._step3_select()
        self._step4_report(catalog_stats)
        profile = None if self.list_only else self._step5_profile()

        elapsed = time.monotonic() - t_start
        self._banner(f"Done in {elapsed:.1f}s  |  {len(self.servers)} matching servers")
        return profile

    # ── step 1: Fetch ───────────────────────────────────────

    def _step1_fetch(self) -> list:
        print("\n[1/5] Fetching server directory...")
        source = self.fetcher.path or self.fetcher.url
        try:
            raw = self.fetcher.fetch()
        except (requests.RequestException, OSError, NordWGError) as exc:
            print(f"    ✗ {source}: {exc}")
            sys.exit(1)
        print(f"    → entries: {len(raw)}")
        return raw

    # ── step 2: Normalize ────────────────────────────────────

    def _step2_normalize(self, raw: list) -> dict:
        print("\n[2/5] Normalizing catalog...")
        records, stats = self.normalizer.apply(raw)
        self.servers = records

        if self.debug:
            for index, exc in stats["errors"]:
                print(f"      dropped #{index}: {exc}")
        print(f"    → before: {stats['before']}  dropped: {stats['dropped']}  after: {stats['after']}")
        return stats

    # ── step 3: Select ───────────────────────────────────────

    def _step3_select(self) -> None:
        print("\n[3/5] Filtering & ranking...")
        print(f"    query={self.criteria.query!r}  p2p={self.criteria.p2p}")

        self.servers, stats = self.filterer.apply(self.servers)
        print(
            f"    → before: {stats['before']}  "
            f"offline: {stats['dropped_offline']}  "
            f"no wireguard: {stats['dropped_protocol']}  "
            f"p2p mismatch: {stats['dropped_p2p']}  "
            f"query mismatch: {stats['dropped_query']}  "
            f"after: {stats['after']}"
        )

    # ── step 4: Report ───────────────────────────────────────

    def _step4_report(self, catalog_stats: dict) -> None:
        print("\n[4/5] Listing servers...")
        report = self.reporter.generate(
            candidates=self.servers,
            criteria={"query": self.criteria.query, "p2p": self.criteria.p2p},
            catalog_stats=catalog_stats,
        )
        if self.debug:
            print(report)
        if self.reporter.out_path is not None:
            print(f"    → report saved to {self.reporter.out_path}")

    # ── step 5: Profile ──────────────────────────────────────

    def _step5_profile(self) -> Optional[Profile]:
        print("\n[5/5] Building WireGuard profile...")
        server = pick(self.servers, self.server_index)
        if server is None:
            if not self.servers:
                print("    ! No servers were found that match your criteria")
            else:
                print(f"    ! No server at index {self.server_index} (have {len(self.servers)})")
            return None

        print(
            f"    {server.identifier.upper()}  {server.load}%  "
            f"{server.city}, {server.country} {flag_emoji(server.country_code)}"
        )
        if not self.prefs.private_key:
            print("    ! private key is empty, fill PrivateKey before importing")

        profile = build_profile(self.prefs, server)

        self.base_out.mkdir(parents=True, exist_ok=True)
        conf_path = self.base_out / config_filename(profile.server_identifier)
        conf_path.write_text(profile.config + "\n", encoding="utf-8")
        print(f"    → config saved to {conf_path}")

        if profile.qrcode is not None:
            png_path = self.base_out / config_filename(profile.server_identifier, ".png")
            png_path.write_bytes(profile.qrcode)
            print(f"    → QR code saved to {png_path}")
        else:
            print(f"    ! QR code skipped: {profile.error}")

        return profile

    # ── utilities ────────────────────────────────────────────

    def _load_config(self) -> dict:
        try:
            with open(self.config_path, encoding="utf-8") as f:
                return yaml.safe_load(f) or {}
        except FileNotFoundError:
            return {}
        except yaml.YAMLError as exc:
            print(f"Error parsing config: {exc}")
            sys.exit(1)

    @staticmethod
    def _int_setting(section: dict, dotted: str, default: int) -> int:
        value = section.get(dotted.split(".", 1)[1], default)
        try:
            return int(value)
        except (TypeError, ValueError, OverflowError):
            print(f"Error in config: {dotted} must be an integer, got {value!r}")
            sys.exit(1)

    def _apply_overrides(self, overrides: Dict) -> None:
        """overrides: {"section.key": value}; None values are ignored."""
        for dotted, value in overrides.items():
            if value is None:
                continue
            section, key = dotted.split(".", 1)
            current = self.config.get(section)
            if not isinstance(current, dict):
                current = {}
                self.config[section] = current
            current[key] = value

    @staticmethod
    def _banner(text: str) -> None:
        print("\n" + "=" * 60)
        print(f"  {text}")
        print("=" * 60)


def main(argv: Optional[List[str]] = None) -> None:
    import argparse

    ap = argparse.ArgumentParser(description="NordVPN WireGuard config generator")
    ap.add_argument("--config", default="config.yaml", help="Path to config.yaml")
    ap.add_argument("--catalog", help="Read the server directory from a local JSON file")
    ap.add_argument("--query", help="Match identifier / country / country code / city")
    p2p = ap.add_mutually_exclusive_group()
    p2p.add_argument("--p2p", dest="p2p", action="store_true", default=None, help="Only P2P servers")
    p2p.add_argument("--no-p2p", dest="p2p", action="store_false", help="Only non-P2P servers")
    ap.add_argument("--index", type=int, help="Position in the ranked list to build a profile for")
    ap.add_argument("--private-key", help="WireGuard private key")
    ap.add_argument("--dns", help="DNS server")
    ap.add_argument("--mtu", help="Interface MTU")
    ap.add_argument("--out", help="Output directory")
    ap.add_argument("--list", dest="list_only", action="store_true", default=None,
                    help="Only list matching servers")
    ap.add_argument("--debug", action="store_true", default=None)
    args = ap.parse_args(argv)

    overrides = {
        "catalog.path": args.catalog,
        "filters.query": args.query,
        "filters.p2p": args.p2p,
        "filters.server_index": args.index,
        "user.private_key": args.private_key,
        "user.dns": args.dns,
        "user.mtu": args.mtu,
        "output.base_path": args.out,
        "output.list_only": args.list_only,
        "app.debug": args.debug,
    }

    pipeline = NordWGPipeline(config_path=args.config, overrides=overrides)
    pipeline.run()


if __name__ == "__main__":
    main()
