"""
Reporter:
- markdown listing of ranked candidates (flag, load badge tier)
- optionally saved to <base_path>/servers.md
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional

from .normalizer import ServerRecord

REGIONAL_INDICATOR_A = 0x1F1E6


def flag_emoji(country_code: str) -> str:
    code = country_code.strip().upper()
    if len(code) != 2 or not all("A" <= c <= "Z" for c in code):
        return ""
    return "".join(chr(REGIONAL_INDICATOR_A + ord(c) - ord("A")) for c in code)


def load_tier(load: int) -> str:
    if load <= 10:
        return "info"
    if load <= 30:
        return "success"
    if load <= 50:
        return "warning"
    return "error"


class Reporter:
    def __init__(self, out_path: Optional[str] = None, limit: int = 100):
        self.out_path = Path(out_path) if out_path else None
        self.limit = limit

    def generate(
        self,
        candidates: List[ServerRecord],
        criteria: Dict,
        catalog_stats: Dict,
    ) -> str:
        lines: List[str] = []

        lines.append("# WireGuard servers")
        lines.append("")
        lines.append(f"- Query: `{criteria.get('query') or '*'}`  P2P: `{criteria.get('p2p')}`")
        lines.append(
            f"- Catalog entries: **{catalog_stats.get('before')}**"
            f" (dropped as invalid: {catalog_stats.get('dropped')})"
        )
        lines.append(f"- Matching servers: **{len(candidates)}**")
        lines.append("")

        if not candidates:
            lines.append("_No servers were found that match your criteria._")
        else:
            shown = candidates[: self.limit] if self.limit > 0 else candidates
            lines.append("| # | Server | Load | Tier | City | Country |")
            lines.append("|---|--------|------|------|------|---------|")
            for i, s in enumerate(shown):
                flag = flag_emoji(s.country_code) or s.country_code or "-"
                lines.append(
                    f"| {i} | `{s.identifier.upper()}` | {s.load}% | "
                    f"{load_tier(s.load)} | {s.city or '-'} | {flag} |"
                )
            if len(shown) < len(candidates):
                lines.append("")
                lines.append(f"_{len(candidates) - len(shown)} more not shown_")

        report = "\n".join(lines) + "\n"
        if self.out_path is not None:
            self.out_path.parent.mkdir(parents=True, exist_ok=True)
            self.out_path.write_text(report, encoding="utf-8")
        return report
