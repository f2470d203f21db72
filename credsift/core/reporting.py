from __future__ import annotations
import json
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from .models import FileResults, ParseResult


def filter_by_app(results: Iterable[ParseResult], app: Optional[str]) -> List[ParseResult]:
    if not app:
        return list(results)
    return [r for r in results if r.app_name == app]


def render_env(results: Iterable[ParseResult]) -> str:
    return "\n".join(f"{r.key}={r.value}" for r in results)


def render_json_object(results: Iterable[ParseResult]) -> str:
    # later duplicates (from other files) overwrite earlier ones
    return json.dumps({r.key: r.value for r in results}, indent=2)


def render_table(results: List[ParseResult]) -> str:
    rows = [(r.app_name or "", r.key, r.value) for r in results]
    headers = ("APP", "KEY", "VALUE")
    widths = [max([len(h)] + [len(row[i]) for row in rows]) for i, h in enumerate(headers)]
    lines = ["  ".join(h.ljust(w) for h, w in zip(headers, widths)).rstrip()]
    for row in rows:
        lines.append("  ".join(c.ljust(w) for c, w in zip(row, widths)).rstrip())
    return "\n".join(lines)


class Reporter:
    """Writes export files for one or more parsed inputs.

    ``credentials.json`` and ``credentials.env`` mirror the app's export
    buttons; with ``app`` set they are named ``<app>.json`` / ``<app>.env``
    and only hold that app's entries.
    """

    def __init__(self, out_dir: Path, app: Optional[str] = None) -> None:
        self.out_dir = out_dir
        self.app = app

    def write_all(self, file_results: List[FileResults]) -> Dict[str, int]:
        self.out_dir.mkdir(parents=True, exist_ok=True)
        stem = self.app or "credentials"

        exported: List[ParseResult] = []
        records = []
        for fr in file_results:
            kept = filter_by_app(fr.results, self.app)
            exported.extend(kept)
            for r in kept:
                records.append({**r.to_dict(), "file": str(fr.file_path), "format": fr.format})

        (self.out_dir / f"{stem}.json").write_text(render_json_object(exported), encoding="utf-8")
        env_text = render_env(exported)
        (self.out_dir / f"{stem}.env").write_text(env_text + "\n" if env_text else "", encoding="utf-8")
        (self.out_dir / "results.json").write_text(json.dumps(records, indent=2), encoding="utf-8")

        lines = ["# Credential Summary", ""]
        for fr in file_results:
            kept = filter_by_app(fr.results, self.app)
            lines.append(f"## {fr.file_path}")
            lines.append(f"- format: {fr.format}")
            lines.append(f"- credentials: {len(kept)}")
            for r in kept:
                lines.append(f"  - `{r.key}` ({r.app_name or 'General'})")
            lines.append("")
        (self.out_dir / "summary.md").write_text("\n".join(lines), encoding="utf-8")

        return {"files": len(file_results), "credentials": len(exported), "artifacts": 4}
