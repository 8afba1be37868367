# ==================================================
# nsrl_filter/result.py
# ==================================================
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

MARKDOWN_HEADER = "| Found | Hash | Filename |\n|-------|------|----------|"


@dataclass
class LookupResult:
    """Outcome of one membership query."""
    found: bool
    hash: str
    filename: str = ""
    markdown: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"found": self.found, "hash": self.hash}
        if self.markdown:
            out["markdown"] = self.markdown
        out["filename"] = self.filename
        return out

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)

    def to_markdown_row(self) -> str:
        found = ":white_check_mark:" if self.found else ":x:"
        filename = self.filename.replace("|", "\\|")
        return f"| {found} | {self.hash} | {filename} |"


def markdown_table(results: Iterable[LookupResult]) -> str:
    rows = [MARKDOWN_HEADER]
    rows.extend(r.to_markdown_row() for r in results)
    return "\n".join(rows)
