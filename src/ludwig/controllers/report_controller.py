import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

import pandas as pd

from ludwig.controllers.audit_controller import AuditPass
from ludwig.dom.core import SEVERITY_ORDER

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = ["Document", "Lines", "Severity", "Rule", "Key", "Description", "Links"]


class ReportController:
    """
    Builds summaries and flat exports from applied audit passes.
    """

    def __init__(self, passes: List[AuditPass]):
        self.passes = passes

    # --- HELPERS ---

    def _rows(self) -> List[Dict[str, Any]]:
        rows = []
        for audit_pass in self.passes:
            for key, rec in audit_pass.table.items():
                rows.append({
                    "Document": audit_pass.uri,
                    "Lines": " ".join(str(n + 1) for n in audit_pass.match.lines_for(key)),
                    "Severity": rec.severity.value if rec.severity else "",
                    "Rule": rec.rule,
                    "Key": key,
                    "Description": rec.description,
                    "Links": " ".join(rec.links),
                })
        return rows

    def issues_df(self) -> pd.DataFrame:
        """One row per recommendation table entry, across all passes."""
        return pd.DataFrame(self._rows(), columns=EXPORT_COLUMNS)

    # --- SUMMARY ---

    def summarize(self) -> Dict[str, Any]:
        """Totals per severity tier (in tier order), matched lines and unmatched keys."""
        df = self.issues_df()
        counts = df["Severity"].value_counts() if not df.empty else pd.Series(dtype=int)
        by_severity = {tier.value: int(counts.get(tier.value, 0)) for tier in SEVERITY_ORDER}

        return {
            "documents": len(self.passes),
            "total_issues": int(len(df)),
            "by_severity": by_severity,
            "matched_lines": sum(len(p.match) for p in self.passes),
            "unmatched_keys": [
                key for p in self.passes for key in p.match.unmatched_keys(p.table)
            ],
        }

    def to_dict(self) -> Dict[str, Any]:
        return {"summary": self.summarize(), "issues": self._rows()}

    # --- EXPORT ---

    def export(self, path: Union[str, Path]) -> Path:
        """Writes the flat issue rows to ``.csv`` or ``.json`` depending on the suffix."""
        out = Path(path)
        out.parent.mkdir(parents=True, exist_ok=True)

        if out.suffix.lower() == ".csv":
            self.issues_df().to_csv(out, index=False)
        elif out.suffix.lower() == ".json":
            out.write_text(json.dumps(self.to_dict(), indent=2), encoding="utf-8")
        else:
            raise ValueError(f"Unsupported export format: {out.suffix or '(none)'}; use .csv or .json")

        logger.info(f"Report exported to {out}")
        return out


def format_text_report(audit_pass: AuditPass, lines: List[str]) -> str:
    """Human-readable listing of the highlighted lines of one document."""
    out: List[str] = [f"{audit_pass.uri}"]
    for m in audit_pass.match.matches:
        rec = m.recommendation
        out.append(f"  line {m.range.start_line + 1}: [{rec.severity.value if rec.severity else '-'}] {rec.rule}")
        out.append(f"    {lines[m.range.start_line].strip()}")
        out.append(f"    {rec.description}")
        for link in rec.links:
            out.append(f"    -> {link}")
    unmatched = audit_pass.match.unmatched_keys(audit_pass.table)
    if unmatched:
        out.append(f"  {len(unmatched)} issue(s) could not be located on a single line:")
        for key in unmatched:
            out.append(f"    [{audit_pass.table[key].rule}] {key[:100]}")
    out.append(f"  Total issues: {audit_pass.total_issues}")
    return "\n".join(out)
