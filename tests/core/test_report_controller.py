# tests/core/test_report_controller.py
import json

import pandas as pd
import pytest

from ludwig.controllers.audit_controller import AuditController
from ludwig.controllers.report_controller import ReportController, format_text_report

PAGE = """<body>
  <img src="logo.png">
  <table>
    <tr><th>Name</th></tr>
  </table>
</body>"""


@pytest.fixture
def audit_pass():
    return AuditController().run_pass("page.html", PAGE)


def test_summary(audit_pass):
    summary = ReportController([audit_pass]).summarize()
    assert summary["total_issues"] == 2
    assert summary["by_severity"] == {"critical": 1, "serious": 1, "moderate": 0, "minor": 0}
    assert summary["matched_lines"] == 1
    assert summary["unmatched_keys"] == ["<th>Name</th>"]


def test_summary_without_passes():
    summary = ReportController([]).summarize()
    assert summary["total_issues"] == 0
    assert summary["by_severity"]["critical"] == 0


def test_export_csv(audit_pass, tmp_path):
    out = ReportController([audit_pass]).export(tmp_path / "out" / "report.csv")
    df = pd.read_csv(out)
    assert list(df["Rule"]) == ["critical/image-alt", "serious/table-headers"]
    assert str(df.loc[0, "Lines"]) == "2"


def test_export_json(audit_pass, tmp_path):
    out = ReportController([audit_pass]).export(tmp_path / "report.json")
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["summary"]["total_issues"] == 2
    assert data["issues"][0]["Key"] == '<img src="logo.png">'


def test_export_rejects_unknown_format(audit_pass, tmp_path):
    with pytest.raises(ValueError):
        ReportController([audit_pass]).export(tmp_path / "report.xlsx")


def test_text_report(audit_pass):
    text = format_text_report(audit_pass, PAGE.splitlines())
    assert "line 2: [critical] critical/image-alt" in text
    assert "could not be located" in text
    assert "Total issues: 2" in text
