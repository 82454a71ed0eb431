# tests/core/test_cli.py
import json

from ludwig import cli

GOOD = '<body>\n  <th scope="col">H</th>\n</body>\n'
BAD = '<body>\n  <form>\n    <label for="a">A</label>\n    <input id="b">\n  </form>\n</body>\n'


def test_scan_clean_file(tmp_path, capsys):
    page = tmp_path / "good.html"
    page.write_text(GOOD, encoding="utf-8")
    assert cli.main(["scan", str(page)]) == cli.EXIT_CLEAN
    assert "Total issues found: 0" in capsys.readouterr().out


def test_scan_with_findings(tmp_path, capsys):
    page = tmp_path / "bad.html"
    page.write_text(BAD, encoding="utf-8")
    assert cli.main(["scan", str(page)]) == cli.EXIT_FINDINGS
    out = capsys.readouterr().out
    assert "line 3: [critical] critical/form-labels" in out


def test_scan_json_and_export(tmp_path, capsys):
    bad = tmp_path / "bad.html"
    good = tmp_path / "good.html"
    bad.write_text(BAD, encoding="utf-8")
    good.write_text(GOOD, encoding="utf-8")
    export = tmp_path / "report.csv"

    code = cli.main(["scan", str(bad), str(good), "--format", "json", "--export", str(export)])
    assert code == cli.EXIT_FINDINGS
    data = json.loads(capsys.readouterr().out)
    assert data["summary"]["documents"] == 2
    assert data["summary"]["total_issues"] == 1
    assert export.exists()


def test_disable_rule(tmp_path):
    page = tmp_path / "bad.html"
    page.write_text(BAD, encoding="utf-8")
    assert cli.main(["scan", str(page), "--disable", "critical/form-labels"]) == cli.EXIT_CLEAN
    assert cli.main(["scan", str(page), "--tier", "serious"]) == cli.EXIT_CLEAN


def test_missing_file(tmp_path):
    assert cli.main(["scan", str(tmp_path / "nope.html")]) == cli.EXIT_ERROR


def test_rules_listing(capsys):
    assert cli.main(["rules"]) == cli.EXIT_CLEAN
    out = capsys.readouterr().out
    assert "critical/form-labels" in out
    assert "serious/table-headers" in out
