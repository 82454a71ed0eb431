# src/ludwig/rules/serious/table_headers.py
from typing import List

from ludwig.dom.core import ElementBase, Finding, RuleDefinition, Severity
from ludwig.dom.query import attr, attr_in, find_all

VALID_SCOPES = ("row", "col", "rowgroup", "colgroup")
HEADER_ROLES = ("columnheader", "rowheader")


def _header_cells(root: ElementBase) -> List[ElementBase]:
    """All <th> cells, followed by the <td> cells acting as headers through their role."""
    th = find_all(root, 'th')
    td = [cell for cell in find_all(root, 'td') if attr_in(cell, 'role', HEADER_ROLES)]
    return th + td


def check_table_headers(root: ElementBase) -> List[Finding]:
    """
    Rule: header cells must declare which cells they describe.

    Every <th>, and every <td> with role=columnheader or role=rowheader,
    needs scope set to exactly row, col, rowgroup or colgroup.
    """
    results = []
    for cell in _header_cells(root):
        if attr_in(cell, 'scope', VALID_SCOPES):
            continue
        scope = attr(cell, 'scope')
        problem = "has no scope attribute" if scope is None else f"has an invalid scope ({scope!r})"
        results.append(DEFINITION.finding(
            cell,
            f"Table header <{cell.tag}> {problem}. "
            f"Use scope with one of: {', '.join(VALID_SCOPES)}."
        ))
    return results


DEFINITION = RuleDefinition(
    name="table-headers",
    tier=Severity.SERIOUS,
    evaluate=check_table_headers,
    summary="Table headers must be scoped to the cells they describe",
    links=[
        "https://www.w3.org/WAI/tutorials/tables/two-headers/",
        "https://dequeuniversity.com/rules/axe/4.8/th-has-data-cells",
    ],
)
