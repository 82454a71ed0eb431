# src/ludwig/rules/critical/form_labels.py
from typing import List

from ludwig.dom.core import ElementBase, Finding, RuleDefinition, Severity
from ludwig.dom.query import attr, direct_children, find_all


def check_form_labels(root: ElementBase) -> List[Finding]:
    """
    Rule: every direct <label> of a <form> must point at its paired <input>.

    Labels and inputs are paired positionally (i-th label with i-th input).
    When the counts differ only the overlapping pairs are checked.
    """
    results = []

    for form in find_all(root, 'form'):
        labels = direct_children(form, 'label')
        inputs = direct_children(form, 'input')

        for label, field in zip(labels, inputs):
            # Both missing counts as a match, like comparing two absent attributes
            if attr(label, 'for') != attr(field, 'id'):
                results.append(DEFINITION.finding(
                    label,
                    f"Label 'for' attribute ({attr(label, 'for')!r}) does not match "
                    f"the id of its input ({attr(field, 'id')!r}). Set for=\"<input id>\" "
                    "so assistive technology announces the label with the field."
                ))

    return results


DEFINITION = RuleDefinition(
    name="form-labels",
    tier=Severity.CRITICAL,
    evaluate=check_form_labels,
    summary="Form labels must be associated with their inputs",
    links=[
        "https://www.w3.org/WAI/tutorials/forms/labels/",
        "https://dequeuniversity.com/rules/axe/4.8/label",
    ],
)
