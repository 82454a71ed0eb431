# src/ludwig/dom/compiler.py
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Tuple

from ludwig.model import Recommendation, RecommendationTable
from .builder import DOMBuilder
from .core import ElementBase, Finding, RuleDefinition
from .registry import RuleRegistry

logger = logging.getLogger(__name__)


class RecommendationCompiler:
    """
    Runs every registered rule against a freshly parsed document and merges the
    findings into a single key -> Recommendation table.

    Findings are merged in registry order; when two findings share a key, the
    later one overwrites the earlier one.
    """

    def __init__(
            self,
            registry: Optional[RuleRegistry] = None,
            builder: Optional[DOMBuilder] = None,
            workers: int = 1
    ):
        self.registry = registry if registry is not None else RuleRegistry.discover()
        self.builder = builder or DOMBuilder()
        self.workers = max(1, int(workers))

    def compile(self, source_text: str) -> RecommendationTable:
        """
        Parses ``source_text`` and compiles the recommendation table.

        Raises:
            ParseError: If the source cannot be parsed; no table is produced.
        """
        root = self.builder.parse_doc(source_text)
        return self.merge(self.run_rules(root))

    def run_rules(self, root: ElementBase) -> List[Tuple[RuleDefinition, Sequence[Finding]]]:
        """Evaluates all rules, returning (rule, findings) pairs in registry order."""
        rules = self.registry.rules()
        if self.workers > 1 and len(rules) > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                # map() yields in submission order, which keeps the merge order fixed
                outputs = list(executor.map(lambda r: self._evaluate(r, root), rules))
        else:
            outputs = [self._evaluate(rule, root) for rule in rules]
        return list(zip(rules, outputs))

    @staticmethod
    def _evaluate(rule: RuleDefinition, root: ElementBase) -> Sequence[Finding]:
        """Runs a single rule. A failing rule counts as having found nothing."""
        try:
            return list(rule.evaluate(root) or [])
        except Exception as e:
            logger.error(f"Rule {rule.full_name} failed, ignoring its findings: {e}", exc_info=True)
            return []

    @staticmethod
    def merge(results: Sequence[Tuple[RuleDefinition, Sequence[Finding]]]) -> RecommendationTable:
        """Builds the table from (rule, findings) pairs. Later keys overwrite earlier ones."""
        table: RecommendationTable = {}
        for rule, findings in results:
            for finding in findings:
                if not finding.key:
                    logger.debug(f"Dropping finding without key from {rule.full_name}")
                    continue
                if finding.key in table:
                    logger.debug(
                        f"Key collision: {rule.full_name} overwrites {table[finding.key].rule} "
                        f"for {finding.key[:80]!r}"
                    )
                table[finding.key] = Recommendation(
                    description=finding.description,
                    links=finding.links,
                    rule=rule.full_name,
                    severity=rule.tier,
                )
        return table


def compile_recommendations(source_text: str, registry: Optional[RuleRegistry] = None) -> RecommendationTable:
    """Shortcut for ``RecommendationCompiler(registry).compile(source_text)``."""
    return RecommendationCompiler(registry=registry).compile(source_text)
