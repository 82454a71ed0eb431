# src/ludwig/services/line_matcher_service.py
import logging
from typing import List, Sequence, Set

from ludwig.model import LineMatch, LineRange, MatchResult, RecommendationTable

logger = logging.getLogger(__name__)


class LineMatcherService:
    """
    Locates the document lines whose trimmed text equals a key of the
    recommendation table. Matching is purely textual; the table already proves
    each key is a real violation.
    """

    def match(self, document_lines: Sequence[str], table: RecommendationTable) -> MatchResult:
        """
        Args:
            document_lines: The document split into lines, without line terminators.
            table: The compiled key -> Recommendation table.

        Returns:
            MatchResult: One whole-line range per matched line, with its recommendation.
        """
        matches: List[LineMatch] = []
        matched_lines: Set[int] = set()

        if not table:
            return MatchResult()

        for line_no, line in enumerate(document_lines):
            key = line.strip()
            if not key or line_no in matched_lines:
                continue
            recommendation = table.get(key)
            if recommendation is None:
                continue
            matches.append(LineMatch(
                range=LineRange.for_line(line_no, line),
                key=key,
                recommendation=recommendation,
            ))
            matched_lines.add(line_no)

        if logger.isEnabledFor(logging.DEBUG):
            unmatched = len(table) - len({m.key for m in matches})
            logger.debug(f"Matched {len(matches)} lines, {unmatched} keys without a line")

        return MatchResult(matches=tuple(matches))


def match_lines(document_lines: Sequence[str], table: RecommendationTable) -> MatchResult:
    """Shortcut for ``LineMatcherService().match(document_lines, table)``."""
    return LineMatcherService().match(document_lines, table)
