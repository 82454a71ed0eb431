from typing import Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from ludwig.dom.core import Severity


class Recommendation(BaseModel):
    """
    Description and reference links shown for one key of the recommendation table.
    ``rule`` and ``severity`` record which rule produced it, for reporting only.
    """
    model_config = ConfigDict(frozen=True)

    description: str
    links: Tuple[str, ...] = Field(min_length=1)
    rule: str = ""
    severity: Optional[Severity] = None


# key (outer markup of the flagged node) -> Recommendation
RecommendationTable = Dict[str, Recommendation]


class LineRange(BaseModel):
    """
    Whole-line span ``[start_line, end_line)`` with 0-based line numbers.
    ``end_character`` is the length of the line so a host can paint all of it.
    """
    model_config = ConfigDict(frozen=True)

    start_line: int = Field(ge=0)
    end_line: int
    end_character: int = 0

    @classmethod
    def for_line(cls, line_no: int, text: str = "") -> "LineRange":
        return cls(start_line=line_no, end_line=line_no + 1, end_character=len(text))

    def contains(self, line_no: int) -> bool:
        return self.start_line <= line_no < self.end_line


class LineMatch(BaseModel):
    """A matched document line together with the key and recommendation it resolved to."""
    model_config = ConfigDict(frozen=True)

    range: LineRange
    key: str
    recommendation: Recommendation


class MatchResult(BaseModel):
    """
    Ranges found by one Line Matcher call plus the reverse lookup from a range
    to its recommendation. Built fresh for every call.
    """
    model_config = ConfigDict(frozen=True)

    matches: Tuple[LineMatch, ...] = ()

    @property
    def ranges(self) -> List[LineRange]:
        return [m.range for m in self.matches]

    def _find(self, line_range: LineRange) -> Optional[LineMatch]:
        for m in self.matches:
            if m.range == line_range:
                return m
        return None

    def lookup(self, line_range: LineRange) -> Optional[Recommendation]:
        """Returns the recommendation used to produce ``line_range``, or None if it was not produced here."""
        m = self._find(line_range)
        return m.recommendation if m else None

    def key_for(self, line_range: LineRange) -> Optional[str]:
        m = self._find(line_range)
        return m.key if m else None

    def recommendation_at(self, line_no: int) -> Optional[Recommendation]:
        """Hover lookup: the recommendation of the range covering ``line_no``."""
        for m in self.matches:
            if m.range.contains(line_no):
                return m.recommendation
        return None

    @property
    def matched_keys(self) -> List[str]:
        seen: Dict[str, None] = {}
        for m in self.matches:
            seen.setdefault(m.key, None)
        return list(seen)

    def lines_for(self, key: str) -> List[int]:
        return [m.range.start_line for m in self.matches if m.key == key]

    def unmatched_keys(self, table: Iterable[str]) -> List[str]:
        """Table keys for which no document line was found."""
        matched = set(self.matched_keys)
        return [key for key in table if key not in matched]

    def __len__(self) -> int:
        return len(self.matches)
