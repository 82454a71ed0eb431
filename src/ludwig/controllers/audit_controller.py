import logging
import threading
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict

from ludwig.dom.compiler import RecommendationCompiler
from ludwig.dom.core import ParseError
from ludwig.model import MatchResult, Recommendation, RecommendationTable
from ludwig.services.line_matcher_service import LineMatcherService

logger = logging.getLogger(__name__)


class AuditPass(BaseModel):
    """Results of one compile + match pass over a document snapshot."""
    model_config = ConfigDict(frozen=True)

    uri: str
    version: int = 0
    table: RecommendationTable
    match: MatchResult

    @property
    def total_issues(self) -> int:
        return len(self.table)


class AuditController:
    """
    Orchestrates analysis passes for open documents and keeps the latest
    applied pass per document, the way an editor integration holds on to its
    highlights between edits.

    A pass that fails to parse leaves the applied results untouched. A pass
    for an older snapshot than the one already applied is discarded.
    """

    def __init__(
            self,
            compiler: Optional[RecommendationCompiler] = None,
            matcher: Optional[LineMatcherService] = None
    ):
        self.compiler = compiler or RecommendationCompiler()
        self.matcher = matcher or LineMatcherService()
        self._applied: Dict[str, AuditPass] = {}
        self._lock = threading.Lock()

    def run_pass(self, uri: str, text: Union[str, bytes], version: int = 0) -> Optional[AuditPass]:
        """
        Runs a full pass for ``uri`` and applies it.

        Returns:
            The pass now applied for ``uri``: the new one, or the previous one
            if parsing failed or a newer snapshot was applied meanwhile.
        """
        try:
            # Compile and match must see the same text, so bytes are decoded once here
            text = self._as_text(text)
            table = self.compiler.compile(text)
        except ParseError as e:
            logger.warning(f"Could not parse {uri} (version {version}), keeping previous results: {e}")
            return self.get(uri)

        match = self.matcher.match(text.splitlines(), table)
        return self._apply(AuditPass(uri=uri, version=version, table=table, match=match))

    @staticmethod
    def _as_text(text: Union[str, bytes]) -> str:
        if isinstance(text, bytes):
            try:
                return text.decode("utf-8")
            except UnicodeDecodeError as e:
                raise ParseError(f"Source is not valid UTF-8: {e}") from e
        if not isinstance(text, str):
            raise ParseError(f"Expected markup text, got {type(text).__name__}")
        return text

    def _apply(self, audit_pass: AuditPass) -> AuditPass:
        # Clear-then-set happens under one lock so only one apply is visible at a time
        with self._lock:
            current = self._applied.get(audit_pass.uri)
            if current is not None and current.version > audit_pass.version:
                logger.debug(
                    f"Discarding pass v{audit_pass.version} for {audit_pass.uri}, "
                    f"v{current.version} already applied"
                )
                return current
            self._applied.pop(audit_pass.uri, None)
            self._applied[audit_pass.uri] = audit_pass
            logger.info(
                f"Applied v{audit_pass.version} for {audit_pass.uri}: "
                f"{audit_pass.total_issues} issues, {len(audit_pass.match)} highlighted lines"
            )
            return audit_pass

    def get(self, uri: str) -> Optional[AuditPass]:
        with self._lock:
            return self._applied.get(uri)

    def recommendation_at(self, uri: str, line_no: int) -> Optional[Recommendation]:
        """Hover lookup against the applied pass for ``uri``."""
        audit_pass = self.get(uri)
        if audit_pass is None:
            return None
        return audit_pass.match.recommendation_at(line_no)

    def documents(self) -> List[str]:
        with self._lock:
            return list(self._applied)

    def clear(self, uri: str) -> None:
        with self._lock:
            self._applied.pop(uri, None)
