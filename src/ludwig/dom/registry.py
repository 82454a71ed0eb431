# src/ludwig/dom/registry.py
import importlib
import logging
import pkgutil
from typing import Dict, Iterable, Iterator, List, Optional

from .core import RuleDefinition, SEVERITY_ORDER, Severity

logger = logging.getLogger(__name__)

RULES_PACKAGE = "ludwig.rules"


class RuleRegistry:
    """
    Ordered collection of accessibility rules, grouped by severity tier.

    Iteration yields tiers in severity order and, within a tier, rules in
    registration order. That order decides which recommendation wins when two
    findings share a key.
    """

    def __init__(self, rules: Optional[Iterable[RuleDefinition]] = None):
        self._by_tier: Dict[Severity, List[RuleDefinition]] = {tier: [] for tier in SEVERITY_ORDER}
        self._names: Dict[str, RuleDefinition] = {}
        for rule in rules or []:
            self.register(rule)

    @classmethod
    def discover(
            cls,
            package: str = RULES_PACKAGE,
            tiers: Optional[Iterable[str]] = None,
            disabled: Optional[Iterable[str]] = None
    ) -> "RuleRegistry":
        """
        Builds a registry from the rule modules found in ``<package>.<tier>``.

        Every module exposing a ``DEFINITION`` (instance of ``RuleDefinition``)
        is registered. Modules within a tier are loaded in name order.

        Args:
            package: Dotted name of the package holding one sub-package per tier.
            tiers: Restrict discovery to these tier names.
            disabled: Full rule names (``tier/check``) to skip.
        """
        registry = cls()
        wanted = {Severity(t) for t in tiers} if tiers else set(SEVERITY_ORDER)
        skipped = set(disabled or [])

        for tier in SEVERITY_ORDER:
            if tier not in wanted:
                continue
            try:
                tier_pkg = importlib.import_module(f"{package}.{tier.value}")
            except ImportError:
                logger.debug(f"No rules package for tier '{tier.value}'")
                continue

            modules = sorted(name for _, name, _ in pkgutil.iter_modules(tier_pkg.__path__))
            for name in modules:
                full_name = f"{package}.{tier.value}.{name}"
                try:
                    module = importlib.import_module(full_name)
                except Exception as e:
                    logger.error(f"Error loading rule module {full_name}: {e}", exc_info=True)
                    continue

                defn = getattr(module, "DEFINITION", None)
                if not isinstance(defn, RuleDefinition):
                    continue
                if defn.tier is not tier:
                    logger.warning(f"Rule {defn.full_name} lives in the '{tier.value}' package, skipped")
                    continue
                if defn.full_name in skipped:
                    logger.info(f"Rule {defn.full_name} disabled by configuration")
                    continue

                registry.register(defn)
                logger.debug(f"Rule loaded: {defn.full_name}")

        return registry

    def register(self, rule: RuleDefinition) -> RuleDefinition:
        """Appends a rule to its tier. Names must be unique."""
        if rule.full_name in self._names:
            raise ValueError(f"Rule '{rule.full_name}' is already registered")
        self._by_tier[rule.tier].append(rule)
        self._names[rule.full_name] = rule
        return rule

    def rules(self, tier: Optional[str] = None) -> List[RuleDefinition]:
        """Returns the registered rules in evaluation order, optionally for a single tier."""
        if tier is not None:
            return list(self._by_tier[Severity(tier)])
        return [rule for t in SEVERITY_ORDER for rule in self._by_tier[t]]

    def get(self, full_name: str) -> Optional[RuleDefinition]:
        return self._names.get(full_name)

    def __iter__(self) -> Iterator[RuleDefinition]:
        return iter(self.rules())

    def __len__(self) -> int:
        return len(self._names)

    def __contains__(self, full_name: object) -> bool:
        return full_name in self._names
