# tests/core/test_rule_registry.py
import pytest

from ludwig.dom.core import RuleDefinition, Severity
from ludwig.dom.registry import RuleRegistry


def stub(name, tier=Severity.SERIOUS):
    return RuleDefinition(name=name, tier=tier, evaluate=lambda root: [], links=["https://example.com"])


def test_discover_loads_builtin_rules_in_tier_order():
    registry = RuleRegistry.discover()
    assert [rule.full_name for rule in registry] == [
        "critical/form-labels",
        "critical/image-alt",
        "serious/iframe-title",
        "serious/link-name",
        "serious/table-headers",
    ]


def test_discover_filters_by_tier_and_disabled():
    registry = RuleRegistry.discover(tiers=["critical"], disabled=["critical/image-alt"])
    assert [rule.full_name for rule in registry] == ["critical/form-labels"]


def test_rules_for_a_single_tier():
    registry = RuleRegistry.discover()
    assert [rule.name for rule in registry.rules("serious")] == ["iframe-title", "link-name", "table-headers"]
    assert registry.rules(Severity.MINOR) == []


def test_register_appends_within_tier_but_tiers_stay_ordered():
    registry = RuleRegistry()
    registry.register(stub("b", Severity.SERIOUS))
    registry.register(stub("z", Severity.CRITICAL))
    registry.register(stub("a", Severity.SERIOUS))
    assert [rule.full_name for rule in registry] == ["critical/z", "serious/b", "serious/a"]
    assert "serious/a" in registry
    assert len(registry) == 3
    assert registry.get("serious/b").name == "b"
    assert registry.get("serious/missing") is None


def test_duplicate_names_are_rejected():
    registry = RuleRegistry([stub("a")])
    with pytest.raises(ValueError):
        registry.register(stub("a"))


def test_unknown_tier_is_rejected():
    with pytest.raises(ValueError):
        RuleRegistry.discover(tiers=["blocker"])


def test_rule_without_links_is_rejected():
    with pytest.raises(ValueError):
        RuleDefinition(name="bare", tier=Severity.SERIOUS, evaluate=lambda root: [])


def test_discover_skips_module_declaring_rule_without_links(tmp_path, monkeypatch):
    tier_dir = tmp_path / "extra_rules" / "critical"
    tier_dir.mkdir(parents=True)
    (tier_dir / "good.py").write_text(
        "from ludwig.dom.core import RuleDefinition, Severity\n"
        "DEFINITION = RuleDefinition(name='good', tier=Severity.CRITICAL,\n"
        "                            evaluate=lambda root: [], links=['https://example.com'])\n"
    )
    (tier_dir / "bare.py").write_text(
        "from ludwig.dom.core import RuleDefinition, Severity\n"
        "DEFINITION = RuleDefinition(name='bare', tier=Severity.CRITICAL, evaluate=lambda root: [])\n"
    )
    monkeypatch.syspath_prepend(str(tmp_path))

    registry = RuleRegistry.discover(package="extra_rules")
    assert [rule.full_name for rule in registry] == ["critical/good"]
