import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from tqdm.auto import tqdm

from ludwig.controllers.audit_controller import AuditController, AuditPass
from ludwig.controllers.report_controller import ReportController, format_text_report
from ludwig.dom.compiler import RecommendationCompiler
from ludwig.dom.core import SEVERITY_ORDER
from ludwig.dom.registry import RuleRegistry
from ludwig.utils.config_loader import get_nested_config, load_config
from ludwig.utils.configure_logging import configure_logger

logger = logging.getLogger(__name__)

EXIT_CLEAN = 0
EXIT_FINDINGS = 1
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ludwig", description="Accessibility checks for HTML files")
    parser.add_argument("--config", type=str, default=None, help="Path to a settings.json to use.")
    parser.add_argument("--log-level", type=str, default=None, help="Overrides logging.level.")
    subparsers = parser.add_subparsers(dest="subcommand")

    scan_parser = subparsers.add_parser("scan", help="Scan HTML files")
    scan_parser.add_argument("files", nargs="+", help="HTML files to scan.")
    scan_parser.add_argument("--format", choices=["text", "json"], default="text")
    scan_parser.add_argument("--export", type=str, default=None, help="Write flat results to .csv or .json.")
    scan_parser.add_argument("--tier", action="append", choices=[t.value for t in SEVERITY_ORDER],
                             help="Only run rules of this tier (repeatable).")
    scan_parser.add_argument("--disable", action="append", default=[], help="Skip a rule, e.g. serious/link-name.")
    scan_parser.add_argument("--workers", type=int, default=None, help="Threads used to evaluate rules.")

    subparsers.add_parser("rules", help="List the registered rules")
    return parser


def _build_registry(config, tiers=None, disabled=None) -> RuleRegistry:
    return RuleRegistry.discover(
        tiers=tiers or get_nested_config("rules.tiers", config=config) or None,
        disabled=list(get_nested_config("rules.disabled", [], config=config)) + list(disabled or []),
    )


def handle_rules(config) -> int:
    registry = _build_registry(config)
    for rule in registry:
        print(f"{rule.full_name:<28} {rule.summary}")
    return EXIT_CLEAN


def handle_scan(args, config) -> int:
    workers = args.workers or get_nested_config("compiler.workers", 1, config=config)
    compiler = RecommendationCompiler(
        registry=_build_registry(config, tiers=args.tier, disabled=args.disable),
        workers=workers,
    )
    controller = AuditController(compiler=compiler)

    exit_code = EXIT_CLEAN
    passes: List[AuditPass] = []
    texts = {}

    for name in tqdm(args.files, desc="Scanning", unit="file", disable=len(args.files) < 2):
        path = Path(name)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Cannot read {path}: {e}")
            exit_code = EXIT_ERROR
            continue

        audit_pass = controller.run_pass(str(path), text)
        if audit_pass is None:
            print(f"❌ {path}: could not be parsed as HTML", file=sys.stderr)
            exit_code = EXIT_ERROR
            continue
        passes.append(audit_pass)
        texts[audit_pass.uri] = text.splitlines()

    report = ReportController(passes)
    summary = report.summarize()

    if args.format == "json":
        print(json.dumps(report.to_dict(), indent=2))
    else:
        for audit_pass in passes:
            print(format_text_report(audit_pass, texts[audit_pass.uri]))
        tiers = ", ".join(f"{tier}: {count}" for tier, count in summary["by_severity"].items())
        print(f"\nTotal issues found: {summary['total_issues']} ({tiers})")

    if args.export:
        try:
            report.export(args.export)
        except (OSError, ValueError) as e:
            logger.error(f"Export failed: {e}")
            return EXIT_ERROR

    if exit_code == EXIT_CLEAN and summary["total_issues"]:
        exit_code = EXIT_FINDINGS
    return exit_code


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config(args.config)
    configure_logger(
        args.log_level or get_nested_config("logging.level", "WARNING", config=config),
        get_nested_config("logging.modules", {}, config=config),
        get_nested_config("logging.silenced", {}, config=config),
    )

    if args.subcommand == "scan":
        return handle_scan(args, config)
    if args.subcommand == "rules":
        return handle_rules(config)

    parser.print_help()
    return EXIT_CLEAN


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
