"""Locale catalog consistency check.

Reports translation keys used by the source tree but missing from a
language's catalog, keys missing relative to the reference language and
incomplete plural families. Optionally fills the gaps with placeholder
values or merges a prepared patch file.

Usage:
    catalog-check                              # report only
    catalog-check --template                   # add placeholders for missing keys
    catalog-check --template --template-out todo.json
    catalog-check --merge patches/events.json  # apply a {lang: tree} patch

Exit codes:
    0: no missing keys remain
    1: missing keys remain
    2: the run failed (no parsable catalog, unwritable catalog, held lock,
       bad configuration or patch file)
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO

import yaml

import structlog
from infrastructure.configuration import CatalogSettings
from infrastructure.i18n import (
    ConsistencyReport,
    DiagnosticCollector,
    I18nError,
    MergeReport,
    PluralReport,
    create_catalog_analyzer,
    create_key_extractor,
    create_language_registry,
)
from infrastructure.logging import configure_logging
from infrastructure.services.providers import get_settings

logger = structlog.get_logger().bind(component="commands.catalog_check")

EXIT_OK = 0
EXIT_MISSING = 1
EXIT_FATAL = 2

PREVIEW_LIMIT = 10


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="catalog-check",
        description="Check locale catalogs against the keys used in the source tree",
    )
    action = parser.add_mutually_exclusive_group()
    action.add_argument(
        "--template",
        action="store_true",
        help="Add placeholder values for every missing key",
    )
    action.add_argument(
        "--merge",
        metavar="PATCH",
        help="Merge a JSON or YAML patch file of the form {lang: tree}",
    )
    parser.add_argument(
        "--template-out",
        metavar="PATH",
        help="With --template, write the placeholders to PATH instead of the catalogs",
    )
    parser.add_argument("--catalog-dir", help="Catalog directory (default: CATALOG_DIR)")
    parser.add_argument(
        "--format",
        choices=("json", "yaml"),
        help="Catalog format (default: CATALOG_FORMAT)",
    )
    parser.add_argument(
        "--source",
        action="append",
        metavar="DIR",
        help="Source directory to scan; repeatable (default: CATALOG_SOURCE_DIRS)",
    )
    parser.add_argument(
        "--reference",
        metavar="CODE",
        help="Reference language (default: CATALOG_REFERENCE_LANGUAGE or the default language)",
    )
    parser.add_argument("--json", action="store_true", help="Print a machine-readable report")
    parser.add_argument("--verbose", action="store_true", help="List every key and debug logs")
    return parser


def load_patch_file(path: Path) -> Dict[str, Any]:
    """Read a {lang: tree} patch file.

    Raises:
        ValueError: If the file cannot be parsed or has the wrong shape.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() in (".yml", ".yaml"):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
        raise ValueError(f"Cannot read patch file {path}: {e}") from e

    if not isinstance(data, dict) or not all(isinstance(v, dict) for v in data.values()):
        raise ValueError(f"Patch file {path} must map language codes to key trees")
    return data


def _catalog_settings(args: argparse.Namespace, settings: CatalogSettings) -> CatalogSettings:
    overrides: Dict[str, Any] = {}
    if args.catalog_dir:
        overrides["catalog_dir"] = args.catalog_dir
    if args.format:
        overrides["catalog_format"] = args.format
    if args.source:
        overrides["source_dirs"] = list(args.source)
    return settings.model_copy(update=overrides)


def run(args: argparse.Namespace, out: Optional[TextIO] = None) -> int:
    """Run the check for parsed arguments and return the exit code."""
    out = out or sys.stdout
    settings = get_settings()
    catalog_settings = _catalog_settings(args, settings.catalogs)

    registry = create_language_registry(settings.localization)
    analyzer = create_catalog_analyzer(
        registry=registry,
        settings=catalog_settings,
        reference_language=args.reference,
    )
    extractor = create_key_extractor(catalog_settings)
    diagnostics = DiagnosticCollector()

    analyzer.load_catalogs(diagnostics)
    extraction = extractor.extract(
        [Path(d) for d in catalog_settings.source_dirs], diagnostics
    )

    merge_report: Optional[MergeReport] = None
    if args.merge:
        merge_report = analyzer.merge(load_patch_file(Path(args.merge)), diagnostics)

    consistency = analyzer.diff(extraction)
    plurals = analyzer.check_plurals()

    if args.template:
        templates = analyzer.build_template(consistency, plurals)
        if args.template_out:
            _write_templates(Path(args.template_out), templates)
            print(f"Placeholders written to {args.template_out}", file=out)
        else:
            merge_report = analyzer.apply_template(templates, diagnostics)
            consistency = analyzer.diff(extraction)
            plurals = analyzer.check_plurals()

    if args.json:
        document: Dict[str, Any] = {
            "consistency": consistency.to_dict(),
            "plurals": plurals.to_dict(),
        }
        if merge_report is not None:
            document["merge"] = merge_report.to_dict()
        json.dump(document, out, ensure_ascii=False, indent=2)
        out.write("\n")
    else:
        print_report(consistency, plurals, merge_report, verbose=args.verbose, out=out)

    remaining = consistency.has_gaps or plurals.has_gaps
    logger.info("catalog_check_finished", missing_remaining=remaining)
    return EXIT_MISSING if remaining else EXIT_OK


def _write_templates(path: Path, templates: Dict[str, Any]) -> None:
    document = {code: tree.to_dict() for code, tree in templates.items()}
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(document, f, ensure_ascii=False, indent=2)
        f.write("\n")


def _print_keys(keys: List[str], verbose: bool, out: TextIO, indent: str = "    ") -> None:
    shown = keys if verbose else keys[:PREVIEW_LIMIT]
    for key in shown:
        print(f"{indent}- {key}", file=out)
    if len(keys) > len(shown):
        print(f"{indent}... and {len(keys) - len(shown)} more", file=out)


def print_report(
    consistency: ConsistencyReport,
    plurals: PluralReport,
    merge_report: Optional[MergeReport] = None,
    verbose: bool = False,
    out: Optional[TextIO] = None,
) -> None:
    """Print a human-readable report."""
    out = out or sys.stdout
    print(f"Reference language: {consistency.reference}", file=out)
    print(f"Keys used in source: {len(consistency.used_keys)}", file=out)

    for code, error in consistency.parse_errors.items():
        print(f"{code.upper()}: catalog could not be parsed ({error})", file=out)

    for code, diff in consistency.languages.items():
        incomplete = plurals.incomplete(code)
        if not diff.has_gaps and not incomplete:
            print(f"{code.upper()}: OK ({len(diff.unused)} unused)", file=out)
            continue

        print(f"{code.upper()}:", file=out)
        if diff.missing:
            print(f"  {len(diff.missing)} missing keys", file=out)
            _print_keys(diff.missing, verbose, out)
        if diff.cross_language_missing:
            print(
                f"  {len(diff.cross_language_missing)} keys missing relative to "
                f"{consistency.reference.upper()}",
                file=out,
            )
            _print_keys(diff.cross_language_missing, verbose, out)
        if diff.cross_language_extra:
            print(
                f"  {len(diff.cross_language_extra)} keys not in "
                f"{consistency.reference.upper()}",
                file=out,
            )
        if incomplete:
            print(f"  {len(incomplete)} incomplete plural families", file=out)
            _print_keys(
                [f"{f.base} (missing: {', '.join(f.missing)})" for f in incomplete],
                verbose,
                out,
            )
        if diff.unused:
            print(f"  {len(diff.unused)} unused keys", file=out)
            if verbose:
                _print_keys(diff.unused, verbose, out)

    if consistency.unextractable:
        print(f"Unextractable key references: {len(consistency.unextractable)}", file=out)
        for ref in consistency.unextractable if verbose else consistency.unextractable[:PREVIEW_LIMIT]:
            print(f"    {ref.file}:{ref.line}: {ref.snippet}", file=out)

    if merge_report is not None:
        print(
            f"Merged: {merge_report.added_count} added, {merge_report.updated_count} updated, "
            f"written: {', '.join(merge_report.written) or 'none'}",
            file=out,
        )
        for code, outcome in merge_report.outcomes.items():
            refused = outcome.conflicts + outcome.invalid
            if refused:
                print(f"  {code.upper()}: {len(refused)} patch keys refused", file=out)
                _print_keys(refused, verbose, out)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.template_out and not args.template:
        parser.error("--template-out requires --template")

    configure_logging(log_level="DEBUG" if args.verbose else None)

    try:
        return run(args)
    except (I18nError, ValueError, OSError) as e:
        logger.error("catalog_check_failed", error=str(e))
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_FATAL


if __name__ == "__main__":
    sys.exit(main())
