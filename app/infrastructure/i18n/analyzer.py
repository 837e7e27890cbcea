"""Catalog consistency analysis.

Compares the keys used by the source tree with the keys present in each
language's catalog, compares every catalog with the reference language,
checks plural families against each language's required CLDR categories,
and merges patches or placeholder templates back into the catalogs.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Set

import structlog
from infrastructure.i18n.catalog import (
    CatalogTree,
    MergeOutcome,
    plural_variant,
    split_plural_key,
)
from infrastructure.i18n.errors import (
    CatalogParseError,
    DiagnosticCollector,
    DiagnosticKind,
    report,
)
from infrastructure.i18n.extractor import ExtractionResult, UnextractableKeyReference
from infrastructure.i18n.loader import CatalogStore
from infrastructure.i18n.models import LanguageRegistry, PluralCategory

logger = structlog.get_logger().bind(component="i18n.analyzer")

DEFAULT_TEMPLATE_MARKER = "[TODO {lang}]"


@dataclass
class LanguageDiff:
    """Key differences of one language's catalog.

    Attributes:
        language: Language code.
        missing: Keys used by the source but absent from the catalog.
        unused: Catalog keys the source never uses.
        cross_language_missing: Reference keys absent from the catalog.
        cross_language_extra: Catalog keys absent from the reference.
    """

    language: str
    missing: List[str] = field(default_factory=list)
    unused: List[str] = field(default_factory=list)
    cross_language_missing: List[str] = field(default_factory=list)
    cross_language_extra: List[str] = field(default_factory=list)

    @property
    def has_gaps(self) -> bool:
        return bool(self.missing or self.cross_language_missing)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "language": self.language,
            "missing": list(self.missing),
            "unused": list(self.unused),
            "cross_language_missing": list(self.cross_language_missing),
            "cross_language_extra": list(self.cross_language_extra),
        }


@dataclass
class ConsistencyReport:
    """Result of an extract-and-diff run."""

    reference: str
    used_keys: List[str] = field(default_factory=list)
    languages: Dict[str, LanguageDiff] = field(default_factory=dict)
    unextractable: List[UnextractableKeyReference] = field(default_factory=list)
    parse_errors: Dict[str, str] = field(default_factory=dict)

    @property
    def has_gaps(self) -> bool:
        return any(diff.has_gaps for diff in self.languages.values())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "reference": self.reference,
            "used_key_count": len(self.used_keys),
            "languages": {code: diff.to_dict() for code, diff in self.languages.items()},
            "unextractable": [ref.to_dict() for ref in self.unextractable],
            "parse_errors": dict(self.parse_errors),
        }


@dataclass
class PluralFamilyStatus:
    """Plural completeness of one family in one language."""

    base: str
    present: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)
    extra: List[str] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return not self.missing

    def to_dict(self) -> Dict[str, Any]:
        return {
            "base": self.base,
            "present": list(self.present),
            "missing": list(self.missing),
            "extra": list(self.extra),
        }


@dataclass
class PluralReport:
    """Plural family status per language."""

    languages: Dict[str, List[PluralFamilyStatus]] = field(default_factory=dict)

    def incomplete(self, language: str) -> List[PluralFamilyStatus]:
        return [f for f in self.languages.get(language, []) if not f.is_complete]

    @property
    def has_gaps(self) -> bool:
        return any(self.incomplete(code) for code in self.languages)

    def to_dict(self) -> Dict[str, Any]:
        return {
            code: [f.to_dict() for f in families]
            for code, families in self.languages.items()
        }


@dataclass
class MergeReport:
    """Outcome of merging patches or templates into the catalogs."""

    outcomes: Dict[str, MergeOutcome] = field(default_factory=dict)
    written: List[str] = field(default_factory=list)
    skipped_languages: List[str] = field(default_factory=list)

    @property
    def added_count(self) -> int:
        return sum(len(o.added) for o in self.outcomes.values())

    @property
    def updated_count(self) -> int:
        return sum(len(o.updated) for o in self.outcomes.values())

    @property
    def refused_count(self) -> int:
        return sum(len(o.conflicts) + len(o.invalid) for o in self.outcomes.values())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "written": list(self.written),
            "skipped_languages": list(self.skipped_languages),
            "languages": {
                code: {
                    "added": o.added,
                    "updated": o.updated,
                    "skipped": o.skipped,
                    "conflicts": o.conflicts,
                    "invalid": o.invalid,
                }
                for code, o in self.outcomes.items()
            },
        }


class CatalogAnalyzer:
    """Analyzes and maintains the catalogs of all supported languages.

    Catalogs are loaded once for analysis. Merges hold the store lock while
    they reload the catalogs, apply the patches and write every changed
    language back atomically.

    Args:
        registry: Supported languages.
        store: Catalog store.
        reference_language: Language other catalogs are compared to;
            defaults to the registry default.
        template_marker: Prefix of generated placeholder values.
    """

    def __init__(
        self,
        registry: LanguageRegistry,
        store: CatalogStore,
        reference_language: Optional[str] = None,
        template_marker: str = DEFAULT_TEMPLATE_MARKER,
    ):
        self.registry = registry
        self.store = store
        self.reference = registry.require(reference_language or registry.default_code)
        self.template_marker = template_marker
        self.catalogs: Dict[str, CatalogTree] = {}
        self.parse_errors: Dict[str, str] = {}
        self._loaded = False
        self.log = logger.bind(reference=self.reference)

    def load_catalogs(
        self, diagnostics: Optional[DiagnosticCollector] = None
    ) -> Dict[str, CatalogTree]:
        """Load every supported language's catalog.

        A catalog that fails to parse is skipped for this run and reported.

        Returns:
            Catalogs by language code.

        Raises:
            CatalogParseError: If no catalog could be parsed at all.
        """
        self.catalogs = {}
        self.parse_errors = {}
        for code in self.registry.codes:
            try:
                self.catalogs[code] = self.store.load(code)
            except CatalogParseError as e:
                self.parse_errors[code] = e.reason
                report(
                    DiagnosticKind.CATALOG_PARSE_ERROR,
                    str(e),
                    diagnostics,
                    language=code,
                    path=e.path,
                )

        if not self.catalogs:
            raise CatalogParseError("*", self.store.catalog_dir, "no catalog could be parsed")

        self._loaded = True
        self.log.info(
            "catalogs_loaded",
            languages=list(self.catalogs),
            failed=list(self.parse_errors),
        )
        return self.catalogs

    def diff(
        self,
        extraction: ExtractionResult,
        diagnostics: Optional[DiagnosticCollector] = None,
    ) -> ConsistencyReport:
        """Compare used keys with each catalog and each catalog with the reference.

        A used key is present when its leaf exists or any plural variant of
        it exists; a plural variant counts as used when its base is used.

        Args:
            extraction: Keys used by the source tree.
            diagnostics: Optional collector (used when catalogs load lazily).

        Returns:
            ConsistencyReport covering every loaded language.
        """
        self._ensure_loaded(diagnostics)
        used = set(extraction.keys)
        reference_tree = self.catalogs.get(self.reference)
        reference_keys = set(reference_tree.key_paths()) if reference_tree else None
        if reference_keys is None:
            self.log.warning("reference_catalog_unavailable")

        result = ConsistencyReport(
            reference=self.reference,
            used_keys=sorted(used),
            unextractable=list(extraction.unextractable),
            parse_errors=dict(self.parse_errors),
        )

        for code, tree in self.catalogs.items():
            present = set(tree.key_paths())
            language_diff = LanguageDiff(language=code)
            language_diff.missing = sorted(k for k in used if not _is_present(k, present))
            language_diff.unused = sorted(p for p in present if not _is_used(p, used))

            if reference_keys is not None and code != self.reference:
                language_diff.cross_language_missing = sorted(
                    k for k in reference_keys - present if self._required_in(code, k)
                )
                language_diff.cross_language_extra = sorted(
                    k
                    for k in present - reference_keys
                    if not self._is_required_variant(code, k, reference_keys)
                )

            result.languages[code] = language_diff

        self.log.info(
            "catalogs_diffed",
            used_key_count=len(used),
            missing={c: len(d.missing) for c, d in result.languages.items()},
            cross_language_missing={
                c: len(d.cross_language_missing) for c, d in result.languages.items()
            },
        )
        return result

    def check_plurals(
        self, diagnostics: Optional[DiagnosticCollector] = None
    ) -> PluralReport:
        """Check plural families against each language's required categories.

        Families are the bases with at least one variant in the language's
        own catalog or in the reference catalog. Extra categories are listed
        but never removed.
        """
        self._ensure_loaded(diagnostics)
        reference_tree = self.catalogs.get(self.reference)
        reference_families = reference_tree.plural_families() if reference_tree else {}

        result = PluralReport()
        for code, tree in self.catalogs.items():
            required = self.registry.get(code).plural_categories
            own = tree.plural_families()
            statuses = []
            for base in sorted(set(own) | set(reference_families)):
                family = own.get(base)
                present = PluralCategory.ordered(family.categories) if family else ()
                statuses.append(
                    PluralFamilyStatus(
                        base=base,
                        present=[c.value for c in present],
                        missing=[c.value for c in required if c not in present],
                        extra=[c.value for c in present if c not in required],
                    )
                )
            result.languages[code] = statuses

        self.log.info(
            "plurals_checked",
            incomplete={code: len(result.incomplete(code)) for code in result.languages},
        )
        return result

    def merge(
        self,
        patches: Mapping[str, Any],
        diagnostics: Optional[DiagnosticCollector] = None,
    ) -> MergeReport:
        """Deep-merge per-language patches into the catalogs and write them.

        Patch leaves overwrite existing leaves. The catalogs are reloaded
        under the store lock first. Patches for unsupported languages, or for
        languages whose catalog failed to parse, are skipped. Leaves that
        conflict with the catalog structure or are not strings are refused
        and listed in the outcome.

        Args:
            patches: {language: tree}, trees nested or flat-dotted.
            diagnostics: Optional collector.

        Returns:
            MergeReport.

        Raises:
            CatalogLockError: If another run holds the lock.
            CatalogWriteError: If a catalog cannot be written.
        """
        return self._apply(patches, template=False, diagnostics=diagnostics)

    def build_template(
        self,
        consistency: ConsistencyReport,
        plurals: Optional[PluralReport] = None,
    ) -> Dict[str, CatalogTree]:
        """Build placeholder trees for every missing key.

        Covers usage-missing keys, keys missing relative to the reference and
        missing plural variants. Each placeholder wraps the reference value,
        else the reference "_other" variant, else the key path, behind the
        template marker.

        Args:
            consistency: Result of diff().
            plurals: Result of check_plurals().

        Returns:
            Placeholder trees by language; languages with nothing missing
            are omitted.
        """
        reference_tree = self.catalogs.get(self.reference) or CatalogTree()
        reference_families = reference_tree.plural_families()
        templates: Dict[str, CatalogTree] = {}

        for code, language_diff in consistency.languages.items():
            tree = self.catalogs.get(code)
            if tree is None:
                continue

            paths: List[str] = []
            for key in language_diff.missing:
                # plural keys are filled variant by variant below
                if key in reference_families:
                    continue
                paths.append(key)
            paths.extend(language_diff.cross_language_missing)
            if plurals is not None:
                for family in plurals.incomplete(code):
                    paths.extend(
                        plural_variant(family.base, PluralCategory(c)) for c in family.missing
                    )

            marker = self.template_marker.replace("{lang}", code)
            template = CatalogTree(language=code)
            seen: Set[str] = set()
            for path in paths:
                if path in seen or tree.has(path):
                    continue
                seen.add(path)
                template.set(path, f"{marker} {self._template_source(path, reference_tree)}")

            if len(template):
                templates[code] = template

        self.log.info(
            "template_built",
            placeholder_count={code: len(t) for code, t in templates.items()},
        )
        return templates

    def apply_template(
        self,
        templates: Mapping[str, Any],
        diagnostics: Optional[DiagnosticCollector] = None,
    ) -> MergeReport:
        """Merge placeholder trees into the catalogs, setting only absent keys.

        Raises:
            CatalogLockError: If another run holds the lock.
            CatalogWriteError: If a catalog cannot be written.
        """
        return self._apply(templates, template=True, diagnostics=diagnostics)

    def _apply(
        self,
        patches: Mapping[str, Any],
        template: bool,
        diagnostics: Optional[DiagnosticCollector],
    ) -> MergeReport:
        result = MergeReport()

        with self.store.lock():
            # another run may have written since the catalogs were loaded
            self.load_catalogs(None if self._loaded else diagnostics)
            changed: Dict[str, CatalogTree] = {}

            for raw_code, patch in patches.items():
                code = self.registry.match(raw_code)
                if code is None:
                    report(
                        DiagnosticKind.UNSUPPORTED_LANGUAGE,
                        f"Skipping patch for unsupported language '{raw_code}'",
                        diagnostics,
                        value=str(raw_code)[:32],
                        source="patch",
                    )
                    result.skipped_languages.append(str(raw_code))
                    continue
                tree = self.catalogs.get(code)
                if tree is None:
                    self.log.warning("patch_skipped_unparsed_catalog", language=code)
                    result.skipped_languages.append(code)
                    continue

                outcome = tree.merge(patch, template=template)
                result.outcomes[code] = outcome
                if outcome.conflicts or outcome.invalid:
                    self.log.warning(
                        "patch_leaves_refused",
                        language=code,
                        conflicts=outcome.conflicts,
                        invalid=outcome.invalid,
                    )
                if outcome.changed:
                    changed[code] = tree

            for code, tree in changed.items():
                self.store.save(tree, code)
                result.written.append(code)

        self.log.info(
            "catalogs_merged",
            template=template,
            written=result.written,
            added=result.added_count,
            updated=result.updated_count,
            refused=result.refused_count,
        )
        return result

    def _ensure_loaded(self, diagnostics: Optional[DiagnosticCollector]) -> None:
        if not self._loaded:
            self.load_catalogs(diagnostics)

    def _required_in(self, code: str, key: str) -> bool:
        """False for plural variants of categories the language does not need."""
        _, category = split_plural_key(key)
        return category is None or self.registry.get(code).requires(category)

    def _is_required_variant(self, code: str, key: str, reference_keys: Set[str]) -> bool:
        base, category = split_plural_key(key)
        if category is None or not self.registry.get(code).requires(category):
            return False
        return any(plural_variant(base, c) in reference_keys for c in PluralCategory)

    def _template_source(self, path: str, reference_tree: CatalogTree) -> str:
        value = reference_tree.get(path)
        if isinstance(value, str) and value:
            return value
        base, _ = split_plural_key(path)
        other = reference_tree.get(plural_variant(base, PluralCategory.OTHER))
        if isinstance(other, str) and other:
            return other
        return path


def _is_present(key: str, present: Set[str]) -> bool:
    if key in present:
        return True
    return any(plural_variant(key, c) in present for c in PluralCategory)


def _is_used(path: str, used: Set[str]) -> bool:
    if path in used:
        return True
    base, category = split_plural_key(path)
    return category is not None and base in used
