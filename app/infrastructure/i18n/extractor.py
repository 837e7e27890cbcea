"""Translation key extraction from source files.

Scans source trees for calls to the translation functions (t("a.b"),
i18n.t('a.b', {...})) and for i18nKey="a.b" attributes. Only literal keys
are extracted; a call whose first argument is computed is reported as an
unextractable reference, never guessed.
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Pattern, Sequence, Set

import structlog
from infrastructure.i18n.errors import DiagnosticCollector, DiagnosticKind, report

logger = structlog.get_logger().bind(component="i18n.extractor")

DEFAULT_FUNCTIONS = ("t", "i18n.t")
DEFAULT_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx")
DEFAULT_EXCLUDE_DIRS = ("node_modules", "dist", "build", ".git")

SNIPPET_LENGTH = 120

_LITERAL = re.compile(
    r"""\s*(?:'(?P<single>[^'\\\n]*)'|"(?P<double>[^"\\\n]*)"|`(?P<backtick>[^`\\]*)`)\s*(?=[,)])"""
)
_I18N_KEY = re.compile(r"""\bi18nKey\s*=\s*""")
_I18N_KEY_LITERAL = re.compile(
    r"""(?:"(?P<double>[^"\n]*)"|'(?P<single>[^'\n]*)'|\{\s*(?P<q>['"`])(?P<braced>[^'"`\n]*)(?P=q)\s*\})"""
)


@dataclass(frozen=True)
class KeyLocation:
    """Where a key was found."""

    file: str
    line: int


@dataclass(frozen=True)
class UnextractableKeyReference:
    """A translation call whose key could not be determined statically.

    Attributes:
        file: Source file.
        line: 1-based line number.
        snippet: The offending source line, trimmed.
    """

    file: str
    line: int
    snippet: str

    def to_dict(self) -> Dict[str, object]:
        return {"file": self.file, "line": self.line, "snippet": self.snippet}


@dataclass
class ExtractionResult:
    """Keys used by a source tree.

    Attributes:
        keys: Used key paths.
        locations: Where each key was found.
        unextractable: Calls with computed keys.
        files_scanned: Number of files read.
        files_skipped: Files that could not be read.
    """

    keys: Set[str] = field(default_factory=set)
    locations: Dict[str, List[KeyLocation]] = field(default_factory=dict)
    unextractable: List[UnextractableKeyReference] = field(default_factory=list)
    files_scanned: int = 0
    files_skipped: List[str] = field(default_factory=list)

    def add_key(self, key: str, location: KeyLocation) -> None:
        self.keys.add(key)
        self.locations.setdefault(key, []).append(location)

    def merge(self, other: "ExtractionResult") -> None:
        for key, locations in other.locations.items():
            self.keys.add(key)
            self.locations.setdefault(key, []).extend(locations)
        self.keys.update(other.keys)
        self.unextractable.extend(other.unextractable)
        self.files_scanned += other.files_scanned
        self.files_skipped.extend(other.files_skipped)


def _call_pattern(functions: Iterable[str]) -> Pattern[str]:
    names = sorted(set(functions), key=len, reverse=True)
    alternatives = "|".join(re.escape(name) for name in names)
    return re.compile(rf"(?<![\w.$])(?:{alternatives})\s*\(")


class KeyExtractor:
    """Extracts used translation keys from source files.

    Args:
        functions: Translation function names (e.g. "t", "i18n.t").
        extensions: File extensions to scan.
        exclude_dirs: Directory names never descended into.
    """

    def __init__(
        self,
        functions: Sequence[str] = DEFAULT_FUNCTIONS,
        extensions: Sequence[str] = DEFAULT_EXTENSIONS,
        exclude_dirs: Sequence[str] = DEFAULT_EXCLUDE_DIRS,
    ):
        if not functions:
            raise ValueError("KeyExtractor requires at least one translation function")
        self.functions = tuple(functions)
        self.extensions = tuple(e.lower() for e in extensions)
        self.exclude_dirs = set(exclude_dirs)
        self._call = _call_pattern(self.functions)

    def extract(
        self,
        roots: Iterable[Path],
        diagnostics: Optional[DiagnosticCollector] = None,
    ) -> ExtractionResult:
        """Scan source roots and collect used keys.

        Unreadable files are skipped and logged; extraction never aborts.

        Args:
            roots: Source directories (or single files).
            diagnostics: Optional collector for unextractable references.

        Returns:
            ExtractionResult for all roots.
        """
        result = ExtractionResult()
        for root in roots:
            root = Path(root)
            if not root.exists():
                logger.warning("source_root_not_found", root=str(root))
                continue
            for path in self._iter_files(root):
                try:
                    text = path.read_text(encoding="utf-8")
                except (OSError, UnicodeDecodeError) as e:
                    logger.warning("source_file_unreadable", file=str(path), error=str(e))
                    result.files_skipped.append(str(path))
                    continue
                result.merge(self.extract_text(text, str(path), diagnostics))

        logger.info(
            "keys_extracted",
            key_count=len(result.keys),
            files_scanned=result.files_scanned,
            files_skipped=len(result.files_skipped),
            unextractable_count=len(result.unextractable),
        )
        return result

    def extract_text(
        self,
        text: str,
        file: str = "<string>",
        diagnostics: Optional[DiagnosticCollector] = None,
    ) -> ExtractionResult:
        """Collect used keys from one source text."""
        result = ExtractionResult(files_scanned=1)

        for match in self._call.finditer(text):
            literal = _LITERAL.match(text, match.end())
            key = _literal_value(literal) if literal else None
            self._record(result, text, match.start(), file, key, diagnostics)

        for match in _I18N_KEY.finditer(text):
            literal = _I18N_KEY_LITERAL.match(text, match.end())
            key = _literal_value(literal) if literal else None
            self._record(result, text, match.start(), file, key, diagnostics)

        return result

    def _record(
        self,
        result: ExtractionResult,
        text: str,
        pos: int,
        file: str,
        key: Optional[str],
        diagnostics: Optional[DiagnosticCollector],
    ) -> None:
        line = text.count("\n", 0, pos) + 1
        if key:
            result.add_key(key, KeyLocation(file=file, line=line))
            return

        snippet = _line_at(text, pos)
        reference = UnextractableKeyReference(file=file, line=line, snippet=snippet)
        result.unextractable.append(reference)
        report(
            DiagnosticKind.UNEXTRACTABLE_KEY_REFERENCE,
            "Translation key is not a literal",
            diagnostics,
            file=file,
            line=line,
            snippet=snippet,
        )

    def _iter_files(self, root: Path) -> Iterable[Path]:
        if root.is_file():
            yield root
            return
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(d for d in dirnames if d not in self.exclude_dirs)
            for name in sorted(filenames):
                if name.lower().endswith(self.extensions):
                    yield Path(dirpath) / name


def _literal_value(match: "re.Match[str]") -> Optional[str]:
    groups = match.groupdict()
    for name in ("single", "double", "backtick", "braced"):
        value = groups.get(name)
        if value is None:
            continue
        if "${" in value:
            return None
        return value.strip() or None
    return None


def _line_at(text: str, pos: int) -> str:
    start = text.rfind("\n", 0, pos) + 1
    end = text.find("\n", pos)
    line = text[start : end if end != -1 else len(text)].strip()
    return line[:SNIPPET_LENGTH]
