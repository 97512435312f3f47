"""File discovery and batch conversion around the in-memory pipeline."""

from __future__ import annotations

import difflib
import os
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from pathlib import Path
from typing import List, Optional, Sequence

from .config import DeclassifyConfig
from .logging import get_logger, log_diagnostic
from .models import DeclassifyError, Diagnostic, MalformedComponentError
from .pipeline import declassify
from .source import SourceFile
from .transform import ClassExtractor

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "node_modules",
    "dist",
    "build",
    "coverage",
    "__pycache__",
}


@dataclass
class FileOutcome:
    """Result of converting one file on disk."""

    path: Path
    changed: bool = False
    component: Optional[str] = None
    diagnostics: List[Diagnostic] = field(default_factory=list)
    diff: str = ""
    error: Optional[str] = None


class Runner:
    """Finds TypeScript sources and converts each one independently."""

    def __init__(self, config: DeclassifyConfig | None = None) -> None:
        self.config = config or DeclassifyConfig(root=Path.cwd())
        self.logger = get_logger("runner")

    def discover(self, paths: Sequence[Path]) -> List[Path]:
        files: List[Path] = []
        for raw in paths:
            path = Path(raw)
            if path.is_file():
                files.append(path)
                continue
            if not path.is_dir():
                raise FileNotFoundError(f"Path does not exist: {path}")
            for current, dirnames, filenames in os.walk(path):
                current_path = Path(current)
                dirnames[:] = sorted(
                    name
                    for name in dirnames
                    if name not in _EXCLUDED_DIRS and not self._excluded(current_path / name, path)
                )
                for name in sorted(filenames):
                    candidate = current_path / name
                    if self._included(name) and not self._excluded(candidate, path):
                        files.append(candidate)

        unique: List[Path] = []
        seen = set()
        for file in files:
            key = file.resolve()
            if key not in seen:
                seen.add(key)
                unique.append(file)
        self.logger.debug("Discovered %d candidate file(s)", len(unique))
        return unique

    def run(self, paths: Sequence[Path], *, dry_run: bool = False) -> List[FileOutcome]:
        outcomes = [self.convert_file(path, dry_run=dry_run) for path in self.discover(paths)]
        converted = sum(1 for outcome in outcomes if outcome.changed)
        failed = sum(1 for outcome in outcomes if outcome.error)
        self.logger.info(
            "Processed %d file(s): %d changed, %d failed%s",
            len(outcomes),
            converted,
            failed,
            " (dry-run)" if dry_run else "",
        )
        return outcomes

    def convert_file(self, path: Path, *, dry_run: bool = False) -> FileOutcome:
        outcome = FileOutcome(path=path)
        original = self._read(path, outcome)
        if original is None:
            return outcome

        source = SourceFile(original, path=str(path))
        try:
            result = declassify(source, self.config.format, self.config.conventions)
        except DeclassifyError as exc:
            outcome.error = str(exc)
            if isinstance(exc, MalformedComponentError):
                outcome.diagnostics.append(exc.diagnostic)
                log_diagnostic(self.logger, exc.diagnostic, str(path))
            else:
                self.logger.error("Failed to convert %s: %s", path, exc)
            return outcome

        outcome.component = result.component
        outcome.diagnostics.extend(result.diagnostics)
        updated = source.text
        if updated == original:
            self.logger.debug("No changes for %s", path)
            return outcome

        outcome.changed = True
        outcome.diff = _unified_diff(original, updated, path)
        if dry_run:
            self.logger.debug("Dry-run: not writing %s", path)
        else:
            path.write_bytes(updated.encode("utf-8"))
            if result.component:
                self.logger.info("Converted %s in %s", result.component, path)
            else:
                self.logger.info("Updated imports in %s", path)
        return outcome

    def check(self, paths: Sequence[Path]) -> List[Path]:
        """Return files that still declare a decorated class component."""
        extractor = ClassExtractor(self.config.conventions)
        remaining: List[Path] = []
        for path in self.discover(paths):
            outcome = FileOutcome(path=path)
            text = self._read(path, outcome)
            if text is None:
                continue
            try:
                found = extractor.extract(SourceFile(text, path=str(path))) is not None
            except DeclassifyError:
                found = True
            if found:
                remaining.append(path)
        return remaining

    def _read(self, path: Path, outcome: FileOutcome) -> Optional[str]:
        try:
            return path.read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            outcome.error = f"Unable to read {path}: {exc}"
            self.logger.error("%s", outcome.error)
            return None

    def _included(self, name: str) -> bool:
        if name.endswith(".d.ts"):
            return False
        return any(fnmatchcase(name, pattern) for pattern in self.config.include)

    def _excluded(self, candidate: Path, base: Path) -> bool:
        try:
            relative = candidate.relative_to(base).as_posix()
        except ValueError:
            return False
        for pattern in self.config.exclude_paths:
            cleaned = pattern.strip().rstrip("/")
            if not cleaned:
                continue
            if fnmatchcase(relative, cleaned) or relative.startswith(f"{cleaned}/"):
                return True
        return False


def _unified_diff(original: str, updated: str, path: Path) -> str:
    diff = difflib.unified_diff(
        original.splitlines(keepends=True),
        updated.splitlines(keepends=True),
        fromfile=f"{path} (original)",
        tofile=f"{path} (converted)",
    )
    return "".join(diff)


__all__ = ["FileOutcome", "Runner"]
