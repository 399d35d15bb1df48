"""Project reader for Angular workspaces."""
import fnmatch
import json
import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional

from angular_analyzer.domain.errors import SourceParseError
from angular_analyzer.parsers.typescript_parser import TypeScriptParser

logger = logging.getLogger(__name__)


class ProjectReadError(Exception):
    """Error reading project configuration."""
    pass


# Strings are matched first so comment markers inside them ("src/**/*.ts") survive
_JSONC_RE = re.compile(r'("(?:\\.|[^"\\])*")|//[^\n]*|/\*[\s\S]*?\*/')
_TRAILING_COMMA_RE = re.compile(r'("(?:\\.|[^"\\])*")|,(\s*[}\]])')


def load_tsconfig(path: str) -> dict[str, Any]:
    """Load a tsconfig.json, tolerating comments and trailing commas."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            raw = f.read()
    except OSError as e:
        raise ProjectReadError(f"Failed to read {path}: {e}")
    except UnicodeDecodeError as e:
        raise ProjectReadError(f"{path} is not valid UTF-8: {e.reason} at byte {e.start}")

    clean = _JSONC_RE.sub(lambda m: m.group(1) or '', raw)
    clean = _TRAILING_COMMA_RE.sub(lambda m: m.group(1) or m.group(2), clean)
    if not clean.strip():
        return {}
    try:
        config = json.loads(clean)
    except json.JSONDecodeError as e:
        raise ProjectReadError(f"Invalid JSON in {path}: {e}")
    return config if isinstance(config, dict) else {}


@dataclass
class ProjectContents:
    """Project contents."""
    root_dir: str
    tsconfig_path: str
    source_files: List[str]


class ProjectReader:
    """Enumerates the TypeScript sources of a project from its tsconfig.json.

    ``files``, ``include`` and ``exclude`` are inherited along the ``extends``
    chain; a config's own keys replace inherited ones, and every path is
    relative to the config that declares it. ``files`` entries are taken
    as-is; ``include`` globs (default ``**/*`` when neither key is set)
    minus ``exclude`` globs select ``.ts`` files. Relative imports of the
    selected files are then followed, so an entry point such as
    ``src/main.ts`` pulls in the application it bootstraps.

    Args:
        ts_parser: Parser used to read import declarations.
        follow_imports: Whether to add the sources reached by relative imports.
    """

    def __init__(self, ts_parser: Optional[TypeScriptParser] = None, follow_imports: bool = True):
        self.skip_folders = {'node_modules', 'dist', '.angular', '.git', 'bower_components', 'jspm_packages'}
        self.skip_suffixes = ('.d.ts', '.spec.ts')
        self.ts_parser = ts_parser or TypeScriptParser()
        self.follow_imports = follow_imports

    def read(self, tsconfig_path: str) -> ProjectContents:
        """Read project contents."""
        if not os.path.isfile(tsconfig_path):
            raise ProjectReadError(f"tsconfig not found: {tsconfig_path}")

        tsconfig_path = os.path.abspath(tsconfig_path)
        root_dir = os.path.dirname(tsconfig_path)
        root = Path(root_dir)
        settings = self.resolve_config(tsconfig_path)

        selected: set[Path] = set()
        files, files_dir = settings.get('files', ([], root))
        for name in files:
            path = Path(os.path.normpath(files_dir / name))
            if path.is_file():
                selected.add(path)
            else:
                logger.warning("File listed in tsconfig not found: %s", path)

        include = settings.get('include')
        if include is None and not files:
            include = (['**/*'], root)
        exclude, exclude_dir = settings.get('exclude', ([], root))
        if include is not None:
            patterns, include_dir = include
            for pattern in patterns:
                selected.update(
                    path for path in self._expand(include_dir, pattern)
                    if not self._is_excluded(path, exclude_dir, exclude)
                )

        sources = {path for path in selected if self._is_source(path, root)}
        if self.follow_imports:
            sources = self._follow_imports(sources, root)

        return ProjectContents(
            root_dir=root_dir,
            tsconfig_path=tsconfig_path,
            source_files=sorted(str(path) for path in sources),
        )

    # ── Config Inheritance ───────────────────────────────────────────────

    def resolve_config(self, path: str, _chain: tuple[str, ...] = ()) -> dict[str, tuple[list[str], Path]]:
        """Collect ``files``, ``include`` and ``exclude`` along the ``extends`` chain.

        Returns:
            Each key mapped to ``(value, directory its paths are relative to)``.
        """
        path = os.path.abspath(path)
        if path in _chain:
            raise ProjectReadError(f"Circular extends: {' -> '.join(_chain + (path,))}")
        config = load_tsconfig(path)
        config_dir = Path(os.path.dirname(path))

        settings: dict[str, tuple[list[str], Path]] = {}
        extends = config.get('extends') or []
        for name in [extends] if isinstance(extends, str) else extends:
            base_path = self._extends_path(name, config_dir)
            if base_path is None:
                logger.warning("Cannot resolve extended config %s from %s", name, path)
                continue
            settings.update(self.resolve_config(base_path, _chain + (path,)))

        for key in ('files', 'include', 'exclude'):
            if config.get(key) is not None:
                settings[key] = (list(config[key]), config_dir)
        return settings

    @staticmethod
    def _extends_path(name: str, config_dir: Path) -> Optional[str]:
        if name.startswith('.') or os.path.isabs(name):
            candidates = [config_dir / name, config_dir / f"{name}.json"]
        else:
            # Package configs are looked up in node_modules of every parent directory
            candidates = []
            for directory in (config_dir, *config_dir.parents):
                package = directory / 'node_modules' / name
                candidates.extend([package, Path(f"{package}.json"), package / 'tsconfig.json'])
        return next((os.path.normpath(c) for c in candidates if c.is_file()), None)

    # ── Import Following ─────────────────────────────────────────────────

    def _follow_imports(self, sources: set[Path], root: Path) -> set[Path]:
        reached = set(sources)
        pending = sorted(sources)
        while pending:
            path = pending.pop()
            try:
                specifiers = self.ts_parser.parse_file(str(path)).import_specifiers()
            except SourceParseError as e:
                # Left in the project so the analysis reports it
                logger.warning("Not following imports of %s: %s", path, e)
                continue
            for specifier in specifiers:
                target = self._resolve_import(specifier, path)
                if target is None or target in reached:
                    continue
                if not self._is_source(target, root):
                    logger.debug("Import %s of %s is outside the project sources", specifier, path)
                    continue
                reached.add(target)
                pending.append(target)
        return reached

    @staticmethod
    def _resolve_import(specifier: str, importer: Path) -> Optional[Path]:
        """Resolve a relative module specifier to a ``.ts`` file; bare package specifiers are skipped."""
        if not specifier.startswith(('./', '../')):
            return None
        target = os.path.normpath(os.path.join(importer.parent, specifier))
        stem = target[:-3] if target.endswith('.js') else target
        for candidate in (target, f"{stem}.ts", os.path.join(target, 'index.ts')):
            if candidate.endswith('.ts') and os.path.isfile(candidate):
                return Path(candidate)
        return None

    # ── Filters ──────────────────────────────────────────────────────────

    @staticmethod
    def _expand(root: Path, pattern: str) -> list[Path]:
        target = root / pattern
        if target.is_dir():
            return [Path(os.path.normpath(p)) for p in target.glob('**/*') if p.is_file()]
        return [Path(os.path.normpath(p)) for p in root.glob(pattern) if p.is_file()]

    def _is_source(self, path: Path, root: Path) -> bool:
        if not path.name.endswith('.ts') or path.name.endswith(self.skip_suffixes):
            return False
        if not path.is_relative_to(root):
            return False
        relative = path.relative_to(root)
        return not any(part in self.skip_folders for part in relative.parts[:-1])

    @staticmethod
    def _is_excluded(path: Path, base_dir: Path, exclude: list[str]) -> bool:
        # Patterns of an extended config may climb out of its directory (../src)
        relative = Path(os.path.relpath(path, base_dir)).as_posix()
        for pattern in exclude:
            pattern = Path(os.path.normpath(pattern)).as_posix()
            if fnmatch.fnmatch(relative, pattern) or relative.startswith(f"{pattern}/"):
                return True
        return False
