"""Template asset source: the bundled template tree and its maintenance.

The collection mirrors github/gitignore: top-level ``*.gitignore`` files,
``Global/*.gitignore`` and ``community/<subcategory>/*.gitignore``.  It is
read once, in full, before any lookup happens.
"""

from __future__ import annotations

import dataclasses
import shutil
import subprocess
import tempfile
from collections.abc import Iterator, Mapping
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path

from .core import logger

GITIGNORE_SUFFIX = ".gitignore"
TEMPLATES_REPO = "https://github.com/github/gitignore.git"


@dataclasses.dataclass(frozen=True)
class TemplateAsset:
    """One template file: its path segments below the root and its text."""

    relative_path: tuple[str, ...]
    content: str

    @property
    def categories(self) -> tuple[str, ...]:
        return self.relative_path[:-1]

    @property
    def bare_name(self) -> str:
        name = self.relative_path[-1]
        if name.endswith(GITIGNORE_SUFFIX):
            name = name[: -len(GITIGNORE_SUFFIX)]
        return name

    @property
    def display_path(self) -> str:
        return "/".join(self.relative_path)


def _is_template_name(name: str) -> bool:
    return name.endswith(GITIGNORE_SUFFIX) and len(name) > len(GITIGNORE_SUFFIX)


def _walk(
    node: Traversable | Path,
    prefix: tuple[str, ...] = (),
) -> Iterator[tuple[tuple[str, ...], Traversable | Path]]:
    """Yield ``(segments, entry)`` for every template file below *node*.

    Entries are visited in name order.  Hidden directories (``.git``,
    ``.github``) are skipped.
    """
    for entry in sorted(node.iterdir(), key=lambda e: e.name):
        if entry.is_dir():
            if entry.name.startswith("."):
                continue
            yield from _walk(entry, prefix + (entry.name,))
        elif entry.is_file() and _is_template_name(entry.name):
            yield prefix + (entry.name,), entry


def bundled_templates_root() -> Traversable:
    """Location of the template tree shipped inside the package."""
    return resources.files("gig") / "templates"


def load_assets(root: Traversable | Path | None = None) -> list[TemplateAsset]:
    """Read every template below *root* (default: the bundled collection)."""
    base = root if root is not None else bundled_templates_root()
    if not base.is_dir():
        raise FileNotFoundError(f"Template directory not found: {base}")

    assets: list[TemplateAsset] = []
    for segments, entry in _walk(base):
        try:
            content = entry.read_bytes().decode("utf-8")
        except UnicodeDecodeError:
            logger.warning(f"Skipping {'/'.join(segments)}: not valid UTF-8")
            continue
        assets.append(TemplateAsset(relative_path=segments, content=content))
    logger.debug(f"Loaded {len(assets)} templates from {base}")
    return assets


def assets_from_mapping(files: Mapping[str, bytes | str]) -> list[TemplateAsset]:
    """Build assets from an in-memory ``{"Global/macOS.gitignore": ...}`` mapping."""
    assets: list[TemplateAsset] = []
    for rel, data in sorted(files.items()):
        segments = tuple(part for part in rel.replace("\\", "/").split("/") if part)
        if not segments or not _is_template_name(segments[-1]):
            continue
        content = data.decode("utf-8") if isinstance(data, bytes) else data
        assets.append(TemplateAsset(relative_path=segments, content=content))
    return assets


# ── Template Sync ────────────────────────────────────────────────────


def sync_templates(dest: Path, repo_url: str = TEMPLATES_REPO) -> int:
    """Replace *dest* with the ``.gitignore`` files of a fresh shallow clone.

    Returns the number of templates copied.  *dest* is left untouched if
    the clone or the copy fails.
    """
    with tempfile.TemporaryDirectory(prefix="gig-sync-") as tmp:
        clone_dir = Path(tmp) / "gitignore"
        logger.info(f"Cloning {repo_url}")
        subprocess.run(
            ["git", "clone", "--depth=1", repo_url, str(clone_dir)],
            check=True,
        )

        staged = Path(tmp) / "staged"
        staged.mkdir()
        count = 0
        for segments, entry in _walk(clone_dir):
            target = staged.joinpath(*segments)
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(entry, target)
            count += 1

        _replace_tree(staged, dest)

    logger.info(f"Synced {count} templates into {dest}")
    return count


def _replace_tree(source: Path, dest: Path) -> None:
    """Copy *source* next to *dest*, then swap it into place.

    The old tree is only removed once the new one is complete.
    """
    fresh = dest.with_name(f".{dest.name}.new")
    backup = dest.with_name(f".{dest.name}.old")
    for leftover in (fresh, backup):
        if leftover.exists():
            shutil.rmtree(leftover)

    try:
        shutil.copytree(source, fresh)
    except BaseException:
        shutil.rmtree(fresh, ignore_errors=True)
        raise

    if dest.exists():
        dest.rename(backup)
    try:
        fresh.rename(dest)
    except OSError:
        if backup.exists():
            backup.rename(dest)
        shutil.rmtree(fresh, ignore_errors=True)
        raise
    shutil.rmtree(backup, ignore_errors=True)
