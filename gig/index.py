"""Template index: canonical lookup keys, collision handling, listing.

Every template is reachable through its *qualified key*, the lowercased
path segments joined with ``-`` (``global-macos``, ``community-cfml-coldbox``).
Templates additionally get a *bare key* (``macos``) when no other template
shares the name, or when they are the only member of their collision group
at the shallowest category depth (top-level beats ``Global/`` beats
``community/<sub>/``).  Ties at the shallowest depth leave the bare key
unassigned, and looking it up is reported as ambiguous.
"""

from __future__ import annotations

import dataclasses
import threading
from collections.abc import Iterable, Mapping
from pathlib import Path
from types import MappingProxyType

from .assets import TemplateAsset, load_assets
from .core import logger, normalize_name
from .errors import IndexBuildError

QUALIFIED_SEP = "-"


def qualified_key(asset: TemplateAsset) -> str:
    return normalize_name(QUALIFIED_SEP.join((*asset.categories, asset.bare_name)))


@dataclasses.dataclass(frozen=True)
class CollisionGroup:
    """Templates sharing one normalized bare name."""

    name: str
    members: tuple[TemplateAsset, ...]

    @property
    def winner(self) -> TemplateAsset | None:
        """The member that owns the bare key, or None on a tie."""
        if len(self.members) == 1:
            return self.members[0]
        depth = min(len(m.categories) for m in self.members)
        leaders = [m for m in self.members if len(m.categories) == depth]
        return leaders[0] if len(leaders) == 1 else None

    @property
    def qualified_keys(self) -> list[str]:
        return sorted(qualified_key(m) for m in self.members)


@dataclasses.dataclass(frozen=True)
class TemplateIndex:
    """Read-only mapping from canonical key to template content."""

    entries: Mapping[str, str]
    owners: Mapping[str, TemplateAsset]
    bare_keys: frozenset[str]
    collisions: Mapping[str, CollisionGroup]

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, key: str) -> str | None:
        return self.entries.get(key)

    def alternatives(self, name: str) -> list[str] | None:
        """Qualified keys for a bare name left unassigned by a tie."""
        group = self.collisions.get(name)
        if group is None or name in self.bare_keys:
            return None
        return group.qualified_keys

    def list_keys(self, include_qualified: bool = False) -> list[str]:
        """Every key a user can resolve, sorted.

        By default a template is listed under its bare key when it has
        one and under its qualified key otherwise.  *include_qualified*
        lists all qualified keys as well.
        """
        if include_qualified:
            return sorted(self.entries)
        keys = set(self.bare_keys)
        with_bare = {self.owners[k].relative_path for k in self.bare_keys}
        for key, asset in self.owners.items():
            if key not in self.bare_keys and asset.relative_path not in with_bare:
                keys.add(key)
        return sorted(keys)


def build_index(assets: Iterable[TemplateAsset]) -> TemplateIndex:
    """Assign lookup keys to *assets*.

    Raises IndexBuildError when two different templates end up with the
    same key, e.g. ``Foo.gitignore`` next to ``foo.gitignore``.
    """
    entries: dict[str, str] = {}
    owners: dict[str, TemplateAsset] = {}

    def claim(key: str, asset: TemplateAsset) -> None:
        owner = owners.get(key)
        if owner is not None and owner.relative_path != asset.relative_path:
            raise IndexBuildError(key, [owner.display_path, asset.display_path])
        owners[key] = asset
        entries[key] = asset.content

    groups: dict[str, list[TemplateAsset]] = {}
    for asset in assets:
        name = normalize_name(asset.bare_name)
        if not name:
            logger.debug(f"Skipping template with empty name: {asset.display_path}")
            continue
        groups.setdefault(name, []).append(asset)
        claim(qualified_key(asset), asset)

    bare_keys: set[str] = set()
    collisions: dict[str, CollisionGroup] = {}
    for name, members in groups.items():
        group = CollisionGroup(name=name, members=tuple(members))
        winner = group.winner
        if len(members) > 1:
            collisions[name] = group
            logger.debug(
                f"Name collision '{name}': {', '.join(group.qualified_keys)} "
                f"(bare key -> {winner.display_path if winner else 'none'})"
            )
        if winner is not None:
            claim(name, winner)
            bare_keys.add(name)

    logger.debug(
        f"Indexed {len(groups)} template names under {len(entries)} keys "
        f"({len(collisions)} collisions)"
    )
    return TemplateIndex(
        entries=MappingProxyType(entries),
        owners=MappingProxyType(owners),
        bare_keys=frozenset(bare_keys),
        collisions=MappingProxyType(collisions),
    )


# ── Process-wide Index ───────────────────────────────────────────────

_INDEX_LOCK = threading.Lock()
_INDEXES: dict[Path | None, TemplateIndex] = {}


def load_index(root: Path | None = None) -> TemplateIndex:
    """Build the index for *root* (default: bundled templates) once and cache it."""
    key = root.resolve() if root is not None else None
    with _INDEX_LOCK:
        index = _INDEXES.get(key)
        if index is None:
            index = build_index(load_assets(root))
            _INDEXES[key] = index
    return index


def list_keys(index: TemplateIndex | None = None, include_qualified: bool = False) -> list[str]:
    if index is None:
        index = load_index()
    return index.list_keys(include_qualified=include_qualified)
