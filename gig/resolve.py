"""Resolve user-supplied language tokens to template content."""

from __future__ import annotations

from collections.abc import Iterable

from .core import normalize_name
from .errors import AmbiguousTemplateError, EmptyTokenError, TemplateNotFoundError
from .index import TemplateIndex


def parse_languages(value: str) -> list[str]:
    """Split ``"go, godot,node"`` into trimmed tokens; empty segments are an error."""
    languages = [part.strip() for part in value.split(",")]
    if any(not lang for lang in languages):
        raise EmptyTokenError()
    return languages


def resolve(index: TemplateIndex, token: str) -> str:
    """Return the content of the template *token* names.

    Only exact bare or qualified keys match; there is no prefix matching.
    """
    key = normalize_name(token)
    if not key:
        raise EmptyTokenError()

    content = index.get(key)
    if content is not None:
        return content

    alternatives = index.alternatives(key)
    if alternatives:
        raise AmbiguousTemplateError(token, alternatives)
    raise TemplateNotFoundError(token)


def resolve_many(index: TemplateIndex, tokens: Iterable[str]) -> list[str]:
    """Resolve every token in order, stopping at the first failure."""
    return [resolve(index, token) for token in tokens]
