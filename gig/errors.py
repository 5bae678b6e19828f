"""Exceptions raised by template lookup, indexing and output writing."""

from __future__ import annotations

from pathlib import Path


class GigError(Exception):
    """Base class for all gig errors."""


class TemplateError(GigError):
    """A single requested template could not be resolved."""


class TemplateNotFoundError(TemplateError):
    def __init__(self, token: str) -> None:
        self.token = token
        super().__init__(f'no template found for language "{token}"')


class AmbiguousTemplateError(TemplateError):
    """The bare name exists in several categories with equal priority."""

    def __init__(self, token: str, alternatives: list[str]) -> None:
        self.token = token
        self.alternatives = sorted(alternatives)
        super().__init__(
            f'ambiguous language "{token}"; matches: {", ".join(self.alternatives)}'
        )


class EmptyTokenError(TemplateError):
    def __init__(self) -> None:
        super().__init__("empty language in list")


class IndexBuildError(GigError):
    """Two distinct templates would be reachable through the same key."""

    def __init__(self, key: str, paths: list[str]) -> None:
        self.key = key
        self.paths = sorted(paths)
        super().__init__(
            f"template key '{key}' is claimed by more than one template: "
            + ", ".join(self.paths)
        )


class OutputExistsError(GigError):
    """The output path exists and the write mode forbids replacing it."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(
            f"file {path} already exists; remove it first or choose a different path"
        )
