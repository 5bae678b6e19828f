"""Turn a request (languages, output path, write policy) into a written file."""

from __future__ import annotations

import dataclasses
from collections.abc import Sequence
from pathlib import Path

from .core import logger
from .errors import EmptyTokenError
from .index import TemplateIndex
from .merge import merge_templates
from .output import WriteMode, read_existing, write_output
from .resolve import resolve_many

DEFAULT_OUTPUT = ".gitignore"


@dataclasses.dataclass(frozen=True)
class GenerateRequest:
    """Already-parsed user request."""

    languages: tuple[str, ...]
    output: Path = Path(DEFAULT_OUTPUT)
    append: bool = False
    force: bool = False

    def __post_init__(self) -> None:
        if self.append and self.force:
            raise ValueError("append and force are mutually exclusive")

    @property
    def mode(self) -> WriteMode:
        if self.append or self.force:
            return WriteMode.OVERWRITE
        return WriteMode.FAIL_IF_EXISTS


@dataclasses.dataclass(frozen=True)
class RenderedOutput:
    path: Path
    text: str
    mode: WriteMode
    eol: str = "\n"


def build_document(contents: Sequence[str], existing: str | None = None) -> str:
    """Combine resolved templates, with *existing* file content first.

    A lone template is returned verbatim; anything more goes through
    merge_templates so earlier patterns win over later duplicates.
    """
    parts = list(contents) if existing is None else [existing, *contents]
    if len(parts) == 1:
        return parts[0]
    return merge_templates(parts)


def render(request: GenerateRequest, index: TemplateIndex) -> RenderedOutput:
    """Resolve every language and build the final text.

    Nothing is written here; any lookup error aborts the whole request.
    """
    if not request.languages:
        raise EmptyTokenError()
    contents = resolve_many(index, request.languages)

    existing: str | None = None
    eol = "\n"
    if request.append:
        found = read_existing(request.output)
        if found is not None:
            existing, eol = found
            logger.debug(f"Merging into existing {request.output}")

    return RenderedOutput(
        path=request.output,
        text=build_document(contents, existing),
        mode=request.mode,
        eol=eol,
    )


def generate(request: GenerateRequest, index: TemplateIndex) -> RenderedOutput:
    rendered = render(request, index)
    write_output(rendered.path, rendered.text, rendered.mode, eol=rendered.eol)
    logger.info(f"Wrote {rendered.path} ({', '.join(request.languages)})")
    return rendered
