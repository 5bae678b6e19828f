"""Entry point: main(), the ``gig`` click command."""

from __future__ import annotations

from pathlib import Path

import click
import yaml
from click.core import ParameterSource

from . import __version__
from .core import config_path_value, load_config, logger, set_verbose
from .errors import (
    AmbiguousTemplateError,
    IndexBuildError,
    OutputExistsError,
    TemplateError,
    TemplateNotFoundError,
)
from .generate import DEFAULT_OUTPUT, GenerateRequest, generate
from .index import load_index
from .resolve import parse_languages

LANG_REQUIRED_ERR = "languages required (e.g., gig python or gig go,godot,node)"
LIST_HINT = "Run 'gig --list' to see available languages."

EPILOG = """\b
Examples:
  gig python                   Create .gitignore for Python
  gig go,godot,node            Create .gitignore for Go + Godot + Node
  gig rust src/.gitignore      Create .gitignore for Rust in src/
  gig --append macos           Add macOS patterns to an existing .gitignore

Templates are sourced from https://github.com/github/gitignore"""


def _all_defaults(ctx: click.Context) -> bool:
    """True when the user passed no arguments or options at all."""
    return all(
        ctx.get_parameter_source(name) in (ParameterSource.DEFAULT, None)
        for name in ctx.params
    )


@click.command(
    name="gig",
    epilog=EPILOG,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.argument("languages", required=False)
@click.argument(
    "output", required=False, type=click.Path(dir_okay=False, path_type=Path),
)
@click.option("--list", "list_only", is_flag=True, help="List all available language templates")
@click.option(
    "--all", "list_all", is_flag=True,
    help="With --list, also show category-qualified names (e.g. global-macos)",
)
@click.option(
    "-a", "--append", is_flag=True,
    help="Merge into an existing output file instead of refusing to touch it",
)
@click.option("-f", "--force", is_flag=True, help="Overwrite an existing output file")
@click.option(
    "--config", "config_path", default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Config file (default: $GIG_CONFIG or ~/.config/gig/config.yaml)",
)
@click.option("-v", "--verbose", is_flag=True, help="Show debug output")
@click.version_option(
    __version__, "-V", "--version", prog_name="gig", message="%(prog)s %(version)s",
)
@click.pass_context
def cli(
    ctx: click.Context,
    languages: str | None,
    output: Path | None,
    list_only: bool,
    list_all: bool,
    append: bool,
    force: bool,
    config_path: Path | None,
    verbose: bool,
) -> None:
    """Generate .gitignore files from GitHub's template collection.

    LANGUAGES is a comma-separated list of templates (e.g. python or
    go,godot,node).  OUTPUT is the file to write (default: .gitignore).
    """
    if _all_defaults(ctx):
        click.echo(ctx.get_help())
        return

    set_verbose(verbose)

    try:
        config = load_config(config_path)
    except (OSError, TypeError, yaml.YAMLError) as exc:
        logger.error(f"Invalid config: {exc}")
        raise SystemExit(1)

    try:
        index = load_index(config_path_value(config, "templates_dir"))
    except (IndexBuildError, OSError) as exc:
        logger.error(str(exc))
        raise SystemExit(1)

    if list_only:
        for key in index.list_keys(include_qualified=list_all):
            click.echo(key)
        return

    if languages is None:
        logger.error(LANG_REQUIRED_ERR)
        raise SystemExit(1)

    # CLI flags win over config; --force disables a configured append.
    if ctx.get_parameter_source("append") is ParameterSource.DEFAULT and not force:
        append = bool(config.get("append", False))
    if append and force:
        raise click.UsageError("--append and --force cannot be used together")
    if output is None:
        output = config_path_value(config, "output") or Path(DEFAULT_OUTPUT)

    try:
        request = GenerateRequest(
            languages=tuple(parse_languages(languages)),
            output=output,
            append=append,
            force=force,
        )
        generate(request, index)
    except (TemplateNotFoundError, AmbiguousTemplateError) as exc:
        logger.error(str(exc))
        logger.info(LIST_HINT)
        raise SystemExit(1)
    except (TemplateError, OutputExistsError) as exc:
        logger.error(str(exc))
        raise SystemExit(1)
    except (OSError, UnicodeDecodeError) as exc:
        logger.error(f"Cannot write {output}: {exc}")
        raise SystemExit(1)


def main() -> None:
    """CLI entry point for the ``gig`` console script."""
    from colorama import init as colorama_init
    colorama_init()
    cli(prog_name="gig", standalone_mode=True)


if __name__ == "__main__":
    main()
