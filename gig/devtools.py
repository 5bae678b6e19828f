"""Maintainer commands: refresh the bundled templates and cut a release."""

from __future__ import annotations

import re
import subprocess
import sys
from functools import partial
from pathlib import Path

import tomllib

import click

from .assets import TEMPLATES_REPO, sync_templates
from .core import logger, set_verbose

SEMVER_RE = re.compile(r"^\d+\.\d+\.\d+$")
_PROJECT_HEADER_RE = re.compile(r"^\[project\]\s*$", re.MULTILINE)
_TABLE_HEADER_RE = re.compile(r"^\[", re.MULTILINE)
_VERSION_LINE_RE = re.compile(r'^(version\s*=\s*)"[^"]*"', re.MULTILINE)
_INIT_VERSION_RE = re.compile(r'^(__version__\s*=\s*)"[^"]*"', re.MULTILINE)


def _git(*args: str, capture: bool = False, cwd: str | Path | None = None) -> str:
    result = subprocess.run(
        ["git", *args],
        check=True,
        text=True,
        capture_output=capture,
        cwd=cwd,
    )
    return result.stdout.strip() if capture else ""


def bump_pyproject_version(text: str, version: str) -> str:
    """Return *text* with ``[project].version`` set to *version*."""
    current = tomllib.loads(text).get("project", {}).get("version", "")
    if not current:
        raise ValueError("No version found in pyproject.toml [project].version.")

    header = _PROJECT_HEADER_RE.search(text)
    if header is None:
        raise ValueError("pyproject.toml has no [project] table.")
    next_table = _TABLE_HEADER_RE.search(text, header.end())
    end = next_table.start() if next_table else len(text)

    section = _VERSION_LINE_RE.sub(rf'\g<1>"{version}"', text[header.end():end], count=1)
    return text[: header.end()] + section + text[end:]


def bump_init_version(text: str, version: str) -> str:
    """Return *text* with ``__version__`` set to *version*."""
    updated, count = _INIT_VERSION_RE.subn(rf'\g<1>"{version}"', text, count=1)
    if count == 0:
        raise ValueError("No __version__ assignment found.")
    return updated


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("-v", "--verbose", is_flag=True, help="Show debug output")
def cli(verbose: bool) -> None:
    """gig maintainer tools."""
    set_verbose(verbose)


@cli.command()
@click.option(
    "--dest", default=None, type=click.Path(file_okay=False, path_type=Path),
    help="Target directory (default: the package's bundled templates)",
)
@click.option("--repo", "repo_url", default=TEMPLATES_REPO, show_default=True,
              help="Template repository to clone")
def sync(dest: Path | None, repo_url: str) -> None:
    """Refresh the bundled templates from github/gitignore."""
    target = dest or Path(__file__).parent / "templates"
    try:
        sync_templates(target, repo_url)
    except subprocess.CalledProcessError as exc:
        logger.error(f"git clone failed with exit code {exc.returncode}")
        raise SystemExit(1)


@cli.command()
@click.argument("version")
@click.option("--push", is_flag=True, help="Push the branch and tag to origin")
@click.option("--dry-run", is_flag=True, help="Show what would happen without changing anything")
@click.option("--skip-tests", is_flag=True, help="Do not run the test suite before committing")
def release(version: str, push: bool, dry_run: bool, skip_tests: bool) -> None:
    """Set VERSION (x.y.z), commit and tag it."""
    if not SEMVER_RE.match(version):
        logger.error(f"Version must be in format x.y.z (e.g. 0.1.0), got '{version}'.")
        raise SystemExit(1)

    git_root = Path(_git("rev-parse", "--show-toplevel", capture=True))
    git = partial(_git, cwd=git_root)

    diff_staged = subprocess.run(["git", "diff", "--cached", "--quiet"], cwd=git_root)
    diff_unstaged = subprocess.run(["git", "diff", "--quiet"], cwd=git_root)
    if diff_staged.returncode != 0 or diff_unstaged.returncode != 0:
        logger.error("You have uncommitted changes. Please commit or stash them first.")
        raise SystemExit(1)

    tag = f"v{version}"
    ret = subprocess.run(
        ["git", "rev-parse", "--verify", "--quiet", tag],
        capture_output=True, text=True, cwd=git_root,
    )
    if ret.returncode == 0:
        logger.error(f"Tag {tag} already exists.")
        raise SystemExit(1)

    branch = git("branch", "--show-current", capture=True)
    if branch != "main":
        logger.warning(f"You're on branch '{branch}', not 'main'.")
        if not click.confirm("Continue?", default=False):
            logger.info("Aborted.")
            raise SystemExit(1)

    pyproject_path = git_root / "pyproject.toml"
    init_path = git_root / "gig" / "__init__.py"
    if not pyproject_path.exists():
        logger.error("pyproject.toml not found at git root.")
        raise SystemExit(1)

    try:
        pyproject = bump_pyproject_version(
            pyproject_path.read_text(encoding="utf-8"), version,
        )
        init_text = bump_init_version(init_path.read_text(encoding="utf-8"), version)
    except ValueError as exc:
        logger.error(str(exc))
        raise SystemExit(1)

    if not skip_tests:
        logger.info("Running test suite...")
        tests = subprocess.run([sys.executable, "-m", "pytest", "-q"], cwd=git_root)
        if tests.returncode != 0:
            logger.error("Tests failed; nothing was committed.")
            raise SystemExit(1)

    if dry_run:
        logger.info(f"Would set version {version} on '{branch}', commit and tag {tag}.")
        return

    logger.info(f"Releasing version {version}...")
    pyproject_path.write_text(pyproject, encoding="utf-8")
    init_path.write_text(init_text, encoding="utf-8")

    git("add", str(pyproject_path), str(init_path))
    git("commit", "-m", f"Release {tag}")
    git("tag", tag)

    if push:
        logger.info("Pushing to origin...")
        git("push", "origin", branch)
        git("push", "origin", tag)
        logger.info(f"Released {tag}.")
    else:
        logger.info(f"To publish:  git push origin {branch} {tag}")


def main() -> None:
    from colorama import init as colorama_init
    colorama_init()
    cli(prog_name="gig-dev", standalone_mode=True)


if __name__ == "__main__":
    main()
