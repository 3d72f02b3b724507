"""Validate root-level repository layout against policy."""

from __future__ import annotations

import argparse
from pathlib import Path

ROOT_ALLOWED = {
    ".env",
    ".git",
    ".github",
    ".gitignore",
    "cli.py",
    "contracts",
    "infra",
    "pyproject.toml",
    "services",
    "tests",
    "tools",
    "version.py",
}

# Entry points the packaging metadata refers to by name.
ROOT_REQUIRED = (
    "cli.py",
    "contracts",
    "infra",
    "pyproject.toml",
    "services",
    "version.py",
)

ROOT_IGNORED_PREFIXES = (
    ".hypothesis",
    ".mypy_cache",
    ".pytest_cache",
    ".ruff_cache",
    ".coverage",
    ".tox",
    ".venv",
    "__pycache__",
    "build",
    "dist",
)
ROOT_IGNORED_SUFFIXES = (".egg-info",)

# Top-level documents are allowed by suffix.
ROOT_DOC_SUFFIXES = (".md", ".txt")


def _ignored(name: str) -> bool:
    return name.startswith(ROOT_IGNORED_PREFIXES) or name.endswith(ROOT_IGNORED_SUFFIXES)


def list_unexpected_root_entries(repo_root: Path) -> list[str]:
    """Return sorted root entries that violate the structure policy."""
    return sorted(
        entry.name
        for entry in repo_root.iterdir()
        if not _ignored(entry.name)
        and entry.name not in ROOT_ALLOWED
        and not (entry.is_file() and entry.name.endswith(ROOT_DOC_SUFFIXES))
    )


def list_missing_root_entries(repo_root: Path) -> list[str]:
    """Return required root entries that are absent."""
    return [name for name in ROOT_REQUIRED if not (repo_root / name).exists()]


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""
    parser = argparse.ArgumentParser(description="Check root layout policy.")
    parser.add_argument(
        "--repo-root",
        default=str(Path(__file__).resolve().parents[2]),
        help="Repository root path (default: auto-detected).",
    )
    args = parser.parse_args(argv)

    repo_root = Path(args.repo_root).resolve()
    unexpected = list_unexpected_root_entries(repo_root)
    missing = list_missing_root_entries(repo_root)
    if not unexpected and not missing:
        print("OK: repository root layout matches policy.")
        return 0

    if unexpected:
        print("ERROR: unexpected root-level entries found:")
        for name in unexpected:
            print(f"- {name}")
        print("Move these under services/, infra/, tools/, or another owned subtree.")
    if missing:
        print("ERROR: required root-level entries missing:")
        for name in missing:
            print(f"- {name}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
