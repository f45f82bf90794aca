"""Discovery of project components from their configuration files."""

from __future__ import annotations

import fnmatch
import os
import stat
from typing import Iterator

from .types import ComponentInfo, ProjectStructure

CONFIG_FILES = (
    "package.json",
    "requirements.txt",
    "pyproject.toml",
    "pom.xml",
    "build.gradle",
    "Cargo.toml",
    "go.mod",
    "*.csproj",
    "docker-compose.yml",
    "docker-compose.yaml",
)

SKIP_DIRS = frozenset(
    {
        ".git",
        "node_modules",
        ".venv",
        "venv",
        "__pycache__",
        ".pytest_cache",
        "target",
        "build",
        "dist",
        ".next",
        ".nuxt",
        "coverage",
        ".coverage",
        "bin",
        "obj",
    }
)


def _walk_dir(path: str, name: str) -> Iterator[tuple[str, str]]:
    if should_skip_dir(name):
        return
    try:
        with os.scandir(path) as listing:
            entries = sorted(listing, key=lambda entry: entry.name)
    except OSError:
        return
    for entry in entries:
        child = os.path.normpath(os.path.join(path, entry.name))
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
        except OSError:
            continue
        if is_dir:
            yield from _walk_dir(child, entry.name)
        else:
            yield child, entry.name


def _walk_files(root: str) -> Iterator[tuple[str, str]]:
    """Yield (path, name) of every non-directory under root, in lexical order."""
    try:
        info = os.lstat(root)
    except OSError:
        return
    name = os.path.basename(os.path.normpath(root))
    if stat.S_ISDIR(info.st_mode):
        yield from _walk_dir(root, name)
    else:
        yield root, name


def discover_project_structure(repo_path: str) -> ProjectStructure:
    """Find the components of a repository by locating their config files."""
    repo_path = os.fspath(repo_path)
    components: dict[str, ComponentInfo] = {}

    for file_path, file_name in _walk_files(repo_path):
        if not is_config_file(file_name):
            continue
        directory = os.path.dirname(file_path) or "."
        relative = os.path.relpath(directory, repo_path)
        if relative == ".":
            relative = ""
        name = get_component_name(directory, relative)
        existing = components.get(name)
        if existing is not None:
            existing.config_files.append(file_name)
        else:
            components[name] = ComponentInfo(
                name=name,
                path=directory,
                config_files=[file_name],
                relative_path=relative,
            )

    found = list(components.values())
    return ProjectStructure(
        type="monorepo" if len(found) > 1 else "single",
        components=found,
    )


def is_config_file(file_name: str) -> bool:
    """Tell whether a file name marks the root of a component."""
    return any(
        pattern == file_name
        or ("*" in pattern and fnmatch.fnmatchcase(file_name, pattern))
        for pattern in CONFIG_FILES
    )


def should_skip_dir(dir_name: str) -> bool:
    """Tell whether a directory is never searched for components."""
    return dir_name in SKIP_DIRS or dir_name.startswith(".")


def get_component_name(full_path: str, relative_path: str) -> str:
    """Name a component after the last element of its directory."""
    if relative_path == "":
        return os.path.basename(os.path.normpath(full_path))
    return relative_path.split(os.sep)[-1]