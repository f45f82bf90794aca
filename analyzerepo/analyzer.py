"""Analysis of a repository and each of its components."""

from __future__ import annotations

import os
import re
from contextlib import contextmanager
from typing import Iterator, Sequence

from .dependency import detect_external_dependencies
from .discovery import discover_project_structure
from .language import (
    detect_development_tools,
    detect_frameworks,
    get_language_stats,
    get_primary_language,
)
from .types import (
    AnalysisOptions,
    AnalysisResult,
    Component,
    ComponentInfo,
    Repository,
)
from .version import extract_version_requirements

_WEB_FRAMEWORKS = ("react", "vue", "angular", "next.js", "nuxt")
_API_FRAMEWORKS = (
    "express", "fastify", "nest", "django", "fastapi", "flask",
    "spring", "springboot", "gin", "echo", "fiber",
)
_LANGUAGE_RULES = {
    "javascript": (("package.json",), "web-application"),
    "typescript": (("package.json",), "web-application"),
    "python": (("requirements.txt", "pyproject.toml"), "api-service"),
    "java": (("pom.xml", "build.gradle"), "api-service"),
    "go": (("go.mod",), "api-service"),
    "rust": (("Cargo.toml",), "application"),
}


class AnalysisError(Exception):
    """Raised when a repository or a component cannot be analysed."""


@contextmanager
def _stage(what: str) -> Iterator[None]:
    try:
        yield
    except (OSError, ValueError) as exc:
        raise AnalysisError(f"failed to {what}: {exc}") from exc


def _base_name(path: str) -> str:
    if not path:
        return "."
    trimmed = path.rstrip(os.sep + (os.altsep or ""))
    if not trimmed:
        return os.sep
    return os.path.basename(trimmed)


def analyze_repository(
    repo_path: str, options: AnalysisOptions | None = None
) -> AnalysisResult:
    """Discover and analyse the components of a repository."""
    options = options or AnalysisOptions()
    repo_path = os.fspath(repo_path)
    if options.verbose:
        print(f"Starting analysis of repository: {repo_path}")

    with _stage("discover project structure"):
        structure = discover_project_structure(repo_path)

    if options.verbose:
        print(f"Discovered {len(structure.components)} components")

    result = AnalysisResult(
        repository=Repository(
            type=structure.type, path=repo_path, name=_base_name(repo_path)
        )
    )

    for info in structure.components:
        if options.component and info.name != options.component:
            continue
        if should_exclude_component(info.relative_path, options.exclude):
            continue
        if options.verbose:
            print(f"Analyzing component: {info.name}")
        try:
            component = analyze_component(info)
        except AnalysisError as exc:
            if options.verbose:
                print(f"Warning: failed to analyze component {info.name}: {exc}")
            continue
        result.components.append(component)

    return result


def analyze_component(comp_info: ComponentInfo) -> Component:
    """Analyse one discovered component; raise AnalysisError on failure."""
    with _stage("get language stats"):
        language_stats = get_language_stats(comp_info.path)
    primary = get_primary_language(language_stats)
    with _stage("detect framework"):
        framework = detect_frameworks(comp_info.path, primary)
    with _stage("extract version requirements"):
        versions = extract_version_requirements(comp_info.path)
    with _stage("detect external dependencies"):
        external = detect_external_dependencies(comp_info.path)
    with _stage("detect development tools"):
        tools = detect_development_tools(comp_info.path)

    return Component(
        name=comp_info.name,
        path=comp_info.relative_path,
        type=infer_component_type(primary, framework, comp_info.config_files),
        primary_language=primary,
        language_stats=language_stats,
        framework=framework,
        version_requirements=versions,
        external_dependencies=external,
        development_tools=tools,
    )


def infer_component_type(
    primary_lang: str, framework: str, config_files: Sequence[str]
) -> str:
    """Classify a component from its language, framework and config files."""
    framework_lower = framework.lower()
    if any(name in framework_lower for name in _WEB_FRAMEWORKS):
        return "web-application"
    if any(name in framework_lower for name in _API_FRAMEWORKS):
        return "api-service"

    if has_config_file(config_files, "docker-compose.yml") or has_config_file(
        config_files, "docker-compose.yaml"
    ):
        return "service"

    language = primary_lang.lower()
    rule = _LANGUAGE_RULES.get(language)
    if rule is not None:
        markers, kind = rule
        if any(has_config_file(config_files, marker) for marker in markers):
            return kind
    elif language == "c#" and any(name.endswith(".csproj") for name in config_files):
        return "api-service"

    if primary_lang == "":
        return "configuration"
    return "library"


def has_config_file(config_files: Sequence[str], target_file: str) -> bool:
    """Tell whether target_file is among the config files, case-sensitively."""
    return target_file in config_files


def _glob_regex(pattern: str) -> re.Pattern[str] | None:
    """Compile a shell pattern whose wildcards stop at path separators.

    Returns None for a malformed pattern.
    """
    escapes = os.sep != "\\"
    not_sep = f"[^{re.escape(os.sep)}]"
    length = len(pattern)

    def class_char(index: int) -> tuple[str | None, int]:
        if index >= length or pattern[index] in "-]":
            return None, index
        if pattern[index] == "\\" and escapes:
            index += 1
            if index >= length:
                return None, index
        return pattern[index], index + 1

    parts: list[str] = []
    index = 0
    while index < length:
        char = pattern[index]
        index += 1
        if char == "*":
            parts.append(f"{not_sep}*")
        elif char == "?":
            parts.append(not_sep)
        elif char == "\\" and escapes:
            if index >= length:
                return None
            parts.append(re.escape(pattern[index]))
            index += 1
        elif char == "[":
            negate = index < length and pattern[index] == "^"
            if negate:
                index += 1
            ranges: list[str] = []
            seen_any = False
            while True:
                if index >= length:
                    return None
                if pattern[index] == "]" and seen_any:
                    index += 1
                    break
                low, index = class_char(index)
                if low is None:
                    return None
                high = low
                if index < length and pattern[index] == "-":
                    high, index = class_char(index + 1)
                    if high is None:
                        return None
                seen_any = True
                if low == high:
                    ranges.append(re.escape(low))
                elif low < high:
                    ranges.append(f"{re.escape(low)}-{re.escape(high)}")
            if ranges:
                parts.append(f"[{'^' if negate else ''}{''.join(ranges)}]")
            else:
                parts.append("(?s:.)" if negate else "(?!)")
        else:
            parts.append(re.escape(char))

    try:
        return re.compile("".join(parts))
    except re.error:
        return None


def should_exclude_component(relative_path: str, exclude_patterns: Sequence[str]) -> bool:
    """Tell whether a component path matches any exclude glob or substring."""
    for pattern in exclude_patterns:
        regex = _glob_regex(pattern)
        if regex is not None and regex.fullmatch(relative_path):
            return True
        if pattern in relative_path:
            return True
    return False