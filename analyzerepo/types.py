"""Data model for repository analysis results and options."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


def _string_list(value: Any) -> list[str]:
    return [str(item) for item in value or []]


@dataclass
class Repository:
    """The analysed repository as a whole."""

    type: str = ""
    path: str = ""
    name: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "path": self.path, "name": self.name}


@dataclass
class ExternalDependencies:
    """Databases and services a component relies on."""

    databases: list[str] = field(default_factory=list)
    services: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"databases": list(self.databases), "services": list(self.services)}


@dataclass
class Component:
    """One analysed component of a repository."""

    name: str = ""
    path: str = ""
    type: str = ""
    primary_language: str = ""
    language_stats: dict[str, float] = field(default_factory=dict)
    framework: str = ""
    version_requirements: dict[str, str] = field(default_factory=dict)
    external_dependencies: ExternalDependencies = field(
        default_factory=ExternalDependencies
    )
    development_tools: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "path": self.path,
            "type": self.type,
            "primary_language": self.primary_language,
            "language_stats": dict(self.language_stats),
            "framework": self.framework,
            "version_requirements": dict(self.version_requirements),
            "external_dependencies": self.external_dependencies.to_dict(),
            "development_tools": list(self.development_tools),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Component":
        deps = data.get("external_dependencies") or {}
        return cls(
            name=str(data.get("name") or ""),
            path=str(data.get("path") or ""),
            type=str(data.get("type") or ""),
            primary_language=str(data.get("primary_language") or ""),
            language_stats={
                str(lang): float(share)
                for lang, share in (data.get("language_stats") or {}).items()
            },
            framework=str(data.get("framework") or ""),
            version_requirements={
                str(tool): str(version)
                for tool, version in (data.get("version_requirements") or {}).items()
            },
            external_dependencies=ExternalDependencies(
                databases=_string_list(deps.get("databases")),
                services=_string_list(deps.get("services")),
            ),
            development_tools=_string_list(data.get("development_tools")),
        )


@dataclass
class AnalysisResult:
    """Full result of analysing a repository."""

    repository: Repository = field(default_factory=Repository)
    components: list[Component] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "repository": self.repository.to_dict(),
            "components": [component.to_dict() for component in self.components],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AnalysisResult":
        repo = data.get("repository") or {}
        return cls(
            repository=Repository(
                type=str(repo.get("type") or ""),
                path=str(repo.get("path") or ""),
                name=str(repo.get("name") or ""),
            ),
            components=[
                Component.from_dict(item) for item in data.get("components") or []
            ],
        )


@dataclass
class AnalysisOptions:
    """Options controlling an analysis run."""

    format: str = "yaml"
    output: str = ""
    verbose: bool = False
    component: str = ""
    exclude: list[str] = field(default_factory=list)


@dataclass
class ComponentInfo:
    """A component found during discovery, before analysis."""

    name: str
    path: str
    config_files: list[str] = field(default_factory=list)
    relative_path: str = ""


@dataclass
class ProjectStructure:
    """Layout of a repository: its kind and discovered components."""

    type: str = "single"
    components: list[ComponentInfo] = field(default_factory=list)