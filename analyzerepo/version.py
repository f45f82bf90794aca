"""Extraction of toolchain version requirements from project manifests."""

from __future__ import annotations

import json
import os
import re
import xml.etree.ElementTree as ET
from typing import Any, Iterable

_REQUIRES_PYTHON = re.compile(r'requires-python\s*=\s*"([^"]+)"', re.ASCII)
_SOURCE_COMPATIBILITY = re.compile(r"""sourceCompatibility\s*=\s*['"]([\d.]+)['"]""", re.ASCII)
_RUST_VERSION = re.compile(r'rust-version\s*=\s*"([^"]+)"', re.ASCII)


def _read_manifest(path: str) -> bytes | None:
    """Return the bytes of an existing manifest, None if it is absent.

    A manifest that exists but cannot be read raises OSError.
    """
    if not os.path.exists(path):
        return None
    with open(path, "rb") as handle:
        return handle.read()


def _read_optional(path: str) -> bytes | None:
    try:
        with open(path, "rb") as handle:
            return handle.read()
    except OSError:
        return None


def _text(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def _json_object(data: bytes) -> dict[str, Any] | None:
    """Decode a JSON object; None if the document is not one."""
    try:
        document = json.loads(data)
    except ValueError:
        return None
    if document is None:
        return {}
    return document if isinstance(document, dict) else None


def _string_map(value: Any) -> dict[str, str] | None:
    if value is None:
        return {}
    if not isinstance(value, dict):
        return None
    if not all(item is None or isinstance(item, str) for item in value.values()):
        return None
    return {key: item or "" for key, item in value.items()}


def _local_name(tag: Any) -> str:
    return tag.rsplit("}", 1)[-1] if isinstance(tag, str) else ""


def _direct_text(element: ET.Element) -> str:
    return (element.text or "") + "".join(child.tail or "" for child in element)


def _xml_root(data: bytes) -> ET.Element | None:
    try:
        return ET.fromstring(data)
    except (ET.ParseError, ValueError):
        return None


def _xml_fields(root: ET.Element, group: str, fields: Iterable[str]) -> dict[str, str]:
    """Collect the text of named elements inside every `group` child of root."""
    wanted = set(fields)
    values: dict[str, str] = {}
    for child in root:
        if _local_name(child.tag) != group:
            continue
        for item in child:
            name = _local_name(item.tag)
            if name in wanted:
                values[name] = _direct_text(item)
    return values


def _node_versions(component_path: str, requirements: dict[str, str]) -> None:
    data = _read_manifest(os.path.join(component_path, "package.json"))
    if data is not None:
        document = _json_object(data)
        engines = _string_map(document.get("engines")) if document is not None else None
        for tool in ("node", "npm"):
            if engines and tool in engines:
                requirements[tool] = engines[tool]

    nvmrc = _read_optional(os.path.join(component_path, ".nvmrc"))
    if nvmrc is not None:
        version = _text(nvmrc).strip()
        if version:
            requirements["node"] = version


def _python_versions(component_path: str, requirements: dict[str, str]) -> None:
    data = _read_manifest(os.path.join(component_path, "pyproject.toml"))
    if data is not None:
        match = _REQUIRES_PYTHON.search(_text(data))
        if match:
            requirements["python"] = match.group(1)

    pinned = _read_optional(os.path.join(component_path, ".python-version"))
    if pinned is not None:
        version = _text(pinned).strip()
        if version:
            requirements["python"] = version


def _java_versions(component_path: str, requirements: dict[str, str]) -> None:
    data = _read_manifest(os.path.join(component_path, "pom.xml"))
    if data is not None:
        root = _xml_root(data)
        if root is not None:
            properties = _xml_fields(
                root,
                "properties",
                ("maven.compiler.source", "maven.compiler.target", "java.version"),
            )
            source = properties.get("maven.compiler.source", "")
            java_version = properties.get("java.version", "")
            if source:
                requirements["java"] = source
            elif java_version:
                requirements["java"] = java_version

    gradle = _read_optional(os.path.join(component_path, "build.gradle"))
    if gradle is not None:
        match = _SOURCE_COMPATIBILITY.search(_text(gradle))
        if match:
            requirements["java"] = match.group(1)


def _go_versions(component_path: str, requirements: dict[str, str]) -> None:
    data = _read_manifest(os.path.join(component_path, "go.mod"))
    if data is None:
        return
    for raw in _text(data).split("\n"):
        line = raw.strip()
        if line.startswith("go "):
            version = line[len("go"):].strip()
            if version:
                requirements["go"] = version
            break


def _rust_versions(component_path: str, requirements: dict[str, str]) -> None:
    data = _read_manifest(os.path.join(component_path, "Cargo.toml"))
    if data is None:
        return
    match = _RUST_VERSION.search(_text(data))
    if match:
        requirements["rust"] = match.group(1)


def _csproj_files(component_path: str) -> list[str]:
    try:
        with os.scandir(component_path) as listing:
            names = sorted(entry.name for entry in listing if entry.name.endswith(".csproj"))
    except OSError:
        return []
    return [os.path.join(component_path, name) for name in names]


def _dotnet_versions(component_path: str, requirements: dict[str, str]) -> None:
    for project in _csproj_files(component_path):
        data = _read_optional(project)
        if data is None:
            continue
        root = _xml_root(data)
        if root is None:
            continue
        target = _xml_fields(root, "PropertyGroup", ("TargetFramework",)).get(
            "TargetFramework", ""
        )
        if target:
            requirements["dotnet"] = target
            break

    data = _read_optional(os.path.join(component_path, "global.json"))
    if data is None:
        return
    document = _json_object(data)
    if document is None:
        return
    sdk = document.get("sdk")
    if not isinstance(sdk, dict):
        return
    version = sdk.get("version")
    if isinstance(version, str) and version:
        requirements["dotnet-sdk"] = version


def extract_version_requirements(component_path: str) -> dict[str, str]:
    """Collect the toolchain versions a component's manifests ask for.

    Raises OSError when a primary manifest exists but cannot be read.
    """
    component_path = os.fspath(component_path)
    requirements: dict[str, str] = {}
    for extract in (
        _node_versions,
        _python_versions,
        _java_versions,
        _go_versions,
        _rust_versions,
        _dotnet_versions,
    ):
        extract(component_path, requirements)
    return requirements