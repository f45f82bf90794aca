"""Detection of external databases and services a component depends on."""

from __future__ import annotations

import datetime
import itertools
import os
from collections.abc import Iterable, Iterator
from typing import Any

import yaml

from .types import ExternalDependencies

COMPOSE_FILES = tuple(
    f"{stem}.{ext}"
    for stem, ext in itertools.product(("docker-compose", "compose"), ("yml", "yaml"))
)
ENV_FILES = (".env", *(f".env.{stage}" for stage in ("local", "development", "production")))

# Display names that plain capitalisation of the keyword would get wrong.
_DISPLAY_NAMES = {
    "postgres": "PostgreSQL",
    "mysql": "MySQL",
    "mariadb": "MariaDB",
    "mongodb": "MongoDB",
    "couchdb": "CouchDB",
    "influxdb": "InfluxDB",
    "timescaledb": "TimescaleDB",
    "sqlite": "SQLite",
    "rabbitmq": "RabbitMQ",
    "kafka": "Apache Kafka",
    "zookeeper": "Apache Zookeeper",
    "vault": "HashiCorp Vault",
    "minio": "MinIO",
}

# Keywords are tried in the order given; the first one found wins.
_IMAGE_DATABASE_KEYS = (
    "postgres mysql mariadb mongodb redis elasticsearch "
    "cassandra couchdb neo4j influxdb timescaledb"
).split()
_IMAGE_SERVICE_KEYS = (
    "nginx apache traefik rabbitmq kafka zookeeper memcached "
    "consul vault prometheus grafana jaeger zipkin minio"
).split()
_ENV_DATABASE_KEYS = "postgres mysql mariadb mongodb sqlite redis elasticsearch".split()
_ENV_SERVICE_KEYS = "redis memcached rabbitmq kafka".split()

_DATABASE_MARKERS = ("DATABASE_URL", "DB_")
_SERVICE_MARKERS = ("REDIS", "CACHE")


class _ComposeShapeError(ValueError):
    """A compose document does not have the expected structure."""


def _display_name(keyword: str) -> str:
    return _DISPLAY_NAMES.get(keyword, keyword.capitalize())


def _add(items: list[str], item: str) -> None:
    if item not in items:
        items.append(item)


def _lookup(text: str, keywords: Iterable[str]) -> str | None:
    """Return the display name of the first keyword contained in ``text``."""
    found = next((key for key in keywords if key in text), None)
    return None if found is None else _display_name(found)


def _scalar_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat()
    raise _ComposeShapeError(f"expected a scalar, got {type(value).__name__}")


def _check_service(name: Any, service: dict) -> None:
    environment = service.get("environment")
    if environment is not None:
        if not isinstance(environment, dict):
            raise _ComposeShapeError(f"environment of {name} is not a mapping")
        for value in environment.values():
            _scalar_text(value)
    ports = service.get("ports")
    if ports is not None:
        if not isinstance(ports, list):
            raise _ComposeShapeError(f"ports of {name} is not a list")
        for port in ports:
            _scalar_text(port)


def _compose_images(document: Any) -> list[tuple[str, str]]:
    """Return (service, image) pairs, or raise if the document is malformed."""
    if document is None:
        return []
    if not isinstance(document, dict):
        raise _ComposeShapeError("compose document is not a mapping")
    services = document.get("services")
    if services is None:
        return []
    if not isinstance(services, dict):
        raise _ComposeShapeError("services is not a mapping")

    pairs: list[tuple[str, str]] = []
    for name, service in services.items():
        if service is None:
            continue
        if not isinstance(service, dict):
            raise _ComposeShapeError(f"service {name} is not a mapping")
        image = _scalar_text(service.get("image"))
        _check_service(name, service)
        if image:
            pairs.append((_scalar_text(name), image))
    return pairs


def _read_bytes(path: str) -> bytes | None:
    try:
        with open(path, "rb") as handle:
            return handle.read()
    except OSError:
        return None


def _scan_compose_files(component_path: str, deps: ExternalDependencies) -> None:
    for filename in COMPOSE_FILES:
        content = _read_bytes(os.path.join(component_path, filename))
        if content is None:
            continue
        try:
            pairs = _compose_images(yaml.safe_load(content))
        except (yaml.YAMLError, _ComposeShapeError):
            continue
        for service_name, image in pairs:
            categorize_service(service_name, image, deps)


def _env_lines(component_path: str) -> Iterator[str]:
    """Yield the meaningful lines of every environment file present."""
    for filename in ENV_FILES:
        content = _read_bytes(os.path.join(component_path, filename))
        if content is None:
            continue
        for raw in content.decode("utf-8", errors="replace").split("\n"):
            line = raw.strip()
            if line and not line.startswith("#"):
                yield line


def _scan_env_files(component_path: str, deps: ExternalDependencies) -> None:
    for line in _env_lines(component_path):
        if any(marker in line for marker in _DATABASE_MARKERS):
            extract_database_from_env(line, deps)
        if any(marker in line for marker in _SERVICE_MARKERS):
            extract_service_from_env(line, deps)


def detect_external_dependencies(component_path: str) -> ExternalDependencies:
    """Collect databases and services from compose and environment files."""
    deps = ExternalDependencies()
    _scan_compose_files(component_path, deps)
    _scan_env_files(component_path, deps)
    return deps


def categorize_service(service_name: str, image: str, deps: ExternalDependencies) -> None:
    """Record the database or service that a container image provides."""
    lowered = image.lower()

    database = _lookup(lowered, _IMAGE_DATABASE_KEYS)
    if database is not None:
        _add(deps.databases, database)
        return

    service = _lookup(lowered, _IMAGE_SERVICE_KEYS)
    if service is not None:
        _add(deps.services, service)
        return

    # Only images from a registry namespace count as unknown services.
    if "/" in lowered and "scratch" not in lowered:
        _add(deps.services, image)


def extract_database_from_env(line: str, deps: ExternalDependencies) -> None:
    """Record a database named in an environment variable line."""
    database = _lookup(line.lower(), _ENV_DATABASE_KEYS)
    if database is not None:
        _add(deps.databases, database)


def extract_service_from_env(line: str, deps: ExternalDependencies) -> None:
    """Record a service named in an environment variable line."""
    service = _lookup(line.lower(), _ENV_SERVICE_KEYS)
    if service is not None:
        _add(deps.services, service)