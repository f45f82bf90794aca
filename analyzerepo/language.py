"""Language statistics, framework detection and development tool detection."""

from __future__ import annotations

import json
import os
import re
from typing import Any, Iterator, Mapping

FRAMEWORK_PATTERNS: dict[str, tuple[str, ...]] = {
    "React": ("react", "@types/react"),
    "Vue": ("vue", "@vue/cli", "vue-cli"),
    "Angular": ("@angular/core", "@angular/cli"),
    "Next.js": ("next",),
    "Nuxt": ("nuxt",),
    "Express": ("express",),
    "Fastify": ("fastify",),
    "Nest": ("@nestjs/core",),
    "Django": ("django", "Django"),
    "FastAPI": ("fastapi",),
    "Flask": ("flask", "Flask"),
    "Spring": ("org.springframework",),
    "SpringBoot": ("org.springframework.boot",),
    "Laravel": ("laravel/framework",),
    "Symfony": ("symfony/framework-bundle",),
    "Rails": ("rails",),
    "Gin": ("github.com/gin-gonic/gin",),
    "Echo": ("github.com/labstack/echo",),
    "Fiber": ("github.com/gofiber/fiber",),
    "Axum": ("axum",),
    "Actix": ("actix-web",),
    "Rocket": ("rocket",),
    "ASP.NET": ("Microsoft.AspNetCore",),
}

SKIP_EXTENSIONS = frozenset(
    {
        ".exe", ".dll", ".so", ".dylib", ".a", ".lib",
        ".jpg", ".jpeg", ".png", ".gif", ".bmp", ".svg", ".ico",
        ".mp4", ".mp3", ".wav", ".avi", ".mov",
        ".zip", ".tar", ".gz", ".7z", ".rar",
        ".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx",
    }
)

_SKIP_PATH_PARTS = (
    "node_modules", ".git", "__pycache__", ".venv", "venv", "target", "build", "dist",
)

_FILENAMES = {
    "Dockerfile": "Dockerfile",
    "Makefile": "Makefile",
    "makefile": "Makefile",
    "GNUmakefile": "Makefile",
    "CMakeLists.txt": "CMake",
    "Gemfile": "Ruby",
    "Rakefile": "Ruby",
    "Vagrantfile": "Ruby",
    "Jenkinsfile": "Groovy",
    "go.mod": "Go Module",
    "go.sum": "Go Checksums",
    "Cargo.lock": "TOML",
    "Pipfile": "TOML",
}

_EXTENSIONS = {
    ".py": "Python", ".pyi": "Python", ".pyw": "Python",
    ".go": "Go",
    ".js": "JavaScript", ".mjs": "JavaScript", ".cjs": "JavaScript", ".jsx": "JavaScript",
    ".ts": "TypeScript", ".mts": "TypeScript", ".cts": "TypeScript",
    ".tsx": "TSX",
    ".rs": "Rust",
    ".java": "Java",
    ".kt": "Kotlin", ".kts": "Kotlin",
    ".scala": "Scala",
    ".groovy": "Groovy", ".gradle": "Gradle",
    ".cs": "C#",
    ".fs": "F#",
    ".vb": "Visual Basic .NET",
    ".c": "C",
    ".cpp": "C++", ".cc": "C++", ".cxx": "C++", ".hpp": "C++", ".hh": "C++", ".hxx": "C++",
    ".swift": "Swift",
    ".rb": "Ruby", ".erb": "HTML+ERB",
    ".php": "PHP",
    ".lua": "Lua",
    ".r": "R",
    ".dart": "Dart",
    ".ex": "Elixir", ".exs": "Elixir",
    ".erl": "Erlang",
    ".hs": "Haskell",
    ".clj": "Clojure",
    ".zig": "Zig",
    ".sh": "Shell", ".bash": "Shell", ".zsh": "Shell",
    ".ps1": "PowerShell",
    ".bat": "Batchfile", ".cmd": "Batchfile",
    ".html": "HTML", ".htm": "HTML",
    ".css": "CSS", ".scss": "SCSS", ".sass": "Sass", ".less": "Less",
    ".vue": "Vue", ".svelte": "Svelte",
    ".json": "JSON",
    ".yml": "YAML", ".yaml": "YAML",
    ".toml": "TOML",
    ".xml": "XML", ".csproj": "XML",
    ".ini": "INI",
    ".md": "Markdown", ".markdown": "Markdown",
    ".rst": "reStructuredText",
    ".txt": "Text",
    ".sql": "SQL",
    ".proto": "Protocol Buffer",
    ".graphql": "GraphQL",
    ".tf": "HCL",
    ".ipynb": "Jupyter Notebook",
    ".dockerfile": "Dockerfile",
}

_INTERPRETERS = {
    "python": "Python",
    "node": "JavaScript",
    "bash": "Shell",
    "sh": "Shell",
    "zsh": "Shell",
    "ruby": "Ruby",
    "perl": "Perl",
    "php": "PHP",
}

_CPP_MARKERS = re.compile(rb"\b(class|namespace|template\s*<|public:|private:)")


def _is_binary(content: bytes) -> bool:
    return b"\x00" in content[:8000]


def _classify_header(content: bytes) -> str:
    if b"@interface" in content or b"@property" in content:
        return "Objective-C"
    if _CPP_MARKERS.search(content):
        return "C++"
    return "C"


def _language_from_shebang(content: bytes) -> str:
    if not content.startswith(b"#!"):
        return ""
    first_line = content.split(b"\n", 1)[0][2:].decode("utf-8", errors="replace")
    tokens = first_line.split()
    if not tokens:
        return ""
    interpreter = os.path.basename(tokens[0])
    if interpreter == "env":
        interpreter = next((tok for tok in tokens[1:] if not tok.startswith("-")), "")
    interpreter = re.sub(r"[\d.]+$", "", interpreter)
    return _INTERPRETERS.get(interpreter, "")


def detect_language(file_path: str, content: bytes) -> str:
    """Name the language of a file from its name and content, or "" if unknown."""
    if _is_binary(content):
        return ""
    name = os.path.basename(file_path)
    if name in _FILENAMES:
        return _FILENAMES[name]
    extension = os.path.splitext(name)[1].lower()
    if extension == ".h":
        return _classify_header(content)
    if extension in _EXTENSIONS:
        return _EXTENSIONS[extension]
    return _language_from_shebang(content)


def _iter_files(root: str) -> Iterator[tuple[str, str]]:
    if not os.path.isdir(root) or os.path.islink(root):
        yield root, os.path.basename(os.path.normpath(root))
        return
    for directory, _dirs, files in os.walk(root, onerror=lambda _err: None):
        for name in files:
            yield os.path.join(directory, name), name


def get_language_stats(path: str) -> dict[str, float]:
    """Return each language's share of the source bytes under path, in percent."""
    path = os.fspath(path)
    if not os.path.lexists(path):
        return {}

    sizes: dict[str, int] = {}
    for file_path, file_name in _iter_files(path):
        if should_skip_file(file_name, file_path):
            continue
        try:
            with open(file_path, "rb") as handle:
                content = handle.read()
        except OSError:
            continue
        language = detect_language(file_path, content)
        if language:
            sizes[language] = sizes.get(language, 0) + len(content)

    total = sum(sizes.values())
    if total <= 0:
        return {}
    return {language: size / total * 100 for language, size in sizes.items()}


def get_primary_language(stats: Mapping[str, float]) -> str:
    """Return the language with the largest share, or "" if there is none."""
    if not stats:
        return ""
    language, share = max(stats.items(), key=lambda item: item[1])
    return language if share > 0 else ""


def should_skip_file(file_name: str, file_path: str) -> bool:
    """Tell whether a file is left out of language statistics."""
    if file_name.startswith(".") and file_name != ".env" and not file_name.startswith(".env."):
        return True
    if os.path.splitext(file_name)[1].lower() in SKIP_EXTENSIONS:
        return True
    return any(part in file_path for part in _SKIP_PATH_PARTS)


def _read_bytes(path: str) -> bytes | None:
    """Return the file's bytes, None if it does not exist; other errors propagate."""
    if not os.path.lexists(path):
        return None
    with open(path, "rb") as handle:
        return handle.read()


def _string_map(value: Any, key: str) -> dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, dict) or not all(
        item is None or isinstance(item, str) for item in value.values()
    ):
        raise ValueError(f"field {key!r} is not a map of strings")
    return {name: item or "" for name, item in value.items()}


def _json_string_maps(data: bytes, *keys: str) -> list[dict[str, str]]:
    """Decode the named string maps of a JSON object; raise ValueError if malformed."""
    document = json.loads(data)
    if document is None:
        document = {}
    if not isinstance(document, dict):
        raise ValueError("JSON document is not an object")
    return [_string_map(document.get(key), key) for key in keys]


def _framework_in_text(text: str) -> str:
    return next(
        (
            framework
            for framework, patterns in FRAMEWORK_PATTERNS.items()
            if any(pattern in text for pattern in patterns)
        ),
        "",
    )


def _framework_in_file(path: str) -> str:
    content = _read_bytes(path)
    if content is None:
        return ""
    return _framework_in_text(content.decode("utf-8", errors="replace"))


def _detect_js_framework(component_path: str) -> str:
    data = _read_bytes(os.path.join(component_path, "package.json"))
    if data is None:
        return ""
    dependencies, dev_dependencies = _json_string_maps(
        data, "dependencies", "devDependencies"
    )
    return detect_framework_from_dependencies({**dependencies, **dev_dependencies})


def _detect_python_framework(component_path: str) -> str:
    content = _read_bytes(os.path.join(component_path, "requirements.txt"))
    if content is None:
        return ""
    deps: dict[str, str] = {}
    for raw in content.decode("utf-8", errors="replace").split("\n"):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        deps[line.split("==")[0].strip()] = ""
    return detect_framework_from_dependencies(deps)


def _detect_dotnet_framework(component_path: str) -> str:
    try:
        projects = sorted(
            entry.path
            for entry in os.scandir(component_path)
            if entry.name.endswith(".csproj")
        )
    except OSError:
        return ""
    for project in projects:
        try:
            with open(project, "rb") as handle:
                text = handle.read().decode("utf-8", errors="replace")
        except OSError:
            continue
        framework = _framework_in_text(text)
        if framework:
            return framework
    return ""


def _detect_php_framework(component_path: str) -> str:
    data = _read_bytes(os.path.join(component_path, "composer.json"))
    if data is None:
        return ""
    require, require_dev = _json_string_maps(data, "require", "require-dev")
    return detect_framework_from_dependencies({**require, **require_dev})


def detect_frameworks(component_path: str, primary_lang: str) -> str:
    """Detect the framework a component uses, judged by its primary language.

    Raises OSError when a manifest cannot be read and ValueError when a JSON
    manifest is malformed.
    """
    language = primary_lang.lower()
    if language in ("javascript", "typescript"):
        return _detect_js_framework(component_path)
    if language == "python":
        return _detect_python_framework(component_path)
    if language == "c#":
        return _detect_dotnet_framework(component_path)
    if language == "php":
        return _detect_php_framework(component_path)
    manifests = {"java": "pom.xml", "go": "go.mod", "rust": "Cargo.toml", "ruby": "Gemfile"}
    if language in manifests:
        return _framework_in_file(os.path.join(component_path, manifests[language]))
    return ""


def detect_framework_from_dependencies(deps: Mapping[str, str]) -> str:
    """Return the framework whose package names best match the dependencies."""
    scores = {
        framework: sum(pattern in deps for pattern in patterns)
        for framework, patterns in FRAMEWORK_PATTERNS.items()
    }
    best, score = max(scores.items(), key=lambda item: item[1])
    return best if score > 0 else ""


def detect_development_tools(component_path: str) -> list[str]:
    """List linters, formatters and test tools configured for a component."""
    tools: list[str] = []

    try:
        data = _read_bytes(os.path.join(component_path, "package.json"))
    except OSError:
        data = None
    if data is not None:
        try:
            dev_dependencies, _scripts = _json_string_maps(data, "devDependencies", "scripts")
        except ValueError:
            dev_dependencies = {}
        for package, tool in (
            ("eslint", "ESLint"),
            ("prettier", "Prettier"),
            ("jest", "Jest"),
            ("typescript", "TypeScript"),
        ):
            if package in dev_dependencies:
                tools.append(tool)

    if os.path.lexists(os.path.join(component_path, "requirements-dev.txt")):
        tools.append("pip-tools")

    try:
        pyproject = _read_bytes(os.path.join(component_path, "pyproject.toml"))
    except OSError:
        pyproject = None
    if pyproject is not None:
        text = pyproject.decode("utf-8", errors="replace")
        for needle, tool in (("black", "Black"), ("flake8", "Flake8"), ("pytest", "pytest")):
            if needle in text:
                tools.append(tool)

    return tools