import json

import pytest

from analyzerepo.language import (
    detect_development_tools,
    detect_framework_from_dependencies,
    detect_frameworks,
    detect_language,
    get_language_stats,
    get_primary_language,
    should_skip_file,
)


@pytest.mark.parametrize(
    "file_path, expected",
    [
        ("src/main.py", "Python"),
        ("cmd/main.go", "Go"),
        ("web/app.js", "JavaScript"),
        ("src/lib.rs", "Rust"),
        ("SRC/MAIN.PY", "Python"),
    ],
)
def test_detect_language_by_extension(file_path, expected):
    assert detect_language(file_path, b"content\n") == expected


def test_detect_language_unknown_extension():
    assert detect_language("data.unknownext", b"hello") == ""


def test_detect_language_binary_content():
    assert detect_language("main.py", b"\x00\x01\x02") == ""


def test_detect_language_shebang():
    assert detect_language("tools/run", b"#!/usr/bin/env python3\nprint(1)\n") == "Python"


@pytest.mark.parametrize(
    "file_name, file_path, expected",
    [
        (".eslintrc", "app/.eslintrc", True),
        (".env", "app/.env", False),
        (".env.local", "app/.env.local", False),
        ("logo.PNG", "app/logo.PNG", True),
        ("index.js", "app/node_modules/lib/index.js", True),
        ("main.go", "src/main.go", False),
    ],
)
def test_should_skip_file(file_name, file_path, expected):
    assert should_skip_file(file_name, file_path) is expected


def test_stats_missing_path(tmp_path):
    assert get_language_stats(str(tmp_path / "missing")) == {}


def test_stats_shares_sum_to_whole(tmp_path):
    py_src = b"print('hello')\n"
    go_src = b"package main\n\nfunc main() {}\n"
    (tmp_path / "a.py").write_bytes(py_src)
    (tmp_path / "b.go").write_bytes(go_src)
    stats = get_language_stats(str(tmp_path))
    assert set(stats) == {"Python", "Go"}
    assert sum(stats.values()) == pytest.approx(100.0)
    assert stats["Python"] / stats["Go"] == pytest.approx(len(py_src) / len(go_src))


def test_stats_ignore_skipped_paths(tmp_path):
    (tmp_path / "main.py").write_text("x = 1\n")
    hidden = tmp_path / "node_modules" / "pkg"
    hidden.mkdir(parents=True)
    (hidden / "index.js").write_text("module.exports = {}\n")
    (tmp_path / "picture.png").write_bytes(b"not really a picture")
    stats = get_language_stats(str(tmp_path))
    assert set(stats) == {"Python"}


def test_stats_empty_files_give_nothing(tmp_path):
    (tmp_path / "a.py").write_bytes(b"")
    assert get_language_stats(str(tmp_path)) == {}


def test_primary_language_empty():
    assert get_primary_language({}) == ""


def test_primary_language_largest_share():
    assert get_primary_language({"Go": 30.0, "Python": 70.0}) == "Python"


def test_framework_from_dependencies_highest_score():
    deps = {"express": "", "react": "", "@types/react": ""}
    assert detect_framework_from_dependencies(deps) == "React"


@pytest.mark.parametrize("deps", [{}, {"left-pad": "1.0"}])
def test_framework_from_dependencies_none(deps):
    assert detect_framework_from_dependencies(deps) == ""


def test_frameworks_javascript(tmp_path):
    (tmp_path / "package.json").write_text(
        json.dumps({"dependencies": {"express": "^4"}, "devDependencies": {"jest": "^29"}})
    )
    assert detect_frameworks(str(tmp_path), "JavaScript") == "Express"


def test_frameworks_typescript_dev_dependency(tmp_path):
    (tmp_path / "package.json").write_text(json.dumps({"devDependencies": {"vue": "^3"}}))
    assert detect_frameworks(str(tmp_path), "TypeScript") == "Vue"


def test_frameworks_javascript_without_manifest(tmp_path):
    assert detect_frameworks(str(tmp_path), "JavaScript") == ""


def test_frameworks_javascript_malformed_manifest(tmp_path):
    (tmp_path / "package.json").write_text("{not json")
    with pytest.raises(ValueError):
        detect_frameworks(str(tmp_path), "JavaScript")


def test_frameworks_javascript_wrong_field_type(tmp_path):
    (tmp_path / "package.json").write_text(json.dumps({"dependencies": {"react": 18}}))
    with pytest.raises(ValueError):
        detect_frameworks(str(tmp_path), "JavaScript")


def test_frameworks_python_requirements(tmp_path):
    (tmp_path / "requirements.txt").write_text("# web\nDjango==4.2\nrequests\n")
    assert detect_frameworks(str(tmp_path), "Python") == "Django"


def test_frameworks_go_module(tmp_path):
    (tmp_path / "go.mod").write_text(
        "module example.com/app\n\ngo 1.21\n\nrequire github.com/gin-gonic/gin v1.9.1\n"
    )
    assert detect_frameworks(str(tmp_path), "Go") == "Gin"


def test_frameworks_rust_cargo(tmp_path):
    (tmp_path / "Cargo.toml").write_text('[dependencies]\nactix-web = "4"\n')
    assert detect_frameworks(str(tmp_path), "Rust") == "Actix"


def test_frameworks_csharp_project(tmp_path):
    (tmp_path / "App.csproj").write_text(
        '<Project Sdk="Microsoft.NET.Sdk.Web"><ItemGroup>'
        '<PackageReference Include="Microsoft.AspNetCore.OpenApi" />'
        "</ItemGroup></Project>"
    )
    assert detect_frameworks(str(tmp_path), "C#") == "ASP.NET"


def test_frameworks_php_composer(tmp_path):
    (tmp_path / "composer.json").write_text(
        json.dumps({"require": {"laravel/framework": "^10"}})
    )
    assert detect_frameworks(str(tmp_path), "PHP") == "Laravel"


def test_frameworks_ruby_gemfile(tmp_path):
    (tmp_path / "Gemfile").write_text('gem "rails"\n')
    assert detect_frameworks(str(tmp_path), "Ruby") == "Rails"


def test_frameworks_unhandled_language(tmp_path):
    (tmp_path / "package.json").write_text(json.dumps({"dependencies": {"react": "18"}}))
    assert detect_frameworks(str(tmp_path), "Haskell") == ""


def test_tools_from_package_json(tmp_path):
    (tmp_path / "package.json").write_text(
        json.dumps({"devDependencies": {"jest": "^29", "eslint": "^8"}, "scripts": {"test": "jest"}})
    )
    assert detect_development_tools(str(tmp_path)) == ["ESLint", "Jest"]


def test_tools_from_python_files(tmp_path):
    (tmp_path / "requirements-dev.txt").write_text("pytest\n")
    (tmp_path / "pyproject.toml").write_text("[tool.black]\n[tool.pytest.ini_options]\n")
    assert detect_development_tools(str(tmp_path)) == ["pip-tools", "Black", "pytest"]


def test_tools_malformed_package_json_ignored(tmp_path):
    (tmp_path / "package.json").write_text(
        json.dumps({"devDependencies": {"eslint": "^8"}, "scripts": {"lint": 1}})
    )
    assert detect_development_tools(str(tmp_path)) == []