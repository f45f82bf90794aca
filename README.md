# analyzerepo

Analyze a local repository and report what its development environment
needs: languages, frameworks, language/runtime version requirements,
external databases and services, and development tools. It works on
single projects as well as monorepos.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Command line

Analyze the current directory and print YAML to standard output:

```
analyze-repo
```

Analyze another path, print JSON, and write the result to a file:

```
analyze-repo path/to/repo --format json --output report/analysis.json
```

Options:

- `--format yaml|json`: output format (default `yaml`); any other value is
  an error
- `--output FILE`: write to a file instead of standard output; parent
  directories are created as needed
- `--verbose`: print progress information (the repository path goes to
  standard error, per-component progress to standard output)
- `--component NAME`: analyze only the component with this name
- `--exclude PATTERNS`: comma-separated glob patterns or substrings of
  component paths to skip (may be given more than once)

Print the version:

```
analyze-repo version
```

The command exits with status 0 on success and 1 on an error, printing
`Error: ...` to standard error.

## How components are found

Every directory that holds a recognised project file (`package.json`,
`requirements.txt`, `pyproject.toml`, `pom.xml`, `build.gradle`,
`Cargo.toml`, `go.mod`, `*.csproj`, `docker-compose.yml`,
`docker-compose.yaml`) becomes a component, named after its directory.
Hidden directories and common build or dependency folders such as
`node_modules`, `venv`, `target`, `build`, `dist`, `bin` and `obj` are
skipped. A repository with more than one component is reported as a
`monorepo`, otherwise as `single`.

For each component the report contains:

- `primary_language` and `language_stats` (percentage of bytes per language)
- `framework`, detected from manifests such as `package.json`,
  `requirements.txt`, `pom.xml`, `go.mod`, `Cargo.toml`, `*.csproj`,
  `composer.json` and `Gemfile`, chosen by the primary language
- `type`: `web-application`, `api-service`, `service`, `application`,
  `library` or `configuration`
- `version_requirements`, e.g. `node`, `npm`, `python`, `java`, `go`,
  `rust`, `dotnet`, `dotnet-sdk`
- `external_dependencies`: databases and services found in compose files
  (`docker-compose.yml`, `docker-compose.yaml`, `compose.yml`,
  `compose.yaml`) and `.env` files
- `development_tools`, e.g. ESLint, Prettier, Jest, TypeScript, pip-tools,
  Black, Flake8, pytest

A component that cannot be analysed (for instance because its
`package.json` is malformed) is left out of the report; with `--verbose`
a warning names it.

## Library use

```python
from analyzerepo.analyzer import analyze_repository
from analyzerepo.cli import render_result
from analyzerepo.types import AnalysisOptions

result = analyze_repository("/path/to/repo", AnalysisOptions())
print(render_result(result, "json"))
```

`analyze_repository` returns an `AnalysisResult`, whose `to_dict()` and
`AnalysisResult.from_dict()` convert to and from plain dictionaries. The
building blocks are available on their own as well:

- `analyzerepo.discovery.discover_project_structure(path)`
- `analyzerepo.language.get_language_stats(path)`,
  `get_primary_language(stats)`, `detect_frameworks(path, language)`,
  `detect_development_tools(path)`, `detect_language(file_path, content)`
- `analyzerepo.version.extract_version_requirements(path)`
- `analyzerepo.dependency.detect_external_dependencies(path)`
- `analyzerepo.analyzer.analyze_component(info)`,
  `infer_component_type(language, framework, config_files)`
- `analyzerepo.output.write_to_file(path, data)`

## Limitations

- Languages are recognised from a fixed table of file names, extensions
  and shebang lines; files it does not know are not counted.
- `pyproject.toml` is only searched for `requires-python` and tool names;
  it is not used to detect a Python framework.
- Nothing is installed or run: the report only describes what the
  repository's files ask for.