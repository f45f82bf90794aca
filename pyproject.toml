[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "analyzerepo"
version = "0.1.0"
description = "Analyze local repositories to identify languages, frameworks, version requirements and external dependencies"
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = ["repository", "analysis", "monorepo", "frameworks", "dependencies", "devenv"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Quality Assurance",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
analyze-repo = "analyzerepo.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["analyzerepo"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
