[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sfcli"
version = "0.1.0"
description = "Git helpers, human-readable PHP/FPM/Symfony log formatting and file watching for local development tooling"
requires-python = ">=3.10"
dependencies = [
    "watchdog",
]
keywords = ["git", "logs", "php", "symfony", "php-fpm", "monolog", "file-watching"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development",
    "Topic :: System :: Logging",
    "Topic :: Software Development :: Version Control :: Git",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["sfcli"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
