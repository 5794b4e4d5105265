[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "curator"
version = "0.1.0"
description = "Build and release tooling: repository configuration, performance rollups, tarballs and system statistics"
requires-python = ">=3.10"
keywords = [
    "build-tools",
    "repository",
    "performance",
    "rollups",
    "tarball",
    "sysinfo",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
    "Topic :: System :: Archiving",
    "Topic :: System :: Monitoring",
]
dependencies = [
    "pyyaml>=6.0",
    "psutil>=5.9",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
]

[project.scripts]
curator = "curator.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["curator"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
