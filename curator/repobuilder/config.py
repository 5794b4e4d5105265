"""Repository configuration: global settings and the repositories to publish."""

from __future__ import annotations

import enum
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Union

import yaml

_log = logging.getLogger(__name__)

DEFAULT_REGION = "us-east-1"


class ConfigError(Exception):
    """A repository configuration could not be read or is inconsistent."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = list(errors) if errors else [message]


class RepoType(str, enum.Enum):
    """Kinds of package repository."""

    RPM = "rpm"
    DEB = "deb"

    def __str__(self) -> str:
        return self.value


def _as_str(value: Any, key: str) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise ConfigError(f"field '{key}' must be a string")


def _as_bool(value: Any, key: str) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    raise ConfigError(f"field '{key}' must be a boolean")


def _as_mapping(value: Any, key: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if isinstance(value, Mapping):
        return value
    raise ConfigError(f"field '{key}' must be a mapping")


def _as_list(value: Any, key: str) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    raise ConfigError(f"field '{key}' must be a list")


def _as_str_list(value: Any, key: str) -> list[str]:
    return [_as_str(item, key) for item in _as_list(value, key)]


def _repo_type(value: str) -> Union[RepoType, str]:
    try:
        return RepoType(value)
    except ValueError:
        return value


@dataclass
class RepositoryDefinition:
    """One repository to publish."""

    name: str = ""
    type: Union[RepoType, str] = ""
    code_name: str = ""
    bucket: str = ""
    region: str = ""
    repos: list[str] = field(default_factory=list)
    edition: str = ""
    architectures: list[str] = field(default_factory=list)
    component: str = ""

    def arch_for_distro(self, arch: str) -> str:
        """Map an architecture name to the one the repository type uses."""
        if self.type == RepoType.DEB:
            if arch == "x86_64":
                return "amd64"
            if arch == "ppc64le":
                return "ppc64el"
        return arch


def _definition_from_mapping(data: Mapping[str, Any]) -> RepositoryDefinition:
    return RepositoryDefinition(
        name=_as_str(data.get("name"), "name"),
        type=_repo_type(_as_str(data.get("type"), "type")),
        code_name=_as_str(data.get("code_name"), "code_name"),
        bucket=_as_str(data.get("bucket"), "bucket"),
        region=_as_str(data.get("region"), "region"),
        repos=_as_str_list(data.get("repos"), "repos"),
        edition=_as_str(data.get("edition"), "edition"),
        architectures=_as_str_list(data.get("architectures"), "architectures"),
        component=_as_str(data.get("component"), "component"),
    )


@dataclass
class RepositoryConfig:
    """Global repository settings and the list of repository definitions."""

    repos: list[RepositoryDefinition] = field(default_factory=list)
    notary_url: str = ""
    index_template: str = ""
    deb_templates: dict[str, str] = field(default_factory=dict)
    dry_run: bool = False
    verbose: bool = False
    workspace: str = ""
    temp_space: str = ""
    region: str = ""
    file_name: str = ""
    _definition_lookup: dict[str, dict[str, RepositoryDefinition]] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def _load(self, data: Any) -> None:
        document = _as_mapping(data, "<document>")

        services = _as_mapping(document.get("services"), "services")
        templates = _as_mapping(document.get("templates"), "templates")

        self.repos = [
            _definition_from_mapping(_as_mapping(item, "repos"))
            for item in _as_list(document.get("repos"), "repos")
        ]
        self.notary_url = _as_str(services.get("notary_url"), "notary_url")
        self.index_template = _as_str(templates.get("index_page"), "index_page")
        self.deb_templates = {
            _as_str(key, "deb"): _as_str(value, "deb")
            for key, value in _as_mapping(templates.get("deb"), "deb").items()
        }
        self.dry_run = _as_bool(document.get("dry_run"), "dry_run")
        self.verbose = _as_bool(document.get("verbose"), "verbose")
        self.workspace = _as_str(document.get("workspace"), "workspace")
        self.temp_space = _as_str(document.get("temp"), "temp")
        self.region = _as_str(document.get("region"), "region")

    def read(self, file_name: str) -> None:
        """Load the configuration from a YAML file and apply defaults."""
        self.file_name = str(file_name)
        try:
            with open(file_name, encoding="utf-8") as stream:
                text = stream.read()
        except OSError as err:
            raise ConfigError(f"reading file '{file_name}': {err}") from err

        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as err:
            raise ConfigError(f"parsing file '{file_name}': {err}") from err

        self._load(data)
        self.validate()

    def validate(self) -> None:
        """Fill in unset defaults."""
        if not self.region:
            self.region = DEFAULT_REGION

    def process_repos(self) -> None:
        """Check the definitions and index them by edition and name.

        Raises ``ConfigError`` listing every problem found.
        """
        problems: list[str] = []

        for index, definition in enumerate(self.repos):
            if definition.type not in (RepoType.DEB, RepoType.RPM):
                problems.append(f"'{definition.type}' is not a valid repo type")

            by_name = self._definition_lookup.setdefault(definition.edition, {})

            if definition.name in by_name:
                problems.append(
                    f"'{definition.edition}.{definition.name}' already exists "
                    f"as repo #{index}"
                )
                continue

            if definition.type == RepoType.DEB and not definition.architectures:
                problems.append(
                    f"Debian distro '{definition.name}' does not specify "
                    "architecture list"
                )
                continue

            if not definition.region:
                definition.region = self.region

            by_name[definition.name] = definition

        if problems:
            raise ConfigError("; ".join(problems), problems)

    def get_repository_definition(
        self, name: str, edition: str
    ) -> RepositoryDefinition | None:
        """Return the definition for a name and edition, or None."""
        return self._definition_lookup.get(edition, {}).get(name)


def get_config(file_name: str) -> RepositoryConfig:
    """Read, validate and index a repository configuration file."""
    config = RepositoryConfig()
    config.read(file_name)
    config.process_repos()

    if not config.notary_url:
        _log.warning(
            "no notary service url specified (file=%s, num_repos=%d)",
            file_name,
            len(config.repos),
        )

    return config