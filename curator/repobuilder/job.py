"""Options for a repository-building job."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional

from curator.repobuilder.config import RepositoryConfig, RepositoryDefinition

_VERSION_RE = re.compile(
    r"^(?P<major>\d+)\.(?P<minor>\d+)\.(?P<patch>\d+)"
    r"(?:-rc(?P<rc>\d+))?"
    r"(?:-(?P<commits>\d+)-g(?P<commit>[0-9a-fA-F]+))?$"
)


@dataclass(frozen=True)
class MongoDBVersion:
    """A parsed MongoDB release version."""

    original: str
    major: int
    minor: int
    patch: int
    rc: Optional[int] = None
    dev_commits: Optional[int] = None
    dev_commit: Optional[str] = None

    @property
    def series(self) -> str:
        """The release series, such as ``4.2``."""
        return f"{self.major}.{self.minor}"

    @property
    def is_release_candidate(self) -> bool:
        return self.rc is not None

    @property
    def is_development_build(self) -> bool:
        return self.dev_commit is not None

    def __str__(self) -> str:
        return self.original


def parse_mongodb_version(version: str) -> MongoDBVersion:
    """Parse a version string; raise ``ValueError`` if it is malformed."""
    match = _VERSION_RE.match(version.strip())
    if match is None:
        raise ValueError(f"'{version}' is not a valid MongoDB version")

    rc = match.group("rc")
    commits = match.group("commits")
    return MongoDBVersion(
        original=version,
        major=int(match.group("major")),
        minor=int(match.group("minor")),
        patch=int(match.group("patch")),
        rc=int(rc) if rc is not None else None,
        dev_commits=int(commits) if commits is not None else None,
        dev_commit=match.group("commit"),
    )


@dataclass
class JobOptions:
    """Everything needed to run a job that builds a repository."""

    configuration: Optional[RepositoryConfig] = None
    distro: Optional[RepositoryDefinition] = None
    version: str = ""
    arch: str = ""
    packages: list[str] = field(default_factory=list)
    job_id: str = ""

    aws_profile: str = ""
    aws_key: str = ""
    aws_secret: str = ""
    aws_token: str = ""

    notary_key: str = ""
    notary_token: str = ""

    release: Optional[MongoDBVersion] = field(default=None, init=False)

    def validate(self) -> None:
        """Check the options; raise ``ValueError`` listing every problem."""
        problems: list[str] = []
        if self.configuration is None:
            problems.append("configuration must not be nil")
        if self.distro is None:
            problems.append("distro specification must not be nil")

        try:
            self.release = parse_mongodb_version(self.version)
        except ValueError as err:
            self.release = None
            problems.append(str(err))

        if problems:
            raise ValueError("; ".join(problems))