import pytest

from curator.repobuilder.config import RepositoryConfig, RepositoryDefinition, RepoType
from curator.repobuilder.job import JobOptions, MongoDBVersion, parse_mongodb_version


def test_parse_release_version():
    version = parse_mongodb_version("3.4.1")
    assert (version.major, version.minor, version.patch) == (3, 4, 1)
    assert not version.is_release_candidate
    assert not version.is_development_build


def test_parse_release_candidate():
    version = parse_mongodb_version("4.2.0-rc3")
    assert version.is_release_candidate
    assert version.rc == 3
    assert (version.major, version.minor, version.patch) == (4, 2, 0)


def test_parse_development_build():
    version = parse_mongodb_version("4.1.5-12-gabcdef")
    assert version.is_development_build
    assert version.dev_commits == 12
    assert version.dev_commit == "abcdef"


def test_version_string_round_trip():
    for text in ("3.6.23", "5.0.0-rc1", "4.1.5-12-gabcdef"):
        assert str(parse_mongodb_version(text)) == text


def test_series_is_major_and_minor():
    version = parse_mongodb_version("4.4.2")
    assert version.series == f"{version.major}.{version.minor}"


@pytest.mark.parametrize("text", ["", "foo", "4.2", "4.2.x", "v4.2.0"])
def test_parse_rejects_malformed_versions(text):
    with pytest.raises(ValueError, match="is not a valid MongoDB version"):
        parse_mongodb_version(text)


def _valid_options(version="4.0.1"):
    return JobOptions(
        configuration=RepositoryConfig(),
        distro=RepositoryDefinition(name="rhel7", type=RepoType.RPM, edition="org"),
        version=version,
        arch="x86_64",
        packages=["mongodb-org-server.rpm"],
    )


def test_validate_sets_release():
    opts = _valid_options()
    opts.validate()
    assert isinstance(opts.release, MongoDBVersion)
    assert str(opts.release) == opts.version
    assert opts.release.major == 4


def test_validate_requires_configuration_and_distro():
    opts = JobOptions(version="4.0.1")
    with pytest.raises(ValueError) as info:
        opts.validate()
    message = str(info.value)
    assert "configuration must not be nil" in message
    assert "distro specification must not be nil" in message


def test_validate_rejects_bad_version():
    opts = _valid_options(version="not-a-version")
    with pytest.raises(ValueError, match="not-a-version"):
        opts.validate()
    assert opts.release is None


def test_validate_reports_all_problems_together():
    opts = JobOptions(distro=RepositoryDefinition(name="rhel7"), version="bad")
    with pytest.raises(ValueError) as info:
        opts.validate()
    assert len(str(info.value).split("; ")) == 2