# curator

A small toolkit for build and release work:

- reading and checking package repository configuration files,
- computing performance rollups (means, throughputs, percentiles,
  bounds and sums) from recorded performance metrics,
- building gzip-compressed tarballs from files and directories,
- collecting system and process statistics at intervals.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Command line

Installing the package provides the `curator` command.

```
curator hello
curator version
curator version --json
```

`hello` (also `hello-world` and `hi`) prints `hello world!`. `version`
prints the build revision and protocol checksums, as text or as indented
JSON; in a plain build these are empty strings.

Create an archive from one or more paths, leaving out files whose path
matches any of the given regular expressions, and placing everything under
a prefix inside the archive. Symbolic links are resolved and the target's
content is stored. The default archive name is `archive.tar.gz`.

```
curator archive create --name build.tar.gz --prefix release --item bin --item docs --exclude '\.tmp$'
```

Collect statistics with `curator stat` (also `curator stats`).
`--interval` (`-i`) sets the time between collections as a duration such
as `10s`, `500ms` or `1m30s` (default `10s`), `--count` limits how many
are taken (the default, 0, means no limit) and `--file` appends JSON lines
to a file instead of writing to standard output:

```
curator stat system --count 3 --interval 5s
curator stat process --pid 1234 --count 1
curator stat process-tree --pid 1234 --file tree.json
curator stat process-all --count 1
```

`process` and `process-tree` require `--pid`. On an error the command
prints a message to standard error and exits with status 1.

## Library use

### Repository configuration

```python
from curator.repobuilder.config import get_config, ConfigError

try:
    conf = get_config("repo_config.yaml")
except ConfigError as exc:
    print("bad configuration:", exc.errors)
else:
    repo = conf.get_repository_definition("rhel7", "org")
    if repo is not None:
        print(repo.bucket, repo.arch_for_distro("x86_64"))
```

Each repository must have type `rpm` or `deb`, Debian repositories must
list their architectures, and every edition/name pair must be unique;
`ConfigError.errors` lists every problem found. The region defaults to
`us-east-1` and is inherited by repositories that do not set their own.
`get_repository_definition` returns `None` for an unknown name or edition.
For Debian repositories `arch_for_distro` maps `x86_64` to `amd64` and
`ppc64le` to `ppc64el`.

### Job options

```python
from curator.repobuilder.job import JobOptions, parse_mongodb_version

opts = JobOptions(configuration=conf, distro=repo, version="4.4.1")
opts.validate()          # raises ValueError listing every problem
print(opts.release.series)  # "4.4"

parse_mongodb_version("4.2.0-rc1").is_release_candidate  # True
```

### Performance rollups

`create_performance_stats` turns a sequence of metric chunks into a
`PerformanceStatistics` object. Each chunk is a mapping (or a sequence of
pairs) from a metric name such as `counters.ops`, `counters.n`,
`counters.size`, `counters.errors`, `timers.dur`, `timers.total`,
`gauges.workers` or `ts` (milliseconds) to its sample values. Unknown
names raise `ValueError`. `calculate_default_rollups` applies every
default rollup factory to the result:

```python
from curator.rollups.metrics import calculate_default_rollups

chunks = [{"ts": [1000, 2000], "counters.ops": [1, 2], "timers.dur": [100, 250]}]
for rollup in calculate_default_rollups(chunks, False):
    print(rollup.name, rollup.metric_type.value, rollup.value)
```

A rollup whose value cannot be computed (for example an average with no
operations) has `value` set to `None`. Individual factories are available
through `rollups_map()`, `rollup_factory_from_type(name)` and
`default_rollup_factories()`; `quantile()` is the percentile function used.

### Archives

```python
from curator.operations.tarball import create_archive

names = create_archive("out.tar.gz", "prefix", ["src"], [r"__pycache__"])
```

### Statistics

```python
from curator.operations.sysinfo import collect_system_info, do_collection, open_stats_logger

with open_stats_logger("stats.json") as logger:
    do_collection(3, 1.0, lambda: logger.info(collect_system_info()))
```

## What the package does not do

- It does not read FTDC binary files; metric chunks must be supplied
  already decoded, as described above.
- It reads and checks repository configuration and job options, but does
  not build, sign, upload or publish repositories, and has no client for a
  remote repository-building service.
- It has no commands for cloud storage, notifications, log forwarding or
  acceptance-test suites, and does not write statistics in a compressed
  binary format.