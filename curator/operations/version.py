"""Build and protocol version information."""

from __future__ import annotations

import json
from dataclasses import dataclass

BUILD_REVISION = ""
JASPER_CHECKSUM = ""
POPLAR_EVENTS_CHECKSUM = ""
POPLAR_RECORDER_CHECKSUM = ""
CEDAR_METRICS_CHECKSUM = ""


@dataclass(frozen=True)
class VersionInfo:
    """The build revision and the checksums of the protocols built in."""

    curator: str = ""
    jasper: str = ""
    poplar_events: str = ""
    poplar_recorder: str = ""
    cedar_metrics: str = ""

    def _as_document(self) -> dict[str, str]:
        return {
            "curator": self.curator,
            "jasper_proto": self.jasper,
            "poplar_proto_events": self.poplar_events,
            "poplar_proto_recorder": self.poplar_recorder,
            "cedar_metrics_proto": self.cedar_metrics,
        }

    def to_json(self) -> str:
        """Return the information as indented JSON."""
        return json.dumps(self._as_document(), indent=3)

    def __str__(self) -> str:
        return "".join(
            [
                "Curator Version Info:",
                "\n\t", "Build: ", self.curator,
                "\n\t", "Jasper: ", self.jasper,
                "\n\t", "PoplarEvents: ", self.poplar_events,
                "\n\t", "PoplarRecorder: ", self.poplar_recorder,
                "\n\t", "CedarMetrics: ", self.cedar_metrics,
            ]
        )


def current_version_info() -> VersionInfo:
    """Return the version information of this build."""
    return VersionInfo(
        curator=BUILD_REVISION,
        jasper=JASPER_CHECKSUM,
        poplar_events=POPLAR_EVENTS_CHECKSUM,
        poplar_recorder=POPLAR_RECORDER_CHECKSUM,
        cedar_metrics=CEDAR_METRICS_CHECKSUM,
    )