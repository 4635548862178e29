import os
from pathlib import Path
from typing import Any, Callable

import pytest

# Start coverage in subprocesses and skip the collector teardown assertion under act/docker
if os.getenv("COVERAGE_PROCESS_START"):
    import coverage

    coverage.process_startup()

    import coverage.collector

    def safe_stop(self: Any) -> None:
        if self in getattr(self, "_collectors", []):
            self._collectors.remove(self)

    coverage.collector.Collector.stop = safe_stop


ADVENTURE = """\
// A two-room sample story
room Hall {
    description: "A long, echoing hall.";
    exits: 2;
    item lamp {
        lit: false;
        weight: 1.5;
    }
    when entered {
        say "You step into the hall.";
        if (lamp.lit) goto(Cellar); else say "It is dark.";
    }
}

room Cellar {
    description: "Damp stone walls.";
}

function describe(place, loud) {
    var text = "You are in " + place;
    while (loud and not done) {
        say text;
    }
    return text;
}

var visits = 0;
visits = visits + 1;
"""


@pytest.fixture
def adventure_source() -> str:
    return ADVENTURE


@pytest.fixture
def story_file(tmp_path: Path) -> Callable[[str], Path]:
    def write(source: str, name: str = "adventure.story") -> Path:
        path = tmp_path / name
        path.write_text(source, encoding="utf-8")
        return path

    return write
