from __future__ import annotations

import json
from pathlib import Path

import ddbjson


def test_version_matches_version_json() -> None:
    version_file = Path(__file__).resolve().parents[2] / "src" / "ddbjson" / "version.json"
    data = json.loads(version_file.read_text(encoding="utf-8"))
    assert ddbjson.__repo_version__ == data["version"]
    if "-rc." in data["version"]:
        assert "-rc." not in ddbjson.__version__
        assert "rc" in ddbjson.__version__
    else:
        assert ddbjson.__version__ == data["version"]
