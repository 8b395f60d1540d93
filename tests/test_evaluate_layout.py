import json
import subprocess
import sys
import xml.etree.ElementTree as ET
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]

ROOM = {"id": "study", "type": "office", "dimensions": {"width": 12, "length": 10}}
FURNITURE = [
    {"id": "desk", "name": "Desk", "category": "desk", "dimensions": [2, 4, 2.5]},
    {"id": "chair", "name": "Desk Chair", "category": "office-chair", "dimensions": [2, 2, 3]},
]


def run_eval(tmp_path, placements=None, strict=True, report=None):
    """Run the evaluate_layout script with the given placements."""
    room_file = tmp_path / "room.json"
    furniture_file = tmp_path / "furniture.json"
    room_file.write_text(json.dumps(ROOM))
    furniture_file.write_text(json.dumps(FURNITURE))

    cmd = [
        sys.executable,
        "-m",
        "evaluation.evaluate_layout",
        "--room",
        str(room_file),
        "--furniture",
        str(furniture_file),
        "--svg_out",
        str(tmp_path / "out.svg"),
    ]
    if placements is not None:
        placements_file = tmp_path / "placements.json"
        placements_file.write_text(json.dumps(placements))
        cmd.extend(["--placements", str(placements_file)])
    if strict:
        cmd.append("--strict")
    if report is not None:
        cmd.extend(["--json-report", str(report)])

    return subprocess.run(cmd, capture_output=True, cwd=REPO_ROOT)


def test_strict_exits_on_out_of_bounds(tmp_path):
    placements = [
        {"furnitureId": "desk", "x": 0.5, "y": 0.5},
        {"furnitureId": "chair", "x": 8, "y": 5},
    ]
    result = run_eval(tmp_path, placements, strict=True)
    assert result.returncode != 0
    assert b"outside" in result.stderr


def test_strict_allows_clean_layout(tmp_path):
    placements = [
        {"furnitureId": "desk", "x": 6, "y": 8},
        {"furnitureId": "chair", "x": 6, "y": 5},
    ]
    report = tmp_path / "report.json"
    result = run_eval(tmp_path, placements, strict=True, report=report)
    assert result.returncode == 0, result.stderr.decode()
    data = json.loads(report.read_text())
    assert data["issues"] == []
    assert data["usedFallback"] is False
    assert {p["furnitureId"] for p in data["layout"]["placements"]} == {"desk", "chair"}
    ET.parse(tmp_path / "out.svg")


def test_fallback_when_no_placements(tmp_path):
    report = tmp_path / "report.json"
    result = run_eval(tmp_path, None, strict=False, report=report)
    assert result.returncode == 0, result.stderr.decode()
    data = json.loads(report.read_text())
    assert data["usedFallback"] is True
    assert len(data["layout"]["placements"]) == 2
    assert "score" in data["evaluation"]


def test_unreadable_input_exits_non_zero(tmp_path):
    cmd = [
        sys.executable,
        "-m",
        "evaluation.evaluate_layout",
        "--room",
        str(tmp_path / "missing.json"),
        "--furniture",
        str(tmp_path / "missing.json"),
    ]
    result = subprocess.run(cmd, capture_output=True, cwd=REPO_ROOT)
    assert result.returncode == 1
