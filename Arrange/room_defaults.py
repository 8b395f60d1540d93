"""Default room shells per room type (dimensions in feet, fixtures, features)."""

from typing import Any, Dict

from Arrange.params import Room

DIMENSION_DEFAULTS: Dict[str, Dict[str, float]] = {
    "bedroom": {"width": 12.0, "length": 10.0, "height": 8.0},
    "living-room": {"width": 16.0, "length": 12.0, "height": 9.0},
    "dining-room": {"width": 12.0, "length": 14.0, "height": 9.0},
    "kitchen": {"width": 10.0, "length": 12.0, "height": 8.0},
    "office": {"width": 10.0, "length": 8.0, "height": 8.0},
    "bathroom": {"width": 6.0, "length": 8.0, "height": 8.0},
}


def _window(fid: str, x: float, y: float, width: float, height: float, clearance: float) -> Dict[str, Any]:
    return {
        "id": fid,
        "type": "window",
        "position": {"x": x, "y": y, "z": 3.0, "wall": "top"},
        "dimensions": {"width": width, "height": height},
        "properties": {"providesNaturalLight": True, "clearanceRequired": clearance},
    }


def _door(fid: str, x: float, width: float, height: float, clearance: float, kind: str = "door",
          wall: str = "bottom", y: float = 0.0, swing: str = "inward") -> Dict[str, Any]:
    return {
        "id": fid,
        "type": kind,
        "position": {"x": x, "y": y, "z": 0.0, "wall": wall},
        "dimensions": {"width": width, "height": height},
        "properties": {"swingDirection": swing, "clearanceRequired": clearance},
    }


ROOM_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "bedroom": {
        "fixtures": [
            _window("bedroom-window", 6.0, 10.0, 4.0, 4.0, 1.5),
            _door("bedroom-door", 2.0, 2.5, 6.5, 2.5),
        ],
        "features": ["natural-light", "window", "door"],
    },
    "living-room": {
        "fixtures": [
            _window("large-window", 8.0, 12.0, 6.0, 4.0, 2.0),
            _door("main-entrance", 2.0, 3.0, 7.0, 3.0),
            _door("patio-door", 16.0, 6.0, 8.0, 3.0, kind="french-door", wall="right", y=6.0, swing="outward"),
        ],
        "features": ["natural-light", "large-windows", "patio-access", "open-concept"],
    },
    "dining-room": {
        "fixtures": [
            _window("dining-window", 6.0, 14.0, 4.0, 4.0, 1.5),
            _door("dining-entrance", 1.5, 2.5, 7.0, 2.5),
        ],
        "features": ["natural-light", "formal-dining", "adjacent-to-kitchen"],
    },
    "kitchen": {
        "fixtures": [
            _window("kitchen-window", 5.0, 10.0, 3.0, 3.0, 1.0),
            _door("kitchen-door", 1.5, 2.5, 7.0, 2.5),
        ],
        "features": ["natural-light", "ventilation", "counter-space"],
    },
    "office": {
        "fixtures": [
            _window("office-window", 5.0, 8.0, 4.0, 4.0, 1.5),
            _door("office-door", 1.5, 2.5, 6.5, 2.5),
        ],
        "features": ["natural-light", "quiet-space", "internet-ready"],
    },
    "bathroom": {
        "fixtures": [
            _window("bathroom-window", 3.0, 6.0, 2.0, 2.0, 0.5),
            _door("bathroom-door", 1.0, 2.0, 6.5, 2.0),
        ],
        "features": ["ventilation", "plumbing-ready", "privacy"],
    },
}


def default_room(room_type: str = "bedroom", style: str = "modern") -> Room:
    """Build the default room for ``room_type``; unknown types get the bedroom shell."""
    key = room_type if room_type in ROOM_DEFAULTS else "bedroom"
    defaults = ROOM_DEFAULTS[key]
    return Room.model_validate(
        {
            "id": f"default-{key}",
            "type": key,
            "dimensions": DIMENSION_DEFAULTS[key],
            "fixtures": defaults["fixtures"],
            "features": defaults["features"],
            "style": style,
        }
    )
