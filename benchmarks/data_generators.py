"""
Test data generators for JSON parsing benchmarks.

Creates JSON documents, encoded as UTF-8 bytes, shaped like the data files a
host application loads:
- Flat and wide objects (configuration records)
- Long arrays of mixed values (level geometry, tables)
- Nested arrays, which exercise the counting pass of array parsing
- String-heavy content with escape sequences and \\u escapes
"""

import json
import random
import string
from typing import Any

# Constants for random data generation
_INT_TYPE = 1
_FLOAT_TYPE = 2
_STRING_TYPE = 3
_BOOL_TYPE = 4
_NULL_TYPE = 5
_ESCAPE_PROBABILITY = 0.3

DATA_TYPES = (
    "small_object",
    "large_object",
    "mixed_array",
    "nested_arrays",
    "nested_structure",
    "string_heavy",
)


def generate_test_data(data_type: str) -> bytes:
    """Generates a JSON document of the given shape."""
    generators = {
        "small_object": _generate_small_object,
        "large_object": _generate_large_object,
        "mixed_array": _generate_mixed_array,
        "nested_arrays": _generate_nested_arrays,
        "nested_structure": _generate_nested_structure,
        "string_heavy": _generate_string_heavy,
    }

    if data_type not in generators:
        raise ValueError(f"Unknown data type: {data_type}")

    return generators[data_type]().encode("utf-8")


def _generate_small_object() -> str:
    """Generates a small entity record (< 1KB)."""
    data = {
        "id": 12345,
        "name": "Goblin Archer",
        "sprite": "sprites/goblin_archer.png",
        "hostile": True,
        "speed": 1.25,
        "stats": {"hp": 14, "atk": 3, "def": 1},
    }
    return json.dumps(data)


def _generate_large_object() -> str:
    """Generates a large level description (> 10KB)."""
    data = {
        "level_id": random.randint(1000, 9999),
        "meta": {
            "name": _random_string(12),
            "author": _random_string(8),
            "music": f"music/{_random_string(6)}.ogg",
            "tileset": random.choice(["forest", "cave", "castle", "desert"]),
        },
        "entities": [
            {
                "id": f"ent_{i:05d}",
                "kind": random.choice(["slime", "bat", "chest", "door"]),
                "x": round(random.uniform(0.0, 512.0), 2),
                "y": round(random.uniform(0.0, 512.0), 2),
                "flags": {
                    "solid": random.choice([True, False]),
                    "visible": random.choice([True, False]),
                },
                "script": None
                if random.random() < 0.5
                else f"on_touch_{_random_string(6)}",
            }
            for i in range(80)
        ],
        "triggers": [
            {
                "area": [random.randint(0, 64) for _ in range(4)],
                "event": random.choice(["cutscene", "spawn", "checkpoint"]),
                "once": random.choice([True, False]),
            }
            for _ in range(30)
        ],
    }
    return json.dumps(data)


def _generate_mixed_array() -> str:
    """Generates a large array with mixed data types."""
    array: list[Any] = []

    for i in range(200):
        choice = random.randint(1, 6)
        if choice == _INT_TYPE:
            array.append(random.randint(-1000, 1000))
        elif choice == _FLOAT_TYPE:
            array.append(round(random.uniform(-100.0, 100.0), 3))
        elif choice == _STRING_TYPE:
            array.append(_random_string(random.randint(5, 30)))
        elif choice == _BOOL_TYPE:
            array.append(random.choice([True, False]))
        elif choice == _NULL_TYPE:
            array.append(None)
        else:
            array.append(
                {
                    "index": i,
                    "value": _random_string(10),
                    "score": round(random.uniform(0, 100), 2),
                }
            )

    return json.dumps(array)


def _generate_nested_arrays() -> str:
    """Generates a tile map: arrays of arrays of small integers."""
    tiles = [
        [[random.randint(0, 15) for _ in range(4)] for _ in range(32)]
        for _ in range(16)
    ]
    return json.dumps({"width": 32, "height": 16, "tiles": tiles})


def _generate_nested_structure() -> str:
    """Generates deeply nested JSON structure."""

    def create_nested_dict(depth: int) -> dict[str, Any]:
        if depth <= 0:
            return {"value": _random_string(10)}

        return {
            "level": depth,
            "data": _random_string(15),
            "items": [create_nested_dict(depth - 1) for _ in range(3)],
            "nested": create_nested_dict(depth - 1),
        }

    return json.dumps(create_nested_dict(6))


def _generate_string_heavy() -> str:
    """Generates JSON with many string escape sequences."""

    def create_escaped_string() -> str:
        chars = []
        for _ in range(50):
            if random.random() < _ESCAPE_PROBABILITY:
                chars.append(random.choice("\"\\/\b\f\n\r\t"))
            else:
                chars.append(
                    random.choice(string.ascii_letters + string.digits + " ")
                )
        return "".join(chars)

    data = {
        "strings": [create_escaped_string() for _ in range(100)],
        "unicode": [
            f"Glyph: {chr(random.randint(0x00A0, 0x2FFF))}"
            for _ in range(50)
        ],
        "dialogue": {
            f"line_{i}": {
                "text": create_escaped_string(),
                "voice": f"C:\\Game\\voice\\{_random_string(8)}.ogg",
            }
            for i in range(20)
        },
    }
    # json.dumps escapes control characters, quotes and non-ASCII glyphs
    return json.dumps(data)


def _random_string(length: int) -> str:
    """Generates a random string of specified length."""
    return "".join(random.choices(string.ascii_letters, k=length))
