"""
Pytest configuration and shared fixtures for jsontree tests.

Provides immutable test data fixtures and common utilities for clean,
type-safe test organization.
"""

from dataclasses import dataclass
from typing import Any

import pytest

import jsontree


@dataclass(frozen=True)
class JsonTestCase:
    """
    Immutable container for JSON test case data.

    Holds test input and expected behavior for consistent test execution.
    """

    description: str
    input_data: bytes
    should_fail: bool = False
    expected_output: Any = None
    skip_reason: str = ""


@pytest.fixture
def allocator() -> jsontree.Allocator:
    """Provides a fresh, unbounded allocator for accounting checks."""
    return jsontree.Allocator()


@pytest.fixture
def json_fail_cases() -> list[JsonTestCase]:
    """
    Provides JSON documents that must fail parsing.

    These cases from the json.org JSON_checker suite ensure strict standards
    compliance and proper error handling for malformed JSON.
    """
    fail_docs = [
        # https://json.org/JSON_checker/test/fail1.json
        b'"A JSON payload should be an object or array, not a string."',
        # https://json.org/JSON_checker/test/fail2.json
        b'["Unclosed array"',
        # https://json.org/JSON_checker/test/fail3.json
        b'{unquoted_key: "keys must be quoted"}',
        # https://json.org/JSON_checker/test/fail4.json
        b'["extra comma",]',
        # https://json.org/JSON_checker/test/fail5.json
        b'["double extra comma",,]',
        # https://json.org/JSON_checker/test/fail6.json
        b'[   , "<-- missing value"]',
        # https://json.org/JSON_checker/test/fail7.json
        b'["Comma after the close"],',
        # https://json.org/JSON_checker/test/fail8.json
        b'["Extra close"]]',
        # https://json.org/JSON_checker/test/fail9.json
        b'{"Extra comma": true,}',
        # https://json.org/JSON_checker/test/fail10.json
        b'{"Extra value after close": true} "misplaced quoted value"',
        # https://json.org/JSON_checker/test/fail11.json
        b'{"Illegal expression": 1 + 2}',
        # https://json.org/JSON_checker/test/fail12.json
        b'{"Illegal invocation": alert()}',
        # https://json.org/JSON_checker/test/fail13.json
        b'{"Numbers cannot have leading zeroes": 013}',
        # https://json.org/JSON_checker/test/fail14.json
        b'{"Numbers cannot be hex": 0x14}',
        # https://json.org/JSON_checker/test/fail15.json
        b'["Illegal backslash escape: \\x15"]',
        # https://json.org/JSON_checker/test/fail16.json
        b"[\\naked]",
        # https://json.org/JSON_checker/test/fail17.json
        b'["Illegal backslash escape: \\017"]',
        # https://json.org/JSON_checker/test/fail18.json
        b'[[[[[[[[[[[[[[[[[[[["Too deep"]]]]]]]]]]]]]]]]]]]]',
        # https://json.org/JSON_checker/test/fail19.json
        b'{"Missing colon" null}',
        # https://json.org/JSON_checker/test/fail20.json
        b'{"Double colon":: null}',
        # https://json.org/JSON_checker/test/fail21.json
        b'{"Comma instead of colon", null}',
        # https://json.org/JSON_checker/test/fail22.json
        b'["Colon instead of comma": false]',
        # https://json.org/JSON_checker/test/fail23.json
        b'["Bad value", truth]',
        # https://json.org/JSON_checker/test/fail24.json
        b"['single quote']",
        # https://json.org/JSON_checker/test/fail25.json
        b'["\ttab\tcharacter\tin\tstring\t"]',
        # https://json.org/JSON_checker/test/fail26.json
        b'["tab\\   character\\   in\\  string\\  "]',
        # https://json.org/JSON_checker/test/fail27.json
        b'["line\nbreak"]',
        # https://json.org/JSON_checker/test/fail28.json
        b'["line\\\nbreak"]',
        # https://json.org/JSON_checker/test/fail29.json
        b"[0e]",
        # https://json.org/JSON_checker/test/fail30.json
        b"[0e+]",
        # https://json.org/JSON_checker/test/fail31.json
        b"[0e+-1]",
        # https://json.org/JSON_checker/test/fail32.json
        b'{"Comma instead if closing brace": true,',
        # https://json.org/JSON_checker/test/fail33.json
        b'["mismatch"}',
        # https://code.google.com/archive/p/simplejson/issues/3
        b'["A\x1fZ control characters in string"]',
    ]

    # Cases that are skipped with reasons
    skips = {
        1: "any value may be the document root",
        18: "twenty levels are within the default nesting limit",
    }

    return [
        JsonTestCase(
            description=f"fail{idx + 1}.json",
            input_data=doc,
            should_fail=True,
            skip_reason=skips.get(idx + 1, ""),
        )
        for idx, doc in enumerate(fail_docs)
    ]


@pytest.fixture
def json_pass_cases() -> list[JsonTestCase]:
    """
    Provides JSON documents that must parse successfully.

    These test cases validate standards compliance for valid JSON structures.
    """
    return [
        JsonTestCase(
            description="pass1.json - complex nested structure",
            input_data=b"""[
    "JSON Test Pattern pass1",
    {"object with 1 member":["array with 1 element"]},
    {},
    [],
    -42,
    true,
    false,
    null,
    {
        "integer": 1234567890,
        "real": -9876.543210,
        "e": 0.123456789e-12,
        "E": 1.234567890E+34,
        "":  23456789012E66,
        "zero": 0,
        "one": 1,
        "space": " ",
        "quote": "\\"",
        "backslash": "\\\\",
        "controls": "\\b\\f\\n\\r\\t",
        "slash": "/ & \\/",
        "alpha": "abcdefghijklmnopqrstuvwyz",
        "ALPHA": "ABCDEFGHIJKLMNOPQRSTUVWYZ",
        "digit": "0123456789",
        "0123456789": "digit",
        "special": "`1~!@#$%^&*()_+-={':[,]}|;.</>?",
        "hex": "\\u0123\\u4567\\u89AB\\uCDEF\\uabcd\\uef4A",
        "true": true,
        "false": false,
        "null": null,
        "array":[  ],
        "object":{  },
        "address": "50 St. James Street",
        "url": "https://www.JSON.org/",
        "comment": "// /* <!-- --",
        "# -- --> */": " ",
        " s p a c e d " :[1,2 , 3

,

4 , 5        ,          6           ,7        ],"compact":[1,2,3,4,5,6,7],
        "jsontext": "{\\"object with 1 member\\":[\\"array with 1 element\\"]}"
    }
]""",
            should_fail=False,
        ),
        JsonTestCase(
            description="pass2.json - deep nesting",
            input_data=b'[[[[[[[[[[[[[[[[[[["Not too deep"]]]]]]]]]]]]]]]]]]]',
            should_fail=False,
        ),
        JsonTestCase(
            description="pass3.json - simple object",
            input_data=b'{"JSON Test Pattern pass3": {"The outermost value": "must be an object or array.", "In this test": "It is an object."}}',
            should_fail=False,
        ),
    ]


@pytest.fixture
def basic_json_values() -> list[JsonTestCase]:
    """
    Provides basic JSON value test cases for fundamental parsing.

    Expected outputs are given as plain Python data, compared through
    `Value.to_python()`. Every number is a float.
    """
    return [
        JsonTestCase("null value", b"null", False, None),
        JsonTestCase("true boolean", b"true", False, True),
        JsonTestCase("false boolean", b"false", False, False),
        JsonTestCase("integer", b"42", False, 42.0),
        JsonTestCase("negative integer", b"-17", False, -17.0),
        JsonTestCase("float", b"3.14", False, 3.14),
        JsonTestCase("exponent", b"2.5E-3", False, 0.0025),
        JsonTestCase("empty string", b'""', False, ""),
        JsonTestCase("simple string", b'"hello"', False, "hello"),
        JsonTestCase("empty array", b"[]", False, []),
        JsonTestCase("empty object", b"{}", False, {}),
        JsonTestCase("simple array", b"[1, 2, 3]", False, [1.0, 2.0, 3.0]),
        JsonTestCase(
            "simple object", b'{"key": "value"}', False, {"key": "value"}
        ),
        JsonTestCase("bare minus", b"-", True),
        JsonTestCase("leading zero", b"01", True),
        JsonTestCase("unknown word", b"nil", True),
    ]
