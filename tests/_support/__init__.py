"""
Test support utilities for handler-commons tests.

Helpers that don't fit as pytest fixtures but are useful across multiple
test files.
"""

from __future__ import annotations

import json
from typing import Any


def parse_logged_payload(line: str, message: str) -> dict[str, Any]:
    """
    Split a RequestLogger line into its JSON payload.

    Args:
        line: Rendered line, ``"<message> <json>"``
        message: Expected leading message

    Returns:
        Parsed JSON payload as dictionary
    """
    assert line.startswith(message + " "), f"Line does not start with {message!r}: {line!r}"
    return json.loads(line[len(message) + 1:])


def assert_dict_subset(actual: dict, expected: dict, path: str = "") -> None:
    """
    Assert that expected is a subset of actual (recursive).

    Args:
        actual: The full dictionary
        expected: The expected subset
        path: Current path (for error messages)
    """
    for key, expected_value in expected.items():
        current_path = f"{path}.{key}" if path else key

        assert key in actual, f"Missing key at {current_path}"
        actual_value = actual[key]

        if isinstance(expected_value, dict) and isinstance(actual_value, dict):
            assert_dict_subset(actual_value, expected_value, current_path)
        else:
            assert actual_value == expected_value, (
                f"Mismatch at {current_path}: "
                f"expected {expected_value!r}, got {actual_value!r}"
            )
