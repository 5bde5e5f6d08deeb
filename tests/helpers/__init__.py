"""Test helper utilities."""

from .console import assert_console_contains, capture_console_output
from .factories import (
    example_group,
    let,
    make_offense,
    make_result,
    sequence,
)
from .temp_files import temp_spec_file, temp_spec_tree

__all__ = [
    "assert_console_contains",
    "capture_console_output",
    "example_group",
    "let",
    "make_offense",
    "make_result",
    "sequence",
    "temp_spec_file",
    "temp_spec_tree",
]
