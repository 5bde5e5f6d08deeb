"""Console testing utilities."""

from collections.abc import Iterator
from contextlib import contextmanager
from io import StringIO

from rich.console import Console


@contextmanager
def capture_console_output(width: int = 100) -> Iterator[tuple[Console, StringIO]]:
    """Yield a non-terminal Console writing into a StringIO buffer.

    Example:
        with capture_console_output() as (console, output):
            display_results(console, results)
        assert "Summary" in output.getvalue()

    """
    output = StringIO()
    yield Console(file=output, force_terminal=False, color_system=None, width=width), output


def assert_console_contains(output: StringIO, *expected_texts: str) -> None:
    """Assert that every fragment appears somewhere in the captured output."""
    rendered = output.getvalue()
    missing = [text for text in expected_texts if text not in rendered]
    assert not missing, f"Missing {missing!r} in output: {rendered!r}"
