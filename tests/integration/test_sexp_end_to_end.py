"""End-to-end tests on parser-gem JSON s-expression dumps."""

import json

from let_override_checker.analyzer import InputFormat, analyze_file
from tests.helpers.temp_files import temp_spec_file


def _let(name: object, value: int, *, method: str = "let") -> list[object]:
    return ["block", ["send", None, method, name], ["args"], ["int", value]]


def _group(method: str, *body: list[object], receiver: object = None) -> list[object]:
    if not body:
        statements = None
    elif len(body) == 1:
        statements = body[0]
    else:
        statements = ["begin", *body]
    return ["block", ["send", receiver, method], ["args"], statements]


RSPEC = ["const", None, "RSpec"]


def test_override_from_dump() -> None:
    """Test that the parser-gem shape of the basic override is reported."""
    dump = _group(
        "describe",
        _let(["sym", "foo"], 1),
        _group("context", _let(["sym", "foo"], 2)),
        receiver=RSPEC,
    )
    with temp_spec_file(json.dumps(dump), suffix=".json") as path:
        result = analyze_file(str(path))

    assert result.error is None
    assert len(result.offenses) == 1
    assert result.offenses[0].location is None
    assert str(result.offenses[0].let_name) == ":foo"


def test_local_variable_from_dump() -> None:
    """Test that lvar names stay indeterminate."""
    dump = _group(
        "describe",
        ["lvasgn", "name", ["sym", "foo"]],
        _let(["lvar", "name"], 1),
        _group("context", _let(["lvar", "name"], 2, method="let!")),
        receiver=RSPEC,
    )
    with temp_spec_file(json.dumps(dump), suffix=".json") as path:
        result = analyze_file(str(path))

    assert result.error is None
    assert result.offenses == ()


def test_explicit_sexp_input_format() -> None:
    """Test forcing the s-expression reader regardless of suffix."""
    dump = _group("describe", _let(["str", "foo"], 1), _group("context", _let(["sym", "foo"], 2)))
    with temp_spec_file(json.dumps(dump), suffix=".txt") as path:
        result = analyze_file(str(path), InputFormat.SEXP)

    assert len(result.offenses) == 1


def test_interpolated_name_is_an_error() -> None:
    """Test that a dsym name aborts the file with an error."""
    dump = _group("describe", _let(["dsym", ["str", "foo_"], ["begin", ["lvar", "x"]]], 1))
    with temp_spec_file(json.dumps(dump), suffix=".json") as path:
        result = analyze_file(str(path))

    assert result.offenses == ()
    assert result.error is not None
    assert "dsym" in result.error


def test_namespaced_rspec_receiver_from_dump() -> None:
    """Test that Foo::RSpec.describe is not an example group, while ::RSpec.describe is."""
    namespaced = ["const", ["const", None, "Foo"], "RSpec"]
    top_level = ["const", ["cbase"], "RSpec"]
    dump = [
        "begin",
        _group(
            "describe",
            _let(["sym", "foo"], 1),
            _group("describe", _let(["sym", "foo"], 2), receiver=namespaced),
            receiver=namespaced,
        ),
        _group(
            "describe",
            _let(["sym", "bar"], 1),
            _group("context", _let(["sym", "bar"], 2)),
            receiver=top_level,
        ),
    ]
    with temp_spec_file(json.dumps(dump), suffix=".json") as path:
        result = analyze_file(str(path))

    assert result.error is None
    assert [str(o.let_name) for o in result.offenses] == [":bar"]
