"""Main analysis orchestrator for overridden ``let`` detection."""

import logging
from enum import StrEnum
from pathlib import Path

from let_override_checker.errors import SyntaxLoadError, UnsupportedNodeError
from let_override_checker.frontends.ruby import parse_ruby_from_file, parse_ruby_from_source
from let_override_checker.frontends.sexp import parse_sexp_from_file
from let_override_checker.models import AnalysisResult, SyntaxNode
from let_override_checker.syntax_visitors.overriding_let import OverridingLetChecker

logger = logging.getLogger(__name__)


class InputFormat(StrEnum):
    """How to read an input file."""

    AUTO = "auto"
    RUBY = "ruby"
    SEXP = "sexp"


def analyze_tree(tree: SyntaxNode, filename: str = "spec.rb") -> AnalysisResult:
    """Run the check over an already built syntax tree.

    Unlike the file-level entry points, this lets ``UnsupportedNodeError``
    propagate to the caller.

    Args:
        tree: Root of the syntax tree
        filename: File name recorded in the result

    Returns:
        AnalysisResult with offenses in source order

    Raises:
        UnsupportedNodeError: If some ``let`` name has an unrecognized shape
    """
    checker = OverridingLetChecker(tree)
    checker.visit(tree)
    logger.debug(
        "Checked %d example group(s), found %d overridden let(s)", checker.scopes_checked, len(checker.offenses)
    )
    return AnalysisResult(
        file_path=filename,
        offenses=tuple(checker.offenses),
        scopes_checked=checker.scopes_checked,
    )


def analyze_source(source: str, filename: str = "spec.rb") -> AnalysisResult:
    """Parse Ruby source and run the check over it.

    Syntax errors and unsupported ``let`` name shapes are reported through
    ``AnalysisResult.error`` rather than raised.
    """
    try:
        tree = parse_ruby_from_source(source, filename)
        return analyze_tree(tree, filename)
    except (SyntaxLoadError, UnsupportedNodeError) as e:
        logger.debug("Analysis of %s failed: %s", filename, e)
        return AnalysisResult(file_path=filename, error=str(e))


def _detect_format(file_path: Path) -> InputFormat:
    return InputFormat.SEXP if file_path.suffix == ".json" else InputFormat.RUBY


def analyze_file(file_path: str, input_format: InputFormat = InputFormat.AUTO) -> AnalysisResult:
    """Complete analysis pipeline for a single file.

    Args:
        file_path: Ruby spec file, or a JSON s-expression dump of one
        input_format: Input format; AUTO picks by file suffix

    Returns:
        AnalysisResult with offenses in source order, or with ``error`` set if
        the file could not be loaded or contains an unsupported ``let`` name
    """
    file_path_obj = Path(file_path)
    if input_format is InputFormat.AUTO:
        input_format = _detect_format(file_path_obj)
    logger.debug("Analyzing %s as %s", file_path, input_format)

    try:
        if input_format is InputFormat.SEXP:
            tree = parse_sexp_from_file(file_path_obj)
        else:
            tree = parse_ruby_from_file(file_path_obj)
        return analyze_tree(tree, file_path)
    except (SyntaxLoadError, UnsupportedNodeError) as e:
        logger.debug("Analysis of %s failed: %s", file_path, e)
        return AnalysisResult(file_path=file_path, error=str(e))
