from __future__ import annotations

import pytest

from graphtutor import exceptions


def test_base_error_message() -> None:
    err = exceptions.GraphTutorError("something broke")
    assert err.format_user_message() == "something broke"
    assert err.get_suggestion() is None


def test_unknown_label_fuzzy_match() -> None:
    err = exceptions.UnknownLabelError("Alpah", ["Alpha", "Beta"])
    message = err.format_user_message()
    assert "No vertex labelled 'Alpah'" in message
    assert "Did you mean: 'Alpha'?" in message
    assert err.get_suggestion() == "Available vertices: Alpha, Beta"


def test_unknown_label_without_candidates() -> None:
    err = exceptions.UnknownLabelError("X")
    assert err.format_user_message() == "No vertex labelled 'X'"
    assert err.get_suggestion() is None


@pytest.mark.parametrize(
    "error_cls",
    [exceptions.TrailLimitError, exceptions.MatchingLimitError],
)
def test_limit_errors_suggest_config(error_cls: type[exceptions.SolverLimitError]) -> None:
    err = error_cls("too many")
    assert isinstance(err, exceptions.SolverLimitError)
    suggestion = err.get_suggestion()
    assert suggestion is not None
    assert "solver configuration" in suggestion


def test_hierarchy() -> None:
    assert issubclass(exceptions.UnknownCandidateError, exceptions.GraphError)
    assert issubclass(exceptions.GraphError, exceptions.GraphTutorError)
    assert issubclass(exceptions.ConfigError, exceptions.GraphTutorError)
    assert issubclass(exceptions.GraphDocumentError, exceptions.GraphTutorError)


def test_invalid_matrix_error_is_not_a_graph_error() -> None:
    err = exceptions.InvalidMatrixError("bad table")
    assert isinstance(err, exceptions.GraphTutorError)
    assert not isinstance(err, exceptions.GraphError)
    suggestion = err.get_suggestion()
    assert suggestion is not None
    assert "symmetric" in suggestion
