from __future__ import annotations

import pytest

from graphtutor.types import ErrorKind, Verdict, VerdictStatus, new_edge_id, new_vertex_id


@pytest.mark.parametrize("kind", list(ErrorKind))
def test_every_error_kind_has_a_message(kind: ErrorKind) -> None:
    assert kind.message
    assert kind.message.endswith(".")


def test_error_kind_values_are_stable() -> None:
    assert ErrorKind.NON_T_JOIN_DUPLICATE == "non_t_join_duplicate"
    assert ErrorKind("cycle") is ErrorKind.CYCLE


def test_verdict_constructors() -> None:
    accepted = Verdict.accept()
    rejected = Verdict.reject(ErrorKind.CYCLE)
    cleared = Verdict.cleared()

    assert accepted.accepted and not accepted.rejected
    assert rejected.rejected and rejected.error == ErrorKind.CYCLE
    assert cleared.status == VerdictStatus.CLEARED
    assert not cleared.accepted and not cleared.rejected
    assert cleared.error is None


def test_verdicts_compare_by_value() -> None:
    assert Verdict.reject(ErrorKind.CYCLE) == Verdict.reject(ErrorKind.CYCLE)
    assert Verdict.accept() != Verdict.cleared()


def test_ids_are_unique() -> None:
    assert new_vertex_id() != new_vertex_id()
    assert new_edge_id() != new_edge_id()
