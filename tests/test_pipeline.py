import sys

import pytest

from tableref import (
    CellOptions,
    CellRecord,
    CellReferenceError,
    EngineOptions,
    GridStage,
    ReferenceCycleError,
    TableEngine,
    TagDescriptor,
    build_from_rows,
)
from tableref.dto.cell import CellKind
from tableref.interpreters.formulas import DEFAULT_REDUCERS


def _texts(grid):
    return [[cell.text for cell in row] for row in grid.rows]


def test_full_read(engine) -> None:
    grid = engine.build([["2", "3", "{#0-0}+{#0-1}", "=SUM(#0-0:0-1)"]])
    assert _texts(grid) == [["2", "3", "5", "5"]]
    assert grid.stage == GridStage.FORMULA_RESOLVED


def test_report_counts_changes(engine) -> None:
    grid = build_from_rows([["<Main>x", "{1+1}", "=SUM(1, 2)", "plain"]])
    report = engine.read(grid)
    assert report.ok
    assert report.stage == GridStage.FORMULA_RESOLVED
    assert report.changed == {
        GridStage.TAG_RESOLVED: 1,
        GridStage.SEQUENCE_RESOLVED: 1,
        GridStage.FORMULA_RESOLVED: 1,
    }


def test_forward_references_resolve_first(engine) -> None:
    grid = engine.build([["{#0-1}", "{#0-2}", "7"], ["=SUM(#1-1)", "=SUM(1, 2)"]])
    assert _texts(grid) == [["7", "7", "7"], ["3", "3"]]


def test_formula_sees_sequence_results(engine) -> None:
    grid = engine.build([["{1+1}", "{#0-0*3}", "=SUM(#0-0:0-1)"]])
    assert _texts(grid) == [["2", "6", "8"]]


def test_tag_output_is_interpreted(engine) -> None:
    engine.add_tag(TagDescriptor(name="Three", callback=lambda args: "{1+2}"))
    assert _texts(engine.build([["<Three>"]])) == [["3"]]


def test_cycles_raise(engine) -> None:
    with pytest.raises(ReferenceCycleError) as exc_info:
        engine.build([["{#0-1}", "{#0-0}"]])
    assert exc_info.value.chain[0] == exc_info.value.chain[-1]

    with pytest.raises(ReferenceCycleError):
        engine.build([["{#0-0}"]])


def test_reference_depth_is_limited() -> None:
    engine = TableEngine(EngineOptions(strict=True, max_reference_depth=2))
    with pytest.raises(CellReferenceError):
        engine.build([["{#0-1}", "{#0-2}", "{#0-3}", "1"]])


def test_non_strict_reports_failures() -> None:
    engine = TableEngine(EngineOptions(strict=False))
    grid = build_from_rows([["{#5-5}", "{1+1}"]])
    report = engine.read(grid)
    assert not report.ok
    assert len(report.failures) == 1
    failure = report.failures[0]
    assert failure.error == "CellReferenceError"
    assert failure.stage == GridStage.SEQUENCE_RESOLVED
    assert _texts(grid) == [["{#5-5}", "2"]]


def test_refresh_is_idempotent(engine) -> None:
    engine.add_tag(
        TagDescriptor(
            name="Mark",
            attributes=[("data-m", "1")],
            events=[("click", print)],
            kind=CellKind.HEADER,
        )
    )
    grid = engine.build([["<Mark>{2*2}", "=SUM(#0-0)"]])
    first = _texts(grid)
    engine.refresh(grid)
    engine.refresh(grid)
    assert _texts(grid) == first == [["4", "4"]]
    cell = grid.cell_at(0, 0)
    assert cell.kind == CellKind.HEADER
    assert cell.attributes == {"data-m": "1"}
    assert len(cell.events) == 1


def test_refresh_starts_from_origin(engine) -> None:
    grid = engine.build([["2", "{#0-0+1}"]])
    cell = grid.cell_at(1, 0)
    cell.text = "edited"
    assert engine.origins.diverged(grid) == [cell]

    engine.refresh(grid)
    assert cell.text == "3"
    assert engine.origins.diverged(grid) == []


def test_rewrite_changes_origin(engine) -> None:
    grid = engine.build([["2", "{#0-0+1}"]])
    assert engine.origins.rewrite(grid, 0, 0, "10")
    assert grid.stage == GridStage.RAW
    engine.refresh(grid)
    assert _texts(grid) == [["10", "11"]]
    assert engine.origins.origin_of(grid, 0, 0) == "10"
    assert not engine.origins.rewrite(grid, 5, 5, "x")


def test_uninterpreted_cells_are_left_alone(engine) -> None:
    grid = build_from_rows([["{#0-1*2}"]])
    for text in ("4", "{1+3}"):
        x = grid.row_length(0)
        grid.rows[0].append(CellRecord.create(x, 0, text, options=CellOptions(interpret=False)))
    engine.read(grid)
    assert _texts(grid) == [["8", "4", "{1+3}"]]


def test_engines_do_not_share_registries() -> None:
    first, second = TableEngine(), TableEngine(EngineOptions(default_tags=False))
    first.add_formula("DOUBLE", lambda values: sum(values) * 2)
    first.add_tag(TagDescriptor(name="Hi", callback=lambda args: "hi"))

    assert "DOUBLE" not in second.formulas.reducers
    assert "DOUBLE" not in DEFAULT_REDUCERS
    assert [d.name for d in first.tags.descriptors] == ["Main", "Hi"]
    assert second.tags.descriptors == []


def test_custom_formula_in_fragments_and_cells() -> None:
    engine = TableEngine(EngineOptions(strict=True))
    engine.add_formula("DOUBLE", lambda values: sum(values) * 2)
    assert _texts(engine.build([["{DOUBLE(2)}", "=DOUBLE(#0-0)"]])) == [["4", "8"]]


def test_non_strict_reports_every_cell_of_a_cycle() -> None:
    engine = TableEngine(EngineOptions(strict=False))
    grid = build_from_rows([["{#0-1}", "{#0-0}", "{#0-0}+1", "{2*3}"]])
    report = engine.read(grid)

    failed = {failure.address.to_selector() for failure in report.failures}
    assert failed == {"#0-0", "#0-1", "#0-2"}
    assert all(f.error == "ReferenceCycleError" for f in report.failures)
    assert _texts(grid) == [["{#0-1}", "{#0-0}", "{#0-0}+1", "6"]]


def test_failing_reducer_keeps_the_formula(engine) -> None:
    engine.add_formula("BROKEN", lambda values: 1 / 0)
    grid = engine.build([["=BROKEN(1)", "{BROKEN(1)}", "=SUM(1, 1)"]])
    assert _texts(grid) == [["=BROKEN(1)", "BROKEN(1)", "2"]]


@pytest.mark.skipif(
    not hasattr(sys, "get_int_max_str_digits"),
    reason="int to str conversion has no digit limit on this interpreter",
)
def test_results_too_large_to_display_are_left_alone(engine) -> None:
    engine.add_formula("HUGE", lambda values: 10 ** 5000)
    grid = engine.build([["{FACTORIAL(1000)*FACTORIAL(1000)}", "=HUGE(1)", "{1+1}"]])
    assert _texts(grid) == [["FACTORIAL(1000)*FACTORIAL(1000)", "=HUGE(1)", "2"]]
