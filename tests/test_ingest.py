import io
from pathlib import Path

import pytest

from program_ingester.errors import IngestError, InvalidInput, InvalidTimestamp, IoFailure
from program_ingester.ingest import Ingester


def test_from_path_reads_every_line(suite_path: Path) -> None:
    ingester = Ingester.from_path(suite_path)
    assert len(ingester.records) == 12
    assert ingester.records[0].id == "Productivity_Suite"
    assert ingester.records[-1].parent_id == "Billing"


def test_from_stream_strips_crlf() -> None:
    stream = io.StringIO(
        "2023-01-01T00:00:00Z 2023-02-01T00:00:00Z P1 Done A null->root\r\n"
        "2023-01-01T00:00:00Z 2023-02-01T00:00:00Z P1 Done A root->leaf\r\n"
    )
    ingester = Ingester.from_stream(stream)
    assert [record.id for record in ingester.records] == ["root", "leaf"]


def test_graph_from_ingester(suite_lines: list[str]) -> None:
    graph = Ingester.from_lines(suite_lines).graph()
    assert [program.id for program in graph.programs] == ["program_2", "program_1"]


def test_blank_line_aborts_batch(suite_lines: list[str]) -> None:
    lines = suite_lines[:3] + [""] + suite_lines[3:]
    with pytest.raises(InvalidInput) as excinfo:
        Ingester.from_lines(lines)
    assert str(excinfo.value).startswith("line 4: ")


def test_bad_timestamp_reports_line_number(suite_lines: list[str]) -> None:
    lines = list(suite_lines)
    lines[1] = lines[1].replace("2023-06-30T00:00:00.000Z", "2023-06-31T00:00:00.000Z")
    with pytest.raises(InvalidTimestamp) as excinfo:
        Ingester.from_lines(lines)
    assert str(excinfo.value).startswith("line 2: ")
    assert excinfo.value.lineno == 2
    assert excinfo.value.value == "2023-06-31T00:00:00.000Z"


def test_missing_file_is_io_failure(tmp_path: Path) -> None:
    with pytest.raises(IoFailure):
        Ingester.from_path(tmp_path / "missing.log")


def test_non_utf8_file_is_io_failure(tmp_path: Path) -> None:
    path = tmp_path / "latin1.log"
    path.write_bytes(b"2023-01-01T00:00:00Z 2023-02-01T00:00:00Z P1 Done \xff null->a\n")
    with pytest.raises(IoFailure):
        Ingester.from_path(path)


def test_failing_line_source_is_io_failure() -> None:
    def lines():
        yield "2023-01-01T00:00:00Z 2023-02-01T00:00:00Z P1 Done A null->a"
        raise OSError("disk went away")

    with pytest.raises(IoFailure, match="line 2") as excinfo:
        Ingester.from_lines(lines())
    assert isinstance(excinfo.value, IngestError)


def test_from_stdin(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "sys.stdin", io.StringIO("2023-01-01T00:00:00Z 2023-02-01T00:00:00Z P1 Done A null->a\n")
    )
    ingester = Ingester.from_stdin()
    assert [record.id for record in ingester.records] == ["a"]
