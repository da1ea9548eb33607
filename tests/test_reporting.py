"""Tests for result rendering."""

import io
import json

from rich.console import Console
from rich.table import Table

from cmdsweep.execution.runner import CommandResult
from cmdsweep.reporting import build_summary_table, results_to_json, write_results


def _results():
    return [
        CommandResult(
            command="neutron lbaas-loadbalancer-create --name lb1",
            seqnum=1,
            output={"id": "lb-1"},
            exitcode=0,
            duration=1.0,
            checked="lb-1: ACTIVE",
            checked_duration=4.0,
        ),
        CommandResult(
            command="neutron lbaas-loadbalancer-create --name lb2",
            seqnum=2,
            error="Quota exceeded\nexit status 1",
            exitcode=1,
            duration=0.5,
        ),
    ]


class TestResultsToJson:
    def test_ordered_records(self):
        data = json.loads(results_to_json(_results()))
        assert [d["seqnum"] for d in data] == [1, 2]
        assert data[0]["output"] == {"id": "lb-1"}
        assert data[1]["exitcode"] == 1
        assert data[1]["success"] == ""

    def test_empty(self):
        assert json.loads(results_to_json([])) == []


class TestWriteResults:
    def test_writes_file(self, tmp_path):
        path = write_results(_results(), tmp_path / "out" / "results.json")
        assert path.exists()
        assert len(json.loads(path.read_text())) == 2


class TestSummaryTable:
    def test_one_row_per_result(self):
        table = build_summary_table(_results())
        assert isinstance(table, Table)
        assert table.row_count == 2

    def test_brackets_rendered_literally(self):
        results = [
            CommandResult(
                command="neutron lbaas-pool-create --name [bold]p1",
                seqnum=1,
                exitcode=0,
                checked="Failed to check execution: [bold]denied",
            )
        ]
        console = Console(file=io.StringIO(), width=200)
        console.print(build_summary_table(results))
        rendered = console.file.getvalue()
        assert "--name [bold]p1" in rendered
        assert "[bold]denied" in rendered
