"""
Tests for CSV exports and filename sanitizing.
"""

import csv

import pytest

from worktimer.domain.models import Task, TaskState
from worktimer.services.export_service import EXPORT_ALL_FILENAME, ExportService
from worktimer.utils import sanitize_filename

HEADER = ["Task", "Project", "Duration (HH:MM:SS)", "Status"]


def read_rows(path):
    with open(path, newline='', encoding='utf-8') as f:
        return list(csv.reader(f))


@pytest.fixture
def exporter(tmp_path, engine):
    return ExportService(tmp_path / "exports", engine=engine)


class TestSanitizer:
    def test_reserved_characters_replaced(self):
        assert sanitize_filename('a/b\\c?d%e*f:g|h"i<j>k.l m') == "a_b_c_d_e_f_g_h_i_j_k_l_m"

    def test_other_characters_pass_through(self):
        assert sanitize_filename("Überstunden-Plan_2026") == "Überstunden-Plan_2026"
        assert sanitize_filename("日本語") == "日本語"


class TestExportAll:
    def test_zero_tasks_writes_header_only(self, exporter):
        path = exporter.export_all([])
        assert path.name == EXPORT_ALL_FILENAME
        assert read_rows(path) == [HEADER]

    def test_one_row_per_task(self, exporter, engine, clock):
        running = Task(description="Write report", folder="Work")
        engine.start(running)
        clock.advance(65)
        paused = Task(description="Plan, then \"ship\"", total_duration=30, state=TaskState.PAUSED)
        done = Task(description="Review", folder="Work", total_duration=3600, state=TaskState.COMPLETED)
        idle = Task(description="Later", folder="Home")

        rows = read_rows(exporter.export_all([running, paused, done, idle]))

        assert rows == [
            HEADER,
            ["Write report", "Work", "00:01:05", "Running"],
            ['Plan, then "ship"', "Uncategorized", "00:00:30", "Paused"],
            ["Review", "Work", "01:00:00", "Completed"],
            ["Later", "Home", "00:00:00", "Stopped"],
        ]

    def test_project_column_can_be_dropped(self, tmp_path, engine):
        exporter = ExportService(tmp_path, engine=engine, include_project_column=False)
        rows = read_rows(exporter.export_all([Task(description="Review", folder="Work")]))
        assert rows == [["Task", "Duration (HH:MM:SS)", "Status"], ["Review", "00:00:00", "Stopped"]]


class TestExportFolder:
    def test_only_exact_folder_matches(self, exporter):
        tasks = [
            Task(description="A", folder="Work"),
            Task(description="B", folder="Work stuff"),
            Task(description="C"),
            Task(description="D", folder="Work"),
        ]
        path = exporter.export_folder("Work", tasks)
        rows = read_rows(path)
        assert [r[0] for r in rows[1:]] == ["A", "D"]

    def test_filename_is_sanitized(self, exporter):
        path = exporter.export_folder("Client: A/B", [])
        assert path.name == "folder_Client__A_B.csv"


class TestExportTask:
    def test_colliding_names_get_suffixes(self, exporter):
        first = Task(description="notes")
        second = Task(description="notes")
        third = Task(description="notes.")

        assert exporter.export_task(first).name == "notes.csv"
        assert exporter.export_task(second).name == "notes_1.csv"
        assert exporter.export_task(third).name == "notes_.csv"

        assert read_rows(exporter.export_dir / "notes.csv") == [HEADER, ["notes", "Uncategorized", "00:00:00", "Stopped"]]
        assert read_rows(exporter.export_dir / "notes_1.csv") == [HEADER, ["notes", "Uncategorized", "00:00:00", "Stopped"]]

    def test_export_records_file_on_task(self, exporter):
        task = Task(description="Write report")
        path = exporter.export_task(task)
        assert task.export_file == path.name == "Write_report.csv"

    def test_reexport_overwrites_own_file(self, exporter):
        task = Task(description="notes", total_duration=10, state=TaskState.PAUSED)
        exporter.export_task(task)
        task.total_duration = 20
        path = exporter.export_task(task)
        assert path.name == "notes.csv"
        assert sorted(p.name for p in exporter.export_dir.glob("*.csv")) == ["notes.csv"]
        assert read_rows(path)[1][2] == "00:00:20"

    def test_renamed_task_gets_new_file(self, exporter):
        task = Task(description="notes")
        exporter.export_task(task)
        task.description = "minutes"
        assert exporter.export_task(task).name == "minutes.csv"


class TestDiscard:
    def test_discard_task_export_removes_only_own_file(self, exporter):
        first = Task(description="notes")
        second = Task(description="notes")
        exporter.export_task(first)
        exporter.export_task(second)

        assert exporter.discard_task_export(second)
        assert (exporter.export_dir / "notes.csv").exists()
        assert not (exporter.export_dir / "notes_1.csv").exists()

    def test_discard_missing_file_is_ignored(self, exporter):
        task = Task(description="never exported")
        assert not exporter.discard_task_export(task)
        task.export_file = "gone.csv"
        assert not exporter.discard_task_export(task)

    def test_discard_all_exports(self, exporter):
        exporter.export_all([])
        exporter.export_folder("Work", [])
        exporter.export_task(Task(description="x"))
        (exporter.export_dir / "keep.txt").write_text("not a report")

        assert exporter.discard_all_exports() == 3
        assert [p.name for p in exporter.export_dir.iterdir()] == ["keep.txt"]
