"""
Unit tests for the importers module.

Tests cover:
- import_from_file: Reading tasks from CSV with and without a column mapping
- load_project: Reading JSON project files
"""

import pytest
import json
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from importers import import_from_file, load_project

CSV_TASKS = """id,title,status,tags,start_date,due_date,completion_percentage,created_at
1,Pour footings,todo,"foundation, concrete",2026-02-01,2026-02-10,50,2026-01-05T10:00:00Z
2,Frame walls,in_progress,structural,,,,
,,todo,,,,,
"""


class TestImportFromFile:
    """Tests for the import_from_file function."""

    def test_reads_task_columns(self, tmp_path):
        """Columns named after task fields are read directly."""
        path = tmp_path / "tasks.csv"
        path.write_text(CSV_TASKS)

        tasks = import_from_file(str(path))

        assert len(tasks) == 2
        footing, frame = tasks
        assert footing["id"] == 1
        assert footing["title"] == "Pour footings"
        assert footing["tags"] == ["foundation", "concrete"]
        assert footing["start_date"] == "2026-02-01"
        assert footing["due_date"] == "2026-02-10"
        assert footing["completion_percentage"] == 50
        assert footing["created_at"] == "2026-01-05T10:00:00Z"
        assert frame["id"] == 2
        assert frame["status"] == "in_progress"
        assert frame["tags"] == ["structural"]
        assert frame["start_date"] is None
        assert frame["completion_percentage"] == 0

    def test_column_mapping(self, tmp_path):
        """A mapping points fields at differently named columns; ids default to row numbers."""
        path = tmp_path / "plan.csv"
        path.write_text("Task Name,Stage,Start\nExcavate,site work;demolition,2026-01-12\nRoof,roofing,\n")

        tasks = import_from_file(str(path), {"title": "Task Name", "tags": "Stage", "start_date": "Start"})

        assert [t["id"] for t in tasks] == [1, 2]
        assert tasks[0]["tags"] == ["site work", "demolition"]
        assert tasks[0]["start_date"] == "2026-01-12"
        assert tasks[1]["start_date"] is None

    def test_mapping_to_missing_column(self, tmp_path):
        """Mapping a field to a column the file lacks is an error."""
        path = tmp_path / "plan.csv"
        path.write_text("Task Name\nExcavate\n")

        with pytest.raises(ValueError) as exc_info:
            import_from_file(str(path), {"title": "Name"})

        assert "'Name'" in str(exc_info.value)

    def test_title_required(self, tmp_path):
        path = tmp_path / "plan.csv"
        path.write_text("id,status\n1,todo\n")

        with pytest.raises(ValueError) as exc_info:
            import_from_file(str(path))

        assert "title" in str(exc_info.value)

    def test_unsupported_extension(self, tmp_path):
        path = tmp_path / "plan.txt"
        path.write_text("title\nExcavate\n")

        with pytest.raises(ValueError) as exc_info:
            import_from_file(str(path))

        assert "Unsupported file type" in str(exc_info.value)

    def test_bad_completion_defaults_to_zero(self, tmp_path):
        path = tmp_path / "plan.csv"
        path.write_text("title,completion_percentage\nExcavate,lots\nPour,150\n")

        tasks = import_from_file(str(path))

        assert [t["completion_percentage"] for t in tasks] == [0, 100]


class TestLoadProject:
    """Tests for the load_project function."""

    def test_project_object(self, tmp_path):
        path = tmp_path / "house.json"
        path.write_text(json.dumps({
            "project_name": "House",
            "project_start_date": "01-01-2026",
            "tasks": [{"id": "a", "title": "Excavate", "tags": ["site work"]}],
        }))

        project = load_project(str(path))

        assert project["project_name"] == "House"
        assert project["project_start_date"] == "01-01-2026"
        assert project["tasks"][0]["id"] == "a"

    def test_bare_task_list_gets_ids(self, tmp_path):
        """A plain list is accepted and missing ids are numbered."""
        path = tmp_path / "tasks.json"
        path.write_text(json.dumps([{"title": "Excavate"}, {"title": "Pour"}]))

        project = load_project(str(path))

        assert project["project_name"] == "Untitled Project"
        assert project["project_start_date"] is None
        assert [t["id"] for t in project["tasks"]] == [1, 2]

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        with pytest.raises(ValueError):
            load_project(str(path))

    def test_missing_task_list(self, tmp_path):
        path = tmp_path / "empty.json"
        path.write_text(json.dumps({"project_name": "House"}))

        with pytest.raises(ValueError) as exc_info:
            load_project(str(path))

        assert "task list" in str(exc_info.value)
