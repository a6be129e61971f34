from datetime import date, datetime
import json
import logging
import re

import pandas as pd

logger = logging.getLogger(__name__)

task_fields = ('id', 'title', 'status', 'priority', 'tags', 'start_date', 'due_date',
               'completion_percentage', 'created_at')

_TAG_SPLIT = re.compile(r'[,;]')


def load_project(filepath):
    """
    Reads a JSON project file.

    The file holds either a list of task dicts or an object with a "tasks"
    list and optional "project_name" / "project_start_date" keys.
    """
    try:
        with open(filepath, 'r') as f:
            project_data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"'{filepath}' is not valid JSON: {e}") from e

    if isinstance(project_data, list):
        project_data = {"tasks": project_data}
    if not isinstance(project_data, dict) or not isinstance(project_data.get("tasks"), list):
        raise ValueError(f"'{filepath}' does not contain a task list.")

    for i, task in enumerate(project_data["tasks"]):
        if not isinstance(task, dict):
            raise ValueError(f"Task {i + 1} in '{filepath}' is not an object.")
        if task.get('id') is None:
            task['id'] = i + 1

    return {
        "project_name": project_data.get("project_name", "Untitled Project"),
        "project_start_date": project_data.get("project_start_date"),
        "tasks": project_data["tasks"],
    }


def import_from_file(filepath, mapping=None):
    """
    Imports tasks from a CSV or Excel file.

    `mapping` maps task fields to column names; fields not mentioned are read
    from a column of the same name when the file has one. A 'title' column
    is required. Rows without a title are skipped.
    """
    lowered = str(filepath).lower()
    try:
        if lowered.endswith('.csv'):
            df = pd.read_csv(filepath)
        elif lowered.endswith('.xls') or lowered.endswith('.xlsx'):
            df = pd.read_excel(filepath)
        else:
            raise ValueError(f"Unsupported file type for '{filepath}'. Please select a CSV or Excel file.")
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise ValueError(f"An error occurred while reading the file: {e}") from e

    mapping = dict(mapping or {})
    for field, column in mapping.items():
        if column not in df.columns:
            raise ValueError(f"The column '{column}' selected for '{field}' does not exist in the file.")

    columns = {}
    for field in task_fields:
        column = mapping.get(field, field)
        if column in df.columns:
            columns[field] = column
    if 'title' not in columns:
        raise ValueError("You must map a column to 'title'.")

    tasks_data = []
    for index, row in df.iterrows():
        title = row[columns['title']]
        if pd.isna(title):
            continue  # Skip rows where the title is empty

        new_task = {field: None for field in task_fields}
        new_task['title'] = str(title)
        new_task['tags'] = []
        new_task['completion_percentage'] = 0

        for field, column in columns.items():
            value = row[column]
            if field == 'title' or _is_blank(value):
                continue
            if field == 'tags':
                new_task['tags'] = [t.strip() for t in _TAG_SPLIT.split(str(value)) if t.strip()]
            elif field == 'completion_percentage':
                new_task['completion_percentage'] = _percentage(value, index)
            elif field in ('start_date', 'due_date'):
                new_task[field] = value.date().isoformat() if isinstance(value, datetime) else str(value)
            elif field == 'created_at':
                new_task[field] = value.isoformat() if isinstance(value, (date, datetime)) else str(value)
            else:
                new_task[field] = _scalar(value)

        if new_task['id'] is None:
            new_task['id'] = index + 1
        tasks_data.append(new_task)

    logger.info("Imported %d tasks from %s", len(tasks_data), filepath)
    return tasks_data


def _is_blank(value):
    if isinstance(value, str):
        return not value.strip()
    return pd.isna(value)


def _scalar(value):
    # numpy scalars -> plain Python values
    if hasattr(value, 'item'):
        value = value.item()
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _percentage(value, index):
    try:
        percentage = int(float(value))
    except (TypeError, ValueError):
        logger.warning("Row %d: completion '%s' is not a number; using 0.", index + 2, value)
        return 0
    return min(100, max(0, percentage))
