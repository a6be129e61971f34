from datetime import date
import copy
import logging

from core_logic import parse_date, resolve_dates, sort_by_phase
from phases import default_phase_table
from timeline import compute_timeline, layout_task, view_mode_settings

logger = logging.getLogger(__name__)


def default_project_start(tasks, now=None):
    """Earliest real start or due date, else the earliest creation day, else today."""
    real_dates = []
    for task in tasks:
        for key in ('start_date', 'due_date'):
            parsed = parse_date(task.get(key))
            if parsed is not None:
                real_dates.append(parsed)
    if real_dates:
        return min(real_dates)

    created = [parse_date(task.get('created_at')) for task in tasks]
    created = [d for d in created if d is not None]
    if created:
        return min(created)

    return parse_date(now) if now is not None else date.today()


def build_gantt(tasks, view_mode, project_start=None, now=None, phase_table=default_phase_table):
    """
    Runs the whole timeline pipeline for one view mode.

    Tasks are ordered by phase, given real or estimated dates, then laid out
    against the axis computed for view_mode. The input tasks are not
    modified; each returned task is a copy with the timeline fields added.

    Returns {'tasks': [chart task, ...], 'timeline': {...}}.
    """
    view_mode_settings(view_mode)

    ordered = sort_by_phase(tasks, phase_table)
    if project_start is None:
        project_start = default_project_start(ordered, now)

    resolved = resolve_dates(ordered, project_start, now=now, phase_table=phase_table)

    chart_tasks = []
    for task in ordered:
        chart_task = copy.deepcopy(task)
        chart_task.update(resolved[task['id']])
        chart_tasks.append(chart_task)

    timeline = compute_timeline(chart_tasks, view_mode, now=now)
    for chart_task in chart_tasks:
        chart_task.update(layout_task(chart_task, timeline['range_start'], timeline['range_end']))

    flagged = sum(1 for t in chart_tasks if t['date_issue'])
    if flagged:
        logger.warning("%d of %d tasks have date problems.", flagged, len(chart_tasks))
    return {'tasks': chart_tasks, 'timeline': timeline}
