from datetime import date
import logging

import config
from core_logic import (add_days, days_between, parse_date,
                        start_of_month, start_of_quarter, start_of_week, start_of_year)

logger = logging.getLogger(__name__)

_ALIGNERS = {
    'week': start_of_week,
    'month': start_of_month,
    'quarter': start_of_quarter,
    'year': start_of_year,
}


def view_mode_settings(view_mode):
    """Returns the config row for a view mode. An unknown mode is a caller error."""
    try:
        return config.view_modes[view_mode]
    except (KeyError, TypeError):
        raise ValueError(
            f"Unknown view mode {view_mode!r}. Expected one of: {', '.join(config.view_modes)}."
        ) from None


def align_range_start(day, view_mode):
    align = view_mode_settings(view_mode)['align']
    if align is None:
        return day
    return _ALIGNERS[align](day)


def unit_start(range_start, view_mode, index):
    """Start of the index-th axis unit, always counted from range_start to avoid drift."""
    return range_start + view_mode_settings(view_mode)['step'] * index


def unit_label(day, view_mode):
    pattern = view_mode_settings(view_mode)['label']
    pattern = pattern.format(quarter=(day.month - 1) // 3 + 1)
    return day.strftime(pattern)


def compute_timeline(chart_tasks, view_mode, now=None):
    """
    Derives the visible date range and the axis units for a view mode.

    The range runs from the earliest effective start (snapped to the mode's
    boundary) to the latest effective end. With no tasks it covers the 30
    days from today. Units are generated until one would start after the
    range end, which for the fixed-length modes is ceil(span / unit length)
    units and for the calendar modes is one unit per calendar month,
    quarter or year touched.
    """
    view_mode_settings(view_mode)

    if chart_tasks:
        earliest = min(task['effective_start'] for task in chart_tasks)
        latest = max(task['effective_end'] for task in chart_tasks)
    else:
        earliest = parse_date(now) if now is not None else date.today()
        latest = add_days(earliest, config.empty_range_days)

    range_start = align_range_start(earliest, view_mode)
    range_end = latest

    units = []
    index = 0
    current = range_start
    while current <= range_end:
        units.append({'start': current, 'label': unit_label(current, view_mode)})
        index += 1
        current = unit_start(range_start, view_mode, index)

    logger.debug("Timeline %s: %s to %s in %d units.", view_mode, range_start, range_end, len(units))
    return {
        'view_mode': view_mode,
        'range_start': range_start,
        'range_end': range_end,
        'units': units,
    }


def layout_task(chart_task, range_start, range_end):
    """
    Places a task's bar on the timeline as percentages of the visible range.

    The width never drops below config.min_visible_width_percent so short
    tasks stay visible; duration_days is not affected by that. The due
    marker is only set when the task carries a readable due date.
    """
    total_days = max(1, days_between(range_start, range_end) + 1)
    start_offset = max(0, days_between(range_start, chart_task['effective_start']))
    duration_days = max(1, days_between(chart_task['effective_start'], chart_task['effective_end']))

    start_percentage = start_offset / total_days * 100
    width_percentage = max(config.min_visible_width_percent, duration_days / total_days * 100)

    due_date = parse_date(chart_task.get('due_date'))
    due_marker_percentage = None
    if due_date is not None:
        due_marker_percentage = max(0, days_between(range_start, due_date)) / total_days * 100

    return {
        'start_percentage': start_percentage,
        'width_percentage': width_percentage,
        'duration_days': duration_days,
        'due_marker_percentage': due_marker_percentage,
    }
