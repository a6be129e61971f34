from datetime import date, datetime, time, timedelta
import collections
import logging

import pandas as pd
from dateutil.relativedelta import relativedelta

import config
from phases import classify_phase, default_phase_table

logger = logging.getLogger(__name__)

DUE_BEFORE_START = 'due_before_start'
UNPARSEABLE_DATE = 'unparseable_date'

# --- Date Helpers ---

def parse_date(value):
    """
    Converts a date-like value to a datetime.date, or None if it can't be read.

    Accepts dates, datetimes (including pandas Timestamps) and ISO 8601
    strings. Anything else, such as a bare month name, reads as None.
    Only the calendar day is kept; an offset in a timestamp string is not
    converted, the written day is used as-is.
    """
    if value is None or value is pd.NaT:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    parsed = pd.to_datetime(value.strip(), format='ISO8601', errors='coerce')
    if pd.isna(parsed):
        return None
    return parsed.date()


def parse_timestamp(value):
    """Like parse_date, but keeps the time of day. Returns a naive datetime or None."""
    if value is None or value is pd.NaT:
        return None
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime.combine(value, time())
    if not isinstance(value, str) or not value.strip():
        return None
    parsed = pd.to_datetime(value.strip(), format='ISO8601', errors='coerce')
    if pd.isna(parsed):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.tz_localize(None)
    return parsed.to_pydatetime()


def days_between(start_date, end_date):
    return (end_date - start_date).days


def add_days(start_date, days):
    return start_date + timedelta(days=days)


def start_of_week(day):
    return day + relativedelta(weekday=config.week_start(-1))


def start_of_month(day):
    return day + relativedelta(day=1)


def start_of_quarter(day):
    return day + relativedelta(month=3 * ((day.month - 1) // 3) + 1, day=1)


def start_of_year(day):
    return day + relativedelta(month=1, day=1)


def check_date_order(start_date, due_date):
    """True unless both dates are present and the due date falls before the start date."""
    start_date = parse_date(start_date)
    due_date = parse_date(due_date)
    if start_date is None or due_date is None:
        return True
    return start_date <= due_date


def _supplied(value):
    if isinstance(value, str):
        return bool(value.strip())
    return value is not None and not pd.isna(value)


# --- Phase Ordering ---

def sort_by_phase(tasks, phase_table=default_phase_table):
    """
    Returns a new list ordered by construction phase, then by created_at.

    Tasks with no phase go last. Within a phase, tasks without a readable
    created_at come after the dated ones. The sort is stable, so tasks with
    equal keys keep their input order.
    """
    keyed = []
    for task in tasks:
        rank = phase_table.rank(classify_phase(task.get('tags'), phase_table))
        created = parse_timestamp(task.get('created_at'))
        keyed.append(((rank, created is None, created or datetime.min), task))
    keyed.sort(key=lambda pair: pair[0])
    return [task for _, task in keyed]


# --- Date Synthesis ---

def resolve_dates(tasks, project_start, now=None, phase_table=default_phase_table):
    """
    Works out the start and end date every task is drawn with.

    Tasks carrying a start and/or due date keep them; a missing side is
    filled with the default span. Tasks with neither are packed into their
    phase's window: the Nth undated task of a phase starts at
    project_start + window_start + N * spacing and lasts the phase's
    duration. Undated tasks without a phase start on their created_at day
    (or `now` when that is missing), but never before the last phase window
    has ended; several such tasks are staggered by other_phase_spacing.

    Returns {task_id: {'phase', 'effective_start', 'effective_end',
    'has_actual_dates', 'date_issue'}}.
    """
    anchor = parse_date(project_start)
    if anchor is None:
        raise ValueError(f"Invalid project start date: {project_start!r}")
    today = parse_date(now) if now is not None else date.today()
    span = config.default_span_days

    resolved = {}
    undated_in_phase = collections.Counter()

    for task in sort_by_phase(tasks, phase_table):
        task_id = task['id']
        phase = classify_phase(task.get('tags'), phase_table)
        raw_start, raw_due = task.get('start_date'), task.get('due_date')
        start_date, due_date = parse_date(raw_start), parse_date(raw_due)
        date_issue = None

        if (_supplied(raw_start) and start_date is None) or (_supplied(raw_due) and due_date is None):
            logger.warning("Task %s has an unreadable date (start=%r, due=%r); treating it as missing.",
                           task_id, raw_start, raw_due)
            date_issue = UNPARSEABLE_DATE

        if start_date is not None or due_date is not None:
            has_actual_dates = True
            if start_date is None:
                start_date = add_days(due_date, -span)
            elif due_date is None:
                due_date = add_days(start_date, span)
            elif not check_date_order(start_date, due_date):
                logger.warning("Task %s is due %s, before its start %s.", task_id, due_date, start_date)
                date_issue = DUE_BEFORE_START
                due_date = start_date
        elif phase is None:
            has_actual_dates = False
            slot = undated_in_phase[None]
            undated_in_phase[None] += 1
            floor = add_days(anchor, phase_table.other_window_start + slot * config.other_phase_spacing)
            created = parse_date(task.get('created_at')) or today
            start_date = max(created, floor)
            due_date = add_days(start_date, span)
            logger.debug("Task %s has no phase; anchored on %s.", task_id, start_date)
        else:
            has_actual_dates = False
            profile = phase_table.profile(phase)
            slot = undated_in_phase[phase]
            undated_in_phase[phase] += 1
            start_date = add_days(anchor, profile.window_start + slot * profile.spacing)
            due_date = add_days(start_date, profile.duration)
            logger.debug("Task %s estimated in %s slot %d: %s to %s.", task_id, phase, slot, start_date, due_date)

        resolved[task_id] = {
            'phase': phase,
            'effective_start': start_date,
            'effective_end': due_date,
            'has_actual_dates': has_actual_dates,
            'date_issue': date_issue,
        }

    return resolved
