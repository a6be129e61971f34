import argparse
import collections
from datetime import date, datetime
import json
import logging
import sys

# Local imports
import config
from gantt import build_gantt
from importers import import_from_file, load_project
from phases import group_tasks_by_phase, phase_color, status_color, status_label


def setup_logging(verbose=False):
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING,
                        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')


def parse_cli_date(value, option):
    try:
        return datetime.strptime(value, config.date_format).date()
    except ValueError:
        raise ValueError(f"Invalid date format for {option}: '{value}'. Please use DD-MM-YYYY.") from None


def load_tasks(filepath):
    """Returns (tasks, project_start_date string or None) for a JSON, CSV or Excel file."""
    if str(filepath).lower().endswith(('.json', '.gantt')):
        project = load_project(filepath)
        return project["tasks"], project["project_start_date"]
    return import_from_file(filepath), None


def _json_default(value):
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def legend(result):
    """Colours for the phases and statuses that appear in the result."""
    phases = collections.OrderedDict()
    statuses = collections.OrderedDict()
    for task in result['tasks']:
        phase = task['phase'] or config.OTHER_PHASE
        phases.setdefault(phase, phase_color(task['phase']))
        statuses.setdefault(status_label(task.get('status')), status_color(task.get('status')))
    return {'phases': phases, 'statuses': statuses}


def format_report(result):
    timeline = result['timeline']
    lines = [
        f"View: {timeline['view_mode']}  Range: {timeline['range_start']} to {timeline['range_end']}",
        "Axis: " + " | ".join(unit['label'] for unit in timeline['units']),
    ]
    for phase, tasks in group_tasks_by_phase(result['tasks']).items():
        if not tasks:
            continue
        lines.append("")
        lines.append(f"== {phase} ({phase_color(phase)}) ==")
        for task in tasks:
            marker = "" if task['has_actual_dates'] else " (estimated)"
            warning = f" [!{task['date_issue']}]" if task['date_issue'] else ""
            lines.append(
                f"  {str(task.get('title') or task['id'])[:40]:<40} "
                f"{status_label(task.get('status')):<12} "
                f"{task['effective_start']} -> {task['effective_end']}{marker} "
                f"@{task['start_percentage']:.1f}% +{task['width_percentage']:.1f}%{warning}"
            )
    if not result['tasks']:
        lines.append("")
        lines.append("No tasks to display.")
    else:
        statuses = legend(result)['statuses']
        lines.append("")
        lines.append("Legend: " + ", ".join(f"{label} {color}" for label, color in statuses.items()))
    return "\n".join(lines)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Lay out a construction project's tasks on a phase-ordered timeline."
    )
    parser.add_argument("tasks_file", help="Task file: JSON project (.json/.gantt), CSV or Excel")
    parser.add_argument("--view", default="month", choices=list(config.view_modes),
                        help="Timeline zoom level (default: month)")
    parser.add_argument("--start", default=None,
                        help="Project start date DD-MM-YYYY (default: from the file or the earliest task date)")
    parser.add_argument("--today", default=None, help="Override today's date DD-MM-YYYY")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    try:
        tasks, file_start = load_tasks(args.tasks_file)
        project_start = None
        if args.start:
            project_start = parse_cli_date(args.start, "--start")
        elif file_start:
            project_start = parse_cli_date(file_start, "project_start_date")
        today = parse_cli_date(args.today, "--today") if args.today else None

        result = build_gantt(tasks, args.view, project_start=project_start, now=today)
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if args.json:
        output = dict(result, legend=legend(result))
        print(json.dumps(output, default=_json_default, indent=4))
    else:
        print(format_report(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
