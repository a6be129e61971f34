import collections
import re

import config

_SEPARATORS = re.compile(r'[\s_\-]+')


def normalize_tag(tag):
    """Lower-cases a tag and collapses '-', '_' and whitespace runs to single spaces."""
    return _SEPARATORS.sub(' ', tag).strip().lower()


class PhaseTable:
    """
    Ordered lookup over construction phase profiles.

    Built once from a sequence of config.PhaseProfile rows and passed to the
    classifier and the date synthesizer, so tests can swap in their own table.
    """

    def __init__(self, profiles):
        self.profiles = tuple(profiles)
        self.names = tuple(p.name for p in self.profiles)
        self._by_name = {p.name: p for p in self.profiles}
        self._rank = {p.name: i for i, p in enumerate(self.profiles)}
        # Unclassified tasks are estimated after the latest phase window closes
        self.other_window_start = max((p.window_start + p.duration for p in self.profiles), default=0)
        self._keywords = {}
        for profile in self.profiles:
            for keyword in (profile.name,) + tuple(profile.keywords):
                # First phase to claim a keyword keeps it
                self._keywords.setdefault(normalize_tag(keyword), profile.name)

    def __len__(self):
        return len(self.profiles)

    def match(self, tag):
        """Returns the phase a single tag names, or None."""
        if not isinstance(tag, str):
            return None
        return self._keywords.get(normalize_tag(tag))

    def rank(self, phase):
        """Sort rank of a phase; None and unknown names rank after every phase."""
        return self._rank.get(phase, len(self.profiles))

    def profile(self, phase):
        return self._by_name.get(phase)


default_phase_table = PhaseTable(config.construction_phases)


def classify_phase(tags, phase_table=default_phase_table):
    """The first tag that names a phase decides it. Returns None when no tag matches."""
    if isinstance(tags, str):
        tags = (tags,)
    for tag in tags or ():
        phase = phase_table.match(tag)
        if phase is not None:
            return phase
    return None


def group_tasks_by_phase(tasks, phase_table=default_phase_table):
    """Buckets tasks by phase. Every phase is present (possibly empty), 'Other' is last."""
    grouped = collections.OrderedDict((name, []) for name in phase_table.names)
    grouped[config.OTHER_PHASE] = []
    for task in tasks:
        phase = classify_phase(task.get('tags'), phase_table)
        grouped[phase if phase is not None else config.OTHER_PHASE].append(task)
    return grouped


# --- Display lookups ---

def phase_color(phase, phase_table=default_phase_table):
    profile = phase_table.profile(phase)
    if profile is None:
        return config.default_phase_color
    return profile.color


def status_color(status):
    if isinstance(status, str) and status in config.status_colors:
        return config.status_colors[status]
    return config.default_status_color


def status_label(status):
    if not isinstance(status, str) or not status:
        return 'Unknown'
    label = config.status_labels.get(status.lower())
    if label is None:
        label = status.replace('_', ' ').title()
    return label
