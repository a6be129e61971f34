import collections
from types import MappingProxyType

from dateutil.relativedelta import relativedelta, SU

# --- Construction Phases ---

# Ordered construction phases. Earlier rows sort first and get earlier
# estimated windows. Offsets, spacing and durations are in calendar days
# from the project start.
PhaseProfile = collections.namedtuple(
    'PhaseProfile',
    ['name', 'keywords', 'window_start', 'spacing', 'duration', 'color']
)

construction_phases = (
    PhaseProfile('Pre-Construction',
                 ('pre construction', 'preconstruction', 'planning', 'permits', 'design'),
                 0, 2, 7, '#8e44ad'),
    PhaseProfile('Site Work',
                 ('site work', 'sitework', 'site preparation', 'site prep', 'excavation', 'demolition', 'grading'),
                 14, 2, 7, '#d68910'),
    PhaseProfile('Foundation',
                 ('foundation', 'foundations', 'footings', 'concrete'),
                 28, 3, 10, '#7b7d7d'),
    PhaseProfile('Structure',
                 ('structure', 'structural', 'framing', 'steel'),
                 49, 3, 14, '#424949'),
    PhaseProfile('Building Envelope',
                 ('building envelope', 'envelope', 'roofing', 'windows', 'cladding'),
                 77, 2, 10, '#3498db'),
    PhaseProfile('MEP Systems',
                 ('mep systems', 'mep', 'mep rough in', 'electrical', 'plumbing', 'hvac', 'mechanical'),
                 98, 3, 14, '#27ae60'),
    PhaseProfile('Interior Build-Out',
                 ('interior build out', 'interior', 'interiors', 'drywall', 'insulation'),
                 126, 2, 10, '#e67e22'),
    PhaseProfile('Finishes',
                 ('finishes', 'finishing', 'interior finishes', 'painting', 'flooring', 'millwork'),
                 147, 2, 7, '#e84393'),
    PhaseProfile('Commissioning',
                 ('commissioning', 'testing', 'inspection', 'inspections'),
                 168, 2, 5, '#17a2b8'),
    PhaseProfile('Closeout',
                 ('closeout', 'close out', 'final', 'handover', 'punch list'),
                 182, 2, 5, '#5b2c6f'),
    PhaseProfile('Warranty',
                 ('warranty', 'post construction'),
                 196, 7, 7, '#6c3483'),
)

OTHER_PHASE = 'Other'
# Undated unclassified tasks are staggered this many days apart after the last phase window
other_phase_spacing = 2
default_phase_color = '#94a3b8'

# --- Statuses ---

status_colors = MappingProxyType(collections.OrderedDict([
    ('todo', '#94a3b8'),
    ('in_progress', '#3b82f6'),
    ('review', '#eab308'),
    ('completed', '#22c55e'),
]))
default_status_color = '#94a3b8'

status_labels = MappingProxyType({
    'todo': 'To Do',
    'to do': 'To Do',
    'in_progress': 'In Progress',
    'in progress': 'In Progress',
    'review': 'Review',
    'completed': 'Completed',
    'done': 'Done',
    'blocked': 'Blocked',
    'on-hold': 'On Hold',
})

# --- Timeline ---

# step: length of one axis unit.
# align: how the range start is snapped ('week', 'month', 'quarter', 'year' or None).
# label: strftime pattern; '{quarter}' is filled in before formatting.
view_modes = MappingProxyType(collections.OrderedDict([
    ('day', MappingProxyType({'step': relativedelta(days=1), 'align': 'week', 'label': '%b %d'})),
    ('week', MappingProxyType({'step': relativedelta(weeks=1), 'align': 'week', 'label': '%b %d'})),
    ('month', MappingProxyType({'step': relativedelta(months=1), 'align': 'month', 'label': '%b %Y'})),
    ('quarter', MappingProxyType({'step': relativedelta(months=3), 'align': 'quarter', 'label': 'Q{quarter} %Y'})),
    ('year', MappingProxyType({'step': relativedelta(years=1), 'align': 'year', 'label': '%Y'})),
    ('all', MappingProxyType({'step': relativedelta(weeks=1), 'align': None, 'label': '%b %d'})),
]))

week_start = SU

default_span_days = 7
empty_range_days = 30
min_visible_width_percent = 2.0

# Date format accepted on the command line
date_format = "%d-%m-%Y"
