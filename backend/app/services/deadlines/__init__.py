"""
Deadline Services

Working-day arithmetic and derivation of per-viewer deadline entries.
"""

from .working_days import (
    ACCOMPLISHMENT_WORKING_DAYS,
    LIQUIDATION_WORKING_DAYS,
    add_working_days,
    calculate_deadline,
)
from .generator import (
    DeadlineEngine,
    generate_for_viewer,
    generate_all,
    due_on,
    sees_deadlines_of,
)

__all__ = [
    'ACCOMPLISHMENT_WORKING_DAYS',
    'LIQUIDATION_WORKING_DAYS',
    'add_working_days',
    'calculate_deadline',
    'DeadlineEngine',
    'generate_for_viewer',
    'generate_all',
    'due_on',
    'sees_deadlines_of',
]
