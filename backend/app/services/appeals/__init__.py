"""
Appeal Services

Pure lifecycle resolution and the persistence side of appeals.
"""

from .lifecycle import (
    APPEAL_VALIDITY_DAYS,
    AppealStateError,
    AppealStateMachine,
    appeal_valid_until,
    owner_has_appealed,
    resolve_state,
)
from .appeal_service import AppealService

__all__ = [
    'APPEAL_VALIDITY_DAYS',
    'AppealStateError',
    'AppealStateMachine',
    'appeal_valid_until',
    'owner_has_appealed',
    'resolve_state',
    'AppealService',
]
