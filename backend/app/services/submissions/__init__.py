"""
Submission Services

Report and activity-request filing, validation and review.
"""

from .gateway import SubmissionGateway
from .validators import is_valid_drive_link, validate_report, validate_activity_request

__all__ = [
    'SubmissionGateway',
    'is_valid_drive_link',
    'validate_report',
    'validate_activity_request',
]
