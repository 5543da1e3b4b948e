"""
Routing Table

Fixed mapping from a submitting organization to the organization that
reviews its submissions. Regular submissions and appeals use two separate
tables; they agree for most codes today but are maintained independently.
"""
from typing import Dict, Optional, Union

from ..models.db_models import Organization


OrgLike = Union[Organization, str]


# Regular submissions: reports and activity requests
REVIEWER_TABLE: Dict[Organization, Organization] = {
    Organization.AO: Organization.LCO,
    Organization.LSG: Organization.USG,
    Organization.LCO: Organization.OSLD,
    Organization.USG: Organization.OSLD,
    Organization.GSC: Organization.OSLD,
    Organization.TGP: Organization.OSLD,
    Organization.USED: Organization.OSLD,
    Organization.COA: Organization.OSLD,
    Organization.OSLD: Organization.OSLD,
}

# Letters of appeal
APPEAL_REVIEWER_TABLE: Dict[Organization, Organization] = {
    Organization.AO: Organization.LCO,
    Organization.LSG: Organization.USG,
    Organization.LCO: Organization.OSLD,
    Organization.OSLD: Organization.OSLD,
    Organization.USG: Organization.OSLD,
    Organization.GSC: Organization.OSLD,
    Organization.TGP: Organization.OSLD,
    Organization.USED: Organization.OSLD,
    Organization.COA: Organization.OSLD,
}

# Oversight body -> the one subordinate whose deadlines it watches
OVERSIGHT_TABLE: Dict[Organization, Organization] = {
    Organization.LCO: Organization.AO,
    Organization.USG: Organization.LSG,
}

ORGANIZATION_NAMES: Dict[Organization, str] = {
    Organization.OSLD: "Office of Student Life and Development",
    Organization.AO: "Accredited Organizations",
    Organization.LSG: "Local Student Government",
    Organization.GSC: "Graduating Student Council",
    Organization.LCO: "League of Campus Organization",
    Organization.USG: "University Student Government",
    Organization.TGP: "The Gold Panicles",
    Organization.USED: "University Student Enterprise Development",
    Organization.COA: "Commission on Audit",
}


def _org(org: OrgLike) -> Organization:
    # Raises ValueError for codes outside the closed set
    return org if isinstance(org, Organization) else Organization(org)


def resolve_reviewer(org: OrgLike) -> Organization:
    """Reviewer for reports and activity requests."""
    return REVIEWER_TABLE[_org(org)]


def resolve_appeal_reviewer(org: OrgLike) -> Organization:
    """Reviewer for letters of appeal."""
    return APPEAL_REVIEWER_TABLE[_org(org)]


def oversight_subordinate(org: OrgLike) -> Optional[Organization]:
    """Subordinate whose deadlines org sees for reminders, if any."""
    return OVERSIGHT_TABLE.get(_org(org))


def display_name(code: str) -> str:
    """Full name for notification text; unknown codes pass through."""
    try:
        return ORGANIZATION_NAMES[Organization(code)]
    except ValueError:
        return "All Organizations" if code == "ALL" else code
