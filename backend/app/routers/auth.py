"""
Org Portal - Authentication Router
Organization sign-in and session verification.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, EmailStr
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.db_models import OrgAccountDB
from ..auth import verify_password, create_access_token, get_current_account
from ..services.routing import display_name

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


# =============================================================================
# PYDANTIC MODELS
# =============================================================================

class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    organization: str


class AccountResponse(BaseModel):
    id: str
    email: str
    organization: str
    organization_name: str
    status: str


# =============================================================================
# API ENDPOINTS
# =============================================================================

@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest, db: Session = Depends(get_db)):
    """
    Authenticate an organization account and return a JWT token.
    """
    account = db.query(OrgAccountDB).filter(OrgAccountDB.email == request.email).first()

    if not account or not verify_password(request.password, account.password_hash):
        logger.warning(f"Failed login for {request.email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_access_token(account.id, account.email, account.organization)

    logger.info(f"{account.organization} logged in: {request.email}")
    return TokenResponse(access_token=access_token, organization=account.organization)


@router.get("/me", response_model=AccountResponse)
async def get_me(account: OrgAccountDB = Depends(get_current_account)):
    return AccountResponse(
        id=account.id,
        email=account.email,
        organization=account.organization,
        organization_name=display_name(account.organization),
        status=account.status,
    )
