from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from app.db.base import get_db
from app.models.member import KMember, MemberRole, MemberStatus
from app.core.security import decode_access_token
from app.services.member import get_member

# Tokens are issued by the phone-OTP sign-in flow; this API only verifies them.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/verify-otp")


async def get_current_member(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> KMember:
    """Get the signed-in member from the JWT bearer token (sub = phone number)."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_access_token(token)
    if payload is None:
        raise credentials_exception

    member_id: str = payload.get("sub")
    if not member_id:
        raise credentials_exception

    member = get_member(db, member_id)
    if member is None:
        raise credentials_exception

    return member


async def get_current_approved_member(
    current_member: KMember = Depends(get_current_member)
) -> KMember:
    """Get current member, who must have been approved by the president."""
    if current_member.status != MemberStatus.APPROVED:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Member registration is not approved"
        )
    return current_member


def require_role(role: MemberRole):
    """Dependency factory for requiring a specific unit role."""
    async def role_checker(
        current_member: KMember = Depends(get_current_approved_member)
    ) -> KMember:
        if current_member.role != role:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Member does not have required role: {role.value}"
            )
        return current_member
    return role_checker


require_president = require_role(MemberRole.PRESIDENT)
