from typing import Optional

from fastapi import Depends, Header

from resume_hub.models.models import Viewer
from resume_hub.services.redaction import is_privileged
from resume_hub.utils.exceptions import AuthenticationError, AuthorizationError

ROLES = ("candidate", "recruiter", "admin")


async def get_viewer(
    x_user_id: Optional[str] = Header(None),
    x_user_role: Optional[str] = Header("candidate"),
) -> Viewer:
    """Caller identity as forwarded by the upstream auth layer."""
    if not x_user_id:
        raise AuthenticationError()
    role = (x_user_role or "candidate").lower()
    if role not in ROLES:
        raise AuthorizationError(f"Unknown role: {role}")
    return Viewer(user_id=x_user_id, role=role)


async def require_privileged(viewer: Viewer = Depends(get_viewer)) -> Viewer:
    if not is_privileged(viewer):
        raise AuthorizationError()
    return viewer
