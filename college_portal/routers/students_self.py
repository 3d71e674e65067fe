from fastapi import APIRouter, Depends, Response, status

from college_portal.core.database import get_database
from college_portal.core.errors import NotFound
from college_portal.crud import students as students_crud
from college_portal.models.student import profile_view
from college_portal.models.user import CurrentUser, Role
from college_portal.schemas.common import ChangePasswordRequest
from college_portal.schemas.student import StudentContactUpdate
from college_portal.services.auth import change_password, load_own_account
from college_portal.utils.security import require_role

router = APIRouter()

student_only = require_role(Role.STUDENT)


@router.get("/me")
async def get_me(current_user: CurrentUser = Depends(student_only), db=Depends(get_database)):
    profile = await students_crud.get_profile_by_user(db, current_user.id)
    if not profile:
        raise NotFound("Profile not found")
    return {"profile": profile_view(profile)}


@router.put("/me")
async def update_me(
    body: StudentContactUpdate,
    current_user: CurrentUser = Depends(student_only),
    db=Depends(get_database),
):
    """Students may only edit their own contact details."""
    user = await load_own_account(db, current_user)

    fields = {f"contact.{key}": value for key, value in body.contact.to_document().items()}
    profile = await students_crud.update_profile(db, {"user": user["_id"]}, fields)
    if not profile:
        raise NotFound("Profile not found")
    return {"profile": profile_view(profile)}


@router.put("/me/password", status_code=status.HTTP_204_NO_CONTENT)
async def update_my_password(
    body: ChangePasswordRequest,
    current_user: CurrentUser = Depends(student_only),
    db=Depends(get_database),
):
    await change_password(db, current_user, body.current_password, body.new_password)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
