# college_portal/routers/students.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from college_portal.core.database import get_database
from college_portal.core.errors import Conflict, NotFound, PermissionDenied, ValidationFailed
from college_portal.crud import students as students_crud
from college_portal.crud import users as users_crud
from college_portal.models.student import profile_view
from college_portal.models.user import CurrentUser, Role
from college_portal.schemas.common import StatusUpdate, dob_to_datetime
from college_portal.schemas.student import StudentCreate, StudentUpdate
from college_portal.services.auth import hash_password
from college_portal.utils.mongo import parse_object_id
from college_portal.utils.security import get_current_user, require_administrative, require_role

# every route here is for academic staff; writes need an administrator
router = APIRouter(dependencies=[Depends(require_role(Role.ACADEMIC))])
logger = logging.getLogger("students_router")

admin_only = require_administrative()


@router.get("")
async def list_students(
    department: Optional[str] = Query(None, max_length=100),
    year: Optional[int] = Query(None, ge=1, le=5),
    q: Optional[str] = Query(None, max_length=100),
    status_filter: Optional[str] = Query(None, alias="status", pattern="^(active|inactive)$"),
    db=Depends(get_database),
):
    department = department.strip() if department else None
    q = q.strip() if q else None
    linked = await students_crud.list_profiles(db, department=department, year=year, q=q, status=status_filter)
    return {"students": [profile_view(profile, user) for profile, user in linked]}


@router.get("/{student_id}")
async def get_student(student_id: str, db=Depends(get_database)):
    profile = await students_crud.get_profile(db, parse_object_id(student_id))
    if not profile:
        raise NotFound()
    user = await users_crud.get_user_by_id(db, profile["user"])
    return {"profile": profile_view(profile, user or {})}


@router.post("", status_code=status.HTTP_201_CREATED, dependencies=[Depends(admin_only)])
async def create_student(body: StudentCreate, db=Depends(get_database)):
    if await users_crud.email_taken(db, body.email):
        raise Conflict()

    user = await users_crud.create_user(
        db,
        email=body.email,
        password_hash=hash_password(body.password),
        role=Role.STUDENT.value,
    )
    try:
        profile = await students_crud.create_profile(
            db,
            user_id=user["_id"],
            first_name=body.first_name,
            last_name=body.last_name,
            dob=dob_to_datetime(body.dob),
            contact=body.contact.to_document() if body.contact else None,
            department=body.department,
            year=body.year,
            avatar_url=body.avatar_url,
        )
    except Exception:
        await users_crud.delete_user(db, user["_id"])
        raise

    logger.info(f"student {user['email']} created")
    return {
        "user": {"id": str(user["_id"]), "email": user["email"], "role": user["role"]},
        "profile": profile_view(profile),
    }


@router.put("/{student_id}", dependencies=[Depends(admin_only)])
async def update_student(student_id: str, body: StudentUpdate, db=Depends(get_database)):
    profile_id = parse_object_id(student_id)
    fields = body.to_document()
    if "dob" in fields:
        fields["dob"] = dob_to_datetime(body.dob)
    for required in ("firstName", "lastName"):
        if required in fields and fields[required] is None:
            raise ValidationFailed(details=[{"field": required, "message": f"{required} cannot be empty"}])

    profile = await students_crud.update_profile(db, {"_id": profile_id}, fields)
    if not profile:
        raise NotFound()
    return {"profile": profile_view(profile)}


@router.patch("/{student_id}/status", status_code=status.HTTP_204_NO_CONTENT)
async def toggle_status(
    student_id: str,
    body: StatusUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    db=Depends(get_database),
):
    # open to every academic user, unlike the faculty equivalent
    profile = await students_crud.get_profile(db, parse_object_id(student_id))
    if not profile:
        raise NotFound()
    await users_crud.set_status(db, profile["user"], body.status)
    logger.info(f"student profile {student_id} set to {body.status} by {current_user.id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_student(
    student_id: str,
    current_user: CurrentUser = Depends(admin_only),
    db=Depends(get_database),
):
    profile = await students_crud.get_profile(db, parse_object_id(student_id))
    if not profile:
        raise NotFound()
    if str(profile["user"]) == current_user.id:
        raise PermissionDenied("Cannot delete your own account")

    await users_crud.delete_user(db, profile["user"])
    await students_crud.delete_profile(db, profile["_id"])
    logger.info(f"student profile {student_id} and its account deleted by {current_user.id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
