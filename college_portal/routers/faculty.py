# college_portal/routers/faculty.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from college_portal.core.database import get_database
from college_portal.core.errors import Conflict, NotFound, PermissionDenied
from college_portal.crud import users as users_crud
from college_portal.models.user import CurrentUser, Role, Status, faculty_view
from college_portal.schemas.common import StatusUpdate
from college_portal.schemas.faculty import FacultyCreate, FacultyUpdate
from college_portal.services.auth import hash_password
from college_portal.utils.mongo import parse_object_id
from college_portal.utils.security import require_administrative, require_role

router = APIRouter(dependencies=[Depends(require_role(Role.ACADEMIC))])
logger = logging.getLogger("faculty_router")

admin_only = require_administrative()


def _is_self(current_user: CurrentUser, faculty_id: str) -> bool:
    # compare parsed ids; hex ids are case-insensitive in the path
    return str(parse_object_id(faculty_id)) == current_user.id


async def _get_academic_or_404(db, faculty_id: str) -> dict:
    faculty = await users_crud.get_user_by_id(db, parse_object_id(faculty_id))
    if not faculty or faculty.get("role") != Role.ACADEMIC.value:
        raise NotFound()
    return faculty


@router.get("")
async def list_faculty(
    department: Optional[str] = Query(None, max_length=100),
    q: Optional[str] = Query(None, max_length=100),
    db=Depends(get_database),
):
    department = department.strip() if department else None
    q = q.strip() if q else None
    faculty = await users_crud.list_academics(db, department=department, q=q)
    return {"faculty": [faculty_view(doc) for doc in faculty]}


@router.get("/{faculty_id}")
async def get_faculty(faculty_id: str, db=Depends(get_database)):
    faculty = await _get_academic_or_404(db, faculty_id)
    return {"faculty": faculty_view(faculty)}


@router.post("", status_code=status.HTTP_201_CREATED, dependencies=[Depends(admin_only)])
async def create_faculty(body: FacultyCreate, db=Depends(get_database)):
    if await users_crud.email_taken(db, body.email):
        raise Conflict()

    faculty = await users_crud.create_user(
        db,
        email=body.email,
        password_hash=hash_password(body.password),
        role=Role.ACADEMIC.value,
        sub_role=body.sub_role,
        name=body.name,
        department=body.department or None,
        avatar_url=body.avatar_url or None,
        status=Status.ACTIVE.value,
    )
    logger.info(f"academic account {faculty['email']} ({faculty['subRole']}) created")
    return {"faculty": faculty_view(faculty)}


@router.put("/{faculty_id}")
async def update_faculty(
    faculty_id: str,
    body: FacultyUpdate,
    current_user: CurrentUser = Depends(admin_only),
    db=Depends(get_database),
):
    faculty = await _get_academic_or_404(db, faculty_id)
    provided = body.model_fields_set

    if _is_self(current_user, faculty_id) and body.sub_role and body.sub_role != faculty.get("subRole"):
        raise PermissionDenied("Cannot change your own subRole")

    fields = {}
    if body.email:
        if await users_crud.email_taken(db, body.email, exclude_id=faculty["_id"]):
            raise Conflict()
        fields["email"] = body.email
    if body.sub_role:
        fields["subRole"] = body.sub_role
    if "name" in provided and body.name is not None:
        fields["name"] = body.name
    # empty string or null clears these
    if "department" in provided:
        fields["department"] = body.department or None
    if "avatar_url" in provided:
        fields["avatarUrl"] = body.avatar_url or None

    updated = await users_crud.update_user(db, faculty["_id"], fields)
    if not updated:
        raise NotFound()
    return {"faculty": faculty_view(updated)}


@router.patch("/{faculty_id}/status", status_code=status.HTTP_204_NO_CONTENT)
async def toggle_faculty_status(
    faculty_id: str,
    body: StatusUpdate,
    current_user: CurrentUser = Depends(admin_only),
    db=Depends(get_database),
):
    if _is_self(current_user, faculty_id):
        raise PermissionDenied("Cannot change your own status")

    faculty = await _get_academic_or_404(db, faculty_id)
    await users_crud.set_status(db, faculty["_id"], body.status)
    logger.info(f"academic account {faculty['email']} set to {body.status} by {current_user.id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{faculty_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_faculty(
    faculty_id: str,
    current_user: CurrentUser = Depends(admin_only),
    db=Depends(get_database),
):
    if _is_self(current_user, faculty_id):
        raise PermissionDenied("Cannot delete your own account")

    faculty = await _get_academic_or_404(db, faculty_id)
    await users_crud.delete_user(db, faculty["_id"])
    logger.info(f"academic account {faculty['email']} deleted by {current_user.id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
