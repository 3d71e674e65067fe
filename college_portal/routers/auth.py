import logging
from typing import Optional

from fastapi import APIRouter, Cookie, Depends, Response, status
from fastapi.responses import JSONResponse

from college_portal.core.database import get_database
from college_portal.core.errors import AuthenticationFailed, Conflict
from college_portal.crud import students as students_crud
from college_portal.crud import users as users_crud
from college_portal.models.student import profile_view
from college_portal.models.user import CurrentUser, Role, public_user
from college_portal.schemas.common import ChangePasswordRequest, dob_to_datetime
from college_portal.schemas.user import ProfileUpdate, UserCreate, UserLogin
from college_portal.services.auth import (
    change_password,
    hash_password,
    load_own_account,
    login_service,
    refresh_service,
)
from college_portal.utils.security import get_current_user
from college_portal.utils.tokens import clear_auth_cookies, set_auth_cookies

router = APIRouter()
logger = logging.getLogger("auth_router")


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(user: UserCreate, response: Response, db=Depends(get_database)):
    if await users_crud.email_taken(db, user.email):
        raise Conflict()

    is_academic = user.role == Role.ACADEMIC
    contact = user.contact.to_document() if user.contact else None
    account = await users_crud.create_user(
        db,
        email=user.email,
        password_hash=hash_password(user.password),
        role=user.role,
        sub_role=user.sub_role if is_academic else None,
        name=user.name if is_academic else None,
        avatar_url=user.avatar_url if is_academic else None,
        department=user.department if is_academic else None,
        # academic accounts only keep phone and address
        contact={k: v for k, v in contact.items() if k in ("phone", "address")} if is_academic and contact else None,
    )

    profile = None
    if not is_academic:
        try:
            profile = await students_crud.create_profile(
                db,
                user_id=account["_id"],
                first_name=user.first_name,
                last_name=user.last_name,
                dob=dob_to_datetime(user.dob),
                contact=contact,
                department=user.department,
                year=user.year,
                avatar_url=user.avatar_url,
            )
        except Exception:
            # no half-registered students
            await users_crud.delete_user(db, account["_id"])
            raise

    logger.info(f"registered {account['email']} as {account['role']}")

    session = await login_service(db, user.email, user.password, user.role)
    set_auth_cookies(response, session.access_token, session.refresh_token)

    return {
        "user": public_user(account),
        "profile": profile_view(profile) if profile else None,
        "message": "Registration successful",
    }


@router.post("/login", status_code=status.HTTP_200_OK)
async def login(credentials: UserLogin, response: Response, db=Depends(get_database)):
    try:
        session = await login_service(db, credentials.email, credentials.password, credentials.role)
    except AuthenticationFailed:
        logger.info(f"login failed for {credentials.email}")
        raise

    set_auth_cookies(response, session.access_token, session.refresh_token)
    logger.info(f"{credentials.email} logged in")
    return {"user": session.user}


@router.post("/refresh", status_code=status.HTTP_200_OK)
async def refresh(
    response: Response,
    refresh_token: Optional[str] = Cookie(None),
    db=Depends(get_database),
):
    try:
        session = await refresh_service(db, refresh_token)
    except AuthenticationFailed as exc:
        logger.info("refresh rejected, clearing session cookies")
        failure = JSONResponse(status_code=exc.status_code, content=exc.to_dict())
        clear_auth_cookies(failure)
        return failure

    set_auth_cookies(response, session.access_token, session.refresh_token)
    return {"user": session.user}


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout():
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    clear_auth_cookies(response)
    return response


@router.put("/password", status_code=status.HTTP_204_NO_CONTENT)
async def update_password(
    body: ChangePasswordRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db=Depends(get_database),
):
    await change_password(db, current_user, body.current_password, body.new_password)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/profile", status_code=status.HTTP_200_OK)
async def update_profile(
    body: ProfileUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    db=Depends(get_database),
):
    user = await load_own_account(db, current_user)

    if await users_crud.email_taken(db, body.email, exclude_id=user["_id"]):
        raise Conflict()

    fields = {"email": body.email}
    provided = body.model_fields_set
    if "name" in provided and body.name is not None:
        fields["name"] = body.name
    if "avatar_url" in provided:
        fields["avatarUrl"] = body.avatar_url or None
    if "department" in provided:
        fields["department"] = body.department or None
    if body.contact is not None:
        for key, value in body.contact.to_document().items():
            fields[f"contact.{key}"] = value

    updated = await users_crud.update_user(db, user["_id"], fields)
    return {"user": public_user(updated)}
