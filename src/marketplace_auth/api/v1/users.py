"""Account administration endpoints. Admin role required."""

from typing import Annotated

from fastapi import APIRouter, Query, status

from src.marketplace_auth.api.dependencies import AdminAccount, UserServiceDep
from src.marketplace_auth.schemas.user import AccountCreate, AccountPatch, UserList, UserRead

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=UserList)
async def list_users(
    admin: AdminAccount,
    service: UserServiceDep,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> UserList:
    """List accounts, newest first."""
    return await service.list_users(limit, offset)


@router.post(
    "",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Weak password"},
        409: {"description": "Email or username taken"},
    },
)
async def create_user(
    data: AccountCreate, admin: AdminAccount, service: UserServiceDep
) -> UserRead:
    """Create an unverified account with any role."""
    user = await service.create_user(data, actor_id=admin.id)  # type: ignore[arg-type]
    return UserRead.model_validate(user)


@router.get("/{user_id}", response_model=UserRead, responses={404: {"description": "Not found"}})
async def get_user(user_id: int, admin: AdminAccount, service: UserServiceDep) -> UserRead:
    return UserRead.model_validate(await service.get_user(user_id))


@router.put(
    "/{user_id}",
    response_model=UserRead,
    responses={404: {"description": "Not found"}, 409: {"description": "Email or username taken"}},
)
async def update_user(
    user_id: int, data: AccountPatch, admin: AdminAccount, service: UserServiceDep
) -> UserRead:
    """Update any account field, including role and status."""
    user = await service.update_user(user_id, data, actor_id=admin.id)  # type: ignore[arg-type]
    return UserRead.model_validate(user)


@router.delete("/{user_id}", response_model=UserRead, responses={404: {"description": "Not found"}})
async def delete_user(user_id: int, admin: AdminAccount, service: UserServiceDep) -> UserRead:
    """Soft delete: the account is marked inactive and kept."""
    user = await service.deactivate_user(user_id, actor_id=admin.id)  # type: ignore[arg-type]
    return UserRead.model_validate(user)
