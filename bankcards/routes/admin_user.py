"""API routes for User management, admins only"""

from fastapi import APIRouter, Depends, Query

from bankcards.middlewares.token import require_admin
from bankcards.schemas.base import PaginationSchema
from bankcards.schemas.user import (
    IdentitySchema,
    UserCreateSchema,
    UserSchema,
    UserUpdateSchema,
)
from bankcards.services.user import UserService

admin_user_router = APIRouter(prefix="/admin/users", tags=["Users (admin)"])


@admin_user_router.get("", response_model=PaginationSchema[UserSchema])
def read_users(
    q: str | None = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(10, ge=1, le=100),
    user_service: UserService = Depends(),
    actor: IdentitySchema = Depends(require_admin),
):
    return user_service.search(q, skip, limit)


@admin_user_router.post("", response_model=UserSchema)
def create_user(
    user: UserCreateSchema,
    user_service: UserService = Depends(),
    actor: IdentitySchema = Depends(require_admin),
):
    return user_service.create(user)


@admin_user_router.patch("/{user_id}", response_model=UserSchema)
def update_user(
    user_id: int,
    user_update: UserUpdateSchema,
    user_service: UserService = Depends(),
    actor: IdentitySchema = Depends(require_admin),
):
    return user_service.update(user_id, user_update)


@admin_user_router.delete("/{user_id}")
def delete_user(
    user_id: int,
    cascade: bool = False,
    user_service: UserService = Depends(),
    actor: IdentitySchema = Depends(require_admin),
) -> int:
    """Delete a user. Pass cascade=true to remove the user's cards as well."""
    return user_service.delete(user_id, cascade=cascade)
