"""User API routes.

Learn: Any authenticated caller may list users and delete any user.
No ownership check is applied here; see DESIGN.md for why this gap is
kept. Deleting a user also deletes all of their posts.
"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from inkpost.api.params import parse_id
from inkpost.db.engine import get_db
from inkpost.errors import NotFoundError
from inkpost.schemas.post import PostRead
from inkpost.schemas.user import UserRead
from inkpost.services.post_service import PostService
from inkpost.services.user_service import UserService

router = APIRouter(prefix="/users")


def _svc(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)


@router.get("", response_model=list[UserRead])
async def list_users(svc: UserService = Depends(_svc)):
    return await svc.list_users()


@router.delete("/{user_id}", status_code=204)
async def delete_user(user_id: str, svc: UserService = Depends(_svc)):
    await svc.delete(parse_id(user_id, "user"))
    await svc.db.commit()
    return Response(status_code=204)


@router.get("/{user_id}/posts", response_model=list[PostRead])
async def list_user_posts(user_id: str, db: AsyncSession = Depends(get_db)):
    """Posts written by one user, newest first."""
    owner_id = parse_id(user_id, "user")
    if not await UserService(db).get(owner_id):
        raise NotFoundError("User not found")
    return await PostService(db).list_posts_by_owner(owner_id)
