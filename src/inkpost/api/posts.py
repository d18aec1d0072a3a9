"""Post API routes.

Learn: Every route here sits behind get_current_user (see api/__init__.py).
Handlers that write also declare the identity explicitly so it can be
handed to the service, which applies the ownership guard.

Path ids are taken as strings and parsed by hand so a non-numeric id is
a 400 invalid_identifier rather than FastAPI's 422.
"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from inkpost.api.params import parse_id
from inkpost.auth.dependencies import CurrentIdentity, get_current_user
from inkpost.db.engine import get_db
from inkpost.errors import NotFoundError
from inkpost.schemas.post import PostRead, PostWrite
from inkpost.services.post_service import PostService

router = APIRouter(prefix="/posts")


def _svc(db: AsyncSession = Depends(get_db)) -> PostService:
    return PostService(db)


@router.get("", response_model=list[PostRead])
async def list_posts(svc: PostService = Depends(_svc)):
    return await svc.list_posts()


@router.post("", response_model=PostRead, status_code=201)
async def create_post(
    body: PostWrite,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: PostService = Depends(_svc),
):
    post = await svc.create(identity, title=body.title, body=body.body)
    await svc.db.commit()
    return post


@router.get("/{post_id}", response_model=PostRead)
async def get_post(post_id: str, svc: PostService = Depends(_svc)):
    post = await svc.get(parse_id(post_id, "post"))
    if not post:
        raise NotFoundError("Post not found")
    return post


@router.put("/{post_id}", response_model=PostRead)
async def update_post(
    post_id: str,
    body: PostWrite,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: PostService = Depends(_svc),
):
    """Replace a post's title and body. Owner only."""
    post = await svc.update(
        identity, parse_id(post_id, "post"), title=body.title, body=body.body
    )
    await svc.db.commit()
    return post


@router.delete("/{post_id}", status_code=204)
async def delete_post(
    post_id: str,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: PostService = Depends(_svc),
):
    """Delete a post. Owner only."""
    await svc.delete(identity, parse_id(post_id, "post"))
    await svc.db.commit()
    return Response(status_code=204)
