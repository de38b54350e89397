"""Favorites routes; every endpoint needs a session cookie."""
from typing import Optional, Union

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.exceptions import ValidationError
from ...core.security import get_current_session
from ...database import get_db
from ...schemas.auth import SessionClaims
from ...schemas.bookmark import (
    FavoriteCreate,
    FavoriteResponse,
    FavoritesResponse,
    FavoriteStatusResponse,
)
from ...schemas.common import SuccessResponse
from ...services.favorites import favorite_service

router = APIRouter(prefix="/favorites", tags=["Favorites"])


@router.get("", response_model=Union[FavoriteStatusResponse, FavoritesResponse])
async def get_favorites(
    bookmark_id: Optional[int] = Query(None, alias="bookmarkId"),
    claims: SessionClaims = Depends(get_current_session),
    db: AsyncSession = Depends(get_db)
):
    """List favorites, or report whether one bookmark is favorited."""
    if bookmark_id is not None:
        favorited = await favorite_service.is_favorited(db, claims.user_id, bookmark_id)
        return FavoriteStatusResponse(is_favorited=favorited)

    favorites = await favorite_service.list_favorites(db, claims.user_id)
    return FavoritesResponse(
        favorites=[FavoriteResponse.model_validate(favorite) for favorite in favorites]
    )


@router.post("", response_model=SuccessResponse)
async def add_favorite(
    favorite_create: FavoriteCreate,
    claims: SessionClaims = Depends(get_current_session),
    db: AsyncSession = Depends(get_db)
):
    await favorite_service.add_favorite(db, claims.user_id, favorite_create.bookmark_id)
    return SuccessResponse(message="Added to favorites")


@router.delete("", response_model=SuccessResponse)
async def remove_favorite(
    bookmark_id: Optional[int] = Query(None, alias="bookmarkId"),
    claims: SessionClaims = Depends(get_current_session),
    db: AsyncSession = Depends(get_db)
):
    if bookmark_id is None:
        raise ValidationError("Bookmark ID is required")

    await favorite_service.remove_favorite(db, claims.user_id, bookmark_id)
    return SuccessResponse(message="Removed from favorites")
