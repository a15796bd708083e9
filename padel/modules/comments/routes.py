from fastapi import APIRouter, Depends
from padel.database.supabase_client import get_service_supabase
from padel.modules.comments.schemas import CommentCreate, CommentUpdate, CommentPin, CommentResponse
from padel.modules.comments.service import CommentService
from padel.core.dependencies import get_current_user_id, get_user_supabase
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/bookings/{booking_id}/comments", tags=["comments"])


def get_comment_service(
    supabase: Client = Depends(get_user_supabase),
    service_supabase: Client = Depends(get_service_supabase)
) -> CommentService:
    return CommentService(supabase, service_supabase)


@router.get("", response_model=List[CommentResponse])
async def list_comments(
    booking_id: str,
    current_user: Dict = Depends(get_current_user_id),
    service: CommentService = Depends(get_comment_service)
):
    return service.list_comments(booking_id)


@router.post("", response_model=CommentResponse, status_code=201)
async def add_comment(
    booking_id: str,
    body: CommentCreate,
    current_user: Dict = Depends(get_current_user_id),
    service: CommentService = Depends(get_comment_service)
):
    author_name = (current_user.get("user_metadata") or {}).get("full_name")
    return service.add_comment(booking_id, current_user["id"], body.content, author_name)


@router.put("/{comment_id}", response_model=CommentResponse)
async def update_comment(
    booking_id: str,
    comment_id: str,
    body: CommentUpdate,
    current_user: Dict = Depends(get_current_user_id),
    service: CommentService = Depends(get_comment_service)
):
    return service.update_comment(comment_id, current_user["id"], body.content)


@router.delete("/{comment_id}", status_code=204)
async def delete_comment(
    booking_id: str,
    comment_id: str,
    current_user: Dict = Depends(get_current_user_id),
    service: CommentService = Depends(get_comment_service)
):
    service.delete_comment(comment_id, current_user["id"])
    return None


@router.put("/{comment_id}/pin", response_model=CommentResponse)
async def toggle_pin(
    booking_id: str,
    comment_id: str,
    body: CommentPin,
    current_user: Dict = Depends(get_current_user_id),
    service: CommentService = Depends(get_comment_service)
):
    """Pin or unpin a comment (organiser only)"""
    return service.toggle_pin(comment_id, booking_id, current_user["id"], body.is_pinned)
