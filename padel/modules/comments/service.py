import logging
from supabase import Client
from postgrest.exceptions import APIError
from padel.modules.comments.schemas import CommentResponse
from padel.modules.notifications.service import create_notifications, NotificationType
from typing import List, Optional, Dict, Any
from fastapi import HTTPException

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 80


def clean_content(content: str) -> str:
    content = (content or "").strip()
    if not content:
        raise HTTPException(status_code=400, detail="Comment cannot be empty")
    return content


def preview(content: str) -> str:
    return content if len(content) <= PREVIEW_LENGTH else content[:PREVIEW_LENGTH - 3].rstrip() + "..."


class CommentService:
    def __init__(self, supabase: Client, service_supabase: Optional[Client] = None):
        self.supabase = supabase
        self.service_supabase = service_supabase or supabase

    def _get_booking(self, booking_id: str) -> Dict[str, Any]:
        result = self.supabase.table("bookings")\
            .select("id, organiser_id, venue_name, date")\
            .eq("id", booking_id)\
            .maybe_single()\
            .execute()
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="Booking not found")
        return result.data

    def list_comments(self, booking_id: str) -> List[CommentResponse]:
        """Pinned comments first, then the conversation oldest first"""
        comments = self.supabase.table("comments")\
            .select("*")\
            .eq("booking_id", booking_id)\
            .order("created_at")\
            .execute().data or []
        user_ids = list({c["user_id"] for c in comments})
        names = {}
        if user_ids:
            profiles = self.supabase.table("profiles")\
                .select("id, full_name")\
                .in_("id", user_ids)\
                .execute().data or []
            names = {p["id"]: p["full_name"] for p in profiles}
        ordered = sorted(comments, key=lambda c: not c.get("is_pinned"))
        return [CommentResponse(**c, author_name=names.get(c["user_id"])) for c in ordered]

    def add_comment(self, booking_id: str, user_id: str, content: str, author_name: Optional[str] = None) -> CommentResponse:
        content = clean_content(content)
        booking = self._get_booking(booking_id)
        try:
            result = self.supabase.table("comments").insert({
                "booking_id": booking_id,
                "user_id": user_id,
                "content": content
            }).execute()
        except APIError as e:
            raise HTTPException(status_code=400, detail=e.message)
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to add comment")

        self._notify_new_comment(booking, user_id, content, author_name)
        return CommentResponse(**result.data[0], author_name=author_name)

    def _notify_new_comment(self, booking: Dict[str, Any], author_id: str, content: str, author_name: Optional[str]):
        confirmed = self.service_supabase.table("signups")\
            .select("user_id")\
            .eq("booking_id", booking["id"])\
            .eq("status", "confirmed")\
            .execute().data or []
        recipients = [booking["organiser_id"]] + [s["user_id"] for s in confirmed]
        create_notifications(
            self.service_supabase,
            [uid for uid in recipients if uid != author_id],
            booking["id"],
            NotificationType.NEW_COMMENT,
            f"New comment on {booking['venue_name']}",
            f"{author_name or 'Someone'}: {preview(content)}"
        )

    def update_comment(self, comment_id: str, user_id: str, content: str) -> CommentResponse:
        """Authors edit their own comments only"""
        content = clean_content(content)
        try:
            result = self.supabase.table("comments")\
                .update({"content": content})\
                .eq("id", comment_id)\
                .eq("user_id", user_id)\
                .execute()
        except APIError as e:
            raise HTTPException(status_code=400, detail=e.message)
        if not result.data:
            raise HTTPException(status_code=404, detail="Comment not found")
        return CommentResponse(**result.data[0])

    def delete_comment(self, comment_id: str, user_id: str) -> bool:
        result = self.supabase.table("comments")\
            .delete()\
            .eq("id", comment_id)\
            .eq("user_id", user_id)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Comment not found")
        return True

    def toggle_pin(self, comment_id: str, booking_id: str, user_id: str, is_pinned: bool) -> CommentResponse:
        """Only the booking's organiser pins; the write uses the service role since they may not own the comment"""
        booking = self._get_booking(booking_id)
        if booking["organiser_id"] != user_id:
            raise HTTPException(status_code=403, detail="Only the organiser can pin comments")
        result = self.service_supabase.table("comments")\
            .update({"is_pinned": is_pinned})\
            .eq("id", comment_id)\
            .eq("booking_id", booking_id)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Comment not found")
        return CommentResponse(**result.data[0])
