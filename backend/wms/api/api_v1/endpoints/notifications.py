"""Notifications of the current user"""

from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from wms.api.deps import CurrentUser, get_current_user
from wms.api.pagination import PageParams, fetch_page
from wms.core.deps import get_db
from wms.core.responses import ApiResponse, create_api_response
from wms.models.notification import Notification
from wms.schemas.notification import NotificationCreate, NotificationResponse, NotificationListData

router = APIRouter()


def _owned_by(current_user: CurrentUser):
    """Addressed to the user directly or to their email."""
    return or_(Notification.user_id == current_user.id, Notification.email == current_user.email)


def _build_response(notification: Notification) -> NotificationResponse:
    return NotificationResponse(
        id=notification.id,
        type=notification.type,
        title=notification.title,
        message=notification.message,
        data=notification.data,
        user_id=notification.user_id,
        email=notification.email,
        phone=notification.phone,
        status=notification.status,
        priority=notification.priority,
        sent_at=notification.sent_at,
        read_at=notification.read_at,
        retry_count=notification.retry_count,
        metadata=notification.meta,
        created_at=notification.created_at,
        updated_at=notification.updated_at)


async def _get_owned(db: AsyncSession, current_user: CurrentUser, notification_id: int) -> Notification:
    result = await db.execute(
        select(Notification).where(Notification.id == notification_id, _owned_by(current_user))
    )
    notification = result.scalar_one_or_none()
    if not notification:
        raise HTTPException(status_code=404, detail="Notification not found")
    return notification


@router.get("/", response_model=ApiResponse[NotificationListData])
async def list_notifications(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    page: PageParams = Depends(),
    status: Optional[str] = Query(None),
    type: Optional[str] = Query(None),
    unread_only: bool = Query(False)) -> Any:
    query = select(Notification).where(_owned_by(current_user))
    if status:
        query = query.where(Notification.status == status)
    if type:
        query = query.where(Notification.type == type)
    if unread_only:
        query = query.where(Notification.read_at.is_(None))

    notifications, total = await fetch_page(
        db, query.order_by(Notification.created_at.desc(), Notification.id.desc()), page
    )
    unread = await db.execute(
        select(func.count(Notification.id)).where(_owned_by(current_user), Notification.read_at.is_(None))
    )
    return create_api_response(True, NotificationListData(
        notifications=[_build_response(n) for n in notifications],
        total=total,
        unread=unread.scalar() or 0,
    ))


@router.get("/{notification_id}", response_model=ApiResponse[NotificationResponse])
async def get_notification(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    notification_id: int) -> Any:
    notification = await _get_owned(db, current_user, notification_id)
    return create_api_response(True, _build_response(notification))


@router.post("/", response_model=ApiResponse[NotificationResponse], status_code=201)
async def create_notification(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    notification_in: NotificationCreate) -> Any:
    """Create a notification; without a recipient it is addressed to the caller"""
    data = notification_in.model_dump(exclude={"metadata"})
    if data["user_id"] is None and data["email"] is None:
        data["user_id"] = current_user.id

    notification = Notification(**data, meta=notification_in.metadata)
    db.add(notification)
    await db.commit()
    await db.refresh(notification)
    return create_api_response(True, _build_response(notification), "Notification created successfully")


@router.put("/{notification_id}/read", response_model=ApiResponse[NotificationResponse])
async def mark_notification_read(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    notification_id: int) -> Any:
    notification = await _get_owned(db, current_user, notification_id)
    notification.mark_read()
    await db.commit()
    await db.refresh(notification)
    return create_api_response(True, _build_response(notification), "Notification marked as read")


@router.delete("/{notification_id}", response_model=ApiResponse[None])
async def delete_notification(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    notification_id: int) -> Any:
    notification = await _get_owned(db, current_user, notification_id)
    await db.delete(notification)
    await db.commit()
    return create_api_response(True, None, "Notification deleted successfully")
