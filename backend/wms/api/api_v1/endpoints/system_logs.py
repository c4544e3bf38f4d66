"""System log API"""

from typing import Any, Optional
from datetime import datetime, timedelta
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy import select, func, and_
from sqlalchemy.ext.asyncio import AsyncSession

from wms.api.deps import CurrentUser, client_ip, require_admin
from wms.api.pagination import PageParams, fetch_page
from wms.core.deps import get_db
from wms.core.responses import ApiResponse, create_api_response
from wms.models.system import SystemLog
from wms.schemas.system import (
    LogLevel, SystemLogCreate, SystemLogResponse, SystemLogListData, SystemLogStats
)

router = APIRouter()


def record_system_log(
    db: AsyncSession,
    action: str,
    message: str,
    *,
    level: str = "info",
    user_id: Optional[int] = None,
    module: Optional[str] = None,
    entity_type: Optional[str] = None,
    entity_id: Optional[Any] = None,
    context: Optional[dict] = None,
    request: Optional[Request] = None) -> SystemLog:
    """Add a log row to the session; the caller's commit persists it."""
    log = SystemLog(
        level=level,
        action=action,
        message=message,
        user_id=user_id,
        module=module,
        entity_type=entity_type,
        entity_id=str(entity_id) if entity_id is not None else None,
        context=context,
        ip_address=client_ip(request) if request else None,
        user_agent=request.headers.get("user-agent") if request else None,
    )
    db.add(log)
    return log


def _parse_date(value: str, field: str) -> datetime:
    try:
        return datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        raise HTTPException(status_code=400, detail=f"{field} must be in YYYY-MM-DD format")


@router.get("/", response_model=ApiResponse[SystemLogListData])
async def list_logs(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
    page: PageParams = Depends(),
    level: Optional[LogLevel] = Query(None),
    action: Optional[str] = Query(None),
    module: Optional[str] = Query(None),
    entity_type: Optional[str] = Query(None),
    user_id: Optional[int] = Query(None),
    start_date: Optional[str] = Query(None, description="YYYY-MM-DD"),
    end_date: Optional[str] = Query(None, description="YYYY-MM-DD, inclusive")) -> Any:
    """List system logs, newest first"""
    conditions = []
    if level:
        conditions.append(SystemLog.level == level)
    if action:
        conditions.append(SystemLog.action == action)
    if module:
        conditions.append(SystemLog.module == module)
    if entity_type:
        conditions.append(SystemLog.entity_type == entity_type)
    if user_id:
        conditions.append(SystemLog.user_id == user_id)
    if start_date:
        conditions.append(SystemLog.created_at >= _parse_date(start_date, "start_date"))
    if end_date:
        conditions.append(SystemLog.created_at < _parse_date(end_date, "end_date") + timedelta(days=1))

    query = select(SystemLog)
    if conditions:
        query = query.where(and_(*conditions))
    query = query.order_by(SystemLog.created_at.desc(), SystemLog.id.desc())

    logs, total = await fetch_page(db, query, page)
    return create_api_response(True, SystemLogListData(
        logs=[SystemLogResponse.model_validate(log) for log in logs],
        total=total,
    ))


@router.get("/stats/summary", response_model=ApiResponse[SystemLogStats])
async def log_stats(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin)) -> Any:
    """Counts by level, module and action"""
    total = (await db.execute(select(func.count(SystemLog.id)))).scalar() or 0

    async def _grouped(column):
        rows = await db.execute(select(column, func.count(SystemLog.id)).group_by(column))
        return {(key or "unknown"): count for key, count in rows.all()}

    return create_api_response(True, SystemLogStats(
        total=total,
        by_level=await _grouped(SystemLog.level),
        by_module=await _grouped(SystemLog.module),
        by_action=await _grouped(SystemLog.action),
    ))


@router.get("/{log_id}", response_model=ApiResponse[SystemLogResponse])
async def get_log(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
    log_id: int) -> Any:
    log = await db.get(SystemLog, log_id)
    if not log:
        raise HTTPException(status_code=404, detail="System log not found")
    return create_api_response(True, SystemLogResponse.model_validate(log))


@router.post("/", response_model=ApiResponse[SystemLogResponse], status_code=201)
async def create_log(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
    request: Request,
    log_in: SystemLogCreate) -> Any:
    """Write a log entry attributed to the current user"""
    log = record_system_log(
        db, log_in.action, log_in.message,
        level=log_in.level,
        user_id=current_user.id,
        module=log_in.module,
        entity_type=log_in.entity_type,
        entity_id=log_in.entity_id,
        context=log_in.context,
        request=request,
    )
    await db.commit()
    await db.refresh(log)
    return create_api_response(True, SystemLogResponse.model_validate(log), "System log created")


@router.delete("/{log_id}", response_model=ApiResponse[None])
async def delete_log(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
    log_id: int) -> Any:
    log = await db.get(SystemLog, log_id)
    if not log:
        raise HTTPException(status_code=404, detail="System log not found")
    await db.delete(log)
    await db.commit()
    return create_api_response(True, None, "System log deleted")
