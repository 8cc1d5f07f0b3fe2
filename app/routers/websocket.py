"""
PayDesk - WebSocket Router

Realtime change stream for a company.

Endpoint:
- /ws/companies/{company_id}?token=...: streams ChangeEvents of the company

Employees only receive company settings events plus employee and
transaction events about themselves.

Message Types (client -> server):
    - {"type": "ping"}: Heartbeat

Message Types (server -> client):
    - {"event": "connected", "data": {...}}
    - {"event": "pong", "data": {"timestamp": "..."}}
    - {"event": "change", "data": {ChangeEvent}}
"""

import json
import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_async_session
from app.services.auth_service import AuthService
from app.services.change_feed import ChangeEvent, Collection, get_change_feed
from app.utils.error_handling import AppException

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ws", tags=["WebSocket"])


def employee_event_filter(employee_id: Optional[str]):
    """Predicate limiting an employee to their own records."""
    def predicate(event: ChangeEvent) -> bool:
        if event.collection == Collection.COMPANIES:
            return True
        if event.collection in (Collection.EMPLOYEES, Collection.TRANSACTIONS):
            return employee_id is not None and event.employee_id == employee_id
        return False

    return predicate


@router.websocket("/companies/{company_id}")
async def company_changes(
    websocket: WebSocket,
    company_id: str,
    token: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_async_session),
):
    """Stream committed changes of one company to an authenticated member."""
    if not token:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        logger.warning("WebSocket connection rejected: no token")
        return

    try:
        user = await AuthService(db).verify_token(token)
    except AppException as e:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        logger.warning(f"WebSocket authentication failed: {e.message}")
        return

    if user.company_id != company_id:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        logger.warning(f"WebSocket connection rejected: user {user.id} not in company {company_id}")
        return

    user_id = user.id
    predicate = None if user.can_manage_staff else employee_event_filter(user.employee_id)

    await websocket.accept()

    async def forward(event: ChangeEvent) -> None:
        await websocket.send_json({"event": "change", "data": event.to_dict()})

    subscription = get_change_feed().subscribe(None, company_id, forward, predicate=predicate)

    try:
        await websocket.send_json({
            "event": "connected",
            "data": {"company_id": company_id, "user_id": user_id},
        })

        while True:
            try:
                data = await websocket.receive_json()
            except json.JSONDecodeError:
                await websocket.send_json({"event": "error", "data": {"message": "Invalid JSON message"}})
                continue

            if data.get("type") == "ping":
                await websocket.send_json({
                    "event": "pong",
                    "data": {"timestamp": datetime.utcnow().isoformat()},
                })
            else:
                await websocket.send_json({
                    "event": "error",
                    "data": {"message": f"Unknown message type: {data.get('type')}"},
                })

    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnected: user {user_id}")

    finally:
        subscription.cancel()
