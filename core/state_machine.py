"""
Room 狀態機：集中管理所有 Room 狀態轉換

合法轉換（單調，不可逆、不可跳過）：
    WAITING -> PLAYING -> COMPLETED

COMPLETED 是終止狀態，沒有任何出口
"""
from sqlalchemy.orm import Session
from typing import Dict, FrozenSet
import logging

from models import Room, RoomStatus
from core.locks import with_room_lock
from core.exceptions import RoomNotFound, InvalidStateTransition

logger = logging.getLogger(__name__)


class RoomStateMachine:
    """Room 狀態機"""

    TRANSITIONS: Dict[RoomStatus, FrozenSet[RoomStatus]] = {
        RoomStatus.WAITING: frozenset({RoomStatus.PLAYING}),
        RoomStatus.PLAYING: frozenset({RoomStatus.COMPLETED}),
        RoomStatus.COMPLETED: frozenset(),
    }

    @classmethod
    def can_transition(cls, current: RoomStatus, target: RoomStatus) -> bool:
        return target in cls.TRANSITIONS[current]

    @classmethod
    def validate(cls, current: RoomStatus, target: RoomStatus) -> None:
        """
        檢查轉換是否合法

        異常：
            InvalidStateTransition: 非法轉換
        """
        if not cls.can_transition(current, target):
            raise InvalidStateTransition(
                f"Cannot transition room from {current.value} to {target.value}"
            )

    @classmethod
    def transition(cls, room_id: str, target: RoomStatus, db: Session) -> Room:
        """
        執行狀態轉換（不 commit，由外層 transaction 處理）

        流程：
        1. 鎖定 Room
        2. 驗證轉換
        3. 寫入 status 與 roles_assigned（兩者一起寫入）

        參數：
            room_id: Room 代碼
            target: 目標狀態
            db: SQLAlchemy Session

        返回：
            更新後的 Room

        異常：
            RoomNotFound: Room 不存在
            InvalidStateTransition: 非法轉換
        """
        room = with_room_lock(room_id, db).first()
        if not room:
            raise RoomNotFound(room_id)

        previous = room.status
        cls.validate(previous, target)

        room.status = target
        room.roles_assigned = target != RoomStatus.WAITING
        db.flush()

        logger.info(f"Room {room_id} state changed: {previous.value} -> {target.value}")
        return room
