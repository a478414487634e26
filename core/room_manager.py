"""
Room Manager：管理 Room 與 Player 的建立與查詢

職責：
1. 建立 Room（含第一位玩家）
2. 玩家加入房間（容量上限 4 人、名稱不可重複）
3. 查詢 Room / Player 資訊

原則：
- 單一職責：只管房間與玩家，角色分配與猜測交給 GameManager
- 容量檢查 + 插入必須在同一把鎖、同一個 transaction 內完成
- 資料結構優先：先檢查資料是否符合要求，再執行操作
"""
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import Any, Dict, List, Tuple
import logging

from models import Room, Player, RoomStatus, ROOM_CAPACITY
from core.locks import room_guard, with_room_lock
from core.exceptions import (
    RoomNotFound,
    RoomFull,
    PlayerNotFound,
    InvalidPlayerName,
    DuplicatePlayerName
)
from services.naming_service import (
    generate_room_code,
    generate_player_id,
    normalize_player_name
)
from database import transactional

logger = logging.getLogger(__name__)


class RoomManager:
    """Room 生命週期管理器"""

    @staticmethod
    @transactional
    def create_room(db: Session, player_name: str, code_length: int = 6) -> Tuple[Room, Player]:
        """
        建立新房間（含第一位玩家）

        流程：
        1. 驗證名稱
        2. 生成唯一的房間代碼
        3. 建立 Room（WAITING）
        4. 建立第一位 Player（seat 0）

        參數：
            db: SQLAlchemy Session
            player_name: 第一位玩家的名稱
            code_length: 房間代碼長度

        返回：
            (Room, Player) tuple

        異常：
            InvalidPlayerName: 名稱為空

        注意：
            - 使用 @transactional，Room 和 Player 要嘛都存在，要嘛都不存在
        """
        name = normalize_player_name(player_name)
        if not name:
            raise InvalidPlayerName()

        # 1. 生成唯一的房間代碼
        code = generate_room_code(code_length)
        while db.query(Room).filter(Room.room_id == code).first():
            code = generate_room_code(code_length)
            logger.warning(f"Room code collision detected, regenerating: {code}")

        # 2. 建立 Room
        room = Room(room_id=code, status=RoomStatus.WAITING, roles_assigned=False)
        db.add(room)
        db.flush()

        # 3. 建立第一位玩家
        player = Player(
            id=generate_player_id(),
            room_id=room.room_id,
            seat=0,
            name=name,
            score=0
        )
        db.add(player)
        db.flush()

        logger.info(f"Created room {code} with first player {player.id} ({name})")

        # transactional decorator 會自動 commit
        return room, player

    @staticmethod
    def join_room(db: Session, room_id: str, player_name: str) -> Player:
        """
        加入房間

        前置條件：
        - 房間必須存在
        - 房間內玩家少於 4 人
        - 名稱在房間內不重複

        並發：
            room_guard 包住整個 transaction，兩個請求搶最後一個位置時，
            後到的一定會看到 4 人並得到 RoomFull

        異常：
            InvalidPlayerName: 名稱為空
            RoomNotFound: 房間不存在
            RoomFull: 房間已滿
            DuplicatePlayerName: 名稱重複
        """
        name = normalize_player_name(player_name)
        if not name:
            raise InvalidPlayerName()

        # 先確認房間存在，避免為不存在的房間代碼建立鎖
        RoomManager.get_room(db, room_id)
        with room_guard(room_id):
            return RoomManager._insert_player(db, room_id, name)

    @staticmethod
    @transactional
    def _insert_player(db: Session, room_id: str, name: str) -> Player:
        # 1. 取得並鎖定 Room
        room = with_room_lock(room_id, db).first()
        if not room:
            raise RoomNotFound(room_id)

        # 2. 檢查容量
        seats = [
            seat for (seat,) in db.query(Player.seat).filter(Player.room_id == room_id).all()
        ]
        if len(seats) >= ROOM_CAPACITY:
            logger.warning(f"Rejected join for room {room_id}: room is full")
            raise RoomFull(room_id)

        # 3. 檢查名稱
        if RoomManager._name_taken(db, room_id, name):
            logger.warning(f"Rejected join for room {room_id}: duplicate name {name}")
            raise DuplicatePlayerName(name)

        # 4. 建立玩家（座位 = 目前人數，也就是加入順序）
        player = Player(
            id=generate_player_id(),
            room_id=room_id,
            seat=len(seats),
            name=name,
            score=0
        )
        db.add(player)
        try:
            db.flush()
        except IntegrityError:
            # 其他 process 搶先插入同一個座位或同一個名稱（資料庫 unique / check constraint 擋下）
            logger.warning(f"Constraint conflict while joining room {room_id}", exc_info=True)
            db.rollback()
            if RoomManager._name_taken(db, room_id, name):
                raise DuplicatePlayerName(name)
            raise RoomFull(room_id)

        logger.info(
            f"Player {player.id} ({name}) joined room {room_id} at seat {player.seat}"
        )
        return player

    @staticmethod
    def _name_taken(db: Session, room_id: str, name: str) -> bool:
        return db.query(Player).filter(
            Player.room_id == room_id,
            Player.name == name
        ).first() is not None

    @staticmethod
    def list_players(db: Session, room_id: str) -> List[str]:
        """
        取得房間內所有玩家名稱（依加入順序）

        房間不存在時回傳空 list，不拋出異常
        """
        rows = db.query(Player.name).filter(
            Player.room_id == room_id
        ).order_by(Player.seat).all()
        return [name for (name,) in rows]

    @staticmethod
    def get_players(db: Session, room_id: str) -> List[Player]:
        """取得房間內所有玩家（依加入順序）"""
        return db.query(Player).filter(
            Player.room_id == room_id
        ).order_by(Player.seat).all()

    @staticmethod
    def get_room(db: Session, room_id: str) -> Room:
        """
        取得 Room

        異常：
            RoomNotFound: Room 不存在
        """
        room = db.query(Room).filter(Room.room_id == room_id).first()
        if not room:
            raise RoomNotFound(room_id)
        return room

    @staticmethod
    def get_room_state(db: Session, room_id: str) -> Dict[str, Any]:
        """
        取得 Room 的輪詢用狀態

        返回：
            room_id, status, roles_assigned, player_count, capacity
        """
        room = RoomManager.get_room(db, room_id)
        return {
            "room_id": room.room_id,
            "status": room.status,
            "roles_assigned": room.roles_assigned,
            "player_count": RoomManager.get_player_count(db, room_id),
            "capacity": ROOM_CAPACITY,
        }

    @staticmethod
    def get_player(db: Session, player_id: str, room_id: str) -> Player:
        """
        取得房間內的某位玩家

        異常：
            PlayerNotFound: 玩家不存在或不屬於此房間
        """
        player = db.query(Player).filter(
            Player.id == player_id,
            Player.room_id == room_id
        ).first()
        if not player:
            raise PlayerNotFound(player_id)
        return player

    @staticmethod
    def get_player_by_name(db: Session, room_id: str, name: str) -> Player:
        """
        用名稱取得房間內的玩家（名稱在房間內唯一）

        異常：
            PlayerNotFound: 房間內沒有這個名稱
        """
        player = db.query(Player).filter(
            Player.room_id == room_id,
            Player.name == normalize_player_name(name)
        ).first()
        if not player:
            raise PlayerNotFound(name)
        return player

    @staticmethod
    def get_player_count(db: Session, room_id: str) -> int:
        """取得房間內玩家數量"""
        return db.query(Player).filter(Player.room_id == room_id).count()
