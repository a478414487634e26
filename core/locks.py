"""
並發控制工具

兩層鎖，防止競態條件（Race Condition）：

1. room_guard：行程內（in-process）的每房間互斥鎖
   FastAPI 的同步 endpoint 跑在 threadpool，同一房間的兩個請求可能同時執行
   必須包住整個 transaction（含 commit）

2. with_room_lock：Database-level 的行級鎖
   使用 PostgreSQL 的 SELECT ... FOR UPDATE 來實現悲觀鎖（Pessimistic Locking）
   多個 worker process 時由資料庫負責序列化（SQLite 會忽略 FOR UPDATE）
"""
from contextlib import contextmanager
from threading import Lock
from typing import Dict, Iterator

from sqlalchemy.orm import Session, Query

from models import Room


_registry_lock = Lock()
_room_locks: Dict[str, Lock] = {}


def _lock_for(room_id: str) -> Lock:
    with _registry_lock:
        lock = _room_locks.get(room_id)
        if lock is None:
            lock = Lock()
            _room_locks[room_id] = lock
        return lock


@contextmanager
def room_guard(room_id: str) -> Iterator[None]:
    """
    序列化同一房間的狀態轉換

    範例：
        with room_guard(room_id):
            RoomManager._insert_player(db, room_id, name)  # @transactional

    注意：
        - 不同房間的操作互不阻塞
        - 必須在 @transactional 函式「外面」取得，確保 commit 完成才釋放
    """
    lock = _lock_for(room_id)
    with lock:
        yield


def with_room_lock(room_id: str, db: Session) -> Query:
    """
    鎖定一個 Room（行級鎖）

    使用場景：
    - 修改 Room 狀態時
    - 檢查玩家數量並新增玩家時（容量檢查 + 插入必須是原子操作）
    - 需要確保 Room 在整個 transaction 期間不被其他請求修改

    範例：
        room = with_room_lock(room_id, db).first()
        if not room:
            raise RoomNotFound(room_id)
        room.status = RoomStatus.PLAYING

    參數：
        room_id: Room 代碼
        db: SQLAlchemy Session

    返回：
        Query object（需要呼叫 .first() 或 .one() 來取得結果）

    注意：
        - nowait=False 表示如果鎖被佔用，會等待（避免 deadlock）
        - 必須在 transaction 內使用（確保有 commit 或 rollback）
        - populate_existing 確保拿到鎖之後讀到的是最新資料，而不是 session 快取
    """
    return db.query(Room).filter(
        Room.room_id == room_id
    ).with_for_update(nowait=False).populate_existing()
