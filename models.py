"""
ORM Models

兩張表：
- rooms：房間與狀態
- players：玩家、座位（加入順序）、角色、分數
"""
from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Enum,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
import enum

from database import Base


ROOM_CAPACITY = 4


class RoomStatus(str, enum.Enum):
    WAITING = "WAITING"
    PLAYING = "PLAYING"
    COMPLETED = "COMPLETED"


class Role(str, enum.Enum):
    RAJA = "Raja"
    MANTRI = "Mantri"
    SIPAHI = "Sipahi"
    CHOR = "Chor"


class Room(Base):
    __tablename__ = "rooms"

    room_id = Column(String(16), primary_key=True)
    status = Column(Enum(RoomStatus), nullable=False, default=RoomStatus.WAITING)
    roles_assigned = Column(Boolean, nullable=False, default=False)


class Player(Base):
    __tablename__ = "players"
    __table_args__ = (
        # 座位唯一且 < 4：即使繞過應用層檢查，資料庫也不會接受第 5 位玩家
        UniqueConstraint("room_id", "seat", name="uq_players_room_seat"),
        UniqueConstraint("room_id", "name", name="uq_players_room_name"),
        CheckConstraint(f"seat >= 0 AND seat < {ROOM_CAPACITY}", name="ck_players_seat_range"),
    )

    id = Column(String(36), primary_key=True)
    room_id = Column(String(16), ForeignKey("rooms.room_id"), nullable=False, index=True)
    seat = Column(Integer, nullable=False)
    name = Column(String(64), nullable=False)
    # values_callable：資料庫存 "Raja" 而不是 "RAJA"
    role = Column(
        Enum(Role, values_callable=lambda roles: [r.value for r in roles]),
        nullable=True
    )
    score = Column(Integer, nullable=False, default=0)
