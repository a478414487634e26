"""
Request / Response schemas

欄位名稱沿用前端既有的 camelCase（playerName、roomId ...），
Python 端用 snake_case，透過 alias 轉換
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from models import Role, RoomStatus


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class RoomCreate(CamelModel):
    player_name: Optional[str] = Field(default=None, alias="playerName", max_length=64)


class RoomJoin(CamelModel):
    room_id: str = Field(alias="roomId")
    player_name: Optional[str] = Field(default=None, alias="playerName", max_length=64)


class GuessSubmit(CamelModel):
    mantri_player_id: str = Field(alias="mantriPlayerId")
    suspected_player_name: str = Field(alias="suspectedPlayerName")


class RoomJoinResponse(CamelModel):
    message: str
    room_id: str = Field(alias="roomId")
    player_id: str = Field(alias="playerId")


class PlayerListResponse(CamelModel):
    players: List[str]
    count: int


class RoomStateResponse(CamelModel):
    room_id: str = Field(alias="roomId")
    status: RoomStatus
    roles_assigned: bool = Field(alias="rolesAssigned")
    player_count: int = Field(alias="playerCount")
    capacity: int


class MessageResponse(CamelModel):
    message: str


class RoleResponse(CamelModel):
    name: str
    role: Role
    instruction: str


class GuessResponse(CamelModel):
    result: str
    suspect_role: Role = Field(alias="suspectRole")


class PlayerResult(CamelModel):
    name: str
    role: Optional[Role]
    score: int


class ResultResponse(CamelModel):
    players: List[PlayerResult]

