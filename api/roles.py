"""
Role API Endpoints

玩家查詢自己的角色（只有持有 playerId 的人看得到）
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db
from schemas import RoleResponse
from core.game_manager import GameManager

router = APIRouter(prefix="/role", tags=["roles"])


@router.get("/me/{room_id}/{player_id}", response_model=RoleResponse)
def get_my_role(room_id: str, player_id: str, db: Session = Depends(get_db)):
    """
    查詢自己的角色

    返回：
        - name
        - role: Raja / Mantri / Sipahi / Chor
        - instruction: Mantri 看到 "Guess the Chor!"，其他人看到 "Wait for Mantri..."
    """
    player, instruction = GameManager.get_role(db, room_id, player_id)
    return RoleResponse(name=player.name, role=player.role, instruction=instruction)
