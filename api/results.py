"""
Result API Endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db
from schemas import ResultResponse, PlayerResult
from core.game_manager import GameManager

router = APIRouter(prefix="/result", tags=["results"])


@router.get("/{room_id}", response_model=ResultResponse)
def get_result(room_id: str, db: Session = Depends(get_db)):
    """取得最終結果（4 位玩家的 name / role / score），遊戲未結算時回傳 400"""
    players = GameManager.get_results(db, room_id)
    return ResultResponse(
        players=[
            PlayerResult(name=p.name, role=p.role, score=p.score)
            for p in players
        ]
    )
