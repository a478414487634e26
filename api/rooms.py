"""
Room API Endpoints

職責：
1. 建立房間、加入房間
2. 查詢房間玩家與狀態（前端短輪詢）
3. 分配角色、Mantri 指認

業務異常（RajaMantriException）直接往上拋，由 main.py 的 exception handler
轉成 {"error": kind, "detail": message}
"""
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session
import logging

from database import get_db
from schemas import (
    RoomCreate,
    RoomJoin,
    RoomJoinResponse,
    PlayerListResponse,
    RoomStateResponse,
    MessageResponse,
    GuessSubmit,
    GuessResponse
)
from core.room_manager import RoomManager
from core.game_manager import GameManager
from core.exceptions import RajaMantriException

router = APIRouter(prefix="/room", tags=["rooms"])
logger = logging.getLogger(__name__)


@router.post("/create", response_model=RoomJoinResponse)
def create_room(payload: RoomCreate, request: Request, db: Session = Depends(get_db)):
    """
    建立房間（建立者自動成為第一位玩家）

    返回：
        - roomId: 房間代碼
        - playerId: 建立者的玩家 ID
    """
    try:
        room, player = RoomManager.create_room(
            db,
            payload.player_name,
            code_length=request.app.state.settings.room_code_length
        )
        return RoomJoinResponse(
            message="Room created",
            room_id=room.room_id,
            player_id=player.id
        )

    except RajaMantriException:
        raise
    except Exception as e:
        logger.error(f"Failed to create room: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.post("/join", response_model=RoomJoinResponse)
def join_room(payload: RoomJoin, db: Session = Depends(get_db)):
    """
    加入房間

    前置條件：
    - 房間必須存在
    - 房間內少於 4 人
    - 名稱在房間內不重複
    """
    try:
        player = RoomManager.join_room(db, payload.room_id, payload.player_name)
        return RoomJoinResponse(
            message="Joined successfully",
            room_id=player.room_id,
            player_id=player.id
        )

    except RajaMantriException:
        raise
    except Exception as e:
        logger.error(f"Failed to join room: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.get("/players/{room_id}", response_model=PlayerListResponse)
def get_players(room_id: str, db: Session = Depends(get_db)):
    """取得房間內玩家名稱（依加入順序），房間不存在時回傳空 list"""
    names = RoomManager.list_players(db, room_id)
    return PlayerListResponse(players=names, count=len(names))


@router.get("/state/{room_id}", response_model=RoomStateResponse)
def get_room_state(room_id: str, db: Session = Depends(get_db)):
    """
    取得房間狀態（前端短輪詢用）

    返回：
        - status: WAITING / PLAYING / COMPLETED
        - rolesAssigned
        - playerCount / capacity
    """
    state = RoomManager.get_room_state(db, room_id)
    return RoomStateResponse(**state)


@router.post("/assign/{room_id}", response_model=MessageResponse)
def assign_roles(room_id: str, db: Session = Depends(get_db)):
    """
    分配角色並開始遊戲

    前置條件：
    - 房間剛好 4 人
    - 房間狀態是 WAITING（只能分配一次）
    """
    try:
        GameManager.assign_roles(db, room_id)
        return MessageResponse(message="Roles assigned. Game started!")

    except RajaMantriException:
        raise
    except Exception as e:
        logger.error(f"Failed to assign roles: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.post("/guess/{room_id}", response_model=GuessResponse)
def submit_guess(room_id: str, payload: GuessSubmit, db: Session = Depends(get_db)):
    """
    Mantri 指認 Chor

    前置條件：
    - 遊戲尚未結算（重複指認會得到 409，不會重複加分）
    - 指認者必須是此房間的 Mantri
    - 被指認者必須在房間內

    返回：
        - result: 結果訊息
        - suspectRole: 被指認者的真實角色
    """
    try:
        outcome = GameManager.resolve_guess(
            db,
            room_id,
            payload.mantri_player_id,
            payload.suspected_player_name
        )
        return GuessResponse(result=outcome.message, suspect_role=outcome.suspect_role)

    except RajaMantriException:
        raise
    except Exception as e:
        logger.error(f"Failed to resolve guess: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")
