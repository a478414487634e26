"""
Game Manager：管理一場遊戲從分配角色到結算的流程

職責：
1. 分配角色（WAITING -> PLAYING）
2. 查詢自己的角色
3. Mantri 指認 Chor 並結算（PLAYING -> COMPLETED）
4. 查詢最終結果

並發設計：
- 所有寫入都在 room_guard + with_room_lock 內，一個狀態轉換一個 transaction
- 重複指認：第一個請求結算並轉成 COMPLETED，其餘請求看到 COMPLETED 後拋出 GameAlreadyResolved
"""
from sqlalchemy.orm import Session
from typing import List, Optional, Tuple
import logging
import random

from models import Room, Player, Role, RoomStatus, ROOM_CAPACITY
from core.state_machine import RoomStateMachine
from core.locks import room_guard, with_room_lock
from core.room_manager import RoomManager
from core.exceptions import (
    RoomNotFound,
    IncompletePlayers,
    RolesAlreadyAssigned,
    RolesNotAssigned,
    GameAlreadyResolved,
    GameInProgress,
    NotMantri,
    PlayerNotFound,
    SuspectNotFound
)
from services.role_deck_service import generate_roles
from services.scoring_service import GuessOutcome, apply_round_scores
from database import transactional

logger = logging.getLogger(__name__)


MANTRI_INSTRUCTION = "Guess the Chor!"
WAITING_INSTRUCTION = "Wait for Mantri..."


class GameManager:
    """遊戲流程管理器"""

    @staticmethod
    def assign_roles(db: Session, room_id: str, rng: Optional[random.Random] = None) -> Room:
        """
        分配角色並開始遊戲（狀態轉換 WAITING -> PLAYING）

        前置條件：
        1. Room 必須存在
        2. Room 狀態必須是 WAITING
        3. 玩家數量必須剛好 4 人

        流程：
        1. 驗證前置條件
        2. 洗牌，依座位順序發給 4 位玩家
        3. 透過 StateMachine 轉換狀態

        參數：
            db: SQLAlchemy Session
            room_id: Room 代碼
            rng: 可注入的亂數來源（測試用）

        返回：
            更新後的 Room

        異常：
            RoomNotFound: Room 不存在
            RolesAlreadyAssigned: Room 狀態不是 WAITING
            IncompletePlayers: 玩家不足 4 人
        """
        RoomManager.get_room(db, room_id)
        with room_guard(room_id):
            return GameManager._assign_roles(db, room_id, rng)

    @staticmethod
    @transactional
    def _assign_roles(db: Session, room_id: str, rng: Optional[random.Random]) -> Room:
        # 1. 取得並鎖定 Room
        room = with_room_lock(room_id, db).first()
        if not room:
            raise RoomNotFound(room_id)

        if room.status != RoomStatus.WAITING:
            raise RolesAlreadyAssigned(room_id)

        # 2. 驗證玩家數量
        players = RoomManager.get_players(db, room_id)
        if len(players) < ROOM_CAPACITY:
            raise IncompletePlayers(len(players))

        # 3. 發牌（依座位順序配對）
        roles = generate_roles(rng)
        for player, role in zip(players, roles):
            player.role = role
        db.flush()

        # 4. 狀態轉換（status 與 roles_assigned 一起寫入）
        room = RoomStateMachine.transition(room_id, RoomStatus.PLAYING, db)

        logger.info(f"Roles assigned for room {room_id}, game started")
        return room

    @staticmethod
    def get_role(db: Session, room_id: str, player_id: str) -> Tuple[Player, str]:
        """
        查詢自己的角色

        返回：
            (Player, instruction)，Mantri 的 instruction 是 "Guess the Chor!"

        異常：
            RoomNotFound: Room 不存在
            RolesNotAssigned: 角色尚未分配
            PlayerNotFound: 玩家不在此房間
        """
        room = RoomManager.get_room(db, room_id)
        if not room.roles_assigned:
            raise RolesNotAssigned(room_id)

        player = RoomManager.get_player(db, player_id, room_id)
        instruction = MANTRI_INSTRUCTION if player.role == Role.MANTRI else WAITING_INSTRUCTION
        return player, instruction

    @staticmethod
    def resolve_guess(db: Session, room_id: str, guesser_id: str, suspect_name: str) -> GuessOutcome:
        """
        Mantri 指認 Chor 並結算（狀態轉換 PLAYING -> COMPLETED）

        前置條件（依序檢查）：
        1. Room 必須存在
        2. Room 尚未結算（否則 GameAlreadyResolved，不會重複加分）
        3. 指認者是此房間的 Mantri
        4. 被指認者在此房間內

        流程：
        1. 驗證前置條件
        2. ScoringService 計算並套用分數
        3. 透過 StateMachine 轉換狀態

        異常：
            RoomNotFound: Room 不存在
            GameAlreadyResolved: 已經結算過
            NotMantri: 指認者不是 Mantri
            SuspectNotFound: 房間內沒有這個名稱
        """
        RoomManager.get_room(db, room_id)
        with room_guard(room_id):
            return GameManager._resolve_guess(db, room_id, guesser_id, suspect_name)

    @staticmethod
    @transactional
    def _resolve_guess(db: Session, room_id: str, guesser_id: str, suspect_name: str) -> GuessOutcome:
        # 1. 取得並鎖定 Room
        room = with_room_lock(room_id, db).first()
        if not room:
            raise RoomNotFound(room_id)

        # 2. 冪等檢查
        if room.status == RoomStatus.COMPLETED:
            raise GameAlreadyResolved(room_id)

        # 3. 驗證指認者（WAITING 時沒有人有角色，也會在這裡被擋下）
        try:
            guesser = RoomManager.get_player(db, guesser_id, room_id)
        except PlayerNotFound:
            raise NotMantri(guesser_id)
        if guesser.role != Role.MANTRI:
            raise NotMantri(guesser_id)

        # 4. 找到被指認者
        try:
            suspect = RoomManager.get_player_by_name(db, room_id, suspect_name)
        except PlayerNotFound:
            raise SuspectNotFound(suspect_name)

        # 5. 計分
        outcome = apply_round_scores(room_id, suspect.role, db)

        # 6. 狀態轉換
        RoomStateMachine.transition(room_id, RoomStatus.COMPLETED, db)

        logger.info(
            f"Room {room_id} resolved: Mantri {guesser_id} accused {suspect.name} "
            f"({suspect.role.value}), correct={outcome.correct}"
        )
        return outcome

    @staticmethod
    def get_results(db: Session, room_id: str) -> List[Player]:
        """
        取得最終結果（依座位順序）

        異常：
            RoomNotFound: Room 不存在
            GameInProgress: 尚未結算
        """
        room = RoomManager.get_room(db, room_id)
        if room.status != RoomStatus.COMPLETED:
            raise GameInProgress(room_id)
        return RoomManager.get_players(db, room_id)
