"""
計分服務：Mantri 指認結果的計分邏輯

只負責計算與套用分數，不改變 Room 的狀態（由 GameManager 負責）
"""
from dataclasses import dataclass
from sqlalchemy.orm import Session
from typing import Dict

from models import Player, Role


TARGET_ROLE = Role.CHOR

PAYOUTS: Dict[bool, Dict[Role, int]] = {
    True: {Role.RAJA: 1000, Role.MANTRI: 800, Role.SIPAHI: 500, Role.CHOR: 0},
    False: {Role.RAJA: 1000, Role.MANTRI: 0, Role.SIPAHI: 500, Role.CHOR: 800},
}

CORRECT_MESSAGE = "Correct! Mantri caught the Chor."
WRONG_MESSAGE = "Wrong! Chor steals points."


@dataclass(frozen=True)
class GuessOutcome:
    correct: bool
    suspect_role: Role
    message: str
    deltas: Dict[Role, int]


def calculate_deltas(suspect_role: Role) -> Dict[Role, int]:
    """
    計算每個角色這一局得到的分數

    Payout Table:
    ┌──────────────────┬──────┬────────┬────────┬──────┐
    │                  │ Raja │ Mantri │ Sipahi │ Chor │
    ├──────────────────┼──────┼────────┼────────┼──────┤
    │ 猜中（是 Chor）  │ 1000 │  800   │  500   │   0  │
    │ 猜錯（不是 Chor）│ 1000 │    0   │  500   │  800 │
    └──────────────────┴──────┴────────┴────────┴──────┘

    猜錯時 Chor 偷走 Mantri 的 800 分，Raja 和 Sipahi 不受影響

    參數：
        suspect_role: 被指認玩家的真實角色

    返回：
        {Role: points}，四個角色都有值
    """
    return dict(PAYOUTS[suspect_role == TARGET_ROLE])


def apply_round_scores(room_id: str, suspect_role: Role, db: Session) -> GuessOutcome:
    """
    把這一局的分數加到房間內四位玩家身上

    用已分配的 role 欄位當 join key（不重新推導角色），
    以 score = score + points 在資料庫內累加

    注意：
    - 只 flush 不 commit（讓外層 transaction 處理）
    - 冪等性由呼叫者負責（GameManager 會先檢查 Room 是否已 COMPLETED）

    參數：
        room_id: 房間代碼
        suspect_role: 被指認玩家的真實角色
        db: SQLAlchemy Session

    返回：
        GuessOutcome

    副作用：
        更新 Player.score 欄位
    """
    deltas = calculate_deltas(suspect_role)

    for role, points in deltas.items():
        db.query(Player).filter(
            Player.room_id == room_id,
            Player.role == role
        ).update(
            {Player.score: Player.score + points},
            synchronize_session=False
        )

    db.flush()

    correct = suspect_role == TARGET_ROLE
    return GuessOutcome(
        correct=correct,
        suspect_role=suspect_role,
        message=CORRECT_MESSAGE if correct else WRONG_MESSAGE,
        deltas=deltas
    )
