"""
角色牌服務：產生四張角色牌的隨機排列

純計算邏輯，不涉及狀態轉換
"""
import random
from typing import List, Optional

from models import Role


ROLE_DECK = (Role.RAJA, Role.MANTRI, Role.SIPAHI, Role.CHOR)


def generate_roles(rng: Optional[random.Random] = None) -> List[Role]:
    """
    產生 4 個角色的隨機排列（每次回傳新的 list）

    random.shuffle 是 Fisher–Yates 洗牌，24 種排列機率相同

    參數：
        rng: 可注入的亂數來源（測試用），預設使用 module-level random

    返回：
        [Role, Role, Role, Role]，剛好是 Raja / Mantri / Sipahi / Chor 各一張

    範例：
        generate_roles() -> [Role.CHOR, Role.RAJA, Role.SIPAHI, Role.MANTRI]
    """
    deck = list(ROLE_DECK)
    (rng or random).shuffle(deck)
    return deck
