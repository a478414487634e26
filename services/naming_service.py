"""
命名服務：生成 Room Code 和 Player ID

純計算邏輯，不涉及狀態轉換
"""
import random
import string
import uuid


def generate_room_code(length: int = 6) -> str:
    """
    生成隨機的大寫字母 + 數字房間代碼

    範例：A7K2QZ, 9XBC3M

    注意：
    - 不檢查唯一性（由呼叫者負責）
    - 36^6 = 2,176,782,336 種可能，碰撞機率極低
    """
    return ''.join(random.choices(string.ascii_uppercase + string.digits, k=length))


def generate_player_id() -> str:
    """玩家 ID：uuid4 字串，呼叫者只能假設它唯一、可比較"""
    return str(uuid.uuid4())


def normalize_player_name(name) -> str:
    """去掉前後空白；None 視為空字串"""
    return (name or "").strip()
