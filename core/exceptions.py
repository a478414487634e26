"""
自定義異常類別

集中管理所有業務邏輯異常，方便 API 層統一處理

每個異常帶有：
- kind：機器可讀的錯誤種類（ValidationError、NotFoundError ...）
- status_code：API 層對應的 HTTP 狀態碼
"""


class RajaMantriException(Exception):
    """所有遊戲異常的基類"""
    kind = "GameError"
    status_code = 400


# ============ 錯誤種類 ============

class ValidationError(RajaMantriException):
    """輸入不合法或缺漏"""
    kind = "ValidationError"
    status_code = 400


class NotFoundError(RajaMantriException):
    """房間或玩家不存在"""
    kind = "NotFoundError"
    status_code = 404


class CapacityError(RajaMantriException):
    """房間已滿"""
    kind = "CapacityError"
    status_code = 400


class IncompletePlayersError(RajaMantriException):
    """分配角色時玩家不足 4 人"""
    kind = "IncompletePlayersError"
    status_code = 400


class AuthorizationError(RajaMantriException):
    """玩家沒有執行此操作的身分"""
    kind = "AuthorizationError"
    status_code = 403


class NotReadyError(RajaMantriException):
    """角色尚未分配"""
    kind = "NotReadyError"
    status_code = 400


class InvalidStateError(RajaMantriException):
    """房間狀態不允許此操作"""
    kind = "InvalidStateError"
    status_code = 409


class GameInProgressError(RajaMantriException):
    """遊戲尚未結束"""
    kind = "GameInProgressError"
    status_code = 400


# ============ Room 相關異常 ============

class RoomNotFound(NotFoundError):
    """房間不存在"""
    def __init__(self, room_id):
        self.room_id = room_id
        super().__init__(f"Room {room_id} not found")


class RoomFull(CapacityError):
    """房間已有 4 位玩家"""
    def __init__(self, room_id):
        self.room_id = room_id
        super().__init__("Room is full")


class IncompletePlayers(IncompletePlayersError):
    """玩家數量不足（必須剛好 4 人）"""
    def __init__(self, player_count):
        self.player_count = player_count
        super().__init__("Need 4 players")


# ============ 狀態轉換異常 ============

class InvalidStateTransition(InvalidStateError):
    """非法的狀態轉換"""
    pass


class RolesAlreadyAssigned(InvalidStateError):
    """角色已經分配過了"""
    def __init__(self, room_id):
        self.room_id = room_id
        super().__init__("Roles already assigned")


class GameAlreadyResolved(InvalidStateError):
    """Mantri 已經猜過了（每場遊戲只能猜一次）"""
    def __init__(self, room_id):
        self.room_id = room_id
        super().__init__("Game already resolved")


class RolesNotAssigned(NotReadyError):
    """角色尚未分配"""
    def __init__(self, room_id):
        self.room_id = room_id
        super().__init__("Wait for game start")


class GameInProgress(GameInProgressError):
    """遊戲進行中，還沒有結果"""
    def __init__(self, room_id):
        self.room_id = room_id
        super().__init__("Game running")


# ============ Player 相關異常 ============

class PlayerNotFound(NotFoundError):
    """玩家不存在"""
    def __init__(self, player_id):
        self.player_id = player_id
        super().__init__("Player not found")


class SuspectNotFound(NotFoundError):
    """被指認的玩家不在房間內"""
    def __init__(self, name):
        self.name = name
        super().__init__("Suspect not found")


class InvalidPlayerName(ValidationError):
    """玩家名稱為空"""
    def __init__(self):
        super().__init__("Name required")


class DuplicatePlayerName(ValidationError):
    """同一房間內名稱重複"""
    def __init__(self, name):
        self.name = name
        super().__init__(f"Name {name} is already taken in this room")


class NotMantri(AuthorizationError):
    """只有 Mantri 可以指認 Chor"""
    def __init__(self, player_id):
        self.player_id = player_id
        super().__init__("Not Mantri")
