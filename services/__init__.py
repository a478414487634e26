"""
服務層

這個 package 包含純計算邏輯，不負責狀態轉換：
- RoleDeckService：角色洗牌
- ScoringService：計分邏輯
- NamingService：房間代碼與玩家 ID 生成
"""
