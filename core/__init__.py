"""
核心業務邏輯層

這個 package 包含所有核心業務邏輯，包括：
- 狀態機：集中管理所有狀態轉換
- Manager：管理 Room 與遊戲流程（分配角色、指認、結算）
- Locks：並發控制工具
- Exceptions：業務異常
"""
