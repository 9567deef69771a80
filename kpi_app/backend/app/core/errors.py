"""服務層錯誤分類（由 main.create_app 註冊對應的 HTTP 回應）。"""

from __future__ import annotations


class KpiError(Exception):
    """所有 KPI 服務錯誤的基底類別。"""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidDateError(KpiError):
    """日期字串無法解析為日曆日期。"""

    status_code = 400


class StoreUnavailableError(KpiError):
    """紀錄儲存層讀寫失敗（不在服務內重試）。"""

    status_code = 500


class AnalysisUnavailableError(KpiError):
    """文字生成分析服務未設定或呼叫失敗。"""

    status_code = 500


class NotifierNotConfiguredError(KpiError):
    status_code = 400


class NotificationFailedError(KpiError):
    status_code = 500
