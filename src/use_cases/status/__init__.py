from use_cases.status.get_status_history_use_case import GetStatusHistoryUseCase

__all__ = ["GetStatusHistoryUseCase"]
