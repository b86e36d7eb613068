from use_cases.record.aggregate_check_entry_use_case import AggregateCheckEntryUseCase
from use_cases.record.enforce_retention_use_case import EnforceRetentionUseCase

__all__ = [
    "AggregateCheckEntryUseCase",
    "EnforceRetentionUseCase",
]
