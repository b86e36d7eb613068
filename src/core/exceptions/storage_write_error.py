from datetime import date


class StorageWriteError(Exception):
    def __init__(self, record_date: date, reason: str):
        self.record_date = record_date
        self.reason = reason
        super().__init__(f"Could not persist daily record {record_date.isoformat()}: {reason}")
