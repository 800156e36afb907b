"""Domain errors raised by the store, aggregator and blob store."""


class ReportError(Exception):
    """Base class for report service errors."""


class DataUnavailable(ReportError):
    """The record store could not be queried."""


class InvalidPeriod(ReportError):
    """A month/year pair that names no calendar month."""

    def __init__(self, month: int, year: int):
        super().__init__(f"Invalid period: month={month}, year={year}")
        self.month = month
        self.year = year


class RecordNotFound(ReportError):
    def __init__(self, kind: str, record_id: str):
        super().__init__(f"{kind.capitalize()} not found: {record_id}")
        self.kind = kind
        self.record_id = record_id
