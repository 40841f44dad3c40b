"""Errors raised by the aggregation module and the services built on it."""


class AggregationError(ValueError):
    """Base class for invalid input to a summary or derived-state calculation."""
    pass


class InvalidLoanTerm(AggregationError):
    """Loan has a non-positive number of months."""

    def __init__(self, total_months):
        self.total_months = total_months
        super().__init__(f"Loan term must be at least one month, got {total_months}")


class UnknownMember(AggregationError):
    """Member id is not part of the attendance record."""

    def __init__(self, member_id: str):
        self.member_id = member_id
        super().__init__(f"Member {member_id} is not on this attendance sheet")


class AttendanceClosed(AggregationError):
    """Attendance can no longer be marked for the meeting."""

    def __init__(self, meeting_id: str = None):
        self.meeting_id = meeting_id
        if meeting_id:
            super().__init__(f"Attendance is closed for meeting {meeting_id}")
        else:
            super().__init__("Attendance is closed")


class ConfigMissing(AggregationError):
    """A unit setting (e.g. the weekly due amount) has not been configured."""

    def __init__(self, setting: str):
        self.setting = setting
        super().__init__(f"{setting} is not configured")


class RecordNotFound(ValueError):
    """A row the operation depends on does not exist."""
    pass
