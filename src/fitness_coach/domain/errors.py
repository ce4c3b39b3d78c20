"""Error taxonomy for coach pipelines."""


class CoachError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500


class ValidationError(CoachError):
    """Caller input is missing or malformed."""

    status_code = 400

    def __init__(self, message: str, fields: list[str] | None = None) -> None:
        super().__init__(message)
        self.fields = fields or []


class UpstreamError(CoachError):
    """The AI provider or a third-party API failed or returned bad content."""


class PersistenceError(CoachError):
    """A database write failed after the artifact was produced."""

    def __init__(self, member_id: str, message: str | None = None) -> None:
        super().__init__(message or f"Failed to save plan for member {member_id}")
        self.member_id = member_id
