"""Failure records produced by expectations."""

from datetime import UTC, datetime

from pydantic import BaseModel, Field, SerializationInfo, field_serializer


class ExpectationFailure(BaseModel):
    """A single failed expectation recorded against a test.

    Attributes:
    ----------
    operation: str
        Name of the expectation that failed (e.g. ``Equals``).
    message: str
        Full diagnostic as shown to the user.
    expected: str | None
        Description of the expected/reference side, if any.
    actual: str | None
        Description of the actual value, if any.
    test_name: str | None
        Name of the test context the failure was recorded against.
    recorded_at: datetime
        UTC timestamp of the failure.
    """

    operation: str
    message: str
    expected: str | None = None
    actual: str | None = None
    test_name: str | None = None
    recorded_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @field_serializer("expected", "actual")
    def _truncate(self, v: str | None, info: SerializationInfo) -> str | None:
        """Truncate descriptions to 50 characters when serialized with ``truncate``."""
        ctx = info.context or {}
        if v is None or not ctx.get("truncate"):
            return v
        max_len = 50
        if len(v) <= max_len:
            return v
        return v[:max_len] + "..."

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return self.model_dump_json(
            indent=2,
            exclude_none=True,
            context={"truncate": True},
        )
