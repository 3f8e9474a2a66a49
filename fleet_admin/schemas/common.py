from pydantic import BaseModel, ConfigDict


class ActionResult(BaseModel):
    """Outcome of an admin action. Exactly one of success/error is set."""
    model_config = ConfigDict(extra="allow")

    success: str | bool | None = None
    error: str | None = None
    status: str | None = None

    @classmethod
    def ok(cls, message: str | bool = True, **extra) -> "ActionResult":
        return cls(success=message, **extra)

    @classmethod
    def fail(cls, message: str, **extra) -> "ActionResult":
        return cls(error=message, **extra)

    @property
    def is_error(self) -> bool:
        return self.error is not None
