"""Task-related Marshmallow schemas."""

from marshmallow import EXCLUDE, Schema, ValidationError, fields, post_load

from task_manager.models import CreateTaskInput, TaskStatus, UpdateTaskInput


def validate_utf8(value: str) -> None:
    """Reject strings holding lone surrogates, which cannot be stored."""
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        raise ValidationError("Text must be valid UTF-8.") from None


class TaskSchema(Schema):
    """Schema for task serialization."""

    id = fields.UUID(dump_only=True)
    title = fields.Str(dump_only=True)
    description = fields.Str(dump_only=True)
    status = fields.Enum(TaskStatus, by_value=True, dump_only=True)
    created_at = fields.DateTime(dump_only=True, format="iso")
    updated_at = fields.DateTime(dump_only=True, format="iso")


class TaskCreateSchema(Schema):
    """Schema for task creation payloads.

    Title rules live in the service, so a missing title loads as an empty
    string and is rejected there as too short.
    """

    class Meta:
        unknown = EXCLUDE

    title = fields.Str(load_default="", allow_none=True, validate=validate_utf8)
    description = fields.Str(load_default="", allow_none=True, validate=validate_utf8)

    @post_load
    def make_input(self, data, **kwargs) -> CreateTaskInput:
        return CreateTaskInput(
            title=data.get("title") or "",
            description=data.get("description") or "",
        )


class TaskUpdateSchema(Schema):
    """Schema for partial task update payloads.

    Absent and null fields are both left unchanged.
    """

    class Meta:
        unknown = EXCLUDE

    title = fields.Str(allow_none=True, validate=validate_utf8)
    description = fields.Str(allow_none=True, validate=validate_utf8)
    status = fields.Str(allow_none=True, validate=validate_utf8)

    @post_load
    def make_input(self, data, **kwargs) -> UpdateTaskInput:
        return UpdateTaskInput(
            title=data.get("title"),
            description=data.get("description"),
            status=data.get("status"),
        )
