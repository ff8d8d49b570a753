"""Input models for the journal MCP tools."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bujo_mcp.enums import ResponseFormat, TaskStatus

# ============================================================================
# Task Tool Input Models
# ============================================================================


class AddTaskInput(BaseModel):
    """Input model for adding a new task."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., description="Task title (required)", min_length=1, max_length=500)
    notes: str = Field(default="", description="Free-form notes", max_length=5000)
    tags: list[str] | None = Field(default=None, description="Tags to apply", max_length=20)
    due_date: datetime | None = Field(default=None, description="Due date (ISO 8601, e.g. '2025-03-01T17:00:00Z')")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title cannot be empty")
        return v.strip()

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: list[str] | None) -> list[str] | None:
        if v is None:
            return None
        return [tag.strip() for tag in v if tag.strip()]


class ListTasksInput(BaseModel):
    """Input model for listing tasks."""

    model_config = ConfigDict(str_strip_whitespace=True)

    status: TaskStatus | None = Field(default=None, description="Only tasks in this status: pool, today or done")
    tags: list[str] | None = Field(default=None, description="Only tasks carrying all of these tags")
    due_after: datetime | None = Field(default=None, description="Only tasks due on or after this time")
    due_before: datetime | None = Field(default=None, description="Only tasks due on or before this time")
    limit: int | None = Field(default=50, description="Maximum number of tasks to return", ge=1, le=500)
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown', 'concise' or 'json'",
    )


class TaskIdInput(BaseModel):
    """Input model for tools that act on a single task."""

    model_config = ConfigDict(str_strip_whitespace=True)

    task_id: str = Field(..., description="Task UUID", min_length=1)
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown', 'concise' or 'json'",
    )


class SyncInput(BaseModel):
    """Input model for sync tools."""

    model_config = ConfigDict(str_strip_whitespace=True)

    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' for human-readable or 'json' for machine-readable",
    )
