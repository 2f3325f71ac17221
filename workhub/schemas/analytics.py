"""Pydantic schema for month-over-month task analytics."""

from pydantic import BaseModel, ConfigDict, Field


class AnalyticsResponse(BaseModel):
    """
    Task counts created this month and their change against last month.

    Every ``*_difference`` is ``this month - last month``. For overdue tasks a
    negative difference is an improvement; the value itself is not inverted.
    """

    model_config = ConfigDict(from_attributes=True)

    task_count: int = Field(..., description="Tasks created this month")
    task_difference: int = Field(..., description="Change against last month")
    assigned_task_count: int = Field(..., description="Tasks assigned to the caller")
    assigned_task_difference: int
    complete_task_count: int = Field(..., description="Tasks in DONE")
    complete_task_difference: int
    incomplete_task_count: int = Field(..., description="Tasks not in DONE")
    incomplete_task_difference: int
    overdue_task_count: int = Field(..., description="Incomplete tasks past their due date")
    overdue_task_difference: int
