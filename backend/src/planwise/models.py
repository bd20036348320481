"""Pydantic models for API request/response."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

PlanningTopic = Literal["Study", "Fitness", "Work", "Life Tasks"]
PlanDuration = Literal["Daily", "Weekly", "Monthly", "Yearly"]
MarkerStyle = Literal["emoji", "markdown"]


class PlanRequest(BaseModel):
    planning_topic: PlanningTopic
    tasks: list[str] = Field(min_length=1)
    available_time: str = Field(min_length=1)
    plan_duration: PlanDuration
    custom_goals: str | None = None

    @field_validator("tasks")
    @classmethod
    def _tasks_not_blank(cls, v: list[str]) -> list[str]:
        if any(not t.strip() for t in v):
            raise ValueError("Task name cannot be empty.")
        return v

    @field_validator("available_time")
    @classmethod
    def _time_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Available time is required.")
        return v


class GenerateResponse(BaseModel):
    task_id: str


class RenderRequest(BaseModel):
    text: str
    marker_style: MarkerStyle | None = None


class RenderResponse(BaseModel):
    blocks: list[dict[str, Any]]


class UploadResponse(BaseModel):
    plan_id: str
    blocks: list[dict[str, Any]]


class PlanResponse(BaseModel):
    plan_id: str
    text: str
    source: str
    blocks: list[dict[str, Any]]
    html: str
    parent_id: str | None = None


class OptimizeRequest(BaseModel):
    instructions: str = Field(min_length=1)


class SummaryResponse(BaseModel):
    plan_id: str
    summary: str


class TaskListItem(BaseModel):
    task_id: str
    status: str
    plan_id: str | None = None
    failure_reason: str | None = None


class TaskListResponse(BaseModel):
    tasks: list[TaskListItem]
    total: int
