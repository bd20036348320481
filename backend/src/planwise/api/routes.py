"""API routes: render, upload, plan generation tasks, optimize and summarize."""

from __future__ import annotations

import asyncio
import json
import logging
import uuid
from concurrent.futures import ThreadPoolExecutor
from typing import AsyncGenerator

from fastapi import APIRouter, File, HTTPException, UploadFile
from sse_starlette.sse import EventSourceResponse

from ..models import (
    GenerateResponse,
    OptimizeRequest,
    PlanRequest,
    PlanResponse,
    RenderRequest,
    RenderResponse,
    SummaryResponse,
    TaskListResponse,
    UploadResponse,
)
from ..services.llm_planner import PlanGenerationError, PlanRequestBlocked
from ..services.plan_store import get_plan, save_plan
from ..services.run_planner import (
    PlanNotFound,
    _task_store,
    default_generator,
    get_task,
    list_tasks,
    optimize_plan,
    render_plan,
    resolve_style,
    run_task,
    summarize_plan,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["api"])
_executor = ThreadPoolExecutor(max_workers=4)


def _generation_http_error(e: PlanGenerationError) -> HTTPException:
    if isinstance(e, PlanRequestBlocked):
        return HTTPException(422, str(e))
    return HTTPException(502, str(e))


def _generator_or_503():
    try:
        return default_generator()
    except ValueError as e:
        raise HTTPException(503, str(e))


def _style_or_503(style: str | None = None) -> str:
    try:
        return resolve_style(style)
    except ValueError as e:
        raise HTTPException(503, str(e))


@router.post("/render", response_model=RenderResponse)
async def api_render(body: RenderRequest):
    """Parse plan text into render blocks. Never fails on malformed text."""
    return RenderResponse(blocks=render_plan(body.text, _style_or_503(body.marker_style))["blocks"])


@router.post("/upload", response_model=UploadResponse)
async def api_upload(file: UploadFile = File(...)):
    """Upload a plan text file (.md/.txt). Returns plan_id and rendered blocks."""
    if not file.filename or not (file.filename.endswith(".md") or file.filename.endswith(".txt")):
        raise HTTPException(400, "File must be .md or .txt")
    style = _style_or_503()
    content = await file.read()
    record = save_plan(content, source="uploaded", marker_style=style)
    rendered = render_plan(record["text"], style)
    return UploadResponse(plan_id=record["plan_id"], blocks=rendered["blocks"])


@router.post("/plans", response_model=GenerateResponse)
async def api_generate(body: PlanRequest):
    """Start plan generation. Returns task_id immediately. Subscribe to GET /api/tasks/{task_id}/stream for progress."""
    task_id = uuid.uuid4().hex
    _task_store[task_id] = {"status": "running", "events": [], "result": None}
    _executor.submit(run_task, body, task_id=task_id)
    return GenerateResponse(task_id=task_id)


@router.get("/plans/{plan_id}", response_model=PlanResponse)
async def api_get_plan(plan_id: str):
    plan = get_plan(plan_id)
    if not plan:
        raise HTTPException(404, "Plan not found")
    rendered = render_plan(plan["text"], _style_or_503(plan.get("marker_style")))
    return PlanResponse(
        plan_id=plan["plan_id"],
        text=plan["text"],
        source=plan.get("source", "generated"),
        blocks=rendered["blocks"],
        html=rendered["html"],
        parent_id=plan.get("parent_id"),
    )


@router.post("/plans/{plan_id}/optimize", response_model=PlanResponse)
async def api_optimize(plan_id: str, body: OptimizeRequest):
    """Revise a plan with new instructions. Returns the new plan."""
    if not get_plan(plan_id):
        raise HTTPException(404, "Plan not found")
    generator = _generator_or_503()
    try:
        record = await asyncio.get_running_loop().run_in_executor(
            _executor, optimize_plan, plan_id, body.instructions, generator
        )
    except PlanNotFound:
        raise HTTPException(404, "Plan not found")
    except PlanGenerationError as e:
        raise _generation_http_error(e)
    rendered = render_plan(record["text"], _style_or_503(record.get("marker_style")))
    return PlanResponse(
        plan_id=record["plan_id"],
        text=record["text"],
        source=record["source"],
        blocks=rendered["blocks"],
        html=rendered["html"],
        parent_id=record.get("parent_id"),
    )


@router.post("/plans/{plan_id}/summarize", response_model=SummaryResponse)
async def api_summarize(plan_id: str):
    if not get_plan(plan_id):
        raise HTTPException(404, "Plan not found")
    generator = _generator_or_503()
    try:
        summary = await asyncio.get_running_loop().run_in_executor(_executor, summarize_plan, plan_id, generator)
    except PlanNotFound:
        raise HTTPException(404, "Plan not found")
    except PlanGenerationError as e:
        raise _generation_http_error(e)
    return SummaryResponse(plan_id=plan_id, summary=summary)


@router.get("/tasks/{task_id}/stream")
async def api_task_stream(task_id: str):
    """SSE stream for task progress. Events: progress (step, progress), error, then result (plan_id)."""
    if not get_task(task_id):
        raise HTTPException(404, "Task not found")

    async def event_generator() -> AsyncGenerator[str, None]:
        last_index = 0
        while True:
            t = get_task(task_id)
            if not t:
                break
            events = t.get("events", [])
            for ev in events[last_index:]:
                yield json.dumps(ev, ensure_ascii=False)
            last_index = len(events)
            status = t.get("status", "running")
            if status != "running":
                result = t.get("result")
                if result:
                    yield json.dumps({"kind": "result", "data": result}, ensure_ascii=False)
                break
            await asyncio.sleep(0.3)

    return EventSourceResponse(event_generator())


@router.get("/tasks", response_model=TaskListResponse)
async def api_tasks_list(page: int = 1, size: int = 20):
    """List task history."""
    data = list_tasks(page=page, size=size)
    return TaskListResponse(**data)
