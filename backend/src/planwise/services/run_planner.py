"""Run plan tasks: build prompt, call the generator, parse and store the plan, record events."""

from __future__ import annotations

import logging
import uuid
from typing import Any, Callable

from .. import config
from ..models import PlanRequest
from .block_converter import build_render_payload, render_html
from .llm_planner import PlanGenerationError, PlanGenerator, create_generator
from .plan_parser import get_marker_table, parse_plan
from .plan_store import get_plan, save_plan
from .prompts import build_generate_prompt, build_optimize_prompt, build_summarize_prompt

logger = logging.getLogger(__name__)

# In-memory task store for status and result
_task_store: dict[str, dict[str, Any]] = {}

STEP_PROGRESS = {"prompting": 10, "generating": 50, "parsing": 80, "rendering": 100}
MAX_PAGE_SIZE = 100


class PlanNotFound(LookupError):
    pass


def default_generator() -> PlanGenerator:
    """Generator for the configured provider. Raises ValueError if its key is missing."""
    return create_generator(
        config.LLM_PROVIDER,
        gemini_api_key=config.GEMINI_API_KEY,
        gemini_model=config.GEMINI_MODEL,
        openai_api_key=config.OPENAI_API_KEY,
        openai_model=config.LLM_MODEL,
    )


def resolve_style(style: str | None = None) -> str:
    """Name of the marker table for `style`, falling back to PLAN_MARKER_STYLE. Raises ValueError if unknown."""
    return get_marker_table(style or config.PLAN_MARKER_STYLE).name


def render_plan(text: str, style: str | None = None) -> dict[str, Any]:
    """Parse plan text and return {"blocks": payload, "html": fragment}."""
    markers = get_marker_table(resolve_style(style))
    blocks = parse_plan(text, markers)
    return {"blocks": build_render_payload(blocks), "html": render_html(blocks, raw_text=text)}


def run_task(
    request: PlanRequest,
    task_id: str | None = None,
    generator: PlanGenerator | None = None,
    style: str | None = None,
    on_event: Callable[[str, dict[str, Any]], None] | None = None,
) -> str:
    """Generate a plan for `request`. If task_id is provided, use it and append events to that task's store."""
    task_id = task_id or uuid.uuid4().hex
    events: list[dict[str, Any]] = []
    _task_store[task_id] = {"status": "running", "events": events, "result": None}

    def emit(kind: str, data: dict[str, Any]) -> None:
        events.append({"kind": kind, "data": data})
        if on_event:
            on_event(kind, data)

    def step(name: str) -> None:
        emit("progress", {"step": name, "progress": STEP_PROGRESS[name]})

    try:
        style = resolve_style(style)
        step("prompting")
        prompt = build_generate_prompt(request, style=style)
        gen = generator or default_generator()
        step("generating")
        text = gen.generate(prompt)
        step("parsing")
        blocks = parse_plan(text, get_marker_table(style))
        record = save_plan(text, source="generated", request=request.model_dump(), marker_style=style)
        step("rendering")
        result = {
            "status": "success",
            "plan_id": record["plan_id"],
            "block_count": len(blocks),
            "failure_reason": "",
            "error_kind": "",
        }
        _task_store[task_id]["result"] = result
        _task_store[task_id]["status"] = "completed"
        logger.info("Task %s produced plan %s (%d blocks)", task_id, record["plan_id"], len(blocks))
    except PlanGenerationError as e:
        _fail(task_id, str(e), e.kind, emit)
    except ValueError as e:
        _fail(task_id, str(e), "config", emit)
    except Exception as e:
        logger.exception("Task %s crashed", task_id)
        _fail(task_id, f"An unexpected error occurred: {e}", "failed", emit)
    return task_id


def _fail(task_id: str, message: str, kind: str, emit: Callable[[str, dict[str, Any]], None]) -> None:
    logger.warning("Task %s failed (%s): %s", task_id, kind, message)
    _task_store[task_id]["status"] = "failed"
    _task_store[task_id]["result"] = {"status": "failed", "failure_reason": message, "error_kind": kind}
    emit("error", {"message": message, "error_kind": kind})


def get_task(task_id: str) -> dict[str, Any] | None:
    return _task_store.get(task_id)


def list_tasks(page: int = 1, size: int = 20) -> dict[str, Any]:
    items = list(_task_store.items())
    items.reverse()
    total = len(items)
    page = max(page, 1)
    size = min(max(size, 1), MAX_PAGE_SIZE)
    start = (page - 1) * size
    end = start + size
    tasks = []
    for tid, data in items[start:end]:
        row = {"task_id": tid, "status": data.get("status", "unknown")}
        result = data.get("result")
        if result:
            row["plan_id"] = result.get("plan_id")
            row["failure_reason"] = result.get("failure_reason") or None
        tasks.append(row)
    return {"tasks": tasks, "total": total}


def optimize_plan(plan_id: str, instructions: str, generator: PlanGenerator) -> dict[str, Any]:
    """Revise a stored plan with the given instructions; stores and returns the new plan record."""
    original = get_plan(plan_id)
    if not original:
        raise PlanNotFound(plan_id)
    text = generator.generate(build_optimize_prompt(original["text"], instructions))
    return save_plan(
        text,
        source="optimized",
        request=original.get("request"),
        parent_id=plan_id,
        marker_style=original.get("marker_style"),
    )


def summarize_plan(plan_id: str, generator: PlanGenerator) -> str:
    plan = get_plan(plan_id)
    if not plan:
        raise PlanNotFound(plan_id)
    return generator.generate(build_summarize_prompt(plan["text"])).strip()
