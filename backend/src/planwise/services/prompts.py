"""Prompt builders for plan generation, optimization and summaries."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..models import PlanRequest

EMOJI_PLAN_PROMPT = """You are an AI planning assistant. Generate a plan based on the following information.
VERY IMPORTANT:
- Do NOT use Markdown headings like #, ##, ###.
- Instead, use emojis to denote structure:
  - For the main plan title (if any), start the line with 📜 followed by a space.
  - For major sections (like days of the week or main time blocks), start the line with 📅 followed by a space.
  - For sub-sections (like Morning, Afternoon, Evening), start the line with ☀️ (Morning), 🌤️ (Afternoon), or 🌙 (Evening) followed by a space.
  - For a 'Tips for Success' section, if generated, start its title with 💡 followed by a space. List individual tips also using Markdown lists with a hyphen and a space ('- ').
- Do NOT use Markdown bold like **text**.
- Instead, to emphasize time or key activities, use the ⏰ emoji before the time/activity.
- Use Markdown lists with a hyphen and a space ('- ') for individual tasks and tips.

Example for a Daily plan:
📅 Monday, October 26th
☀️ Morning
- ⏰ 08:00 - 09:00: Breakfast and prepare for the day
- ⏰ 09:00 - 10:00: Deep work session 1
🌤️ Afternoon
- ⏰ 13:00 - 14:00: Lunch break
- ⏰ 14:00 - 15:00: Meetings
🌙 Evening
- ⏰ 19:00 - 20:00: Dinner
- ⏰ 20:00 - 21:00: Relax and unwind

Ensure the output is clean and well-structured, following these emoji and list guidelines.
"""

EMOJI_PLAN_FOOTER = """Generate a detailed and actionable plan.
After generating the core plan, include a 'Tips for Success' section. This section should start with '💡 Tips for Success' and contain 2-3 actionable tips relevant to the plan, formatted as a Markdown list."""

MARKDOWN_PLAN_PROMPT = """You are an AI planning assistant. Generate a plan based on the following information using Markdown formatting.
For {plan_duration} plans, try to structure the output in a way that could be easily read in a table-like format.
Use Markdown headings for titles and sections (#, ##, ###). Use bold for emphasis on time or key activities. Use lists for tasks.

Example for a Daily plan:
## [Day Name or Date, e.g., Monday, October 26th]
### Morning
- **[Time Range e.g., 08:00 - 09:00]**: [Activity] - [Optional: Details/Notes]
- **[Time Range e.g., 09:00 - 10:00]**: [Activity] - [Optional: Details/Notes]
### Afternoon
- **[Time Range e.g., 13:00 - 14:00]**: [Activity] - [Optional: Details/Notes]
### Evening
- **[Time Range e.g., 19:00 - 20:00]**: [Activity] - [Optional: Details/Notes]

Ensure the output is clean, well-structured Markdown.
"""

MARKDOWN_PLAN_FOOTER = "Generate a detailed and actionable plan as Markdown."

OPTIMIZE_PROMPT = """You are an AI assistant specialized in optimizing plans.

Given the original plan and the optimization instructions, revise the plan accordingly.
Maintain the original format and structure of the plan as much as possible, while incorporating the new instructions.

Original Plan:
{original_plan}

Optimization Instructions:
{instructions}

Optimized Plan:
"""

SUMMARIZE_PROMPT = "Summarize the following plan in a concise manner:\n\n{plan}"


def _request_details(request: PlanRequest) -> str:
    tasks = "\n".join(f"- {t}" for t in request.tasks)
    return (
        f"Planning Topic: {request.planning_topic}\n"
        f"Tasks:\n{tasks}\n"
        f"Available Time: {request.available_time}\n"
        f"Plan Duration: {request.plan_duration}\n"
        f"Custom Goals: {request.custom_goals or 'None'}\n"
    )


def build_generate_prompt(request: PlanRequest, style: str = "emoji") -> str:
    """Prompt asking for a plan in the given line convention ("emoji" or "markdown")."""
    if style == "markdown":
        head = MARKDOWN_PLAN_PROMPT.format(plan_duration=request.plan_duration)
        footer = MARKDOWN_PLAN_FOOTER
    else:
        head, footer = EMOJI_PLAN_PROMPT, EMOJI_PLAN_FOOTER
    return f"{head}\n{_request_details(request)}\n{footer}"


def build_optimize_prompt(original_plan: str, instructions: str) -> str:
    return OPTIMIZE_PROMPT.format(original_plan=original_plan, instructions=instructions)


def build_summarize_prompt(plan: str) -> str:
    return SUMMARIZE_PROMPT.format(plan=plan)
