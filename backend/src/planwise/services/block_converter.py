"""Plan blocks → render payloads (JSON for the web client, HTML fragment).

Presentation only: the parser hands over Block values and this module decides
how they look. Keys are derived from source line numbers so a client can use
them as stable element keys across re-renders.
"""

from __future__ import annotations

import html
from typing import Any

from .emphasis import Emphasized, Span, resolve_emphasis
from .plan_parser import Block, Heading, ListBlock, Paragraph, Spacer


def build_render_payload(blocks: list[Block]) -> list[dict[str, Any]]:
    """Build JSON-ready dicts, one per block.

    Shapes:
    - heading:   {"type", "key", "level", "spans"}
    - list:      {"type", "key", "items": [{"key", "spans"}]}
    - paragraph: {"type", "key", "spans"}
    - spacer:    {"type", "key"}
    """
    return [_payload_for_block(b) for b in blocks]


def _spans_payload(text: str) -> list[dict[str, Any]]:
    return [
        {"text": s.text, "emphasized": isinstance(s, Emphasized)}
        for s in resolve_emphasis(text)
    ]


def _key(line: int) -> str:
    return f"line-{line}"


def _payload_for_block(block: Block) -> dict[str, Any]:
    if isinstance(block, Heading):
        return {"type": "heading", "key": _key(block.line), "level": block.level, "spans": _spans_payload(block.text)}
    if isinstance(block, ListBlock):
        return {
            "type": "list",
            "key": f"ul-{block.line}",
            "items": [
                {"key": f"{_key(block.line + i)}-li", "spans": _spans_payload(item)}
                for i, item in enumerate(block.items)
            ],
        }
    if isinstance(block, Paragraph):
        return {"type": "paragraph", "key": _key(block.line), "spans": _spans_payload(block.text)}
    if isinstance(block, Spacer):
        return {"type": "spacer", "key": _key(block.line)}
    raise TypeError(f"Unknown block type: {type(block).__name__}")


def _inline_html(spans: list[Span]) -> str:
    parts: list[str] = []
    for s in spans:
        text = html.escape(s.text)
        parts.append(f"<strong>{text}</strong>" if isinstance(s, Emphasized) else text)
    return "".join(parts)


def render_html(blocks: list[Block], raw_text: str = "") -> str:
    """Render blocks as an HTML fragment (h1-h3, ul/li, p, strong, spacer div).

    If there are no blocks but raw_text is non-empty, it is shown as one paragraph.
    """
    if not blocks:
        return f"<p>{html.escape(raw_text)}</p>" if raw_text else ""
    out: list[str] = []
    for block in blocks:
        if isinstance(block, Heading):
            tag = f"h{block.level}"
            out.append(f"<{tag}>{_inline_html(resolve_emphasis(block.text))}</{tag}>")
        elif isinstance(block, ListBlock):
            items = "".join(f"<li>{_inline_html(resolve_emphasis(it))}</li>" for it in block.items)
            out.append(f"<ul>{items}</ul>")
        elif isinstance(block, Paragraph):
            out.append(f"<p>{_inline_html(resolve_emphasis(block.text))}</p>")
        elif isinstance(block, Spacer):
            out.append('<div class="spacer"></div>')
    return "\n".join(out)
