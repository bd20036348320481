import pytest

from planwise.services.plan_parser import (
    EMOJI_MARKERS,
    MARKDOWN_MARKERS,
    BlockKind,
    ClassifiedLine,
    Heading,
    ListBlock,
    Paragraph,
    Spacer,
    assemble_blocks,
    classify_line,
    get_marker_table,
    parse_plan,
    split_lines,
)


@pytest.mark.parametrize(
    "line, kind, content",
    [
        ("📜 Weekly Plan", BlockKind.HEADING_1, "Weekly Plan"),
        ("📅 Monday", BlockKind.HEADING_2, "Monday"),
        ("💡 Tips for Success", BlockKind.HEADING_2, "Tips for Success"),
        ("☀️ Morning", BlockKind.HEADING_3, "Morning"),
        ("🌤️ Afternoon", BlockKind.HEADING_3, "Afternoon"),
        ("🌙 Evening", BlockKind.HEADING_3, "Evening"),
        ("☀ Morning", BlockKind.HEADING_3, "Morning"),
        ("- ⏰ 08:00: Run", BlockKind.LIST_ITEM, "⏰ 08:00: Run"),
        ("", BlockKind.SPACER, ""),
        ("   \t", BlockKind.SPACER, ""),
        ("Just text", BlockKind.PARAGRAPH, "Just text"),
        ("-no space", BlockKind.PARAGRAPH, "-no space"),
        ("  - indented", BlockKind.PARAGRAPH, "  - indented"),
    ],
)
def test_classify_line_emoji(line, kind, content):
    got = classify_line(line)
    assert got.kind == kind
    assert got.content == content


def test_classify_strips_single_carriage_return():
    assert classify_line("📅 Monday\r").content == "Monday"
    assert classify_line("\r").kind == BlockKind.SPACER
    assert classify_line("text\r\r").content == "text\r"


def test_heading_3_wins_over_later_title_glyph():
    got = classify_line("🌙 Evening 📜 review")
    assert got.kind == BlockKind.HEADING_3
    assert got.content == "Evening 📜 review"


def test_marker_glyph_without_space_is_paragraph():
    assert classify_line("📜Title").kind == BlockKind.PARAGRAPH


def test_marker_only_line_is_empty_heading():
    got = classify_line("📅 ")
    assert got.kind == BlockKind.HEADING_2
    assert got.content == ""


@pytest.mark.parametrize(
    "line, kind, content",
    [
        ("# Title", BlockKind.HEADING_1, "Title"),
        ("## Week 1", BlockKind.HEADING_2, "Week 1"),
        ("### Morning", BlockKind.HEADING_3, "Morning"),
        ("#### Deep", BlockKind.PARAGRAPH, "#### Deep"),
        ("* star item", BlockKind.LIST_ITEM, "star item"),
        ("- dash item", BlockKind.LIST_ITEM, "dash item"),
        ("📅 Monday", BlockKind.PARAGRAPH, "📅 Monday"),
    ],
)
def test_classify_line_markdown(line, kind, content):
    got = classify_line(line, MARKDOWN_MARKERS)
    assert (got.kind, got.content) == (kind, content)


def test_get_marker_table():
    assert get_marker_table("emoji") is EMOJI_MARKERS
    assert get_marker_table("Markdown") is MARKDOWN_MARKERS
    assert get_marker_table(None) is EMOJI_MARKERS
    with pytest.raises(ValueError):
        get_marker_table("rst")


def test_split_lines():
    assert split_lines("") == []
    assert [ln.text for ln in split_lines("a\nb")] == ["a", "b"]
    assert [ln.text for ln in split_lines("a\n")] == ["a"]
    assert [ln.text for ln in split_lines("\n")] == [""]
    assert [ln.index for ln in split_lines("a\n\nb")] == [0, 1, 2]


def test_list_grouping():
    assert parse_plan("- a\n- b\n- c") == [ListBlock(("a", "b", "c"), 0)]


def test_list_closing_by_spacer():
    blocks = parse_plan("- a\n\n- b")
    assert blocks == [ListBlock(("a",), 0), Spacer(1), ListBlock(("b",), 2)]


def test_list_closed_by_heading_and_paragraph():
    blocks = parse_plan("- a\n📅 Tue\n- b\nnote\n- c")
    assert [type(b) for b in blocks] == [ListBlock, Heading, ListBlock, Paragraph, ListBlock]
    assert all(len(b.items) == 1 for b in blocks if isinstance(b, ListBlock))


def test_empty_input_and_single_blank_line():
    assert parse_plan("") == []
    assert parse_plan("\n") == [Spacer(0)]
    assert parse_plan("   ") == [Spacer(0)]


def test_crlf_input():
    blocks = parse_plan("📜 Plan\r\n- a\r\n- b\r\n")
    assert blocks == [Heading(1, "Plan", 0), ListBlock(("a", "b"), 1)]


def test_sample_plan_structure(sample_plan):
    blocks = parse_plan(sample_plan)
    assert blocks == [
        Heading(1, "Study Plan", 0),
        Heading(2, "Monday", 1),
        Heading(3, "Morning", 2),
        ListBlock(("⏰ 08:00 - 09:00: **Review** notes", "⏰ 09:00 - 10:00: Practice problems"), 3),
        Spacer(5),
        Heading(3, "Evening", 6),
        ListBlock(("⏰ 19:00 - 20:00: Flashcards",), 7),
        Heading(2, "Tips for Success", 8),
        ListBlock(("Take breaks",), 9),
        Paragraph("Stay consistent.", 10),
    ]


def test_markdown_plan_text_under_emoji_table_is_all_paragraphs_and_lists():
    blocks = parse_plan("# Title\n## Day\n- **08:00**: Run")
    assert blocks == [Paragraph("# Title", 0), Paragraph("## Day", 1), ListBlock(("**08:00**: Run",), 2)]


def test_block_count_and_order_match_classification(sample_plan):
    classified = [classify_line(ln.text, index=ln.index) for ln in split_lines(sample_plan)]
    collapsed = []
    for c in classified:
        if c.kind == BlockKind.LIST_ITEM and collapsed and collapsed[-1] == BlockKind.LIST_ITEM:
            continue
        collapsed.append(c.kind)
    blocks = parse_plan(sample_plan)
    assert len(blocks) == len(collapsed)
    kind_of = {Heading: "h", ListBlock: BlockKind.LIST_ITEM, Paragraph: BlockKind.PARAGRAPH, Spacer: BlockKind.SPACER}
    for block, kind in zip(blocks, collapsed):
        expected = kind_of[type(block)]
        if expected == "h":
            assert kind.value == f"heading_{block.level}"
        else:
            assert kind == expected


def test_assemble_blocks_empty():
    assert assemble_blocks([]) == []


def test_assemble_blocks_from_classified_lines():
    lines = [
        ClassifiedLine(BlockKind.LIST_ITEM, "x", 4),
        ClassifiedLine(BlockKind.LIST_ITEM, "y", 5),
        ClassifiedLine(BlockKind.SPACER, "", 6),
    ]
    assert assemble_blocks(lines) == [ListBlock(("x", "y"), 4), Spacer(6)]


def test_parse_is_deterministic(sample_plan):
    assert parse_plan(sample_plan) == parse_plan(sample_plan)


def test_blocks_are_immutable():
    block = parse_plan("📜 Plan")[0]
    with pytest.raises(AttributeError):
        block.text = "other"
