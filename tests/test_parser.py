"""Tests for status markdown parser."""

import pytest

from markdeck.ids import IdGenerator
from markdeck.parser import (
    current_lane_for_line,
    description_block,
    extract_links,
    extract_metadata,
    parse_card,
    parse_project,
    parse_swimlanes,
    split_front_matter,
)


def test_parse_basic_board():
    project = parse_project("# P\n## Lane\n- 🔵 A\n- 🟢 B")
    assert [(c.title, c.status) for c in project.cards] == [("A", "todo"), ("B", "done")]
    assert [(s.id, s.title) for s in project.swimlanes] == [("lane", "Lane")]
    assert project.board_mode == "full"
    assert project.metadata.title == "P"


def test_parse_keeps_raw_markdown():
    text = "# P\n## Lane\n- 🔵 A\n"
    assert parse_project(text).raw_markdown == text


def test_parse_checkbox_board_is_simple():
    project = parse_project("# P\n## T\n- [ ] A\n- [x] B")
    assert project.board_mode == "simple"
    assert [c.original_format for c in project.cards] == ["checkbox", "checkbox"]
    assert [c.status for c in project.cards] == ["todo", "done"]


def test_board_mode_one_emoji_makes_full():
    project = parse_project("## T\n- [ ] A\n- [x] B\n- 🔵 C")
    assert project.board_mode == "full"


def test_board_mode_empty_is_full():
    assert parse_project("").board_mode == "full"
    assert parse_project("# Only prose\n\nNothing here.").board_mode == "full"


def test_parse_rejects_non_string():
    with pytest.raises(TypeError):
        parse_project(None)
    with pytest.raises(TypeError):
        parse_project(b"# P")


def test_card_ids_and_lines():
    project = parse_project("## Lane\n- 🔵 A\n- 🔵 A\n- 🟡 B")
    assert [c.id for c in project.cards] == ["lane-a", "lane-a-1", "lane-b"]
    assert [c.original_line for c in project.cards] == [1, 2, 3]


def test_duplicate_lane_headings_collapse():
    project = parse_project("# P\n## L1\n- 🔵 A\n## L2\n- 🔵 B\n## L1\n- 🔵 C")
    assert [s.id for s in project.swimlanes] == ["l1", "l2"]
    assert [s.order for s in project.swimlanes] == [0, 1]
    assert [c.lane_id for c in project.cards] == ["l1", "l2", "l1"]


def test_no_headings_gives_default_lane():
    project = parse_project("- 🔵 A\n- [x] B")
    assert [(s.id, s.title) for s in project.swimlanes] == [("default", "All Items")]
    assert all(c.lane_id == "default" for c in project.cards)


def test_h1_and_h4_are_not_lanes():
    lanes = parse_swimlanes("# Title\n#### Deep\n### Three\n## Two".split("\n"))
    assert [s.title for s in lanes] == ["Three", "Two"]


def test_cards_before_first_heading_use_first_lane():
    project = parse_project("- 🔵 Early\n## Lane\n- 🔵 Late")
    assert [c.lane_id for c in project.cards] == ["lane", "lane"]


def test_current_lane_for_line():
    lines = "# P\n- x\n## A\n- y\n### B\n- z".split("\n")
    lanes = parse_swimlanes(lines)
    assert current_lane_for_line(lines, 1, lanes) == "a"
    assert current_lane_for_line(lines, 3, lanes) == "a"
    assert current_lane_for_line(lines, 5, lanes) == "b"


def test_legacy_blocked_marker():
    card = parse_project("## L\n- ❌ Something").cards[0]
    assert (card.status, card.blocked, card.title) == ("todo", True, "Something")


def test_legacy_markers_are_notes():
    project = parse_project("## L\n- ✅ Old done\n- ⚠️ Old warning")
    assert project.cards == []
    assert len(project.notes) == 1
    assert "Old done" in project.notes[0].content


def test_bullet_without_title_is_not_a_card():
    assert parse_project("## L\n- 🔵\n- [ ]").cards == []


def test_star_bullets_and_indent():
    project = parse_project("## L\n* 🟡 Star\n    - 🔴 Indented")
    assert [c.title for c in project.cards] == ["Star", "Indented"]
    assert project.cards[1].blocked


def test_done_is_never_blocked():
    project = parse_project("## L\n- ❌ 🟢 Finished")
    assert project.cards[0].status == "done"
    assert project.cards[0].blocked is False


def test_description_collected():
    text = "## L\n- 🔵 A\n  first line\n\n    second line\n- 🔵 B"
    cards = parse_project(text).cards
    assert cards[0].description == "first line\nsecond line"
    assert cards[1].description is None


def test_description_stops_at_heading():
    text = "## L\n- 🔵 A\n  details\n## Next\n- 🟢 B"
    project = parse_project(text)
    assert project.cards[0].description == "details"
    assert [s.id for s in project.swimlanes] == ["l", "next"]
    assert project.cards[1].lane_id == "next"


def test_description_block_leaves_trailing_blanks():
    lines = "- 🔵 A\n  one\n\n\nText".split("\n")
    rows, end = description_block(lines, 0, 0)
    assert rows == [(1, "one")]
    assert end == 2


def test_nested_cards_are_cards():
    project = parse_project("## L\n- 🔵 Parent\n    - 🟡 Child\n- 🟢 Sibling")
    assert [c.title for c in project.cards] == ["Parent", "Child", "Sibling"]
    assert project.cards[0].description == "- 🟡 Child"
    assert project.notes == []


def test_links():
    text = "## L\n- 🔵 See https://example.com/a\n    and [docs](https://docs.example.com/x) http://example.com/a"
    card = parse_project(text).cards[0]
    assert card.links == ["https://example.com/a", "https://docs.example.com/x", "http://example.com/a"]


def test_extract_links_none():
    assert extract_links("no links here") == []


def test_parse_card_directly():
    lines = ["- [X] Ship it", "    notes"]
    card = parse_card(lines[0], 0, lines, "rel", IdGenerator())
    assert card.id == "rel-ship-it"
    assert card.status == "done"
    assert card.original_format == "checkbox"
    assert card.description == "notes"


def test_parse_card_not_a_bullet():
    assert parse_card("🔵 A", 0, ["🔵 A"], "l", IdGenerator()) is None


def test_metadata():
    lines = "# My Project\n\nVersion: 1.2\n**Last Updated:** 2024-03-05\n".split("\n")
    meta = extract_metadata(lines)
    assert meta.title == "My Project"
    assert meta.version == "1.2"
    assert meta.last_updated == "2024-03-05"


def test_metadata_version_keeps_emphasis():
    meta = extract_metadata(["**Version:** 2.0"])
    assert meta.version == "** 2.0"


def test_metadata_defaults():
    meta = extract_metadata(["no header", "here"])
    assert meta.title == "Untitled Project"
    assert meta.version is None
    assert meta.last_updated is None


def test_metadata_only_reads_header():
    lines = ["intro"] * 10 + ["# Late Title"]
    assert extract_metadata(lines).title == "Untitled Project"


def test_front_matter():
    text = "---\ntitle: From YAML\nversion: 3\nowner: me\n---\n## L\n- 🔵 A"
    project = parse_project(text)
    assert project.metadata.title == "From YAML"
    assert project.metadata.version == "3"
    assert project.metadata.extra["owner"] == "me"
    assert project.cards[0].original_line == 6


def test_front_matter_h1_wins():
    project = parse_project("---\ntitle: From YAML\n---\n# From Heading")
    assert project.metadata.title == "From Heading"


def test_front_matter_invalid_or_unclosed():
    assert split_front_matter("---\nbad: [\n---".split("\n")) == (0, {})
    assert split_front_matter("---\nkey: value\n# T".split("\n")) == (0, {})


def test_fenced_code_is_not_interpreted():
    text = "## L\n```\n## Fake\n- 🔵 Not a card\n```\n- 🔵 Real"
    project = parse_project(text)
    assert [c.title for c in project.cards] == ["Real"]
    assert [s.id for s in project.swimlanes] == ["l"]


def test_notes_from_plain_bullets():
    text = "# P\n\nIntro.\n\n## Lane\n- Plain bullet\n  more text\n- 🔵 A"
    project = parse_project(text)
    assert len(project.notes) == 1
    note = project.notes[0]
    assert note.title == "Lane"
    assert note.section == ""
    assert note.content == "- Plain bullet\n  more text"


def test_note_section_path():
    project = parse_project("## Area\n### Topic\n- remember this")
    note = project.notes[0]
    assert (note.section, note.title) == ("Area", "Topic")


def test_note_without_heading():
    project = parse_project("- loose bullet")
    assert project.notes[0].title == "Notes"


def test_note_includes_open_fence():
    project = parse_project("## L\n- example:\n```\n- 🔵 x\n```")
    assert project.cards == []
    assert project.notes[0].content == "- example:\n```\n- 🔵 x\n```"


def test_description_lines_are_not_notes():
    project = parse_project("## L\n- 🔵 A\n    - plain sub bullet")
    assert project.notes == []


def test_crlf_input():
    project = parse_project("## L\r\n- 🔵 A\r\n    detail\r\n")
    card = project.cards[0]
    assert card.title == "A"
    assert card.description == "detail"
    assert card.lane_id == "l"


def test_horizontal_rules_are_not_front_matter():
    text = "---\n## Lane\n- 🔵 A\nplain words\n---\n- 🟢 B"
    assert split_front_matter(text.split("\n")) == (0, {})
    project = parse_project(text)
    assert [c.title for c in project.cards] == ["A", "B"]
    assert [s.id for s in project.swimlanes] == ["lane"]
    assert project.metadata.extra == {}


def test_scalar_front_matter_is_ignored():
    project = parse_project("---\njust a sentence\n---\n# Title\n- 🔵 A")
    assert project.metadata.title == "Title"
    assert project.cards[0].original_line == 4
