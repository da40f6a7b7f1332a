from __future__ import annotations

from clip2recipe.services.text import (
    decode_html,
    decode_json_object_at,
    join_caption_items,
    safe_json,
    timedtext_items,
    unescape_json_string,
    vtt_to_plain_text,
)


SAMPLE_VTT = """WEBVTT
Kind: captions
Language: en

NOTE
This block is ignored

1
00:00:00.000 --> 00:00:02.000
<c>Add the</c> flour

2
00:00:02.000 --> 00:00:04.500 align:start
and <00:00:03.000>stir   gently.
"""


class TestDecodeHtml:
    def test_common_entities(self) -> None:
        assert decode_html("Mac &amp; cheese &lt;3 &quot;best&quot; it&#39;s") == 'Mac & cheese <3 "best" it\'s'


class TestSafeJson:
    def test_valid(self) -> None:
        assert safe_json('{"a": 1}') == {"a": 1}

    def test_invalid_returns_none(self) -> None:
        assert safe_json("{not json") is None


class TestDecodeJsonObjectAt:
    def test_ignores_trailing_content(self) -> None:
        page = 'var x = {"title": "a};b"}; var y = 2;'
        assert decode_json_object_at(page, page.index("{")) == {"title": "a};b"}

    def test_malformed_returns_none(self) -> None:
        assert decode_json_object_at("x = {oops", 4) is None

    def test_excessive_nesting_returns_none(self) -> None:
        page = "x = {\"a\":" + "[" * 100_000 + "]" * 100_000 + "}"
        assert decode_json_object_at(page, 4) is None


class TestUnescapeJsonString:
    def test_newlines_and_quotes(self) -> None:
        assert unescape_json_string('Line one\\nSay \\"hi\\"') == 'Line one\nSay "hi"'

    def test_invalid_escape(self) -> None:
        assert unescape_json_string("bad \\x escape") is None


class TestVttToPlainText:
    def test_strips_headers_timestamps_and_tags(self) -> None:
        assert vtt_to_plain_text(SAMPLE_VTT) == "Add the flour and stir gently."

    def test_empty(self) -> None:
        assert vtt_to_plain_text("WEBVTT\n\n") == ""


class TestTimedtext:
    def test_items_are_decoded(self) -> None:
        xml = (
            '<?xml version="1.0"?><transcript>'
            '<text start="0" dur="1">Add salt &amp; pepper</text>'
            '<text start="1" dur="1">then  stir</text>'
            "</transcript>"
        )
        items = timedtext_items(xml)
        assert items == ["Add salt & pepper", "then  stir"]
        assert join_caption_items(items) == "Add salt & pepper then stir"

    def test_no_items(self) -> None:
        assert timedtext_items("<transcript></transcript>") == []
