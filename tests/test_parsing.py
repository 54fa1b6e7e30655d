"""Tests for decoding generated text."""

import pytest

from menuplan.llm.parsing import parse_json_text, strip_code_fence


class TestParsing:
    def test_strip_json_fence(self):
        assert strip_code_fence('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_plain_text_untouched(self):
        assert strip_code_fence('  {"a": 1} ') == '{"a": 1}'

    def test_parse_fenced_object(self):
        assert parse_json_text('```json\n{"Monday": {"lunch": "l1_m"}}\n```') == {"Monday": {"lunch": "l1_m"}}

    def test_parse_with_chatter(self):
        text = 'Ecco il piano:\n{"Monday": {}}\nBuon appetito!'
        assert parse_json_text(text) == {"Monday": {}}

    def test_parse_array(self):
        assert parse_json_text('[{"prodotto": "Orata"}]') == [{"prodotto": "Orata"}]

    @pytest.mark.parametrize("text", ["", "nessun piano", "{broken", "```\n```"])
    def test_garbage_raises_value_error(self, text):
        with pytest.raises(ValueError):
            parse_json_text(text)
