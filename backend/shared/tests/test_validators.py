import pytest

from shared.validators import parse_origin_list


class TestParseOriginList:
    def test_comma_separated(self):
        assert parse_origin_list("http://a.com,http://b.com") == ["http://a.com", "http://b.com"]

    def test_whitespace_and_trailing_slash_trimmed(self):
        assert parse_origin_list(" http://a.com/ , http://b.com ") == ["http://a.com", "http://b.com"]

    def test_json_array(self):
        assert parse_origin_list('["http://a.com","http://b.com"]') == ["http://a.com", "http://b.com"]

    def test_list_passthrough(self):
        assert parse_origin_list(["http://a.com"]) == ["http://a.com"]

    def test_blank_entries_skipped(self):
        assert parse_origin_list("http://a.com,,") == ["http://a.com"]

    @pytest.mark.parametrize("value", ["", " ", ",,", "[]", []])
    def test_empty_rejected(self, value):
        with pytest.raises(ValueError, match="at least one entry"):
            parse_origin_list(value)

    def test_invalid_json_rejected(self):
        with pytest.raises(ValueError, match="not a valid JSON array"):
            parse_origin_list("[not json")

    def test_non_string_items_rejected(self):
        with pytest.raises(ValueError, match="array of strings"):
            parse_origin_list('["http://a.com", 1]')

    def test_field_name_in_message(self):
        with pytest.raises(ValueError, match="allowed_origins"):
            parse_origin_list("", field="allowed_origins")
