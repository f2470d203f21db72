import pytest

from credsift.core.detector import detect_format


@pytest.mark.parametrize(
    "text, expected",
    [
        ('{"a":{"b":"1"}}', "json"),
        ("[1, 2, 3]", "json"),
        ('{"a": ', "unknown"),
        ('{"a": NaN}', "unknown"),
        ("<config><key>v</key></config>", "xml"),
        ("---\nkey: value", "yaml"),
        ("server:\n  host: x", "yaml"),
        ('[database]\nurl = "postgres://x"', "toml"),
        ("[tool.poetry]\nname = x", "toml"),
        ("DB_HOST=127.0.0.1\nAPI_KEY=xyz123", "env"),
        ("host: value", "unknown"),
        ("just some words here", "unknown"),
        ("", "unknown"),
    ],
)
def test_detect_format(text, expected):
    assert detect_format(text) == expected


def test_invalid_json_is_not_retried_as_env():
    assert detect_format("{ broken\nAPI_KEY=xyz123") == "unknown"


def test_stray_section_wins_over_env():
    # TOML is checked before ENV, so one [x] line flips the guess
    assert detect_format("API_KEY=xyz123\n[x]") == "toml"


def test_yaml_marker_wins_over_toml():
    assert detect_format("key = a---b\n[section]") == "yaml"


def test_bracket_text_without_table_header_stays_unknown():
    assert detect_format("[not json\nkey = value") == "unknown"


def test_table_header_falls_through_to_structural_rules():
    assert detect_format("[section]\nkey: \"v\"\n---") == "yaml"


def test_deeply_nested_json_does_not_blow_up():
    assert detect_format("[" * 50000) == "unknown"
