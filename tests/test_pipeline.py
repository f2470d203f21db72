from concurrent.futures import ThreadPoolExecutor
import time

import pytest

from credsift.core.models import Candidate, ParseResult, ParserOptions
from credsift.core.pipeline import CredentialParser, deduplicate, parse, parse_credentials

SAMPLES = [
    "",
    "{",
    "[[[[",
    "[" * 20000,
    "<<<>>>",
    "\x00\x01\x02",
    "=",
    ":",
    '"":""',
    '{"a":{"b":"1"}}',
    "DB_HOST=127.0.0.1\nAPI_KEY=xyz123",
    "A_KEY=first\nA_KEY=second\nB_KEY=x",
    '[database]\nurl = "postgres://x"\n[database]\nurl = "other"',
    "api_key_example: xx\napi_token: abc123\nt: 1",
    "---\nname: app\nname: again\ntest_secret: s",
    '<cfg user="u" user="v"><password>p</password></cfg>',
    "key: \"a # b\"\nother = 'c ; d'",
    "The quick brown fox jumps over the lazy dog.",
]


def keys(results):
    return [r.key for r in results]


def test_json_example():
    results = parse('{"a":{"b":"1"}}')
    assert [(r.key, r.value) for r in results] == [("a.b", "1")]


def test_env_example_with_app_names():
    results = parse("DB_HOST=127.0.0.1\nAPI_KEY=xyz123")
    assert [r.to_dict() for r in results] == [
        {"key": "DB_HOST", "value": "127.0.0.1", "appName": "Database"},
        {"key": "API_KEY", "value": "xyz123", "appName": "API"},
    ]


def test_toml_example():
    results = parse('[database]\nurl = "postgres://x"')
    assert [(r.key, r.value) for r in results] == [("database.url", "postgres://x")]


def test_aws_example():
    assert parse("AWS_SECRET_ACCESS_KEY=abcd")[0].app_name == "AWS"


def test_prose_yields_nothing():
    parser = CredentialParser()
    fmt, results = parser.parse_with_format("The quick brown fox jumps over the lazy dog. It was a sunny day.")
    assert fmt == "unknown"
    assert results == []


def test_strict_mode_removes_example_keys():
    text = "api_key_example: xx\napi_token: abc123"
    assert keys(parse(text)) == ["api_key_example", "api_token"]
    assert keys(parse(text, {"strictMode": True})) == ["api_token"]
    assert keys(parse_credentials(text, strict=True)) == ["api_token"]


def test_infer_can_be_disabled():
    assert parse("DB_HOST=x", {"inferAppName": False})[0].app_name is None
    assert parse("DB_HOST=x", ParserOptions(infer_app_name=False))[0].app_name is None
    assert parse("DB_HOST=x", {"infer_app_name": None})[0].app_name == "Database"


def test_first_occurrence_wins():
    results = parse("A_KEY=first\nB=2\nA_KEY=second")
    assert [(r.key, r.value) for r in results] == [("A_KEY", "first"), ("B", "2")]


def test_deduplicate_keeps_order():
    cands = [Candidate("b", "1"), Candidate("a", "2"), Candidate("b", "3")]
    assert deduplicate(cands) == [ParseResult("b", "1"), ParseResult("a", "2")]


@pytest.mark.parametrize("text", SAMPLES)
def test_never_raises_and_keys_are_unique(text):
    results = parse(text)
    assert isinstance(results, list)
    assert len(keys(results)) == len(set(keys(results)))
    assert all(r.value for r in results)


@pytest.mark.parametrize("text", SAMPLES)
def test_strict_is_a_subset(text):
    loose = {r.key: r.value for r in parse(text)}
    strict = {r.key: r.value for r in parse(text, {"strictMode": True})}
    assert set(strict) <= set(loose)
    assert all(loose[k] == v for k, v in strict.items())


def test_results_are_fresh_per_call():
    a = parse("API_KEY=xyz123")
    b = parse("API_KEY=xyz123")
    assert a == b
    assert a[0] is not b[0]


def test_concurrent_calls_match_sequential():
    parser = CredentialParser()
    expected = [parser.parse(t) for t in SAMPLES]
    with ThreadPoolExecutor(max_workers=4) as ex:
        got = list(ex.map(parser.parse, SAMPLES * 4))
    assert got == expected * 4


def test_inference_stays_fast_on_large_input():
    text = "\n".join(f"K{i}_VALUE=v{i}xyzxyzxyzxyz" for i in range(2000))
    assert len(text) > 50_000
    start = time.perf_counter()
    results = parse(text)
    elapsed = time.perf_counter() - start
    assert len(results) == 2000
    assert {r.app_name for r in results} == {"General"}
    assert elapsed < 2.0


@pytest.mark.parametrize("text", ["clé: valeur", "clé=valeur", "<clé>valeur</clé>"])
def test_non_ascii_keys_are_not_extracted(text):
    assert parse(text) == []
    assert parse(text, {"strictMode": True}) == []
