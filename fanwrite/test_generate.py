import re
from datetime import datetime, timezone

from fanwrite.generate import ALPHABET, generate_content, generate_key

KEY_RE = re.compile(r"^\d{8}T\d{6}/[0-9a-f]{32}$")


def test_key_format() -> None:
    before = datetime.now(timezone.utc).replace(microsecond=0)
    key = generate_key()
    after = datetime.now(timezone.utc)
    assert KEY_RE.match(key), key
    folder = datetime.strptime(key.split("/")[0], "%Y%m%dT%H%M%S").replace(tzinfo=timezone.utc)
    assert before <= folder <= after


def test_keys_are_distinct() -> None:
    keys = [generate_key() for _ in range(1000)]
    assert len(set(keys)) == len(keys)


def test_content_length_and_alphabet() -> None:
    for length in (0, 1, 1024, 5000):
        content = generate_content(length)
        assert len(content) == length
        assert set(content) <= set(ALPHABET)


def test_alphabet() -> None:
    assert len(ALPHABET) == 62
    assert ALPHABET.isalnum()


def test_content_varies() -> None:
    assert generate_content(1024) != generate_content(1024)
