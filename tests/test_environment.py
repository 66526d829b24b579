import pytest

from minish.environment import Environment, NameCheck, check_export_name


@pytest.fixture
def env():
    return Environment(["HOME=/home/user", "PATH=/usr/bin:/bin", "LANG=C"])


def test_get_existing_value(env):
    assert env.get("HOME") == "/home/user"


def test_get_missing_returns_none(env):
    assert env.get("NOPE") is None


def test_get_requires_exact_name(env):
    assert env.get("HOM") is None
    assert env.get("HOME=") is None


def test_get_value_may_contain_equals():
    env = Environment(["OPTS=a=b"])
    assert env.get("OPTS") == "a=b"


def test_set_updates_in_place(env):
    env.set("PATH", "/opt/bin")
    assert env.entries() == ["HOME=/home/user", "PATH=/opt/bin", "LANG=C"]


def test_set_appends_new(env):
    env.set("NEW", "value")
    assert env.entries()[-1] == "NEW=value"
    assert env.get("NEW") == "value"
    assert len(env) == 4


def test_set_empty_value_round_trip(env):
    env.set("EMPTY", "")
    assert env.get("EMPTY") == ""
    assert "EMPTY" in env


def test_unset_removes_and_keeps_order(env):
    assert env.unset("PATH") is True
    assert env.entries() == ["HOME=/home/user", "LANG=C"]
    assert env.get("PATH") is None


def test_unset_missing_returns_false(env):
    assert env.unset("MISSING") is False
    assert len(env) == 3


def test_sorted_entries(env):
    assert env.sorted_entries() == ["HOME=/home/user", "LANG=C", "PATH=/usr/bin:/bin"]
    assert env.entries()[0] == "HOME=/home/user"


def test_sorted_entries_uppercase_before_lowercase():
    env = Environment(["b=1", "B=2", "a=3"])
    assert env.sorted_entries() == ["B=2", "a=3", "b=1"]


def test_search_path_splits_and_skips_empty():
    env = Environment(["PATH=/usr/bin::/bin:"])
    assert env.search_path() == ["/usr/bin", "/bin"]


def test_search_path_last_entry_wins():
    env = Environment(["PATH=/first", "PATH=/second"])
    assert env.search_path() == ["/second"]


def test_search_path_missing():
    assert Environment(["HOME=/x"]).search_path() is None


def test_mapping_constructor_and_as_dict():
    env = Environment({"A": "1", "B": "x=y"})
    assert env.entries() == ["A=1", "B=x=y"]
    assert env.as_dict() == {"A": "1", "B": "x=y"}


def test_entries_is_a_copy(env):
    entries = env.entries()
    entries.clear()
    assert len(env) == 3


@pytest.mark.parametrize(
    "text, expected",
    [
        ("NAME", NameCheck.NAME_ONLY),
        ("NAME=value", NameCheck.ASSIGNMENT),
        ("_under_9=x", NameCheck.ASSIGNMENT),
        ("1ABC", NameCheck.LEADING_DIGIT),
        ("A-B", NameCheck.BAD_CHARACTER),
        ("A-B=c", NameCheck.BAD_CHARACTER),
        ("A=b-c", NameCheck.ASSIGNMENT),
        ("=x", NameCheck.ASSIGNMENT),
        ("", NameCheck.NAME_ONLY),
    ],
)
def test_check_export_name(text, expected):
    assert check_export_name(text) is expected


def test_only_leading_digit_is_falsy():
    assert not check_export_name("9x")
    assert check_export_name("a-b")
    assert check_export_name("ok")