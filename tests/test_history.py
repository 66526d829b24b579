import pytest

from minish.history import History, has_visible_text


@pytest.mark.parametrize("text", ["", "   ", "\t\n", " \t "])
def test_blank_has_no_visible_text(text):
    assert has_visible_text(text) is False


@pytest.mark.parametrize("text", ["ls", "  ls  ", "\tx"])
def test_visible_text(text):
    assert has_visible_text(text) is True


def test_add_records_in_order():
    history = History()
    assert history.add("ls") is True
    assert history.add("pwd") is True
    assert history.entries() == ["ls", "pwd"]


def test_add_skips_blank():
    history = History()
    assert history.add("   ") is False
    assert history.entries() == []
    assert len(history) == 0


def test_add_keeps_surrounding_whitespace():
    history = History()
    history.add("  echo hi ")
    assert history.entries() == ["  echo hi "]


def test_oldest_dropped_when_full():
    history = History(limit=3)
    for command in ["a", "b", "c", "d"]:
        history.add(command)
    assert history.entries() == ["b", "c", "d"]


def test_default_limit_is_thousand():
    history = History()
    for n in range(1001):
        history.add(f"cmd{n}")
    assert len(history) == 1000
    assert history.entries()[0] == "cmd1"
    assert history.entries()[-1] == "cmd1000"


def test_format_numbers_from_one():
    history = History()
    history.add("ls")
    history.add("pwd")
    assert history.format() == "1 ls\n2 pwd\n"


def test_format_empty():
    assert History().format() == ""


def test_entries_is_a_copy():
    history = History()
    history.add("ls")
    history.entries().append("x")
    assert history.entries() == ["ls"]


def test_invalid_limit():
    with pytest.raises(ValueError):
        History(limit=0)