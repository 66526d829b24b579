import io

import pytest

from minish.redirection import (
    Redirection,
    RedirectionError,
    parse_command,
    read_heredoc,
)


def test_parse_plain_arguments():
    args, red = parse_command("ls -l /tmp")
    assert args == ["ls", "-l", "/tmp"]
    assert red == Redirection()


def test_parse_collapses_spaces_and_tabs():
    args, _ = parse_command("  ls \t -a\t\tdir  ")
    assert args == ["ls", "-a", "dir"]


def test_parse_output_truncate():
    args, red = parse_command("ls -l > out.txt")
    assert args == ["ls", "-l"]
    assert red.outfile == "out.txt"
    assert red.append is False


def test_parse_output_append():
    _, red = parse_command("ls >> log.txt")
    assert red.outfile == "log.txt"
    assert red.append is True


def test_parse_later_output_wins():
    _, red = parse_command("ls >> a > b")
    assert red.outfile == "b"
    assert red.append is False


def test_parse_input_and_heredoc():
    args, red = parse_command("cat < in.txt << END")
    assert args == ["cat"]
    assert red.infile == "in.txt"
    assert red.heredoc_delimiter == "END"


def test_parse_operator_without_target_is_ignored():
    args, red = parse_command("cat <")
    assert args == ["cat"]
    assert red.infile is None


def test_parse_empty_command():
    args, red = parse_command("   ")
    assert args == []
    assert red == Redirection()


def test_read_heredoc_stops_at_delimiter():
    stream = io.StringIO("a\nb\nEOF\nc\n")
    assert read_heredoc("EOF", stream) == "a\nb\n"
    assert stream.readline() == "c\n"


def test_read_heredoc_stops_at_end_of_input():
    assert read_heredoc("EOF", io.StringIO("x\ny")) == "x\ny\n"


def test_read_heredoc_writes_prompts():
    prompts = io.StringIO()
    read_heredoc("END", io.StringIO("one\nEND\n"), prompts)
    assert prompts.getvalue() == "> " * 2


def test_apply_without_redirections():
    assert Redirection().apply(io.StringIO("")) == (None, None)


def test_apply_heredoc_gives_content_as_input():
    stdin, stdout = Redirection(heredoc_delimiter="END").apply(
        io.StringIO("hello\nworld\nEND\n")
    )
    try:
        assert stdout is None
        assert stdin.read() == b"hello\nworld\n"
    finally:
        stdin.close()


def test_apply_infile_replaces_heredoc(tmp_path):
    source = tmp_path / "in.txt"
    source.write_bytes(b"from file\n")
    red = Redirection(infile=str(source), heredoc_delimiter="END")
    stream = io.StringIO("ignored\nEND\nrest\n")
    stdin, _ = red.apply(stream)
    try:
        assert stdin.read() == b"from file\n"
    finally:
        stdin.close()
    assert stream.readline() == "rest\n"


def test_apply_missing_infile_raises(tmp_path):
    red = Redirection(infile=str(tmp_path / "missing"))
    with pytest.raises(RedirectionError, match="open infile"):
        red.apply(io.StringIO(""))


def test_apply_outfile_truncates(tmp_path):
    target = tmp_path / "out.txt"
    target.write_bytes(b"old contents that are long\n")
    _, stdout = Redirection(outfile=str(target)).apply(io.StringIO(""))
    stdout.write(b"new\n")
    stdout.close()
    assert target.read_bytes() == b"new\n"


def test_apply_outfile_appends(tmp_path):
    target = tmp_path / "out.txt"
    target.write_bytes(b"first\n")
    _, stdout = Redirection(outfile=str(target), append=True).apply(io.StringIO(""))
    stdout.write(b"second\n")
    stdout.close()
    assert target.read_bytes() == b"first\nsecond\n"


def test_apply_outfile_in_missing_directory_raises(tmp_path):
    red = Redirection(outfile=str(tmp_path / "no" / "such" / "file"))
    with pytest.raises(RedirectionError, match="open outfile"):
        red.apply(io.StringIO(""))