import pytest

from roastkit.serial_command import CommandParser


@pytest.fixture
def parser():
    return CommandParser()


def test_command_with_arguments(parser):
    received = []

    def handler():
        received.append([parser.next_token(), parser.next_token(), parser.next_token()])

    parser.add_command("TEMP", handler)
    parser.feed("temp;1;2\n")
    assert parser.commands() == ["TEMP"]
    assert received == [["1", "2", None]]


def test_input_is_upper_cased(parser):
    calls = []
    parser.add_command("READ", lambda: calls.append("read"))
    parser.feed("rEaD\n")
    assert calls == ["read"]


def test_unknown_command_goes_to_default(parser):
    unknown = []
    parser.add_command("READ", lambda: unknown.append("wrong"))
    parser.set_default_handler(unknown.append)
    parser.feed("foo;bar\n")
    assert unknown == ["FOO"]


def test_unknown_without_default_is_ignored(parser):
    calls = []
    parser.add_command("READ", lambda: calls.append(1))
    parser.feed("OTHER\n")
    parser.feed("READ\n")
    assert calls == [1]


def test_empty_line_dispatches_nothing(parser):
    seen = []
    parser.set_default_handler(seen.append)
    parser.feed("\n;;;\n")
    assert seen == []


def test_repeated_and_leading_delimiters_are_skipped(parser):
    args = []
    parser.add_command("CMD", lambda: args.append(parser.next_token()))
    parser.feed(";;CMD;;;X\n")
    assert args == ["X"]


def test_nonprintable_characters_dropped(parser):
    calls = []
    parser.add_command("READ", lambda: calls.append(1))
    parser.feed("RE\tA\x01D\r\n")
    assert calls == [1]


def test_line_is_truncated_at_buffer_size(parser):
    seen = []
    parser.set_default_handler(seen.append)
    parser.feed("A" * 40 + "\n")
    assert seen == ["A" * 32]


def test_command_names_compare_on_twelve_characters(parser):
    calls = []
    parser.add_command("ABCDEFGHIJKLMNOP", lambda: calls.append(1))
    parser.feed("abcdefghijklxyz\n")
    assert calls == [1]
    assert parser.commands() == ["ABCDEFGHIJKL"]


def test_first_registration_wins(parser):
    calls = []
    parser.add_command("GO", lambda: calls.append("first"))
    parser.add_command("GO", lambda: calls.append("second"))
    parser.feed("GO\n")
    assert calls == ["first"]
    assert parser.commands() == ["GO", "GO"]


def test_line_may_arrive_in_pieces(parser):
    args = []
    parser.add_command("SET", lambda: args.append(parser.next_token()))
    parser.feed("se")
    parser.feed("t;4")
    assert args == []
    parser.feed("2\n")
    assert args == ["42"]


def test_bytes_input(parser):
    args = []
    parser.add_command("OT1", lambda: args.append(parser.next_token()))
    parser.feed(b"ot1;55\n")
    assert args == ["55"]


def test_clear_discards_partial_line(parser):
    seen = []
    parser.set_default_handler(seen.append)
    parser.feed("JUNK")
    parser.clear()
    parser.feed("OK\n")
    assert seen == ["OK"]


def test_next_token_without_line_is_none(parser):
    assert parser.next_token() is None


def test_custom_terminator_and_delimiter():
    parser = CommandParser(terminator="\r", delimiter=", ")
    args = []
    parser.add_command("PID", lambda: args.extend([parser.next_token(), parser.next_token()]))
    parser.feed("pid, 1,2\r")
    assert args == ["1", "2"]


@pytest.mark.parametrize("terminator, delimiter", [("", ";"), ("ab", ";"), ("\n", "")])
def test_invalid_construction(terminator, delimiter):
    with pytest.raises(ValueError):
        CommandParser(terminator, delimiter)