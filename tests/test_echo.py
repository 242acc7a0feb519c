from tictacnet.echo import echo, main


def test_echo_joins_with_spaces():
    assert echo(["hello", "world"]) == "hello world\n"


def test_echo_single_argument():
    assert echo(["one"]) == "one\n"


def test_echo_nothing_prints_nothing():
    assert echo([]) == ""


def test_echo_keeps_argument_text():
    args = ["a b", "", "c"]
    assert echo(args).rstrip("\n").split(" ") == ["a", "b", "", "c"]


def test_main_writes_to_stdout(capsys):
    assert main(["hi", "there"]) == 0
    assert capsys.readouterr().out == "hi there\n"