"""
Tests the command line entry point.
"""

import pytest

from groupdir.scripts import cli


@pytest.mark.parametrize(
    "argv",
    [["groupdir"], ["groupdir", "foo"], ["groupdir", "run"], ["groupdir", "run", "staging"]],
)
def test_unknown_command_exits_with_usage(monkeypatch, capsys, argv):
    monkeypatch.setattr(cli.sys, "argv", argv)

    with pytest.raises(SystemExit) as excinfo:
        cli.main()

    assert excinfo.value.code == 1
    assert capsys.readouterr().out.strip() == cli.USAGE
