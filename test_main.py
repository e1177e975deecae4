import pytest

from main import _parse_args


@pytest.mark.parametrize(
    "args, expected",
    [
        (["data.tsv"], {"path": "data.tsv", "base": None}),
        (["data.tsv", "--base", "old.tsv"], {"path": "data.tsv", "base": "old.tsv"}),
        (["--base=old.tsv", "data.tsv"], {"path": "data.tsv", "base": "old.tsv"}),
        ([], {"path": None, "base": None}),
    ],
)
def test_parse_args_paths(args, expected):
    opts = _parse_args(args)
    assert opts["path"] == expected["path"]
    assert opts["base"] == expected["base"]


def test_parse_args_flags():
    opts = _parse_args(["-v", "-h", "--debug"])
    assert opts["version"] and opts["help"] and opts["debug"]


@pytest.mark.parametrize(
    "args",
    [["--base"], ["a.tsv", "b.tsv"], ["--nope"]],
)
def test_parse_args_rejects_bad_usage(args):
    with pytest.raises(ValueError):
        _parse_args(args)
