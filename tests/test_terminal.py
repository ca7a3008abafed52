import pytest
from careersql.terminal import Terminal, humanize_size

@pytest.fixture
def terminal():
    return Terminal()

def test_ls(terminal):
    assert terminal.execute("ls").output == "secret.png    profile.png"
    assert terminal.execute("ls -a").output == ".    ..    secret.png    profile.png"

def test_ls_long(terminal):
    lines = terminal.execute("ls -la").output.split("\n")
    assert lines[0] == "total 456"
    assert lines[1] == "drwxr-xr-x  1 user   user       4096 Nov 19 11:34 ."
    assert lines[3] == "-rw-r--r--  1 user   user     245760 Nov 19 11:34 secret.png"

def test_ls_human_readable(terminal):
    lines = terminal.execute("ls -l -h").output.split("\n")
    assert lines[1].split()[4] == "240K"
    assert lines[2].split()[4] == "150K"

@pytest.mark.parametrize("size, expected", [
    (512, "512B"),
    (1536, "2K"),
    (245760, "240K"),
    (5 * 1024 * 1024, "5M"),
])
def test_humanize_size(size, expected):
    assert humanize_size(size) == expected

def test_imgcat(terminal):
    result = terminal.execute("imgcat profile.png")
    assert result.image == "/data/images/profile.png"
    assert terminal.execute("img2sixel secret.png").image == "/data/images/secret.png"

def test_imgcat_errors(terminal):
    assert terminal.execute("imgcat").output == "Error: imgcat requires a filename argument"
    result = terminal.execute("imgcat cat.png")
    assert result.output == 'Error: Image "cat.png" not found'
    assert result.image is None

def test_mode_switches(terminal):
    assert terminal.execute("clear").clear
    assert terminal.execute("sql").enter_sql
    assert terminal.execute("").output == ""

def test_unknown_command(terminal):
    assert terminal.execute("vim notes.txt").output == "command not found: vim"
