import pytest

from helpers import ARGV_SCRIPT, write_script


@pytest.fixture
def bin_dir(tmp_path):
    """A directory of small executables usable as a search path."""
    directory = tmp_path / "bin"
    write_script(directory, "argv", ARGV_SCRIPT)
    write_script(directory, "greet", 'echo "hello $1"')
    write_script(directory, "fail", "exit 3")
    write_script(directory, "warn", 'echo "warning: $1" >&2')
    return directory
