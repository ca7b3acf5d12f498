import subprocess
from typing import Callable

from dnsmasqd.errors import FileReadError

FileReaderFn = Callable[[str], str]
LauncherFn = Callable[[list[str]], subprocess.Popen]


def read_file(path: str) -> str:
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            return f.read()
    except OSError as e:
        raise FileReadError(path, e.strerror or str(e)) from e


def exec_pipe_cmd(argv: list[str]) -> subprocess.Popen:
    """
    Launch argv without waiting for it. stdout/stderr are inherited so the
    child's output lands in our own streams.
    """
    return subprocess.Popen(
        argv,
        stdin=subprocess.DEVNULL,
        stdout=None,
        stderr=None,
    )


def split_lines(content: str) -> list[str]:
    # Only "\n" ends a line; str.splitlines() also breaks on \x0b, \x1c, \x85 and more
    return [line.removesuffix("\r") for line in content.split("\n")]
