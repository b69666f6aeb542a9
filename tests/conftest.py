import textwrap

import pytest

# real-world swapinfo -k output
SWAPINFO_SINGLE = textwrap.dedent(
    """\
    Device          1K-blocks     Used    Avail Capacity
    /dev/ada0p3       2097152   524288  1572864    25%
    """
)

SWAPINFO_MULTI = textwrap.dedent(
    """\
    Device          1K-blocks     Used    Avail Capacity
    /dev/ada0p3       2097152   524288  1572864    25%
    /dev/ada1p3       1048576   786432   262144    75%
    Total             3145728  1310720  1835008    42%
    """
)


class FakeSwapInfo:
    """Stands in for SwapInfo and counts how often it has been asked."""

    def __init__(self, output):
        self.output = output
        self.calls = 0

    def query(self):
        self.calls += 1
        return self.output


@pytest.fixture
def swapinfo_single():
    return FakeSwapInfo(SWAPINFO_SINGLE)


@pytest.fixture
def swapinfo_multi():
    return FakeSwapInfo(SWAPINFO_MULTI)


@pytest.fixture
def fake_swapinfo(tmp_path):
    """Factory for shell scripts behaving like swapinfo."""

    def make(output="", exitcode=0, stderr="", sleep=None):
        (tmp_path / "output").write_text(output)
        lines = ["#!/bin/sh"]
        if sleep:
            lines.append("exec sleep {}".format(sleep))
        lines.append("cat {}".format(tmp_path / "output"))
        if stderr:
            lines.append("echo '{}' >&2".format(stderr))
        lines.append("exit {}".format(exitcode))
        script = tmp_path / "swapinfo"
        script.write_text("\n".join(lines) + "\n")
        script.chmod(0o755)
        return str(script)

    return make


@pytest.fixture
def swapinfo_from():
    """Factory for in-process swapinfo stand-ins with arbitrary output."""
    return FakeSwapInfo
