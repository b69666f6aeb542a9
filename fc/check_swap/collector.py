"""Run swapinfo(8) and hand back its raw output."""

import logging
import os
import subprocess
import time

import nagiosplugin

from fc.check_swap import CollectionError, UtilityError

DEFAULT_SWAPINFO = "/usr/sbin/swapinfo"
# 1K blocks, one row per device plus the capacity column
SUMMARY_ARGS = ["-k"]

_log = logging.getLogger("nagiosplugin")


class SwapInfo(object):
    """Encapsulates a single swapinfo invocation.

    The utility is run exactly once per check. There are no retries: the
    monitoring system calls us again on its next schedule anyway.
    """

    def __init__(self, path=DEFAULT_SWAPINFO, args=None, timeout=None):
        self.path = path
        self.args = list(SUMMARY_ARGS if args is None else args)
        self.timeout = timeout
        # the run deadline starts when the check is set up
        self.deadline = time.monotonic() + timeout if timeout else None
        self.returncode = None
        self.output = None

    @property
    def cmdline(self):
        return [self.path] + self.args

    def verify(self):
        """Make sure we are able to run the utility at all."""
        if not os.path.exists(self.path):
            raise UtilityError("{} does not exist".format(self.path))
        if not os.path.isfile(self.path):
            raise UtilityError("{} is not a regular file".format(self.path))
        if not os.access(self.path, os.X_OK):
            raise UtilityError("{} is not executable".format(self.path))

    def remaining(self):
        """Seconds left until the run deadline, None without deadline."""
        if self.deadline is None:
            return None
        left = self.deadline - time.monotonic()
        if left <= 0:
            raise nagiosplugin.Timeout("{}s".format(self.timeout))
        return left

    def query(self):
        self.verify()
        timeout = self.remaining()
        _log.info('querying swap devices with "%s"', " ".join(self.cmdline))
        try:
            proc = subprocess.run(
                self.cmdline,
                capture_output=True,
                text=True,
                timeout=timeout,
                env={"LANG": "C", "PATH": os.environ.get("PATH", os.defpath)},
            )
        except subprocess.TimeoutExpired:
            raise nagiosplugin.Timeout("{}s".format(self.timeout))
        self.returncode = proc.returncode
        self.output = proc.stdout
        _log.debug("swapinfo output:\n%s", proc.stdout)
        if proc.returncode != 0:
            msg = "{} exited with status {}".format(self.path, proc.returncode)
            if proc.stderr.strip():
                msg += ": " + proc.stderr.strip()
            raise CollectionError(msg)
        if not proc.stdout.strip():
            raise CollectionError(
                "no usable data from {} (exit status {})".format(
                    self.path, proc.returncode
                )
            )
        return proc.stdout

    def __repr__(self):
        return "{}({!r})".format(self.__class__.__name__, self.cmdline)
