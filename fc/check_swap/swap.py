"""Swap usage check.

Runs `swapinfo -k` and adds up the rows of all swap devices:

    Device          1K-blocks     Used    Avail Capacity
    /dev/ada0p3       2097152    12340  2084812     1%
    /dev/md0          1048576        0  1048576     0%

One of the measurements total_swap_blocks, used_swap_blocks,
available_swap_blocks or swap_usage is then compared against the warning
and critical ranges. A measurement without any threshold is reported as
UNKNOWN since there is nothing to judge it against.
"""

import argparse
import dataclasses
import enum
import logging
import re
import sys
from typing import Optional

import nagiosplugin

from fc.check_swap import CollectionError, ConfigurationError, extraopts
from fc.check_swap.collector import DEFAULT_SWAPINFO, SwapInfo

_log = logging.getLogger("nagiosplugin")


@dataclasses.dataclass(frozen=True)
class SwapCounters:
    """Column sums of all matching swapinfo rows."""

    total: int = 0
    used: int = 0
    available: int = 0
    capacity: int = 0

    def __add__(self, other):
        return SwapCounters(
            self.total + other.total,
            self.used + other.used,
            self.available + other.available,
            self.capacity + other.capacity,
        )


class Measurement(enum.Enum):
    """Selectable metrics: (SwapCounters field, unit)."""

    total_swap_blocks = ("total", "kB")
    used_swap_blocks = ("used", "kB")
    available_swap_blocks = ("available", "kB")
    swap_usage = ("capacity", "%")

    def __init__(self, field, unit):
        self.field = field
        self.unit = unit

    @classmethod
    def names(cls):
        return [m.name for m in cls]

    @classmethod
    def from_name(cls, name):
        if not name:
            raise ConfigurationError(
                "missing measurement, expected one of: {}".format(
                    ", ".join(cls.names())
                )
            )
        try:
            return cls[name]
        except KeyError:
            raise ConfigurationError(
                "invalid measurement '{}', expected one of: {}".format(
                    name, ", ".join(cls.names())
                )
            )

    def select(self, counters):
        """Return (value, unit) of this measurement."""
        return getattr(counters, self.field), self.unit


# Permissive: anything ending in four numeric columns, the last one with a
# percent sign. Note that this also matches the "Total" row swapinfo prints
# for more than one device.
r_row = re.compile(r"(\d*)\s+(\d*)\s+(\d*)\s+(\d*)%$")
r_strict_row = re.compile(r"^(\S+)\s+(\d+)\s+(\d+)\s+(\d+)\s+(\d+)%$")


def _int(capture):
    return int(capture) if capture else 0


def parse_swapinfo(output, strict=False):
    """Sum up the device rows of swapinfo output.

    Lines which don't look like device rows (headers, blank lines) are
    skipped. Without any device rows, all counters stay zero unless
    `strict` is set. In strict mode, rows must start with a device name and
    the "Total" row is not counted.
    """
    counters = SwapCounters()
    rows = 0
    for line in output.splitlines():
        line = line.rstrip()
        fields = None
        if strict:
            m = r_strict_row.match(line)
            if m and m.group(1) == "Total":
                _log.debug("skipping summary row: %s", line)
                continue
            if m:
                fields = m.groups()[1:]
        else:
            m = r_row.search(line)
            if m:
                fields = m.groups()
        if fields is None:
            _log.debug("ignoring line: %s", line)
            continue
        counters += SwapCounters(*(_int(f) for f in fields))
        rows += 1
    if strict and not rows:
        raise CollectionError("no swap device rows found in swapinfo output")
    _log.info("%d swap device row(s): %s", rows, counters)
    return counters


@dataclasses.dataclass(frozen=True)
class CheckConfig:
    """Everything the check needs to know, built once from the arguments."""

    measurement: Measurement
    warning: Optional[str] = None
    critical: Optional[str] = None
    swapinfo: str = DEFAULT_SWAPINFO
    timeout: int = 10
    verbose: int = 0
    strict: bool = False

    @staticmethod
    def _verify_range(label, spec):
        if not spec:
            return
        try:
            nagiosplugin.Range(spec)
        except ValueError as e:
            raise ConfigurationError(
                "invalid {} range '{}': {}".format(label, spec, e)
            )

    @classmethod
    def from_args(cls, args):
        measurement = Measurement.from_name(args.measurement)
        cls._verify_range("warning", args.warning)
        cls._verify_range("critical", args.critical)
        return cls(
            measurement=measurement,
            warning=args.warning,
            critical=args.critical,
            swapinfo=args.swapinfo,
            timeout=args.timeout,
            verbose=args.verbose,
            strict=args.strict,
        )


class Swap(nagiosplugin.Resource):
    """Aggregated swap counters of all devices."""

    def __init__(self, measurement, swapinfo, strict=False):
        self.measurement = measurement
        self.swapinfo = swapinfo
        self.strict = strict
        self.counters = None

    def probe(self):
        self.counters = parse_swapinfo(self.swapinfo.query(), self.strict)
        value, unit = self.measurement.select(self.counters)
        _log.debug("%s = %s%s", self.measurement.name, value, unit)
        return nagiosplugin.Metric(
            self.measurement.name, value, unit, context="swap"
        )


class SwapContext(nagiosplugin.ScalarContext):
    """Range based evaluation which refuses to pass without thresholds."""

    def __init__(
        self,
        name,
        warning=None,
        critical=None,
        fmt_metric="{valueunit} {name}",
        result_cls=nagiosplugin.Result,
    ):
        super(SwapContext, self).__init__(
            name, warning, critical, fmt_metric, result_cls
        )
        self.judgeable = bool(warning or critical)

    def evaluate(self, metric, resource):
        result = super(SwapContext, self).evaluate(metric, resource)
        if result.state == nagiosplugin.Ok and not self.judgeable:
            return self.result_cls(
                nagiosplugin.Unknown,
                "no warning or critical threshold given",
                metric,
            )
        return result


class SwapSummary(nagiosplugin.Summary):
    """Status line is just "<value><unit> <name>", hints go to -v output."""

    def _describe(self, result):
        if result.metric is not None:
            return result.metric.description
        return str(result)

    def ok(self, results):
        return self._describe(results.first_significant)

    def problem(self, results):
        return self._describe(results.first_significant)

    def verbose(self, results):
        msgs = super(SwapSummary, self).verbose(results)
        for r in results:
            counters = getattr(r.resource, "counters", None)
            if counters is not None:
                msgs.append(
                    "total {0.total}kB, used {0.used}kB, "
                    "available {0.available}kB, capacity {0.capacity}%".format(
                        counters
                    )
                )
        return msgs


class ArgumentParser(argparse.ArgumentParser):
    """Report usage errors as UNKNOWN instead of exiting with status 2."""

    def error(self, message):
        raise ConfigurationError(message)


def parse_args(argv=None):
    if argv is None:
        argv = sys.argv[1:]
    argv = extraopts.expand(argv)
    a = ArgumentParser(
        prog="check_swap",
        description=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    a.add_argument(
        "-m",
        "--measurement",
        metavar="NAME",
        help="measurement to check, one of: {}".format(
            ", ".join(Measurement.names())
        ),
    )
    a.add_argument(
        "-w",
        "--warning",
        metavar="RANGE",
        help="return warning if measurement is outside RANGE",
    )
    a.add_argument(
        "-c",
        "--critical",
        metavar="RANGE",
        help="return critical if measurement is outside RANGE",
    )
    a.add_argument(
        "--swapinfo",
        metavar="PATH",
        default=DEFAULT_SWAPINFO,
        help="swapinfo binary (default: %(default)s)",
    )
    a.add_argument(
        "--strict",
        action="store_true",
        default=False,
        help="only count rows starting with a device name, skip the Total "
        "row and fail if there are no device rows",
    )
    a.add_argument(
        "--extra-opts",
        metavar="[SECTION][@FILE]",
        nargs="?",
        help="read options from SECTION (default: check_swap) of an ini "
        "FILE (default: search standard plugins.ini locations)",
    )
    a.add_argument(
        "-t",
        "--timeout",
        metavar="N",
        default=10,
        type=int,
        help="abort check execution after N seconds (default: %(default)s)",
    )
    a.add_argument(
        "-v",
        "--verbose",
        default=0,
        action="count",
        help="increase output verbosity (use up to 3 times)",
    )
    a.add_argument("-V", "--version", action="version", version="%(prog)s 1.0")
    return a.parse_args(argv)


def make_check(config, swapinfo=None):
    if swapinfo is None:
        swapinfo = SwapInfo(config.swapinfo, timeout=config.timeout)
    return nagiosplugin.Check(
        Swap(config.measurement, swapinfo, config.strict),
        SwapContext("swap", config.warning, config.critical),
        SwapSummary(),
    )


@nagiosplugin.guarded(verbose=0)
def main(argv=None):
    config = CheckConfig.from_args(parse_args(argv))
    check = make_check(config)
    check.main(config.verbose, config.timeout)


if __name__ == "__main__":
    main()
