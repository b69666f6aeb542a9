"""Support for the `--extra-opts=[SECTION][@FILE]` plugin convention.

Options are read from SECTION (default: the plugin name) of an ini FILE.
Without FILE, the first existing file from SEARCH_PATH is used. Every
`key = value` entry becomes `--key=value`, a bare `key` becomes `--key`.
The options are put in front of the remaining arguments so that anything
given on the command line takes precedence.
"""

import configparser
import logging
import os.path

from fc.check_swap import ConfigurationError

DEFAULT_SECTION = "check_swap"
SEARCH_PATH = [
    "/etc/nagios/plugins.ini",
    "/usr/local/nagios/etc/plugins.ini",
    "/usr/local/etc/nagios/plugins.ini",
    "/etc/opt/nagios/plugins.ini",
    "/etc/nagios-plugins.ini",
    "/usr/local/etc/nagios-plugins.ini",
    "/etc/opt/nagios-plugins.ini",
]

_log = logging.getLogger("nagiosplugin")


def split_spec(spec, default_section=DEFAULT_SECTION):
    """Split `SECTION@FILE` into (section, filename or None)."""
    section, _, filename = (spec or "").partition("@")
    return section or default_section, filename or None


def find_config(search_path=None):
    search_path = SEARCH_PATH if search_path is None else search_path
    for candidate in search_path:
        if os.path.isfile(candidate):
            return candidate
    raise ConfigurationError(
        "no extra-opts file found in {}".format(", ".join(search_path))
    )


def load(spec, default_section=DEFAULT_SECTION, search_path=None):
    """Return the options of one ini file section as argument list."""
    section, filename = split_spec(spec, default_section)
    if filename is None:
        filename = find_config(search_path)
    config = configparser.ConfigParser(allow_no_value=True, interpolation=None)
    try:
        if not config.read(filename):
            raise ConfigurationError(
                "cannot read extra-opts file {}".format(filename)
            )
    except configparser.Error as e:
        raise ConfigurationError(
            "cannot parse extra-opts file {}: {}".format(filename, e)
        )
    if not config.has_section(section):
        raise ConfigurationError(
            "section [{}] not found in {}".format(section, filename)
        )
    _log.debug("reading extra options from [%s] in %s", section, filename)
    args = []
    for key, value in config.items(section):
        if value is None:
            args.append("--{}".format(key))
        else:
            args.append("--{}={}".format(key, value))
    return args


def expand(argv, default_section=DEFAULT_SECTION, search_path=None):
    """Replace all `--extra-opts` arguments by the options they refer to."""
    extra = []
    rest = []
    for arg in argv:
        if arg == "--extra-opts":
            extra += load(None, default_section, search_path)
        elif arg.startswith("--extra-opts="):
            spec = arg.split("=", 1)[1]
            extra += load(spec, default_section, search_path)
        else:
            rest.append(arg)
    return extra + rest
