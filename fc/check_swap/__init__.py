"""Swap usage check based on swapinfo(8) output."""

import nagiosplugin


class ConfigurationError(nagiosplugin.CheckError):
    """Invalid command line, threshold or extra-opts configuration."""


class UtilityError(nagiosplugin.CheckError):
    """The swap reporting utility cannot be run at all."""


class CollectionError(nagiosplugin.CheckError):
    """The swap reporting utility ran but gave us nothing to work with."""
