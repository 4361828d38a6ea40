# =============================================================================
# core/exceptions.py - Error types
# =============================================================================


class ToolError(Exception):
    """Base class for errors that terminate a run"""


class PrerequisiteMissingError(ToolError):
    """Required directory configuration or capability is absent"""


class InputMissingError(ToolError):
    """The group list input file does not exist"""


class ConfigurationError(ToolError):
    """Run configuration is incomplete or inconsistent"""


class DirectoryError(ToolError):
    """A directory lookup or member fetch failed"""


class OutputWriteError(ToolError):
    """The report could not be written"""
