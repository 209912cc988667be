"""Errors raised while querying helm release history."""

from typing import Optional


class HelmError(RuntimeError):
    """Base class for helm history failures."""

    def __init__(self, message: str, release_name: Optional[str] = None):
        super().__init__(message)
        self.release_name = release_name


class HelmLaunchError(HelmError):
    """The helm binary could not be started."""


class HelmInterruptedError(HelmError):
    """The wait for helm was interrupted; the child process was killed."""


class HelmTimeoutError(HelmError):
    """Helm did not finish before the deadline; the child process was killed."""

    def __init__(self, message: str, release_name: Optional[str] = None, timeout: Optional[float] = None):
        super().__init__(message, release_name)
        self.timeout = timeout


class HelmToolError(HelmError):
    """Helm exited with a non-zero status."""

    def __init__(
        self,
        message: str,
        release_name: Optional[str] = None,
        returncode: int = 1,
        stderr: str = "",
    ):
        super().__init__(message, release_name)
        self.returncode = returncode
        self.stderr = stderr


class HelmEmptyOutputError(HelmError):
    """Helm succeeded but printed nothing."""


class HelmOutputError(HelmError):
    """Helm printed something that is not a JSON array of revision objects."""


# Failures that list_revisions turns into an empty result unless strict
SWALLOWED_ERRORS = (HelmToolError, HelmEmptyOutputError, HelmOutputError)
