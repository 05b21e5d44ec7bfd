"""Failure categories raised by the build pipeline.

Every error is fatal: the pipeline never retries or writes partial output.
"""

from __future__ import annotations


class BuildError(Exception):
    """Base class for all build failures."""


class MissingInputError(BuildError):
    """A required input file is missing or unreadable."""


class TransformError(BuildError):
    """Minification or compression of a page failed."""


class BundlerError(BuildError):
    """The external bundler rejected the entry script or could not run."""


class PackagingError(BuildError):
    """Writing the output script or its archive failed."""
