"""Print assembly specific exceptions."""


class PrintError(Exception):
    """Base class for print assembly errors."""


class PrintAssemblyError(PrintError):
    """Fatal assembly fault; no partial document may be rendered."""


class ResumeNotFoundError(PrintError):
    """Raised when the requested resume does not exist."""


class BucketMissingError(PrintAssemblyError):
    """The object store reports the bucket itself as missing.

    This is an infrastructure fault and is never degraded to a missing image.
    """
