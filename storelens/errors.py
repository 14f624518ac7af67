"""Exceptions raised by the Storelens services."""


class InvalidReportArgs(ValueError):
    """A report request carried an argument that cannot be used."""


__all__ = ["InvalidReportArgs"]
