"""Custom exceptions for harvestfilter."""


class HarvestFilterError(Exception):
    """Base exception for harvestfilter."""

    pass


class FilterLoadError(HarvestFilterError):
    """Raised when an existing definition file cannot be read."""

    def __init__(self, path, cause: OSError):
        super().__init__(f"cannot read filter definition {path}: {cause}")
        self.path = path
        self.cause = cause


class InvalidFragmentError(HarvestFilterError, ValueError):
    """Raised when a fragment id is not a usable regular expression fragment."""

    pass
