"""
Pricing engine exceptions.
"""


class PricingError(Exception):
    """Base class for pricing engine failures."""


class PricingConfigurationError(PricingError):
    """Room type pricing bounds are missing or invalid. Aborts a run before any writes."""

    def __init__(self, room_type_name, message):
        self.room_type_name = room_type_name
        super().__init__(message)


class PricingDataError(PricingError):
    """An external data load (rules, market factors, occupancy) failed."""


class InvalidBucketSpec(PricingError, ValueError):
    """A bucket key or value could not be parsed."""
