"""Exceptions raised by the building report pipeline."""


class BuildingReportError(Exception):
    """Base class for all building report errors."""


class AddressUnresolvable(BuildingReportError):
    """Neither the geocoder nor the fallback parser produced a house number and street.

    This is the only error a search surfaces to its caller; no report is built.
    """


class CollaboratorUnavailable(BuildingReportError):
    """An external data service failed, timed out, or returned a non-success status.

    Always caught at the call site and treated as an empty result.
    """

    def __init__(self, service: str, reason: str):
        self.service = service
        self.reason = reason
        super().__init__(f"{service} unavailable: {reason}")
