class PartnerHubError(Exception):
    """Base class for errors surfaced to the operator as an inline message."""


class InvalidSearchRequest(PartnerHubError):
    pass


class SearchFailed(PartnerHubError):
    """The oracle call failed (transport, quota, API error). Never means "zero leads"."""


class MissingPhoneError(PartnerHubError):
    pass


class RestoreError(PartnerHubError):
    pass


class ExportError(PartnerHubError):
    pass


class BrokerValidationError(PartnerHubError):
    pass


class CompanyNotFound(PartnerHubError):
    pass


class CompanyValidationError(PartnerHubError):
    """A partner edit carries a field the record cannot hold."""
