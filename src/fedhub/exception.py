class FedHubError(Exception):
    pass


class AlreadyExists(FedHubError):
    """Raised by a store when a uniqueness constraint is hit."""

    def __init__(self, collection, key):
        FedHubError.__init__(self, f"{collection}: '{key}' already exists")
        self.collection = collection
        self.key = key


class ValidationFailure(FedHubError):
    def __init__(self, field, message=""):
        FedHubError.__init__(self, message or f"Invalid value for '{field}'")
        self.field = field


class CertificateLoadFailure(FedHubError):
    def __init__(self, path, reason=""):
        FedHubError.__init__(self, f"Could not load certificate from '{path}': {reason}")
        self.path = path


class AccountPolicyFailure(FedHubError):
    def __init__(self, user_name, errors):
        FedHubError.__init__(self, "Could not create '{}': {}".format(
            user_name, "; ".join(e["description"] for e in errors)))
        self.user_name = user_name
        self.errors = errors


class StoreUnavailable(FedHubError):
    pass


class UnknownBinding(ValidationFailure):
    pass
