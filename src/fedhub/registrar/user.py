import logging
from typing import Optional

from fedhub.exception import AccountPolicyFailure
from fedhub.exception import ValidationFailure
from fedhub.identity import IdentityStore
from fedhub.identity import PasswordPolicy
from fedhub.registrar import Registrar
from fedhub.store import USERS

logger = logging.getLogger(__name__)


class UserProvisioner(Registrar):
    """
    Creates the test account the rest of the system expects in development.
    This is a fixture, production deployments should turn it off.
    """
    collection = USERS
    key_attribute = "user_name"

    def __init__(self, session, password_policy: Optional[dict] = None, **kwargs):
        Registrar.__init__(self, session, **kwargs)
        if password_policy:
            _policy = PasswordPolicy(**password_policy)
        else:
            _policy = PasswordPolicy()
        self.identity_store = IdentityStore(session, password_policy=_policy)

    def find(self, key):
        return self.identity_store.find_by_name(key)

    def ensure(self, key, descriptor) -> bool:
        if not key:
            raise ValidationFailure("user_name", "user_name must not be empty")

        if self.find(key) is not None:
            logger.debug(f"User '{key}' already exists")
            return False

        _result = self.identity_store.create(key, descriptor["email"], descriptor["password"])
        if _result.succeeded:
            logger.info(f"Created user '{key}'")
            return True

        if [e for e in _result.errors if e["code"] == "DuplicateUserName"]:
            logger.info(f"User '{key}' was created by someone else")
            return False

        for error in _result.errors:
            logger.error(f"Could not create user '{key}': {error['code']} {error['description']}")
        raise AccountPolicyFailure(key, _result.errors)

    def ensure_user(self, user_name: str, email: str, password: str) -> bool:
        return self.ensure(user_name, {"email": email, "password": password})
