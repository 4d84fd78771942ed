"""
A minimal identity store. Accounts are created through :py:meth:`IdentityStore.create`
which applies the password policy before anything is written.
"""
import logging
from typing import List
from typing import Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError
from argon2.exceptions import VerificationError

from fedhub.exception import AlreadyExists
from fedhub.store import USERS

logger = logging.getLogger(__name__)


def normalize(user_name: str) -> str:
    return user_name.strip().upper()


class IdentityResult(object):
    def __init__(self, succeeded: bool, errors: Optional[List[dict]] = None):
        self.succeeded = succeeded
        self.errors = errors or []

    @classmethod
    def success(cls):
        return cls(True)

    @classmethod
    def failed(cls, *errors):
        return cls(False, list(errors))

    def __bool__(self):
        return self.succeeded


class PasswordPolicy(object):
    def __init__(self,
                 required_length: int = 6,
                 required_unique_chars: int = 1,
                 require_digit: bool = True,
                 require_lowercase: bool = True,
                 require_uppercase: bool = True,
                 require_non_alphanumeric: bool = True):
        self.required_length = required_length
        self.required_unique_chars = required_unique_chars
        self.require_digit = require_digit
        self.require_lowercase = require_lowercase
        self.require_uppercase = require_uppercase
        self.require_non_alphanumeric = require_non_alphanumeric

    def validate(self, password: str) -> List[dict]:
        errors = []
        password = password or ""
        if len(password) < self.required_length:
            errors.append({"code": "PasswordTooShort",
                           "description": "Passwords must be at least "
                                          f"{self.required_length} characters."})
        if self.require_non_alphanumeric and password.isalnum():
            errors.append({"code": "PasswordRequiresNonAlphanumeric",
                           "description": "Passwords must have at least one non alphanumeric "
                                          "character."})
        if self.require_digit and not any(c.isdigit() for c in password):
            errors.append({"code": "PasswordRequiresDigit",
                           "description": "Passwords must have at least one digit ('0'-'9')."})
        if self.require_lowercase and not any(c.islower() for c in password):
            errors.append({"code": "PasswordRequiresLower",
                           "description": "Passwords must have at least one lowercase "
                                          "('a'-'z')."})
        if self.require_uppercase and not any(c.isupper() for c in password):
            errors.append({"code": "PasswordRequiresUpper",
                           "description": "Passwords must have at least one uppercase "
                                          "('A'-'Z')."})
        if len(set(password)) < self.required_unique_chars:
            errors.append({"code": "PasswordRequiresUniqueChars",
                           "description": "Passwords must use at least "
                                          f"{self.required_unique_chars} different characters."})
        return errors


class IdentityStore(object):
    """User accounts kept in the 'users' collection of a store session."""

    def __init__(self, session, password_policy: Optional[PasswordPolicy] = None,
                 hasher: Optional[PasswordHasher] = None):
        self.session = session
        self.password_policy = password_policy or PasswordPolicy()
        self.hasher = hasher or PasswordHasher()

    def find_by_name(self, user_name: str) -> Optional[dict]:
        return self.session.find(USERS, normalize(user_name))

    def create(self, user_name: str, email: str, password: str) -> IdentityResult:
        if not user_name:
            return IdentityResult.failed({"code": "InvalidUserName",
                                          "description": "User name is empty."})

        _errors = self.password_policy.validate(password)
        if _errors:
            return IdentityResult.failed(*_errors)

        _record = {
            "user_name": user_name,
            "normalized_user_name": normalize(user_name),
            "email": email,
            "normalized_email": normalize(email) if email else "",
            "password_hash": self.hasher.hash(password),
        }
        try:
            self.session.add(USERS, _record["normalized_user_name"], _record)
        except AlreadyExists:
            return IdentityResult.failed({"code": "DuplicateUserName",
                                          "description": f"Username '{user_name}' is "
                                                         "already taken."})
        return IdentityResult.success()

    def check_password(self, user_name: str, password: str) -> bool:
        _user = self.find_by_name(user_name)
        if _user is None:
            return False
        try:
            return self.hasher.verify(_user["password_hash"], password)
        except (VerificationError, InvalidHashError):
            return False
