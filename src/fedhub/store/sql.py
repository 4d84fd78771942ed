"""Store kept in a relational database. Uniqueness is enforced by the database."""
import copy
import logging
from typing import Optional

from sqlalchemy import JSON
from sqlalchemy import Boolean
from sqlalchemy import Column
from sqlalchemy import Integer
from sqlalchemy import String
from sqlalchemy import Text
from sqlalchemy import create_engine
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from fedhub.exception import AlreadyExists
from fedhub.exception import StoreUnavailable
from fedhub.store import CLIENTS
from fedhub.store import COLLECTIONS
from fedhub.store import SCOPES
from fedhub.store import SERVICE_PROVIDERS
from fedhub.store import Store
from fedhub.store import StoreSession
from fedhub.store import USERS

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """SQLAlchemy declarative base."""


class ClientRecord(Base):
    __tablename__ = CLIENTS

    id = Column(Integer, primary_key=True, autoincrement=True)
    client_id = Column(String(400), unique=True, nullable=False)
    client_secret = Column(Text, nullable=True)
    client_type = Column(String(25), nullable=False)
    consent_type = Column(String(50), nullable=True)
    display_name = Column(Text, nullable=True)
    redirect_uris = Column(JSON, nullable=False, default=list)
    post_logout_redirect_uris = Column(JSON, nullable=False, default=list)
    permissions = Column(JSON, nullable=False, default=list)
    requirements = Column(JSON, nullable=False, default=list)


class ScopeRecord(Base):
    __tablename__ = SCOPES

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), unique=True, nullable=False)
    resources = Column(JSON, nullable=False, default=list)
    properties = Column(JSON, nullable=False, default=dict)


class UserRecord(Base):
    __tablename__ = USERS

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_name = Column(String(256), nullable=False)
    normalized_user_name = Column(String(256), unique=True, nullable=False)
    email = Column(String(256), nullable=True)
    normalized_email = Column(String(256), nullable=True)
    password_hash = Column(Text, nullable=False)


class ServiceProviderRecord(Base):
    __tablename__ = SERVICE_PROVIDERS

    id = Column(Integer, primary_key=True, autoincrement=True)
    entity_id = Column(String(400), unique=True, nullable=False)
    encrypt_assertions = Column(Boolean, nullable=False, default=False)
    allow_idp_initiated_sso = Column(Boolean, nullable=False, default=False)
    assertion_consumer_services = Column(JSON, nullable=False, default=list)
    single_logout_services = Column(JSON, nullable=False, default=list)
    artifact_resolution_services = Column(JSON, nullable=False, default=list)
    signing_certificates = Column(JSON, nullable=False, default=list)
    encryption_certificate = Column(JSON, nullable=True)


MODELS = {
    CLIENTS: ClientRecord,
    SCOPES: ScopeRecord,
    USERS: UserRecord,
    SERVICE_PROVIDERS: ServiceProviderRecord,
}


def _to_dict(obj) -> dict:
    res = {}
    for column in obj.__table__.columns:
        if column.name == "id":
            continue
        _val = getattr(obj, column.name)
        if _val is not None:
            res[column.name] = copy.deepcopy(_val)
    return res


class SQLSession(StoreSession):

    def __init__(self, session_factory):
        self.db = session_factory()

    def _key_column(self, collection):
        return getattr(MODELS[collection], COLLECTIONS[collection])

    def find(self, collection, key) -> Optional[dict]:
        _stmt = select(MODELS[collection]).where(self._key_column(collection) == key)
        try:
            _obj = self.db.execute(_stmt).scalar_one_or_none()
        except OperationalError as err:
            raise StoreUnavailable(str(err))
        if _obj is None:
            return None
        return _to_dict(_obj)

    def add(self, collection, key, record):
        _obj = MODELS[collection](**record)
        self.db.add(_obj)
        try:
            self.db.commit()
        except IntegrityError as err:
            self.db.rollback()
            # only a record with the same key counts, other constraints are real errors
            if self.find(collection, key) is not None:
                raise AlreadyExists(collection, key)
            logger.error(f"Could not add {key} to {collection}: {err}")
            raise
        except OperationalError as err:
            self.db.rollback()
            raise StoreUnavailable(str(err))

    def keys(self, collection):
        _stmt = select(self._key_column(collection))
        try:
            return [k for k in self.db.execute(_stmt).scalars()]
        except OperationalError as err:
            raise StoreUnavailable(str(err))

    def close(self):
        self.db.close()


class SQLStore(Store):

    def __init__(self, url: str = "", echo: Optional[bool] = False, **kwargs):
        if not url:
            raise ValueError("A database URL is needed")
        self.url = url

        _args = {}
        if url.startswith("sqlite"):
            _args["connect_args"] = {"check_same_thread": False}
            if url in ("sqlite://", "sqlite:///:memory:"):
                # all sessions must see the same in-memory database
                _args["poolclass"] = StaticPool

        self.engine = create_engine(url, echo=echo, **_args)
        self.session_factory = sessionmaker(autocommit=False, autoflush=False,
                                            bind=self.engine)

    def ensure_schema(self):
        try:
            Base.metadata.create_all(self.engine)
        except OperationalError as err:
            raise StoreUnavailable(f"Could not reach the database: {err}")

    def open(self):
        return SQLSession(self.session_factory)
