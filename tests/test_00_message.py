import pytest

from fedhub.defaults import DEFAULT_SEED
from fedhub.defaults import FEATURE_PKCE
from fedhub.defaults import GRANT_CLIENT_CREDENTIALS
from fedhub.exception import ValidationFailure
from fedhub.message import ClientDescriptor

MVC = DEFAULT_SEED["clients"][0]


def test_client_descriptor():
    desc = ClientDescriptor(**MVC)
    assert desc.verify()
    assert desc.effective_client_type() == "confidential"

    rec = desc.to_record()
    assert rec["client_id"] == "mvc"
    assert rec["client_type"] == "confidential"
    assert rec["consent_type"] == "explicit"
    assert rec["display_name"] == "MVC client application"
    assert rec["redirect_uris"] == ["https://localhost:44338/callback/login/local"]
    assert rec["requirements"] == [FEATURE_PKCE]
    assert set(rec["permissions"]) == set(MVC["permissions"])


def test_public_client():
    desc = ClientDescriptor(client_id="https://localhost:5001/saml", permissions=["scp:email"])
    assert desc.verify()
    rec = desc.to_record()
    assert rec["client_type"] == "public"
    assert "client_secret" not in rec
    assert rec["redirect_uris"] == []
    assert rec["display_name"] == ""


def test_empty_client_id():
    with pytest.raises(ValidationFailure) as err:
        ClientDescriptor(client_id="").verify()
    assert err.value.field == "client_id"


def test_confidential_without_secret():
    desc = ClientDescriptor(client_id="c1", client_type="confidential")
    with pytest.raises(ValidationFailure) as err:
        desc.verify()
    assert err.value.field == "client_secret"


def test_grant_requires_secret():
    desc = ClientDescriptor(client_id="c1", permissions=[GRANT_CLIENT_CREDENTIALS])
    with pytest.raises(ValidationFailure) as err:
        desc.verify()
    assert err.value.field == "client_secret"


def test_unknown_consent_type():
    desc = ClientDescriptor(client_id="c1", consent_type="sometimes")
    with pytest.raises(ValidationFailure) as err:
        desc.verify()
    assert err.value.field == "consent_type"


def test_relative_redirect_uri():
    desc = ClientDescriptor(client_id="c1", redirect_uris=["/callback"])
    with pytest.raises(ValidationFailure) as err:
        desc.verify()
    assert err.value.field == "redirect_uris"
