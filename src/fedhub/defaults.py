PERMISSION_PREFIX = {
    "endpoint": "ept:",
    "grant_type": "gt:",
    "response_type": "rst:",
    "scope": "scp:",
}

ENDPOINT_AUTHORIZATION = "ept:authorization"
ENDPOINT_LOGOUT = "ept:logout"
ENDPOINT_TOKEN = "ept:token"

GRANT_AUTHORIZATION_CODE = "gt:authorization_code"
GRANT_CLIENT_CREDENTIALS = "gt:client_credentials"
GRANT_IMPLICIT = "gt:implicit"
GRANT_PASSWORD = "gt:password"
GRANT_REFRESH_TOKEN = "gt:refresh_token"

RESPONSE_TYPE_CODE = "rst:code"

SCOPE_EMAIL = "scp:email"
SCOPE_PROFILE = "scp:profile"
SCOPE_ROLES = "scp:roles"

FEATURE_PKCE = "ft:pkce"

CONSENT_TYPES = ["explicit", "external", "implicit", "systematic"]
CLIENT_TYPES = ["public", "confidential"]

# A client allowed any of these must be able to authenticate itself
GRANTS_REQUIRING_SECRET = [GRANT_CLIENT_CREDENTIALS, GRANT_PASSWORD]

# Property bag key the scope claims are kept under
CLAIMS_PROPERTY = "Claims"

DEFAULT_OIDC_ENDPOINTS = {
    "authorization": "connect/authorize",
    "end_session": "connect/logout",
    "token": "connect/token",
    "userinfo": "connect/userinfo",
}

DEFAULT_REGISTERED_SCOPES = ["email", "profile", "roles"]

DEFAULT_SAML_HOST_OPTIONS = {
    "login_url": "/Identity/Account/Login",
    "logout_url": "/Connect/Logout",
}

DEFAULT_STORE = {
    "class": "fedhub.store.memory.MemoryStore",
    "kwargs": {}
}

DEFAULT_REGISTRARS = {
    "client": {"class": "fedhub.registrar.client.ClientRegistrar", "kwargs": {}},
    "service_provider": {
        "class": "fedhub.registrar.service_provider.FederationTrustRegistrar",
        "kwargs": {}
    },
    "scope": {"class": "fedhub.registrar.scope.ScopeRegistrar", "kwargs": {}},
    "user": {"class": "fedhub.registrar.user.UserProvisioner", "kwargs": {}},
}

SP_ENTITY_ID = "https://localhost:5001/saml"

# Development fixtures. Disable with `seed: {enabled: false}` in production.
DEFAULT_SEED = {
    "enabled": True,
    "clients": [
        {
            "client_id": "mvc",
            "client_secret": "901564A5-E7FE-42CB-B10D-61EF6A8F3654",
            "consent_type": "explicit",
            "display_name": "MVC client application",
            "redirect_uris": ["https://localhost:44338/callback/login/local"],
            "post_logout_redirect_uris": ["https://localhost:44338/callback/logout/local"],
            "permissions": [
                ENDPOINT_AUTHORIZATION,
                ENDPOINT_LOGOUT,
                ENDPOINT_TOKEN,
                GRANT_AUTHORIZATION_CODE,
                RESPONSE_TYPE_CODE,
                SCOPE_EMAIL,
                SCOPE_PROFILE,
                SCOPE_ROLES
            ],
            "requirements": [FEATURE_PKCE]
        }
    ],
    "resource_clients": [
        {
            "client_id": SP_ENTITY_ID,
            "permissions": [SCOPE_EMAIL]
        }
    ],
    "service_providers": [
        {
            "entity_id": SP_ENTITY_ID,
            "encrypt_assertions": False,
            "allow_idp_initiated_sso": True,
            "assertion_consumer_services": [
                {"binding": "HTTP-POST",
                 "location": "https://localhost:5001/signin-saml-openIddict"}
            ],
            "single_logout_services": [
                {"binding": "HTTP-Redirect", "location": "https://localhost:5001/signout-saml"}
            ],
            "signing_certificates": ["Resources/testclient.cer"],
            "encryption_certificate": "Resources/idsrv3test.cer"
        },
        {
            "entity_id": f"{SP_ENTITY_ID}/artifact",
            "encrypt_assertions": False,
            "assertion_consumer_services": [
                {"binding": "HTTP-Artifact",
                 "location": "https://localhost:5001/signin-saml-openIddict-artifact"}
            ],
            "single_logout_services": [
                {"binding": "HTTP-Redirect",
                 "location": "https://localhost:5001/signout-saml-artifact"}
            ],
            "artifact_resolution_services": [
                {"binding": "SOAP", "location": "https://localhost:5001/ars-saml"}
            ],
            "signing_certificates": ["Resources/testclient.cer"],
            "encryption_certificate": "Resources/idsrv3test.cer"
        }
    ],
    "scopes": [
        {
            "name": "email",
            "resources": [SP_ENTITY_ID],
            "claims": ["email"]
        }
    ],
    "users": [
        {
            "user_name": "bob@test.fake",
            "email": "bob@test.fake",
            "password": "Password123!"
        }
    ]
}
