from functools import wraps

import jwt as pyjwt

from core.imports import (
    current_app, create_access_token, get_jwt, verify_jwt_in_request,
    set_access_cookies, set_refresh_cookies, unset_jwt_cookies,
    datetime, timezone, uuid,
)
from core.extensions import jwt
from core.errors import AuthenticationError
from repositories.accounts import users, sellers

ROLES = {"user": users, "seller": sellers}
REFRESH_ALGORITHM = "HS256"


def _settings():
    return current_app.extensions["settings"]


@jwt.user_lookup_loader
def load_account(_jwt_header, jwt_data):
    repository = ROLES.get(jwt_data.get("role"))
    if repository is None:
        return None
    return repository.get(jwt_data["sub"])


def role_required(role):
    """Rejects requests without a valid access token for the given role."""
    def wrapper(fn):
        @wraps(fn)
        def decorator(*args, **kwargs):
            verify_jwt_in_request()
            if get_jwt().get("role") != role:
                raise AuthenticationError("Invalid Access Token")
            return fn(*args, **kwargs)
        return decorator
    return wrapper


user_required = role_required("user")
seller_required = role_required("seller")


def generate_access_token(account, role):
    return create_access_token(
        identity=str(account.id),
        additional_claims={"email": account.email, "name": account.name, "role": role},
    )


def generate_refresh_token(account, role):
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(account.id),
        "role": role,
        "type": "refresh",
        "jti": uuid.uuid4().hex,
        "iat": now,
        "exp": now + _settings().refresh_token_expires,
    }
    return pyjwt.encode(payload, _settings().refresh_token_secret, algorithm=REFRESH_ALGORITHM)


def decode_refresh_token(token, role):
    """Returns the account id carried by a refresh token issued for role."""
    try:
        payload = pyjwt.decode(token, _settings().refresh_token_secret, algorithms=[REFRESH_ALGORITHM])
    except pyjwt.PyJWTError as e:
        raise AuthenticationError("Invalid refresh token.") from e
    if payload.get("type") != "refresh" or payload.get("role") != role:
        raise AuthenticationError("Invalid refresh token.")
    return payload["sub"]


def set_auth_cookies(response, access_token, refresh_token):
    set_access_cookies(response, access_token)
    set_refresh_cookies(response, refresh_token)
    return response


def clear_auth_cookies(response):
    unset_jwt_cookies(response)
    return response
