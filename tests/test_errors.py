"""Error table tests — the public face of every internal error kind.

Learn: These assertions pin the collapsing rules so a refactor can't
start leaking why a token was rejected.
"""

import json

import pytest

from inkpost.errors import (
    ERROR_RESPONSES,
    DuplicateIdentityError,
    ExpiredTokenError,
    ForbiddenError,
    InkpostError,
    InvalidCredentialsError,
    InvalidIdentifierError,
    InvalidTokenError,
    MalformedCredentialError,
    MissingCredentialError,
    MissingFieldError,
    NotFoundError,
    StoreUnavailableError,
    UnauthenticatedError,
    render_error,
)


@pytest.mark.parametrize(
    "exc_type,status,code",
    [
        (MissingFieldError, 400, "missing_field"),
        (InvalidIdentifierError, 400, "invalid_identifier"),
        (DuplicateIdentityError, 400, "duplicate_identity"),
        (InvalidCredentialsError, 401, "invalid_credentials"),
        (MissingCredentialError, 401, "missing_credential"),
        (MalformedCredentialError, 401, "malformed_credential"),
        (UnauthenticatedError, 401, "unauthenticated"),
        (InvalidTokenError, 401, "unauthenticated"),
        (ExpiredTokenError, 401, "unauthenticated"),
        (ForbiddenError, 403, "forbidden"),
        (NotFoundError, 404, "not_found"),
        (StoreUnavailableError, 503, "store_unavailable"),
    ],
)
def test_error_table(exc_type, status, code):
    assert ERROR_RESPONSES[exc_type.code][:2] == (status, code)
    assert render_error(exc_type()).status_code == status


def test_token_failures_collapse_to_one_body():
    bodies = {
        render_error(e).body
        for e in (
            InvalidTokenError("Invalid token: Signature verification failed"),
            ExpiredTokenError(),
            InvalidTokenError("Token is not yet valid"),
            UnauthenticatedError(),
        )
    }
    assert len(bodies) == 1
    assert json.loads(bodies.pop()) == {
        "detail": "Invalid or expired token",
        "code": "unauthenticated",
    }


def test_login_failure_message_ignores_internal_detail():
    body = json.loads(render_error(InvalidCredentialsError("no such email")).body)
    assert body["detail"] == "Invalid email or password"


def test_store_failure_hides_driver_detail():
    body = json.loads(render_error(StoreUnavailableError("connection refused on 10.0.0.5")).body)
    assert body["detail"] == "Service temporarily unavailable"


def test_input_errors_keep_their_message():
    body = json.loads(render_error(MissingFieldError("Title and body are required")).body)
    assert body["detail"] == "Title and body are required"


def test_401_carries_bearer_challenge():
    assert render_error(MissingCredentialError()).headers["WWW-Authenticate"] == "Bearer"
    assert "WWW-Authenticate" not in render_error(ForbiddenError()).headers


def test_unknown_kind_is_500():
    class Surprise(InkpostError):
        code = "surprise"

    assert render_error(Surprise()).status_code == 500
