"""Settings tests — secret fallback rules and algorithm pinning."""

import pydantic
import pytest

from inkpost.config import DEV_JWT_SECRET, Settings
from inkpost.main import create_app


def test_dev_secret_allowed_in_development():
    cfg = Settings(jwt_secret=DEV_JWT_SECRET, environment="development")
    assert cfg.uses_dev_secret


def test_dev_secret_rejected_outside_development():
    with pytest.raises(pydantic.ValidationError, match="INKPOST_JWT_SECRET"):
        Settings(jwt_secret=DEV_JWT_SECRET, environment="production")


def test_blank_secret_rejected_outside_development():
    with pytest.raises(pydantic.ValidationError):
        Settings(jwt_secret="", environment="staging")


def test_real_secret_accepted_in_production():
    cfg = Settings(jwt_secret="a-real-secret-0123456789abcdefgh", environment="production")
    assert not cfg.uses_dev_secret


@pytest.mark.parametrize("alg", ["none", "RS256", "ES256"])
def test_non_hmac_algorithm_rejected(alg):
    with pytest.raises(pydantic.ValidationError):
        Settings(jwt_algorithm=alg)


def test_settings_are_frozen():
    cfg = Settings()
    with pytest.raises(pydantic.ValidationError):
        cfg.jwt_secret = "changed"


def test_app_codec_built_from_settings():
    cfg = Settings(jwt_secret="factory-secret-0123456789abcdefgh", token_lifetime_hours=1)
    app = create_app(cfg)
    codec = app.state.token_codec
    claims = codec.decode(codec.issue(9))
    assert claims.expires_at - claims.issued_at == 3600
    assert app.state.settings is cfg
