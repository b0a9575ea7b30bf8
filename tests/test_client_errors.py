import pytest

from mcp_datahub.client.errors import (
    ConfigError,
    DataHubError,
    ForbiddenError,
    InvalidURNError,
    NotConfiguredError,
    NotFoundError,
    RateLimitedError,
    RequestTimeoutError,
    UnauthorizedError,
    UnknownConnectionError,
)


@pytest.mark.parametrize(
    "cls, message",
    [
        (UnauthorizedError, "unauthorized: invalid or missing token"),
        (ForbiddenError, "forbidden: insufficient permissions"),
        (NotFoundError, "entity not found"),
        (InvalidURNError, "invalid DataHub URN format"),
        (RequestTimeoutError, "request timed out"),
        (RateLimitedError, "rate limited by DataHub"),
        (NotConfiguredError, "datahub client not configured"),
    ],
)
def test_default_messages(cls, message):
    assert str(cls()) == message
    assert cls().detail is None


def test_detail_is_appended_to_default_message():
    err = InvalidURNError("must have parentheses")
    assert str(err) == "invalid DataHub URN format: must have parentheses"
    assert err.detail == "must have parentheses"


@pytest.mark.parametrize(
    "cls, expected",
    [
        (ConfigError, "detail"),
        (UnauthorizedError, "unauthorized: invalid or missing token"),
        (ForbiddenError, "forbidden: insufficient permissions"),
        (NotFoundError, "entity not found"),
        (InvalidURNError, "invalid DataHub URN format"),
        (RequestTimeoutError, "request timed out"),
        (RateLimitedError, "rate limited by DataHub"),
        (NotConfiguredError, "datahub client not configured"),
    ],
)
def test_all_errors_share_base_class(cls, expected):
    err = cls("detail") if cls is ConfigError else cls()
    assert isinstance(err, DataHubError)
    assert str(err) == expected
    with pytest.raises(DataHubError, match=expected):
        raise err


def test_config_error_message_is_exact():
    err = ConfigError("DATAHUB_URL is required")
    assert str(err) == "DATAHUB_URL is required"
    assert isinstance(err, ValueError)


def test_timeout_error_is_builtin_timeout():
    err = RequestTimeoutError()
    assert isinstance(err, TimeoutError)
    assert str(err) == "request timed out"


def test_invalid_urn_is_value_error():
    err = InvalidURNError("bad")
    assert isinstance(err, ValueError)
    assert str(err) == "invalid DataHub URN format: bad"


def test_unknown_connection_error_keeps_name_and_available():
    err = UnknownConnectionError("staging", ["datahub", "dev"])
    assert err.name == "staging"
    assert err.available == ["datahub", "dev"]
    assert str(err).startswith("unknown connection: ")
    assert "'staging'" in str(err)
    assert "'dev'" in str(err)
    assert isinstance(err, LookupError)