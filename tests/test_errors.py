import pytest

from portal.errors import (
    ConflictError,
    CorruptStateError,
    InvalidCredentialsError,
    NotFoundError,
    PersistenceError,
    PortalError,
    ValidationError,
)


@pytest.mark.parametrize(
    ("error", "status_code"),
    [
        (ValidationError("bad"), 400),
        (NotFoundError("missing"), 404),
        (InvalidCredentialsError(), 401),
        (ConflictError("dup"), 409),
        (PersistenceError("full"), 507),
        (CorruptStateError("junk"), 500),
    ],
)
def test_every_error_is_a_portal_error(error, status_code):
    assert isinstance(error, PortalError)
    assert error.status_code == status_code


def test_invalid_credentials_is_a_lookup_miss():
    assert issubclass(InvalidCredentialsError, NotFoundError)


def test_to_dict():
    err = ValidationError("Invalid role.", field="role", value="owner")
    assert err.to_dict() == {
        "error_code": "VALIDATION_ERROR",
        "message": "Invalid role.",
        "details": {"field": "role", "value": "owner"},
    }
    assert str(err) == "Invalid role."
