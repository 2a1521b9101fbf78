from comradezone.utils.errors import (
    ComradeZoneError,
    ConfigurationError,
    ConflictError,
    DatabaseError,
    NotFoundError,
    ProfileRequiredError,
    QuotaExhaustedError,
    ValidationError,
)


def test_comradezone_error_base():
    err = ComradeZoneError("test error", 503, {"foo": "bar"})
    assert str(err) == "test error"
    assert err.message == "test error"
    assert err.status_code == 503
    assert err.details == {"foo": "bar"}


def test_comradezone_error_defaults():
    err = ComradeZoneError("test error")
    assert err.status_code == 500
    assert err.details == {}


def test_configuration_error():
    err = ConfigurationError("config error")
    assert isinstance(err, ComradeZoneError)
    assert err.status_code == 500
    assert err.message == "config error"


def test_database_error():
    err = DatabaseError("db error", {"error": "timeout"})
    assert isinstance(err, ComradeZoneError)
    assert err.status_code == 500
    assert err.details == {"error": "timeout"}


def test_validation_error():
    err = ValidationError("Cannot swipe on yourself")
    assert isinstance(err, ComradeZoneError)
    assert err.status_code == 400
    assert err.message == "Cannot swipe on yourself"


def test_not_found_error():
    err = NotFoundError("not found")
    assert isinstance(err, ComradeZoneError)
    assert err.status_code == 404
    assert err.message == "not found"


def test_profile_required_error():
    err = ProfileRequiredError(details={"profile_id": "p1"})
    assert isinstance(err, NotFoundError)
    assert err.status_code == 404
    assert err.message == "Create a profile first"
    assert err.details == {"profile_id": "p1"}


def test_quota_exhausted_error():
    err = QuotaExhaustedError("No super likes remaining today")
    assert isinstance(err, ComradeZoneError)
    assert err.status_code == 429


def test_conflict_error():
    err = ConflictError("Conflicting write, please try again")
    assert isinstance(err, ComradeZoneError)
    assert err.status_code == 409
