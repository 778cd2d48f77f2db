from reservations.errors import (
    USER_MESSAGES,
    ErrorCode,
    PartialWriteError,
    ReservationError,
    SchemaError,
    StatementError,
    StorageError,
    ValidationError,
)


def test_all_error_codes_have_user_message():
    for code in ErrorCode:
        assert code in USER_MESSAGES


def test_user_message_lookup():
    err = ReservationError("connection reset by peer", code=ErrorCode.STORAGE_FAILED)
    assert err.user_message == "Unable to reach reservation storage. Please try again."


def test_subclasses_default_codes():
    assert ValidationError("missing").code == ErrorCode.INVALID_ARGUMENT
    assert SchemaError("boom").code == ErrorCode.SCHEMA_FAILED
    assert StatementError("missing").code == ErrorCode.STATEMENT_MISSING
    assert StorageError("down").code == ErrorCode.STORAGE_FAILED
    assert StorageError("slow", code=ErrorCode.TIMEOUT).user_message == USER_MESSAGES[ErrorCode.TIMEOUT]


def test_partial_write_is_a_storage_error():
    err = PartialWriteError("second step failed", completed=["reservations_by_hotel_date"], failed="reservations_by_confirmation")
    assert isinstance(err, StorageError)
    assert err.code == ErrorCode.PARTIAL_WRITE
    assert err.completed == ["reservations_by_hotel_date"]
    assert err.failed == "reservations_by_confirmation"


def test_user_message_never_exposes_internal_message():
    internal = "SELECT * FROM reservations_by_confirmation WHERE confirmation_number = 'secret'"
    err = StorageError(internal)
    assert internal not in err.user_message
