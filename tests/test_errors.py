import errno

import pytest

from memscan.errors import (
    AppError,
    DataTypeParseError,
    ErrnoError,
    PermissionDeniedError,
    ProcessNotFoundError,
)


def test_eperm_maps_to_permission_denied():
    error = AppError.from_errno(errno.EPERM)
    assert isinstance(error, PermissionDeniedError)
    assert str(error) == "Permission Denied"


def test_esrch_maps_to_process_not_found():
    error = AppError.from_errno(errno.ESRCH)
    assert isinstance(error, ProcessNotFoundError)
    assert str(error) == "Process Not Found"


@pytest.mark.parametrize("code", [errno.EACCES, errno.EFAULT, errno.ENOMEM])
def test_other_codes_keep_errno(code):
    error = AppError.from_errno(code)
    assert isinstance(error, ErrnoError)
    assert error.errno == code
    assert errno.errorcode[code] in str(error)


def test_parse_error_carries_message():
    error = DataTypeParseError("invalid digit found in string")
    assert str(error) == "invalid digit found in string"
    assert error.message == "invalid digit found in string"


def test_all_errors_are_app_errors():
    errors = [
        AppError.from_errno(errno.EPERM),
        AppError.from_errno(errno.ESRCH),
        AppError.from_errno(errno.EFAULT),
        DataTypeParseError("x"),
    ]
    assert all(isinstance(error, AppError) for error in errors)
    assert str(errors[0]) == "Permission Denied"
    assert str(errors[1]) == "Process Not Found"
    assert errors[2].errno == errno.EFAULT
    assert errors[3].message == "x"