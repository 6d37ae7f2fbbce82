from core.errors import ConfigError, EncodeError, InvalidCropError, ScannerError, error_payload


def test_scanner_error_payload_keeps_code_and_details():
    payload = error_payload(InvalidCropError((10, 20, 0, 0), (640, 480)))
    assert payload == {
        "success": False,
        "error": "Crop rectangle (10, 20, 0, 0) is empty inside frame 640x480",
        "error_code": "INVALID_CROP",
        "details": {"rect": [10, 20, 0, 0], "frame_size": [640, 480]},
    }


def test_subclass_codes():
    assert error_payload(EncodeError(".jpg"))["error_code"] == "ENCODE_FAILED"
    assert error_payload(ConfigError("ema_alpha", 2.0, "must be in (0, 1]"))["details"]["field"] == "ema_alpha"


def test_unexpected_exception_gets_generic_payload():
    payload = error_payload(ValueError("bad shape"))
    assert payload["success"] is False
    assert payload["error"] == "An unexpected error occurred"
    assert payload["error_code"] == "UNEXPECTED_ERROR"
    assert payload["details"] == {"error_type": "ValueError", "error_message": "bad shape"}


def test_scanner_error_str_is_message():
    err = ScannerError("Something broke", "SOMETHING")
    assert str(err) == "Something broke"
    assert err.details == {}
