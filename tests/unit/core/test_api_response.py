from core.pydantic_schemas import ApiResponse, api_response, error, ok


def test_ok_helper_returns_success_envelope():
    result = ok("Upload processed", data={"files": []}, meta={"published": 0})

    assert result == {
        "code": 200,
        "success": True,
        "message": "Upload processed",
        "data": {"files": []},
        "meta": {"published": 0},
    }


def test_error_helper_requires_error_code():
    result = error(401, "Unauthorized")

    assert result["code"] == 401
    assert result["success"] is False
    assert result["message"] == "Unauthorized"


def test_error_helper_rejects_success_code():
    try:
        error(200, "should fail")
    except ValueError as exc:
        assert "Error responses must" in str(exc)
    else:  # pragma: no cover
        raise AssertionError("error helper accepted success code")


def test_api_response_model_dump_matches_payload():
    envelope = ApiResponse[int](code=201, success=True, message="created", data=1)

    assert envelope.model_dump() == {
        "code": 201,
        "success": True,
        "message": "created",
        "data": 1,
        "meta": None,
    }


def test_api_response_supports_meta_payload():
    result = api_response(code=202, message="accepted", data=None, meta={"ttl_seconds": 60})

    assert result["success"] is True
    assert result["meta"] == {"ttl_seconds": 60}
