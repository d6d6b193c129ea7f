import pytest

from promptlog.utils.result import (
    Failure,
    Success,
    internal_error,
    not_found_error,
    storage_error,
    upstream_error,
    validation_error,
)


class TestSuccess:
    def test_success_basics(self):
        result = Success({"id": 1})

        assert result.is_success()
        assert not result.is_failure()
        assert bool(result) is True
        assert result.unwrap() == {"id": 1}


class TestFailure:
    def test_failure_basics(self):
        result = Failure(error="nope")

        assert result.is_failure()
        assert bool(result) is False
        assert result.status_code == 500

    def test_unwrap_raises(self):
        with pytest.raises(RuntimeError):
            Failure(error="nope").unwrap()

    def test_to_dict(self):
        result = validation_error("missing message", context={"field": "message"})

        assert result.to_dict() == {
            "success": False,
            "error": "missing message",
            "error_type": "ValidationError",
            "context": {"field": "message"},
            "recoverable": True,
        }

    def test_to_dict_minimal(self):
        assert not_found_error("No conversations found").to_dict() == {
            "success": False,
            "error": "No conversations found",
            "error_type": "NotFoundError",
        }


class TestErrorConstructors:
    @pytest.mark.parametrize(
        "factory,error_type,status_code",
        [
            (validation_error, "ValidationError", 400),
            (not_found_error, "NotFoundError", 404),
            (upstream_error, "UpstreamError", 500),
            (storage_error, "StorageError", 500),
            (internal_error, "InternalError", 500),
        ],
    )
    def test_kinds(self, factory, error_type, status_code):
        result = factory("x")

        assert result.error_type == error_type
        assert result.status_code == status_code
