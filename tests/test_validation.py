import pytest

from promptlog.chat import RequestValidator, ValidatedRequest


class TestRequestValidator:
    def test_valid_message(self):
        result = RequestValidator().check({"message": "Write a mission statement"})

        assert result.is_success()
        assert result.unwrap() == ValidatedRequest(message="Write a mission statement")

    def test_message_kept_verbatim(self):
        result = RequestValidator().check({"message": "  spaced  "})
        assert result.unwrap().message == "  spaced  "

    @pytest.mark.parametrize(
        "payload",
        [None, {}, {"message": None}, {"message": ""}, {"message": " \t\n"}, {"message": 42}],
    )
    def test_missing_message(self, payload):
        result = RequestValidator().check(payload)

        assert result.is_failure()
        assert result.error == "missing message"
        assert result.status_code == 400
        assert result.context == {"field": "message"}

    def test_email_optional_by_default(self):
        result = RequestValidator().check({"message": "hi"})
        assert result.unwrap().email is None

    def test_email_is_trimmed(self):
        result = RequestValidator().check({"message": "hi", "email": " a@example.com "})
        assert result.unwrap().email == "a@example.com"

    @pytest.mark.parametrize("email", [None, "", "   "])
    def test_missing_email_when_required(self, email):
        result = RequestValidator(require_email=True).check(
            {"message": "hi", "email": email}
        )

        assert result.is_failure()
        assert result.error == "missing email"
        assert result.error_type == "ValidationError"

    def test_message_checked_before_email(self):
        result = RequestValidator(require_email=True).check({})
        assert result.error == "missing message"
