"""Error hierarchy - status codes, categories and the response envelope."""

from marketing_api.core.errors import (
    AuthenticationRequiredError, ConflictError, DatabaseError, ErrorCategory,
    LinkingDisabledError, PermissionDeniedError, RequestValidationFailed,
    ResourceNotFoundError,
)


def test_envelope_keeps_error_a_string():
    body = ResourceNotFoundError("Plan", "abc").to_response()
    assert body["error"] == "Plan not found"
    assert body["code"] == "RESOURCE_NOT_FOUND"
    assert body["category"] == ErrorCategory.RESOURCE_NOT_FOUND.value


def test_status_codes():
    assert RequestValidationFailed("bad").http_status == 400
    assert AuthenticationRequiredError().http_status == 401
    assert PermissionDeniedError("marketing.campaigns.create").http_status == 403
    assert LinkingDisabledError().http_status == 403
    assert ResourceNotFoundError("Plan", "x").http_status == 404
    assert ConflictError("dup").http_status == 409
    assert DatabaseError("boom", "commit").http_status == 500


def test_validation_failure_reports_field_detail():
    body = RequestValidationFailed("month must be YYYY-MM", field="month").to_response()
    assert body["details"] == [
        {"field": "month", "message": "month must be YYYY-MM", "type": "value_error"},
    ]


def test_permission_denied_records_action_key():
    err = PermissionDeniedError("marketing.campaigns.delete")
    assert err.context.action_key == "marketing.campaigns.delete"
    assert err.to_response()["error"] == "Not authorized"


def test_not_found_records_entity_id():
    assert ResourceNotFoundError("Vendor", "v-1").context.entity_id == "v-1"
