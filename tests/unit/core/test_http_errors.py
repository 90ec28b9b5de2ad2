import pytest

from core.exceptions import (
    ConfigurationError,
    NotFoundError,
    ServiceError,
    StorageError,
    ValidationError,
)
from core.http.errors import build_error_response


@pytest.mark.parametrize(
    ("exc", "status", "error", "context"),
    [
        (ValidationError("bad", field="kind"), 400, "validation_error", {"field": "kind"}),
        (NotFoundError("missing", resource="collections"), 404, "not_found", {"resource": "collections"}),
        (ConfigurationError("bad port", key="WAVE_SERVER_PORT"), 500, "configuration_error", {"key": "WAVE_SERVER_PORT"}),
        (StorageError("disk", operation="write"), 500, "storage_error", {"operation": "write"}),
    ],
)
def test_build_error_response_maps_exceptions(exc, status, error, context):
    code, payload = build_error_response(exc)

    assert code == status
    assert payload["success"] is False
    assert payload["code"] == status
    assert payload["message"] == str(exc)
    assert payload["data"] == {"error": error, "context": context}


def test_context_is_omitted_without_details():
    code, payload = build_error_response(ValidationError("bad"))

    assert code == 400
    assert payload["data"] == {"error": "validation_error"}


def test_generic_service_error_is_internal():
    code, payload = build_error_response(ServiceError("unexpected"))

    assert code == 500
    assert payload["data"] == {"error": "service_error"}
