"""Test declarations: bind services to bodies, headers and expectations."""

from apit import create_test

from services import (
    service_get_object,
    service_get_object_by_id,
    service_get_profile,
    service_list_objects,
    service_login,
)


def _expect_present(result):
    assert result is not None


def _expect_credentials(result):
    assert "credentials" in result
    assert "accessToken" in result["credentials"]


login_test = create_test(
    "LOGIN_TEST",
    service_login,
    _expect_credentials,
    body={"email": "someone@example.com", "password": "change-me"},
    headers={"application-key": "portal-web-app"},
)

profile_test = create_test(
    "PROFILE_TEST",
    service_get_profile,
    _expect_present,
    headers={
        "application-key": "portal-web-app",
        "Authorization": "Bearer @@LOGIN_TEST.credentials.accessToken",
    },
)


def _expect_list(result):
    assert isinstance(result, list) and result, "expected a non-empty list of objects"


list_objects_test = create_test("GET_LIST_OBJECTS", service_list_objects, _expect_list)

object_by_id_test = create_test(
    "GET_OBJECT_BY_ID",
    service_get_object_by_id,
    _expect_list,
)


def _first_object_id():
    objects = list_objects_test.last_response or []
    return str(objects[0]["id"]) if objects else ""


object_test = create_test(
    "GET_OBJECT",
    service_get_object,
    _expect_present,
    params={"objectId": _first_object_id},
)
