"""Service declarations: one per endpoint under test."""

from apit import HttpMethod, create_service

service_login = create_service(
    "LOGIN",
    "https://apit-framework.com/auth/sign-in",
    HttpMethod.POST,
)

service_get_profile = create_service(
    "GET_PROFILE",
    "https://apit-framework.com/auth/profile",
    HttpMethod.GET,
)

service_list_objects = create_service(
    "GET_LIST_OBJECTS",
    "https://api.restful-api.dev/objects",
    HttpMethod.GET,
)

# the id comes from the first object returned by GET_LIST_OBJECTS
service_get_object_by_id = create_service(
    "GET_OBJECT_BY_ID",
    "https://api.restful-api.dev/objects?id=@@GET_LIST_OBJECTS.[0].id",
    HttpMethod.GET,
)

service_get_object = create_service(
    "GET_OBJECT",
    "https://api.restful-api.dev/objects/{objectId}",
    HttpMethod.GET,
)
