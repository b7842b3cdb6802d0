"""Flow declarations picked up by `apit run flows.py`."""

from apit import create_flow

from specs import list_objects_test, login_test, object_by_id_test, object_test, profile_test

auth_flow = create_flow("AUTH_FLOW", [login_test, profile_test])

objects_flow = create_flow(
    "OBJECTS_FLOW",
    [list_objects_test, object_by_id_test, object_test],
)

FLOWS = [auth_flow, objects_flow]
