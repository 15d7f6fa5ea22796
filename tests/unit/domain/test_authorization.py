"""Unit tests for the role allow-lists."""

import pytest

from core.exceptions import InsufficientPermissionsError
from domain.authorization import ALLOWED_ROLES, Operation, authorize, is_allowed
from domain.entities.workspace import WorkspaceRole

OWNER = WorkspaceRole.OWNER
ADMIN = WorkspaceRole.ADMIN
MEMBER = WorkspaceRole.MEMBER
VIEWER = WorkspaceRole.VIEWER


def test_every_operation_has_an_allow_list():
    assert set(ALLOWED_ROLES) == set(Operation)


@pytest.mark.parametrize(
    "operation, allowed",
    [
        (Operation.UPDATE_WORKSPACE, {OWNER}),
        (Operation.DELETE_WORKSPACE, {OWNER}),
        (Operation.CHANGE_ROLES, {OWNER}),
        (Operation.MANAGE_MEMBERS, {OWNER}),
        (Operation.CREATE_INVITE, {OWNER, ADMIN}),
        (Operation.REVOKE_INVITE, {OWNER, ADMIN}),
        (Operation.SEED_DEMO_DATA, {OWNER, ADMIN}),
        (Operation.DELETE_TASK, {OWNER, ADMIN}),
        (Operation.DELETE_TAG, {OWNER, ADMIN}),
        (Operation.CREATE_TASK, {OWNER, ADMIN, MEMBER}),
        (Operation.ADD_COMMENT, {OWNER, ADMIN, MEMBER}),
        (Operation.READ_TASKS, {OWNER, ADMIN, MEMBER, VIEWER}),
        (Operation.READ_ACTIVITY, {OWNER, ADMIN, MEMBER, VIEWER}),
    ],
)
def test_allow_lists(operation: Operation, allowed: set[WorkspaceRole]):
    for role in WorkspaceRole:
        assert is_allowed(role, operation) is (role in allowed)


def test_viewer_cannot_write_anything():
    read_only = {Operation.READ_TASKS, Operation.READ_MEMBERS, Operation.READ_ACTIVITY}
    for operation in Operation:
        if operation not in read_only:
            assert not is_allowed(VIEWER, operation), operation


def test_authorize_raises_with_allowed_roles():
    with pytest.raises(InsufficientPermissionsError) as exc_info:
        authorize(MEMBER, Operation.DELETE_TASK)

    assert exc_info.value.status_code == 403
    assert exc_info.value.details == {
        "operation": "delete_task",
        "allowed_roles": ["admin", "owner"],
    }


def test_authorize_passes_for_allowed_role():
    authorize(ADMIN, Operation.DELETE_TASK)
