"""Role-based authorization for workspace operations.

Each operation enumerates the roles allowed to perform it. There is no
role ordering: widening an allow-list is always an explicit edit here.
"""

from enum import StrEnum

from core.exceptions import InsufficientPermissionsError
from domain.entities.workspace import WorkspaceRole

_ALL_ROLES = frozenset(WorkspaceRole)
_OWNER = frozenset({WorkspaceRole.OWNER})
_OWNER_ADMIN = frozenset({WorkspaceRole.OWNER, WorkspaceRole.ADMIN})
_CONTRIBUTORS = frozenset({WorkspaceRole.OWNER, WorkspaceRole.ADMIN, WorkspaceRole.MEMBER})


class Operation(StrEnum):
    """Operations guarded by a workspace role check."""

    UPDATE_WORKSPACE = "update_workspace"
    DELETE_WORKSPACE = "delete_workspace"
    MANAGE_MEMBERS = "manage_members"
    CHANGE_ROLES = "change_roles"
    SEED_DEMO_DATA = "seed_demo_data"

    CREATE_INVITE = "create_invite"
    LIST_INVITES = "list_invites"
    REVOKE_INVITE = "revoke_invite"

    CREATE_TASK = "create_task"
    UPDATE_TASK = "update_task"
    DELETE_TASK = "delete_task"
    READ_TASKS = "read_tasks"

    ADD_SUBTASK = "add_subtask"
    UPDATE_SUBTASK = "update_subtask"
    DELETE_SUBTASK = "delete_subtask"
    ADD_COMMENT = "add_comment"
    DELETE_ANY_COMMENT = "delete_any_comment"
    ADD_ATTACHMENT = "add_attachment"

    CREATE_TAG = "create_tag"
    DELETE_TAG = "delete_tag"

    READ_MEMBERS = "read_members"
    READ_ACTIVITY = "read_activity"


ALLOWED_ROLES: dict[Operation, frozenset[WorkspaceRole]] = {
    Operation.UPDATE_WORKSPACE: _OWNER,
    Operation.DELETE_WORKSPACE: _OWNER,
    Operation.MANAGE_MEMBERS: _OWNER,
    Operation.CHANGE_ROLES: _OWNER,
    Operation.SEED_DEMO_DATA: _OWNER_ADMIN,
    Operation.CREATE_INVITE: _OWNER_ADMIN,
    Operation.LIST_INVITES: _OWNER_ADMIN,
    Operation.REVOKE_INVITE: _OWNER_ADMIN,
    # Members are further restricted by task rules in TaskService
    Operation.CREATE_TASK: _CONTRIBUTORS,
    Operation.UPDATE_TASK: _CONTRIBUTORS,
    Operation.DELETE_TASK: _OWNER_ADMIN,
    Operation.READ_TASKS: _ALL_ROLES,
    Operation.ADD_SUBTASK: _CONTRIBUTORS,
    Operation.UPDATE_SUBTASK: _CONTRIBUTORS,
    Operation.DELETE_SUBTASK: _CONTRIBUTORS,
    Operation.ADD_COMMENT: _CONTRIBUTORS,
    Operation.DELETE_ANY_COMMENT: _OWNER_ADMIN,
    Operation.ADD_ATTACHMENT: _CONTRIBUTORS,
    Operation.CREATE_TAG: _CONTRIBUTORS,
    Operation.DELETE_TAG: _OWNER_ADMIN,
    Operation.READ_MEMBERS: _ALL_ROLES,
    Operation.READ_ACTIVITY: _ALL_ROLES,
}


def is_allowed(role: WorkspaceRole, operation: Operation) -> bool:
    """Return True if ``role`` may perform ``operation``."""
    return role in ALLOWED_ROLES[operation]


def authorize(role: WorkspaceRole, operation: Operation) -> None:
    """Raise InsufficientPermissionsError unless ``role`` may perform ``operation``."""
    if not is_allowed(role, operation):
        raise InsufficientPermissionsError(
            operation.value,
            allowed_roles=sorted(r.value for r in ALLOWED_ROLES[operation]),
        )
