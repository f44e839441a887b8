"""
Role and capability model
Every mutating workflow transition and every user-administration call
asks has_permission() first
"""
import enum
from typing import Dict, FrozenSet, Optional, Union


class Role(str, enum.Enum):
    IT_ADMIN = "IT Admin"
    HR_MANAGER = "HR Manager"
    HR_ASSISTANT = "HR Assistant"


class Capability(str, enum.Enum):
    VIEW_METRICS = "canViewMetrics"
    APPROVE_JOBS = "canApproveJobs"
    MANAGE_USERS = "canManageUsers"
    CREATE_JOBS = "canCreateJobs"
    FORMAT_JOBS = "canFormatJobs"
    PUBLISH_JOBS = "canPublishJobs"


DEFAULT_ROLE = Role.HR_ASSISTANT

ROLE_PERMISSIONS: Dict[Role, FrozenSet[Capability]] = {
    Role.IT_ADMIN: frozenset(Capability),
    Role.HR_MANAGER: frozenset({
        Capability.VIEW_METRICS,
        Capability.APPROVE_JOBS,
        Capability.CREATE_JOBS,
        Capability.FORMAT_JOBS,
        Capability.PUBLISH_JOBS,
    }),
    Role.HR_ASSISTANT: frozenset({
        Capability.CREATE_JOBS,
        Capability.FORMAT_JOBS,
        Capability.PUBLISH_JOBS,
    }),
}


def parse_role(value) -> Optional[Role]:
    """Convert an untrusted role value; None when it is not a known role"""
    if isinstance(value, Role):
        return value
    try:
        return Role(value)
    except ValueError:
        return None


def permissions_for(role: Union[Role, str, None]) -> FrozenSet[Capability]:
    parsed = parse_role(role)
    if parsed is None:
        return frozenset()
    return ROLE_PERMISSIONS[parsed]


def has_permission(role: Union[Role, str, None], capability: Union[Capability, str]) -> bool:
    """
    True when the role grants the capability.
    Unknown roles and unknown capabilities are denied.
    """
    try:
        capability = Capability(capability)
    except ValueError:
        return False
    return capability in permissions_for(role)


def permission_flags(role: Union[Role, str, None]) -> Dict[str, bool]:
    """All capabilities as a {name: bool} map, as the frontend consumes them"""
    granted = permissions_for(role)
    return {capability.value: capability in granted for capability in Capability}
