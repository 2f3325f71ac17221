"""Business logic services."""

from .analytics_service import AnalyticsScope, compute_analytics
from .auth_service import (
    authenticate_user,
    create_access_token,
    create_user,
    decode_access_token,
    get_current_user,
    get_user_by_email,
    get_user_by_id,
)
from .invite_code_service import (
    generate_invite_code,
    join_workspace,
    rotate_invite_code,
)
from .lifecycle_service import (
    LifecycleError,
    LifecycleReport,
    LifecycleStage,
    StepOutcome,
    StepResult,
    create_project,
    create_workspace,
    delete_project,
    delete_task,
    delete_workspace,
)
from .membership_service import (
    MembershipService,
    unauthorized,
)
from .position_service import (
    POSITION_STEP,
    REBALANCE_THRESHOLD,
    move_task,
    next_position,
    position_between,
    rebalance_bucket,
)
from .task_helpers import enrich_tasks, get_member_with_user

__all__ = [
    # Analytics
    "AnalyticsScope",
    "compute_analytics",
    # Auth service
    "authenticate_user",
    "create_access_token",
    "create_user",
    "decode_access_token",
    "get_current_user",
    "get_user_by_email",
    "get_user_by_id",
    # Invite codes
    "generate_invite_code",
    "join_workspace",
    "rotate_invite_code",
    # Lifecycle
    "LifecycleError",
    "LifecycleReport",
    "LifecycleStage",
    "StepOutcome",
    "StepResult",
    "create_project",
    "create_workspace",
    "delete_project",
    "delete_task",
    "delete_workspace",
    # Membership
    "MembershipService",
    "unauthorized",
    # Positions
    "POSITION_STEP",
    "REBALANCE_THRESHOLD",
    "move_task",
    "next_position",
    "position_between",
    "rebalance_bucket",
    # Task helpers
    "enrich_tasks",
    "get_member_with_user",
]
