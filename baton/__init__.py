"""Baton: role-sequenced workflow orchestration with checkpoints and correction memory."""

from .checkpoints import CheckpointStore, SubprocessGitInfoProvider
from .config import BatonConfig, load_config
from .contracts import HandoffData, WorkflowExecution, WorkflowState
from .corrections import CorrectionStore
from .engine import RoleSchedule, WorkflowEngine
from .errors import (
    BatonError,
    ExecutionError,
    InvalidTransitionError,
    NotFoundError,
    PersistenceError,
)
from .persistence import get_repository
from .responders import RoleRequest, RoleResult, TemplateResponder
from .roles import Role, RoleCatalog, RoleSelector, Task

__version__ = "0.1.0"
__all__ = [
    "BatonConfig",
    "BatonError",
    "CheckpointStore",
    "CorrectionStore",
    "ExecutionError",
    "HandoffData",
    "InvalidTransitionError",
    "NotFoundError",
    "PersistenceError",
    "Role",
    "RoleCatalog",
    "RoleRequest",
    "RoleResult",
    "RoleSchedule",
    "RoleSelector",
    "SubprocessGitInfoProvider",
    "Task",
    "TemplateResponder",
    "WorkflowEngine",
    "WorkflowExecution",
    "WorkflowState",
    "get_repository",
    "load_config",
]
