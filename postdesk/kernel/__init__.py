"""
Postdesk Kernel — the client-side post core.

Four components:
  validation    — draft field constraints (pure)
  cache         — the known post list, fetch status
  orchestrator  — create/update/delete with per-target de-duplication
  interaction   — list, create, and detail views with their dialogs
"""

from postdesk.kernel.cache import PostCache
from postdesk.kernel.interaction import CreatePostView, HomeView, PostDetailView, View
from postdesk.kernel.orchestrator import MutationOrchestrator
from postdesk.kernel.types import Operation, OperationKind, OperationState, Post, PostDraft
from postdesk.kernel.validation import validate, validate_field

__all__ = [
    "validate",
    "validate_field",
    "PostCache",
    "MutationOrchestrator",
    "View",
    "HomeView",
    "CreatePostView",
    "PostDetailView",
    "Post",
    "PostDraft",
    "Operation",
    "OperationKind",
    "OperationState",
]
