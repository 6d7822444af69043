"""Scalar constants for stack discovery.

All application-level constants with proper type hints using Final.
"""

from typing import Final

# ============================================================================
# Application
# ============================================================================

APP_TITLE: Final = "StackLens"
CONFIG_ENV_VAR: Final = "STACKLENS_CONFIG"

# ============================================================================
# Kubernetes labels
# ============================================================================

ROLE_LABEL: Final = "llm-d.ai/role"
POD_MODEL_LABEL: Final = "llm-d.ai/model"
DEPLOYMENT_MODEL_LABEL: Final = "llmd.org/model"
POD_TEMPLATE_HASH_LABEL: Final = "pod-template-hash"
CONTROLLER_REVISION_HASH_LABEL: Final = "controller-revision-hash"
DEFAULT_GROUP_KEY: Final = "default"

# ============================================================================
# Cache storage
# ============================================================================

CACHE_KEY: Final = "llmd-stack-cache"
CACHE_FILE_NAME: Final = f"{CACHE_KEY}.json"
SELECTION_FILE_NAME: Final = "llmd-stack-selection.json"

# ============================================================================
# Demo mode
# ============================================================================

DEMO_MODEL_NAME: Final = "Llama-3-70B"

__all__ = [
    "APP_TITLE",
    "CACHE_FILE_NAME",
    "CACHE_KEY",
    "CONFIG_ENV_VAR",
    "CONTROLLER_REVISION_HASH_LABEL",
    "DEFAULT_GROUP_KEY",
    "DEMO_MODEL_NAME",
    "DEPLOYMENT_MODEL_LABEL",
    "POD_MODEL_LABEL",
    "POD_TEMPLATE_HASH_LABEL",
    "ROLE_LABEL",
    "SELECTION_FILE_NAME",
]
