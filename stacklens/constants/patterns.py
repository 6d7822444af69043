"""Rule tables and patterns for workload classification.

The tables are versioned so the matching vocabulary can grow without
touching discovery orchestration. Bump ROLE_RULES_VERSION whenever a table
changes meaning.
"""

import re
from typing import Final

ROLE_RULES_VERSION: Final = 1

# ============================================================================
# Role labels
# ============================================================================

PREFILL_ROLE_VALUES: Final = ("prefill", "prefill-server")
DECODE_ROLE_VALUES: Final = ("decode", "decode-server")
UNIFIED_ROLE_VALUES: Final = ("both", "unified", "model", "server", "vllm")

PREFILL_NAME_TOKEN: Final = "prefill"
DECODE_NAME_TOKEN: Final = "decode"

# ============================================================================
# Serving workload vocabulary (deployment fallback discovery)
# ============================================================================

SERVING_NAMESPACE_TOKENS: Final = (
    "llm-d",
    "llmd",
    "e2e",
    "vllm",
    "effi",
    "aibrix",
    "hc4ai",
    "inf",
    "gaie",
    "sched",
    "inference",
    "serving",
    "model",
    "ai-",
    "-ai",
    "ml-",
)

SERVING_DEPLOYMENT_NAME_TOKENS: Final = (
    # engines
    "vllm",
    "llm-d",
    "llmd",
    "tgi",
    "triton",
    # model families
    "llama",
    "granite",
    "qwen",
    "mistral",
    "mixtral",
    # serving / scheduling keywords
    "inference",
    "modelservice",
    "scheduling",
    "inference-pool",
    "-epp",
)

SERVING_DEPLOYMENT_NAME_SUFFIXES: Final = ("epp",)

# Only counted when the namespace itself looks like a serving namespace.
NAMESPACE_SCOPED_NAME_TOKENS: Final = ("gateway", "ingress")

# (label key, required value); a value of None means "present and non-empty".
SERVING_TEMPLATE_LABELS: Final = (
    ("llmd.org/inferenceServing", "true"),
    ("llmd.org/model", None),
    ("llm-d.ai/role", None),
    ("app", "llm-inference"),
    ("app.kubernetes.io/name", "vllm"),
    ("app.kubernetes.io/name", "tgi"),
    ("app.kubernetes.io/part-of", "inference"),
)

EPP_NAME_TOKENS: Final = ("-epp",)
EPP_NAME_SUFFIXES: Final = ("epp",)
EPP_DEPLOYMENT_NAME_TOKENS: Final = ("scheduling", "inference-pool")

# ============================================================================
# Connectivity failures
# ============================================================================

CONNECTIVITY_ERROR_TOKENS: Final = (
    "unable to connect",
    "connection refused",
    "timeout",
    "no such host",
    "context deadline exceeded",
)

# ============================================================================
# Name patterns
# ============================================================================

POD_NAME_SUFFIX_PATTERN: Final = re.compile(r"-[a-z0-9]+$")
SHELL_METACHARACTERS_PATTERN: Final = re.compile(r"[;|&$`]")

__all__ = [
    "CONNECTIVITY_ERROR_TOKENS",
    "DECODE_NAME_TOKEN",
    "DECODE_ROLE_VALUES",
    "EPP_DEPLOYMENT_NAME_TOKENS",
    "EPP_NAME_SUFFIXES",
    "EPP_NAME_TOKENS",
    "NAMESPACE_SCOPED_NAME_TOKENS",
    "POD_NAME_SUFFIX_PATTERN",
    "PREFILL_NAME_TOKEN",
    "PREFILL_ROLE_VALUES",
    "ROLE_RULES_VERSION",
    "SERVING_DEPLOYMENT_NAME_SUFFIXES",
    "SERVING_DEPLOYMENT_NAME_TOKENS",
    "SERVING_NAMESPACE_TOKENS",
    "SERVING_TEMPLATE_LABELS",
    "SHELL_METACHARACTERS_PATTERN",
    "UNIFIED_ROLE_VALUES",
]
