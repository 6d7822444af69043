"""kubectl transport for cluster queries.

The engine only depends on the request/response contract: a command goes out
with a context and a timeout, and a ``KubectlResponse`` comes back carrying
output text, exit code and error text. Failures are reported in the response,
never raised, so callers can classify them.
"""

from __future__ import annotations

import asyncio
import logging
import subprocess
from dataclasses import dataclass

from stacklens.constants.enums import QueryFailure
from stacklens.constants.patterns import (
    CONNECTIVITY_ERROR_TOKENS,
    SHELL_METACHARACTERS_PATTERN,
)
from stacklens.constants.timeouts import KUBECTL_COMMAND_TIMEOUT

logger = logging.getLogger(__name__)

TIMEOUT_EXIT_CODE = 124
NOT_FOUND_EXIT_CODE = 127


@dataclass(frozen=True)
class KubectlResponse:
    """Result of one kubectl invocation."""

    output: str
    exit_code: int
    error: str = ""
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


def classify_failure(response: KubectlResponse) -> QueryFailure:
    """Classify a response as success, connectivity failure or other failure.

    A process timeout is a connectivity failure regardless of its text. Any
    other non-zero exit is a connectivity failure only when its output or
    error text carries one of the connectivity tokens.
    """
    if response.ok:
        return QueryFailure.NONE
    if response.timed_out:
        return QueryFailure.CONNECTIVITY
    if is_connectivity_message(f"{response.output}\n{response.error}"):
        return QueryFailure.CONNECTIVITY
    return QueryFailure.COMMAND


def is_connectivity_message(message: str) -> bool:
    """Return True when text reads like an unreachable-cluster error."""
    lowered = message.lower()
    return any(token in lowered for token in CONNECTIVITY_ERROR_TOKENS)


class KubectlExecutor:
    """Runs read-only kubectl commands in a worker thread."""

    ALLOWED_VERBS = frozenset(
        {
            "get",
            "describe",
            "version",
            "api-resources",
            "api-versions",
            "cluster-info",
        }
    )

    def __init__(
        self,
        kubeconfig: str | None = None,
        binary: str = "kubectl",
    ) -> None:
        """Initialize the executor.

        Args:
            kubeconfig: Optional kubeconfig path passed to every command.
            binary: kubectl executable name or path.
        """
        self.kubeconfig = kubeconfig
        self.binary = binary

    @classmethod
    def validate_args(cls, args: tuple[str, ...]) -> bool:
        """Accept only read-only verbs without shell metacharacters."""
        if not args:
            return False
        if args[0].lower() not in cls.ALLOWED_VERBS:
            return False
        return not any(
            "--exec" in arg.lower() or SHELL_METACHARACTERS_PATTERN.search(arg)
            for arg in args
        )

    def build_command(self, args: tuple[str, ...], context: str | None) -> list[str]:
        cmd = [self.binary]
        if self.kubeconfig:
            cmd.extend(["--kubeconfig", self.kubeconfig])
        if context:
            cmd.extend(["--context", context])
        cmd.extend(args)
        return cmd

    def _execute_sync(
        self,
        args: tuple[str, ...],
        context: str | None,
        timeout: float,
    ) -> KubectlResponse:
        cmd = self.build_command(args, context)
        try:
            result = subprocess.run(
                cmd, capture_output=True, text=True, timeout=timeout
            )
        except subprocess.TimeoutExpired:
            return KubectlResponse(
                output="",
                exit_code=TIMEOUT_EXIT_CODE,
                error=f"kubectl command timeout after {timeout:g}s",
                timed_out=True,
            )
        except FileNotFoundError:
            return KubectlResponse(
                output="",
                exit_code=NOT_FOUND_EXIT_CODE,
                error=f"{self.binary} executable not found",
            )

        stdout = result.stdout or ""
        stderr = (result.stderr or "").strip()
        output = stdout if stdout or not stderr else stderr
        return KubectlResponse(output=output, exit_code=result.returncode, error=stderr)

    async def execute(
        self,
        args: tuple[str, ...],
        *,
        context: str | None = None,
        timeout: float = KUBECTL_COMMAND_TIMEOUT,
    ) -> KubectlResponse:
        """Run a kubectl command against a context.

        Args:
            args: kubectl arguments, starting with the verb.
            context: kubeconfig context to target.
            timeout: Process timeout in seconds.

        Returns:
            The command's response; disallowed commands are refused with
            exit code 1 without spawning a process.
        """
        if not self.validate_args(args):
            logger.warning("Refusing disallowed kubectl command: %s", " ".join(args))
            return KubectlResponse(
                output="", exit_code=1, error="Disallowed kubectl command"
            )
        return await asyncio.to_thread(self._execute_sync, args, context, timeout)
