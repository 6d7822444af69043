"""Tests for the kubectl executor and failure classification."""

from __future__ import annotations

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from stacklens.constants.enums import QueryFailure
from stacklens.controllers.stacks.executor import (
    NOT_FOUND_EXIT_CODE,
    TIMEOUT_EXIT_CODE,
    KubectlExecutor,
    KubectlResponse,
    classify_failure,
    is_connectivity_message,
)


class TestClassifyFailure:
    """Tests for structured failure classification."""

    def test_success(self) -> None:
        assert classify_failure(KubectlResponse("{}", 0)) is QueryFailure.NONE

    def test_timed_out_is_connectivity(self) -> None:
        response = KubectlResponse("", TIMEOUT_EXIT_CODE, "killed", timed_out=True)
        assert classify_failure(response) is QueryFailure.CONNECTIVITY

    @pytest.mark.parametrize(
        "error",
        [
            "Unable to connect to the server",
            "dial tcp 10.0.0.1:443: connect: connection refused",
            "net/http: request canceled (Client.Timeout exceeded)",
            "lookup api.example: no such host",
            "context deadline exceeded",
        ],
    )
    def test_connectivity_tokens(self, error: str) -> None:
        assert classify_failure(KubectlResponse("", 1, error)) is (
            QueryFailure.CONNECTIVITY
        )

    def test_other_failure_is_command(self) -> None:
        response = KubectlResponse("", 1, 'error: the server doesn\'t have "vpa"')
        assert classify_failure(response) is QueryFailure.COMMAND

    def test_token_in_output_counts(self) -> None:
        assert is_connectivity_message("Connection Refused") is True
        assert is_connectivity_message("forbidden") is False


class TestKubectlExecutor:
    """Tests for KubectlExecutor class."""

    @pytest.mark.parametrize(
        "args",
        [
            ("get", "pods", "-A"),
            ("version", "-o", "json"),
            ("describe", "deployment", "x"),
        ],
    )
    def test_allows_read_only(self, args: tuple[str, ...]) -> None:
        assert KubectlExecutor.validate_args(args) is True

    @pytest.mark.parametrize(
        "args",
        [
            (),
            ("delete", "pod", "x"),
            ("exec", "pod", "--", "sh"),
            ("get", "pods", "--exec-command=x"),
            ("get", "pods;rm", "-rf"),
            ("get", "pods", "$(whoami)"),
        ],
    )
    def test_rejects_unsafe(self, args: tuple[str, ...]) -> None:
        assert KubectlExecutor.validate_args(args) is False

    def test_build_command(self) -> None:
        executor = KubectlExecutor(kubeconfig="/tmp/kc", binary="kubectl")
        assert executor.build_command(("get", "pods"), "prod") == [
            "kubectl",
            "--kubeconfig",
            "/tmp/kc",
            "--context",
            "prod",
            "get",
            "pods",
        ]

    def test_build_command_without_context(self) -> None:
        assert KubectlExecutor().build_command(("get", "pods"), None) == [
            "kubectl",
            "get",
            "pods",
        ]

    @pytest.mark.asyncio
    async def test_disallowed_command_not_executed(self) -> None:
        executor = KubectlExecutor()
        with patch("subprocess.run") as run:
            response = await executor.execute(("delete", "ns", "x"))
        run.assert_not_called()
        assert response.exit_code == 1
        assert "Disallowed" in response.error

    @pytest.mark.asyncio
    async def test_execute_success(self) -> None:
        completed = MagicMock(returncode=0, stdout='{"items": []}', stderr="")
        with patch("subprocess.run", return_value=completed) as run:
            response = await KubectlExecutor().execute(
                ("get", "pods"), context="prod", timeout=5
            )
        assert response.ok
        assert response.output == '{"items": []}'
        assert run.call_args.kwargs["timeout"] == 5
        assert "--context" in run.call_args.args[0]

    @pytest.mark.asyncio
    async def test_execute_failure_uses_stderr(self) -> None:
        completed = MagicMock(returncode=1, stdout="", stderr="connection refused\n")
        with patch("subprocess.run", return_value=completed):
            response = await KubectlExecutor().execute(("get", "pods"))
        assert response.exit_code == 1
        assert response.error == "connection refused"
        assert response.output == "connection refused"

    @pytest.mark.asyncio
    async def test_execute_timeout(self) -> None:
        with patch(
            "subprocess.run",
            side_effect=subprocess.TimeoutExpired(cmd="kubectl", timeout=5),
        ):
            response = await KubectlExecutor().execute(("get", "pods"), timeout=5)
        assert response.timed_out is True
        assert response.exit_code == TIMEOUT_EXIT_CODE
        assert classify_failure(response) is QueryFailure.CONNECTIVITY

    @pytest.mark.asyncio
    async def test_execute_missing_binary(self) -> None:
        with patch("subprocess.run", side_effect=FileNotFoundError):
            response = await KubectlExecutor(binary="nokubectl").execute(
                ("get", "pods")
            )
        assert response.exit_code == NOT_FOUND_EXIT_CODE
        assert classify_failure(response) is QueryFailure.COMMAND
