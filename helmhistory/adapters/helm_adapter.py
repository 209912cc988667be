"""Helm adapter for release history queries."""

import json
import subprocess
import time
from typing import List, Optional, Tuple

import anyio

from ..config import get_settings
from ..errors import (
    SWALLOWED_ERRORS,
    HelmEmptyOutputError,
    HelmError,
    HelmInterruptedError,
    HelmLaunchError,
    HelmOutputError,
    HelmTimeoutError,
    HelmToolError,
)
from ..logging import get_logger, log_helm_call
from ..models.revisions import RevisionList, RevisionRecord, revision_ids

logger = get_logger(__name__)


def parse_history_output(stdout: str, release_name: Optional[str] = None) -> List[RevisionRecord]:
    """Parse `helm history -o json` output into revision records."""
    try:
        data = json.loads(stdout)
    except json.JSONDecodeError as e:
        raise HelmOutputError(f"Helm history output is not valid JSON: {e}", release_name) from e

    if not isinstance(data, list):
        raise HelmOutputError(
            f"Helm history output is a JSON {type(data).__name__}, expected an array",
            release_name
        )

    records: List[RevisionRecord] = []
    for index, entry in enumerate(data):
        if not isinstance(entry, dict):
            raise HelmOutputError(f"History entry {index} is not an object", release_name)
        try:
            records.append(RevisionRecord.from_history_entry(entry))
        except (KeyError, TypeError, ValueError) as e:
            raise HelmOutputError(
                f"History entry {index} has no usable revision: {e}",
                release_name
            ) from e

    return records


class HelmAdapter:
    """Adapter for the helm release history command."""

    def __init__(
        self,
        helm_path: Optional[str] = None,
        namespace: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        strict: Optional[bool] = None
    ):
        """Initialize the helm adapter.

        Unset arguments fall back to the global settings. A timeout of zero
        or less disables the deadline.
        """
        self.settings = get_settings()
        self.helm_path = helm_path or self.settings.helm_binary
        self.namespace = namespace or self.settings.namespace

        if timeout is None:
            timeout = self.settings.helm_timeout
        self.timeout = timeout if timeout is not None and timeout > 0 else None

        self.strict = self.settings.strict_errors if strict is None else strict

    def build_history_command(self, release_name: str, kubeconfig_path: Optional[str] = None) -> List[str]:
        """Build the helm history command line for a release."""
        cmd = [
            self.helm_path, "history", release_name,
            "-o", "json",
            "-n", self.namespace
        ]

        if kubeconfig_path:
            cmd.extend(["--kubeconfig", kubeconfig_path])

        return cmd

    def list_revisions(self, release_name: str, kubeconfig_path: Optional[str] = None) -> RevisionList:
        """List the revision identifiers of a release, oldest first.

        Tool failures, empty output and malformed output all yield an empty
        list unless the adapter is strict. Launch failures, interruptions
        and timeouts always raise.
        """
        try:
            records = self.query_history(release_name, kubeconfig_path)
        except SWALLOWED_ERRORS as e:
            if self.strict:
                raise
            self._log_swallowed(e, release_name)
            return []

        return revision_ids(records)

    def query_history(self, release_name: str, kubeconfig_path: Optional[str] = None) -> List[RevisionRecord]:
        """Query helm history and raise on every kind of failure."""
        cmd = self.build_history_command(release_name, kubeconfig_path)

        logger.info(
            "Querying helm history",
            release_name=release_name,
            namespace=self.namespace,
            timeout=self.timeout
        )

        returncode, stdout, stderr = self._run_helm_subprocess(cmd, release_name)
        return self._collect(returncode, stdout, stderr, release_name)

    async def list_revisions_async(self, release_name: str, kubeconfig_path: Optional[str] = None) -> RevisionList:
        """Async variant of list_revisions."""
        try:
            records = await self.query_history_async(release_name, kubeconfig_path)
        except SWALLOWED_ERRORS as e:
            if self.strict:
                raise
            self._log_swallowed(e, release_name)
            return []

        return revision_ids(records)

    async def query_history_async(
        self,
        release_name: str,
        kubeconfig_path: Optional[str] = None
    ) -> List[RevisionRecord]:
        """Async variant of query_history.

        Cancellation, including the deadline, kills the helm process.
        """
        cmd = self.build_history_command(release_name, kubeconfig_path)
        started = time.monotonic()

        logger.info(
            "Querying helm history",
            release_name=release_name,
            namespace=self.namespace,
            timeout=self.timeout
        )

        try:
            with anyio.fail_after(self.timeout):
                result = await anyio.run_process(cmd, check=False)
        except TimeoutError as e:
            raise HelmTimeoutError(
                f"helm history did not finish within {self.timeout}s",
                release_name,
                timeout=self.timeout
            ) from e
        except OSError as e:
            raise HelmLaunchError(f"Failed to launch helm ({self.helm_path}): {e}", release_name) from e

        log_helm_call(logger, cmd, result.returncode, _elapsed_ms(started), release_name=release_name)

        stdout = result.stdout.decode("utf-8", errors="replace")
        stderr = result.stderr.decode("utf-8", errors="replace")
        return self._collect(result.returncode, stdout, stderr, release_name)

    def health_check(self) -> bool:
        """Check if helm is available and working."""
        cmd = [self.helm_path, "version", "--short"]

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=10
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.error("Helm health check failed", helm_path=self.helm_path, error=str(e))
            return False

        if result.returncode != 0:
            logger.error(
                "Helm health check failed",
                helm_path=self.helm_path,
                returncode=result.returncode,
                stderr=result.stderr.strip()
            )
            return False

        logger.debug("Helm available", version=result.stdout.strip())
        return True

    def _run_helm_subprocess(self, cmd: List[str], release_name: str) -> Tuple[int, str, str]:
        """Run helm to completion and return its exit status and output."""
        started = time.monotonic()

        try:
            process = subprocess.Popen(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace"
            )
        except OSError as e:
            raise HelmLaunchError(f"Failed to launch helm ({self.helm_path}): {e}", release_name) from e

        # Leaving the block closes both pipes and reaps the child
        with process:
            try:
                stdout, stderr = process.communicate(timeout=self.timeout)
            except subprocess.TimeoutExpired as e:
                self._kill(process)
                raise HelmTimeoutError(
                    f"helm history did not finish within {self.timeout}s",
                    release_name,
                    timeout=self.timeout
                ) from e
            except KeyboardInterrupt as e:
                self._kill(process)
                raise HelmInterruptedError("Interrupted while waiting for helm history", release_name) from e

        log_helm_call(logger, cmd, process.returncode, _elapsed_ms(started), release_name=release_name)
        return process.returncode, stdout, stderr

    def _kill(self, process: subprocess.Popen) -> None:
        """Kill a running helm process and wait for it to exit."""
        process.kill()
        process.wait()
        logger.warning("Killed helm process", pid=process.pid)

    def _collect(self, returncode: int, stdout: str, stderr: str, release_name: str) -> List[RevisionRecord]:
        """Turn a finished helm run into records, gated on its exit status."""
        if returncode != 0:
            raise HelmToolError(
                f"helm history exited with status {returncode}",
                release_name,
                returncode=returncode,
                stderr=stderr.strip()
            )

        if not stdout.strip():
            raise HelmEmptyOutputError("helm history printed nothing", release_name)

        return parse_history_output(stdout, release_name)

    def _log_swallowed(self, error: HelmError, release_name: str) -> None:
        """Record a failure that is being reported as an empty history."""
        if isinstance(error, HelmEmptyOutputError):
            logger.info("Helm history is empty", release_name=release_name)
            return

        log_data = {"release_name": release_name, "error": str(error)}
        if isinstance(error, HelmToolError):
            log_data["returncode"] = error.returncode
            log_data["stderr"] = error.stderr

        logger.warning("Helm history unavailable, reporting no revisions", **log_data)


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)
