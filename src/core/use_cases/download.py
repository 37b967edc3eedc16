"""
Download use case — resolve extension tokens and fetch or enable them.

This is the top-level orchestrator of ``extdl ext download``:

    refresh (when asked)  →  resolve tokens  →  retry once after a
    refresh (auto mode)   →  per key: decide  →  download / enable

Resolution errors are gathered and reported together; nothing is
downloaded unless every token resolved. During dispatch the first
abort or failed operation stops the run. Keys already processed stay
as they are.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import StrEnum

from src.adapters.base import ExtensionBackend
from src.core.context import InvocationContext
from src.core.models.action import Action, Receipt
from src.core.models.errors import ErrorKind, ResolutionError, RunFailure
from src.core.services.policy import ConflictPolicy, PromptFn, decide
from src.core.services.resolver import resolve

logger = logging.getLogger(__name__)

# (level, message); level is "info", "error" or "comment"
EmitFn = Callable[[str, str], None]


class RefreshMode(StrEnum):
    """When to refresh the remote catalog."""

    YES = "yes"     # before the first resolution
    AUTO = "auto"   # only if the first resolution had errors


@dataclass(frozen=True)
class DownloadOptions:
    """User flags for one download run."""

    refresh: RefreshMode = RefreshMode.AUTO
    no_install: bool = False
    force: bool = False
    keep: bool = False

    @property
    def policy(self) -> ConflictPolicy:
        return ConflictPolicy(keep=self.keep, force=self.force)


@dataclass
class StepRecord:
    """What happened to one resolved key."""

    key: str
    url: str
    action: Action
    receipt: Receipt | None = None

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "url": self.url,
            "action": str(self.action),
            "status": self.receipt.status if self.receipt else None,
            "error": self.receipt.error if self.receipt else None,
        }


@dataclass
class DownloadResult:
    """Result of a download run."""

    feed_url: str = ""
    refreshed: bool = False
    downloads: dict[str, str] = field(default_factory=dict)
    errors: list[ResolutionError] = field(default_factory=list)
    steps: list[StepRecord] = field(default_factory=list)
    failure: RunFailure | None = None

    @property
    def ok(self) -> bool:
        return not self.errors and self.failure is None

    @property
    def aborted(self) -> bool:
        return self.failure is not None and self.failure.kind == ErrorKind.ABORTED

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "feed_url": self.feed_url,
            "refreshed": self.refreshed,
            "downloads": dict(self.downloads),
            "errors": [{"kind": str(e.kind), "message": e.message} for e in self.errors],
            "steps": [s.to_dict() for s in self.steps],
            "failure": self.failure.message if self.failure else None,
        }


def _log_emit(level: str, message: str) -> None:
    if level == "error":
        logger.error("%s", message)
    else:
        logger.info("%s", message)


def _no_answer(message: str, options: dict[str, str], default: str) -> str | None:
    """Prompt used when nobody is there to answer."""
    logger.warning("No interactive prompt available: %s", message)
    return None


def run_download(
    tokens: Sequence[str],
    backend: ExtensionBackend,
    options: DownloadOptions | None = None,
    prompt: PromptFn | None = None,
    emit: EmitFn | None = None,
    command_name: str = "ext download",
) -> DownloadResult:
    """Resolve ``tokens`` and download or enable each extension.

    Args:
        tokens: Keys, short names, or ``key@url`` pairs.
        backend: Catalog and storage backend.
        options: Refresh mode and conflict flags.
        prompt: Asks the user what to do with an existing extension.
            Without one, conflicts that need an answer abort.
        emit: Receives progress lines as they happen.
        command_name: Used in the help tips printed after errors.

    Returns:
        DownloadResult; ``exit_code`` is 0 only if every key succeeded.
    """
    options = options or DownloadOptions()
    prompt = prompt or _no_answer
    emit = emit or _log_emit

    result = DownloadResult(feed_url=backend.feed_url)
    ctx = InvocationContext(backend)

    emit("info", f'Using extension feed "{backend.feed_url}"')

    # ── Refresh / resolve ────────────────────────────────────────
    mode = options.refresh
    while True:
        if mode == RefreshMode.YES:
            emit("info", "Refreshing extension cache")
            receipt = backend.refresh_catalog(local=False, remote=True)
            ctx.invalidate()
            result.refreshed = True
            if receipt.failed:
                result.failure = RunFailure(
                    kind=ErrorKind.REFRESH_FAILED,
                    phase="refresh",
                    detail=receipt.error or "",
                )
                emit("error", result.failure.message)
                return result

        downloads, errors = resolve(tokens, ctx.index())
        if mode == RefreshMode.AUTO and errors:
            emit("info", "Extension cache does not contain requested item(s)")
            mode = RefreshMode.YES
            continue
        break

    result.downloads = downloads
    result.errors = errors

    if errors:
        for error in errors:
            emit("error", error.message)
        emit("comment", f'Tip: To customize the feed, review options in "extdl {command_name} --help"')
        emit("comment", 'Tip: To browse available downloads, run "extdl ext list --remote"')
        return result

    # ── Dispatch ─────────────────────────────────────────────────
    for key, url in downloads.items():
        installed = backend.list_installed_keys()
        action = decide(key, installed, options.policy, prompt)
        step = StepRecord(key=key, url=url, action=action)
        result.steps.append(step)

        if action == Action.DOWNLOAD:
            emit("info", f'Downloading extension "{key}" ({url})')
            step.receipt = backend.download(key, url, install=not options.no_install)
        elif action == Action.INSTALL:
            emit("info", f'Found extension "{key}". Enabling.')
            step.receipt = backend.enable(key)
        elif action == Action.ABORT:
            result.failure = RunFailure(kind=ErrorKind.ABORTED, key=key)
            emit("error", result.failure.message)
            return result
        else:
            raise RuntimeError(f"Unrecognized action: {action}")

        if step.receipt.failed:
            result.failure = RunFailure(
                kind=ErrorKind.OPERATION_FAILED,
                key=key,
                phase=step.receipt.operation,
                detail=step.receipt.error or "",
            )
            emit("error", result.failure.message)
            return result

        logger.debug("%s %s ok (%dms)", step.receipt.operation, key, step.receipt.duration_ms)

    return result
