"""Git-backed sync of the encrypted task blob."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

from bujo_mcp.enums import SyncStatus
from bujo_mcp.errors import RemoteDivergedError, StorageError, SyncNetworkError
from bujo_mcp.models.sync import PullResult
from bujo_mcp.storage.fs import atomic_write
from bujo_mcp.sync.cli import CommandResult, CommandRunner, SubprocessCommandRunner

logger = logging.getLogger(__name__)

_REJECTED_MARKERS = ("rejected", "non-fast-forward", "fetch first")


class SyncAdapter(Protocol):
    def status(self) -> SyncStatus: ...
    def push(self) -> None: ...
    def pull(self) -> PullResult: ...


def _classify(ahead: int, behind: int) -> SyncStatus:
    if ahead and behind:
        return SyncStatus.DIVERGED
    if ahead:
        return SyncStatus.AHEAD
    if behind:
        return SyncStatus.BEHIND
    return SyncStatus.SYNCED


class GitSyncAdapter:
    """
    Syncs the repository blob through a git work tree.

    The tracked file is ``work_tree / store_path.name``. When the store lives
    elsewhere, the adapter keeps that file as a copy: store -> tracked before
    every operation, tracked -> store after a pull. The blob is only ever
    copied, never decrypted.

    Conflicts resolve last-write-wins in favour of the remote. The local blob
    is kept in a ``.conflict-<timestamp>.bak`` file next to the store.
    """

    def __init__(
        self,
        work_tree: str | Path,
        store_path: str | Path,
        *,
        runner: CommandRunner | None = None,
        remote: str = "origin",
        branch: str = "main",
        timeout: float = 60.0,
    ) -> None:
        self._work_tree = Path(work_tree).expanduser()
        self._store_path = Path(store_path).expanduser()
        self._tracked = self._work_tree / self._store_path.name
        self._runner = runner if runner is not None else SubprocessCommandRunner()
        self._remote = remote
        self._branch = branch
        self._timeout = timeout

    @property
    def tracked_path(self) -> Path:
        return self._tracked

    @property
    def _remote_ref(self) -> str:
        return f"{self._remote}/{self._branch}"

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def status(self) -> SyncStatus:
        self._prepare()
        self._fetch()

        dirty = self._blob_dirty()
        if not self._remote_branch_exists():
            return SyncStatus.AHEAD if dirty or self._has_head() else SyncStatus.SYNCED
        if not self._has_head():
            return SyncStatus.DIVERGED if dirty else SyncStatus.BEHIND

        ahead, behind = self._ahead_behind()
        if dirty:
            ahead += 1
        status = _classify(ahead, behind)
        logger.info("Sync status %s (ahead=%d behind=%d)", status.value, ahead, behind)
        return status

    def push(self) -> None:
        self._prepare()
        self._commit_pending("Update tasks")

        if not self._has_head():
            logger.info("Nothing to push: no local commits")
            return
        if self._remote_branch_exists():
            ahead, _ = self._ahead_behind()
            if ahead == 0:
                logger.info("Nothing to push: %s is up to date", self._remote_ref)
                return

        result = self._git("push", self._remote, f"HEAD:{self._branch}", check=False)
        if not result.ok:
            if any(marker in result.stderr.lower() for marker in _REJECTED_MARKERS):
                raise RemoteDivergedError(self._remote, self._branch, result.stderr)
            raise SyncNetworkError("git push failed", command=result.command, stderr=result.stderr)
        logger.info("Pushed task store to %s", self._remote_ref)

    def pull(self) -> PullResult:
        self._prepare()
        self._commit_pending("Update tasks before pull")
        self._fetch()

        if not self._remote_branch_exists():
            return PullResult(conflict=False, message=f"Remote branch {self._remote_ref} does not exist yet")

        if not self._has_head():
            self._git("reset", "--hard", self._remote_ref)
            self._restore_store()
            return PullResult(conflict=False, message=f"Checked out {self._remote_ref}")

        ahead, behind = self._ahead_behind()
        if behind == 0:
            return PullResult(conflict=False, message="Already up to date")

        if ahead == 0:
            self._git("merge", "--ff-only", self._remote_ref)
            self._restore_store()
            logger.info("Fast-forwarded to %s", self._remote_ref)
            return PullResult(conflict=False, message=f"Fast-forwarded to {self._remote_ref}")

        merge = self._git("merge", "--no-edit", self._remote_ref, check=False)
        if merge.ok:
            self._restore_store()
            return PullResult(conflict=False, message=f"Merged {self._remote_ref} cleanly")

        if not self._in_conflict(merge):
            self._git("merge", "--abort", check=False)
            raise SyncNetworkError("git merge failed", command=merge.command, stderr=merge.stderr)

        return self._resolve_conflict()

    # ------------------------------------------------------------------
    # Conflict policy
    # ------------------------------------------------------------------

    def _resolve_conflict(self) -> PullResult:
        """Keep the remote blob, back up the local one."""
        self._git("merge", "--abort")
        backup = self._backup_local_blob()
        self._git("reset", "--hard", self._remote_ref)
        self._restore_store()

        message = (
            "Conflict: local and remote both changed. Kept the remote version; "
            f"local version backed up to {backup}"
        )
        logger.warning(message)
        return PullResult(conflict=True, message=message, backup_path=backup)

    def _backup_local_blob(self) -> Path:
        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
        backup = self._store_path.with_name(f"{self._store_path.name}.conflict-{stamp}.bak")
        n = 1
        while backup.exists():
            backup = self._store_path.with_name(f"{self._store_path.name}.conflict-{stamp}-{n}.bak")
            n += 1

        self._copy_blob(self._tracked, backup)
        return backup

    # ------------------------------------------------------------------
    # Tracked copy
    # ------------------------------------------------------------------

    @property
    def _mirrored(self) -> bool:
        return self._store_path.resolve() != self._tracked.resolve()

    def _prepare(self) -> None:
        if not self._work_tree.is_dir():
            raise SyncNetworkError(f"sync work tree {self._work_tree} does not exist")
        self._mark_blob_binary()
        if not self._mirrored or not self._store_path.exists():
            return
        try:
            data = self._store_path.read_bytes()
            if self._tracked.exists() and self._tracked.read_bytes() == data:
                return
            atomic_write(self._tracked, data)
        except OSError as e:
            raise StorageError("sync", self._store_path, str(e)) from e

    def _restore_store(self) -> None:
        if not self._mirrored or not self._tracked.exists():
            return
        self._copy_blob(self._tracked, self._store_path)

    def _copy_blob(self, source: Path, target: Path) -> None:
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            atomic_write(target, source.read_bytes())
        except OSError as e:
            raise StorageError("sync", target, str(e)) from e

    def _mark_blob_binary(self) -> None:
        # Never let git line-merge the blob, even when it happens to be text.
        info_dir = self._work_tree / ".git" / "info"
        if not info_dir.parent.is_dir():
            return
        attributes = info_dir / "attributes"
        rule = f"/{self._tracked.name} binary"
        try:
            existing = attributes.read_text(encoding="utf-8") if attributes.exists() else ""
            if rule in existing.splitlines():
                return
            info_dir.mkdir(parents=True, exist_ok=True)
            prefix = existing if not existing or existing.endswith("\n") else existing + "\n"
            attributes.write_text(f"{prefix}{rule}\n", encoding="utf-8")
        except OSError as e:
            raise StorageError("sync", attributes, str(e)) from e

    # ------------------------------------------------------------------
    # Git plumbing
    # ------------------------------------------------------------------

    def _git(self, *args: str, check: bool = True) -> CommandResult:
        result = self._runner.run(args, cwd=self._work_tree, timeout=self._timeout)
        if check and not result.ok:
            raise SyncNetworkError(
                f"git {args[0]} failed ({result.returncode})", command=result.command, stderr=result.stderr
            )
        return result

    def _fetch(self) -> None:
        self._git("fetch", self._remote)

    def _has_head(self) -> bool:
        return self._git("rev-parse", "--verify", "--quiet", "HEAD", check=False).ok

    def _remote_branch_exists(self) -> bool:
        ref = f"refs/remotes/{self._remote_ref}"
        return self._git("rev-parse", "--verify", "--quiet", ref, check=False).ok

    def _blob_dirty(self) -> bool:
        result = self._git("status", "--porcelain", "--", self._tracked.name)
        return bool(result.stdout.strip())

    def _ahead_behind(self) -> tuple[int, int]:
        result = self._git("rev-list", "--left-right", "--count", f"HEAD...{self._remote_ref}")
        parts = result.stdout.split()
        if len(parts) != 2:
            raise SyncNetworkError(f"unexpected rev-list output {result.stdout!r}", command=result.command)
        return int(parts[0]), int(parts[1])

    def _commit_pending(self, message: str) -> bool:
        if not self._tracked.exists():
            return False
        self._git("add", "--", self._tracked.name)
        diff = self._git("diff", "--cached", "--quiet", "--", self._tracked.name, check=False)
        if diff.returncode == 0:
            return False
        if diff.returncode != 1:
            raise SyncNetworkError("git diff failed", command=diff.command, stderr=diff.stderr)
        self._git("commit", "-m", message, "--", self._tracked.name)
        logger.info("Committed local task store changes")
        return True

    def _in_conflict(self, merge: CommandResult) -> bool:
        if "CONFLICT" in merge.stdout or "CONFLICT" in merge.stderr:
            return True
        unmerged = self._git("diff", "--name-only", "--diff-filter=U", check=False)
        return bool(unmerged.stdout.strip())
