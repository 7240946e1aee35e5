"""Git history helpers for list files."""

from __future__ import annotations

import logging
from pathlib import Path

from dulwich import porcelain
from dulwich.repo import Repo

from todo_service.errors import McpError
from todo_service.mcp_utils import _atomic_write

logger = logging.getLogger(__name__)


def _ensure_git_repo(workspace_root: Path) -> Repo:
    git_dir = workspace_root / ".git"
    try:
        if git_dir.exists():
            return Repo(workspace_root)
        return porcelain.init(workspace_root)
    except Exception as exc:
        raise McpError(
            "GIT_ERROR",
            "Git repository could not be initialized.",
            {"path": str(workspace_root)},
        ) from exc


def _commit_list_change(repo: Repo, relative_path: Path, operation: str) -> str:
    repo.get_worktree().stage([relative_path.as_posix()])
    commit_message = f"{operation}: {relative_path.as_posix()}"
    commit_sha = porcelain.commit(repo, message=commit_message)
    if isinstance(commit_sha, bytes):
        return commit_sha.decode("ascii")
    return str(commit_sha)


def _rollback_list_change(
    repo: Repo | None,
    target_path: Path,
    relative_path: Path,
    original_content: str | None,
) -> None:
    if original_content is None:
        try:
            if target_path.exists():
                target_path.unlink()
        except OSError:
            logger.warning("could not remove %s during rollback", target_path)
    else:
        _atomic_write(target_path, original_content)
    if repo is None:
        return
    try:
        repo.get_worktree().stage([relative_path.as_posix()])
    except Exception:
        logger.warning("could not restage %s during rollback", relative_path)


def commit_list_file(
    repo: Repo,
    workspace_root: Path,
    target_path: Path,
    operation: str,
    original_content: str | None,
) -> str:
    """Commit a freshly written list file, restoring it if the commit fails.

    ``repo`` must come from ``_ensure_git_repo`` before the file was written
    so repository errors never leave an uncommitted change behind.
    """
    relative_path = target_path.relative_to(workspace_root)
    try:
        commit_sha = _commit_list_change(repo, relative_path, operation)
    except Exception as exc:
        _rollback_list_change(repo, target_path, relative_path, original_content)
        raise McpError(
            "GIT_ERROR",
            "Git commit failed; mutation rolled back.",
            {"path": relative_path.as_posix(), "operation": operation},
        ) from exc
    logger.debug("committed %s as %s", relative_path.as_posix(), commit_sha)
    return commit_sha
