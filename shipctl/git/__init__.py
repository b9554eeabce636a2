"""Git operations used by the release sequence.

Usage:
    from shipctl.git import Repository

    repo = Repository(project.root)
    match repo.status():
        case Ok(status) if status.is_clean:
            ...
"""

from shipctl.git.repository import (
    GitError,
    GitStatus,
    Repository,
    StatusEntry,
    github_slug,
)

__all__ = [
    "GitError",
    "GitStatus",
    "Repository",
    "StatusEntry",
    "github_slug",
]
