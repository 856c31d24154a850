"""Commit id lookup for the commit proof."""

import subprocess
from typing import Optional


def current_commit_hash(cwd: Optional[str] = None) -> str:
    """
    Full hash of HEAD, as printed by `git log -1 --format=%H`.

    Raises:
        RuntimeError: not a git repository, no commits, or git missing
    """
    cmd = ["git", "log", "-1", "--format=%H"]
    try:
        result = subprocess.run(
            cmd, cwd=cwd, check=True, stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True
        )
    except FileNotFoundError as e:
        raise RuntimeError("git not found in PATH") from e
    except subprocess.CalledProcessError as e:
        raise RuntimeError(f"git log failed: {e.stderr.strip()}") from e
    return result.stdout.strip()
