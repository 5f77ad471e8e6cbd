"""Higher level git operations on a working copy."""

from __future__ import annotations

import os

from .gitexec import GitError, exec_git, run_git, run_git_quiet


def get_current_branch(cwd) -> str:
    """Return the checked out branch name, or an empty string if unknown."""
    try:
        out = run_git_quiet(cwd, "symbolic-ref", "--short", "HEAD")
    except GitError:
        return ""
    return out.strip(" \n")


def reset_hard(cwd, reference) -> None:
    """Reset the working copy hard to *reference*."""
    run_git_quiet(cwd, "reset", "--hard", reference)


def init(directory, debug) -> str:
    """Create a repository in *directory*; output is shown only when debugging."""
    return exec_git(directory, ["init"], not debug)


def add_and_commit(directory, message, debug) -> None:
    """Stage everything and commit it with *message*."""
    for command in (["add", "."], ["commit", "-a", "-m", message]):
        exec_git(directory, command, not debug)


def fetch(cwd, remote, branch) -> None:
    """Fetch *remote*, restricted to *branch* when one is given."""
    args = ["fetch", remote]
    if branch:
        args.append(branch)
    run_git_quiet(cwd, *args)


def clone(url, directory) -> None:
    """Clone *url* into *directory*, running from its parent."""
    directory = os.fspath(directory)
    run_git(os.path.dirname(directory), "clone", url, directory)


def push(cwd, remote, ref, remote_ref) -> None:
    """Push *ref* to *remote*, optionally under the name *remote_ref*."""
    if not ref:
        raise ValueError("ref is required when pushing")
    if remote_ref:
        ref = f"{ref}:{remote_ref}"
    run_git(cwd, "push", "--progress", remote, ref)


def get_upstream_branch(cwd, *args) -> str:
    """Return the upstream branch name if it lives on one of the given remotes."""
    try:
        out = run_git_quiet(cwd, "rev-parse", "--abbrev-ref", "--symbolic-full-name", "@{u}")
    except GitError:
        return ""
    upstream = out.strip(" \n")
    if "/" not in upstream:
        return ""
    remote, branch = upstream.split("/", 1)
    return branch if remote in args else ""