"""Git Analyzer - Read the staged diff."""

import subprocess

from gentools.errors import EmptyInputError, ToolUnavailableError


class GitError(ToolUnavailableError):
    """Raised when git operations fail."""
    pass


class GitAnalyzer:
    """Extracts staged changes from git."""

    def __init__(self, cwd: str | None = None):
        self.cwd = cwd
        self._verify_git_available()
        self._verify_in_repo()

    def _run_git(self, *args: str) -> str:
        """Run a git command and return stdout."""
        try:
            result = subprocess.run(
                ['git', *args],
                capture_output=True,
                text=True,
                check=True,
                encoding='utf-8',
                errors='replace',
                cwd=self.cwd,
            )
            return result.stdout
        except subprocess.CalledProcessError as e:
            raise GitError(f"Git command failed: git {' '.join(args)}\n{e.stderr}")
        except FileNotFoundError:
            raise GitError("Git is not installed or not in PATH")

    def _verify_git_available(self) -> None:
        """Fail fast if git isn't available."""
        try:
            self._run_git('--version')
        except GitError:
            raise GitError("Git is not installed or not in PATH")

    def _verify_in_repo(self) -> None:
        """Fail fast if we're not in a git repository."""
        try:
            self._run_git('rev-parse', '--git-dir')
        except GitError:
            raise GitError("Not inside a git repository")

    def get_staged_diff(self) -> str:
        """Get the diff of staged changes. Raises EmptyInputError if nothing is staged."""
        diff = self._run_git('diff', '--cached')
        if not diff.strip():
            raise EmptyInputError("No staged changes. Run 'git add' first.")
        return diff
