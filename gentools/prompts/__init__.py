"""Prompts - The fixed instructions each command sends."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Task:
    """A system instruction plus the lead-in placed before the user's payload."""
    name: str
    system_prompt: str
    lead_in: str

    def user_content(self, payload: str) -> str:
        """Embed the payload verbatim after the lead-in."""
        return f"{self.lead_in}\n\n{payload}"


COMMIT_MESSAGE = Task(
    name="commit-message",
    system_prompt=(
        "You are an assistant that writes concise English conventional-commit messages. "
        "Format: <type>(<scope>): <subject>\n\n<simple-body>"
    ),
    lead_in="Read the following Git diff and propose a commit message:",
)

FILE_NAME = Task(
    name="file-name",
    system_prompt=(
        "You provide short, lowercase, hyphenated file names summarizing given text. "
        "Respond with only the name, no extension."
    ),
    lead_in="Suggest a file name for the following text:",
)


__all__ = ["Task", "COMMIT_MESSAGE", "FILE_NAME"]
