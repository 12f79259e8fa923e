"""Plain-text summaries for GitLab webhook events."""

from __future__ import annotations

from typing import Any, Callable, Optional, Sequence

from app.schemas import (
    BuildEvent,
    Commit,
    InboundEvent,
    IssueEvent,
    MergeRequestEvent,
    NoteEvent,
    PipelineEvent,
    PushEvent,
    UnrecognizedEvent,
    WikiPageEvent,
)

SHORT_ID_LENGTH = 7

BRANCH_PREFIX = "refs/heads/"
TAG_PREFIX = "refs/tags/"

ISSUE_URL_FALLBACK = "Fail to fetch issue url, a bug of GitLab?"
MR_URL_FALLBACK = "Fail to fetch merge request url, a bug of GitLab?"

MISSING = "?"

ISSUE_ACTIONS: dict[str, str] = {
    "update": "updated",
    "open": "opened",
    "close": "closed",
    "reopen": "reopened",
}

MR_ACTIONS: dict[str, str] = {
    **ISSUE_ACTIONS,
    "approved": "approved",
    "unapproved": "unapproved",
    "merge": "merged",
}


class UnknownActionError(ValueError):
    """An issue or merge request event carried an action we cannot name."""

    detail = "unknown action"

    def __init__(self, action: Optional[str]):
        super().__init__(f"{self.detail}: {action!r}")
        self.action = action


class UnknownIssueAction(UnknownActionError):
    detail = "unknown issue action"


class UnknownMergeRequestAction(UnknownActionError):
    detail = "unknown mr action"


def _short_id(value: Optional[str]) -> str:
    return value[:SHORT_ID_LENGTH] if value else MISSING


def _first_line(text: str) -> str:
    lines = text.splitlines()
    return lines[0] if lines else text


def _count(paths: Optional[Sequence[str]]) -> int:
    return len(paths) if paths else 0


def _modification(commit: Commit) -> str:
    """``2+1-`` style counters; zero counters are left out."""
    parts = []
    for n, mark in (
        (_count(commit.added), "+"),
        (_count(commit.modified), "M"),
        (_count(commit.removed), "-"),
    ):
        if n:
            parts.append(f"{n}{mark}")
    return "".join(parts)


def _render_push(event: PushEvent) -> str:
    project = event.project.path_with_namespace
    actor = event.user_username
    ref = event.ref

    if ref.startswith(BRANCH_PREFIX):
        branch = ref[len(BRANCH_PREFIX):]
        lines = [f"Recent commit to {project}:{branch} by {actor}"]
        for commit in event.commits:
            lines.append(
                f"{_short_id(commit.id)} {_first_line(commit.message)}"
                f" ({_modification(commit)})"
            )
        text = "\n".join(lines)
        if event.commits:
            text += f"\n\n{event.commits[0].url}"
        return text

    if ref.startswith(TAG_PREFIX):
        tag = ref[len(TAG_PREFIX):]
        return (
            f"New tag {tag} on {project} by {actor}"
            f"\n\n{event.project.web_url}/-/tags/{tag}"
        )

    return f"New {ref} on {project} by {actor}"


def _render_issue(event: IssueEvent) -> str:
    attrs = event.object_attributes
    keyword = ISSUE_ACTIONS.get(attrs.action or "")
    if keyword is None:
        raise UnknownIssueAction(attrs.action)
    return (
        f"{event.user.username} {keyword} issue"
        f" {event.project.path_with_namespace}#{attrs.iid}"
        f"\n{attrs.title}"
        f"\n{attrs.description or ''}"
        f"\n\n{attrs.url or ISSUE_URL_FALLBACK}"
    )


def _note_target(event: NoteEvent) -> str:
    project = event.project.path_with_namespace
    kind = event.object_attributes.noteable_type
    if kind == "Commit":
        return f"{project}@{_short_id(event.object_attributes.commit_id)}"
    if kind == "Issue":
        iid = event.issue.iid if event.issue else MISSING
        return f"{project}#{iid}"
    if kind == "MergeRequest":
        iid = event.merge_request.iid if event.merge_request else MISSING
        return f"{project}#{iid}"
    title = event.snippet.title if event.snippet else MISSING
    return f"snippet {title}"


def _render_note(event: NoteEvent) -> str:
    attrs = event.object_attributes
    return (
        f"{event.user.username} commented on {_note_target(event)}"
        f"\n{attrs.note}"
        f"\n\n{attrs.url}"
    )


def _render_merge_request(event: MergeRequestEvent) -> str:
    attrs = event.object_attributes
    keyword = MR_ACTIONS.get(attrs.action or "")
    if keyword is None:
        raise UnknownMergeRequestAction(attrs.action)
    return (
        f"{event.user.username} {keyword} mr"
        f" {event.project.path_with_namespace}#{attrs.iid}"
        f"\n\n{attrs.url or MR_URL_FALLBACK}"
    )


def _unsupported(name: str) -> Callable[[Any], str]:
    def _render(_event: Any) -> str:
        return f"Unsupported action {name}"

    return _render


def _render_unrecognized(event: UnrecognizedEvent) -> str:
    return event.error


RENDERERS: dict[type, Callable[[Any], str]] = {
    PushEvent: _render_push,
    IssueEvent: _render_issue,
    NoteEvent: _render_note,
    MergeRequestEvent: _render_merge_request,
    BuildEvent: _unsupported("build"),
    PipelineEvent: _unsupported("pipeline"),
    WikiPageEvent: _unsupported("wiki page"),
    UnrecognizedEvent: _render_unrecognized,
}


def render(event: InboundEvent) -> str:
    """
    Render the chat message body for ``event``.

    Pure and deterministic. Raises :class:`UnknownIssueAction` or
    :class:`UnknownMergeRequestAction` when the lifecycle action is missing
    or not one GitLab documents.
    """
    return RENDERERS[type(event)](event)
