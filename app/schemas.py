"""Wire schemas: GitLab webhook payloads in, OneBot envelopes out."""

from __future__ import annotations

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError


class GitLabUser(BaseModel):
    """Only the username is rendered."""

    username: str


class GitLabProject(BaseModel):
    path_with_namespace: str
    web_url: str = ""


class Commit(BaseModel):
    """
    One commit in a push payload.
    GitLab omits the file lists for some commits, so they default to empty.
    """

    id: str
    message: str = ""
    url: str = ""
    added: Optional[list[str]] = None
    modified: Optional[list[str]] = None
    removed: Optional[list[str]] = None


class PushEvent(BaseModel):
    """``push`` and ``tag_push`` hooks."""

    object_kind: Literal["push", "tag_push"]
    ref: str
    user_username: str
    project: GitLabProject
    commits: list[Commit] = Field(default_factory=list)


class IssueAttributes(BaseModel):
    iid: int
    title: str = ""
    description: Optional[str] = None
    url: Optional[str] = None
    action: Optional[str] = None


class IssueEvent(BaseModel):
    object_kind: Literal["issue"]
    user: GitLabUser
    project: GitLabProject
    object_attributes: IssueAttributes


class NoteAttributes(BaseModel):
    note: str = ""
    noteable_type: Literal["Commit", "Issue", "MergeRequest", "Snippet"]
    url: str = ""
    commit_id: Optional[str] = None


class NoteIssueRef(BaseModel):
    iid: int


class NoteMergeRequestRef(BaseModel):
    iid: int


class NoteSnippetRef(BaseModel):
    title: str = ""


class NoteEvent(BaseModel):
    """Comment on a commit, issue, merge request or snippet."""

    object_kind: Literal["note"]
    user: GitLabUser
    project: GitLabProject
    object_attributes: NoteAttributes
    issue: Optional[NoteIssueRef] = None
    merge_request: Optional[NoteMergeRequestRef] = None
    snippet: Optional[NoteSnippetRef] = None


class MergeRequestAttributes(BaseModel):
    iid: int
    title: str = ""
    url: Optional[str] = None
    action: Optional[str] = None


class MergeRequestEvent(BaseModel):
    object_kind: Literal["merge_request"]
    user: GitLabUser
    project: GitLabProject
    object_attributes: MergeRequestAttributes


class BuildEvent(BaseModel):
    object_kind: Literal["build"]


class PipelineEvent(BaseModel):
    object_kind: Literal["pipeline"]


class WikiPageEvent(BaseModel):
    object_kind: Literal["wiki_page"]


class UnrecognizedEvent(BaseModel):
    """Body that could not be parsed; ``error`` is the parser's diagnostic."""

    error: str


KnownEvent = Annotated[
    Union[
        PushEvent,
        IssueEvent,
        NoteEvent,
        MergeRequestEvent,
        BuildEvent,
        PipelineEvent,
        WikiPageEvent,
    ],
    Field(discriminator="object_kind"),
]

InboundEvent = Union[
    PushEvent,
    IssueEvent,
    NoteEvent,
    MergeRequestEvent,
    BuildEvent,
    PipelineEvent,
    WikiPageEvent,
    UnrecognizedEvent,
]

_known_event_adapter: TypeAdapter[KnownEvent] = TypeAdapter(KnownEvent)


def parse_event(body: bytes) -> InboundEvent:
    """
    Decode a GitLab webhook body using its ``object_kind`` discriminator.

    Never raises: malformed JSON, unknown kinds and missing fields all come
    back as :class:`UnrecognizedEvent`.
    """
    try:
        return _known_event_adapter.validate_json(body)
    except ValidationError as exc:
        return UnrecognizedEvent(error=str(exc))


# OneBot response envelopes


class SendMessageData(BaseModel):
    message_id: int


class SendMessageResponse(BaseModel):
    """``{data: {message_id}, retcode, status}``"""

    data: SendMessageData
    retcode: int
    status: str


class OneBotAbout(BaseModel):
    app_name: str
    app_version: str
    protocol: int


class VersionInfoResponse(BaseModel):
    data: OneBotAbout
    retcode: int
    status: str
