"""GitLab webhook payload builders and a recording OneBot transport."""

from __future__ import annotations

import json
import typing as typ

import httpx

PROJECT = {
    "path_with_namespace": "group/proj",
    "web_url": "https://git.example/group/proj",
}

API_BASE = "http://onebot.test"


def commit(
    sha: str = "0123456789abcdef",
    message: str = "Fix the thing\n\nLonger body",
    *,
    added: list[str] | None = None,
    modified: list[str] | None = None,
    removed: list[str] | None = None,
    url: str | None = None,
) -> dict[str, typ.Any]:
    return {
        "id": sha,
        "message": message,
        "url": url or f"https://git.example/group/proj/-/commit/{sha}",
        "added": added if added is not None else [],
        "modified": modified if modified is not None else [],
        "removed": removed if removed is not None else [],
    }


def push_payload(
    ref: str = "refs/heads/main",
    commits: list[dict[str, typ.Any]] | None = None,
    *,
    kind: str = "push",
) -> dict[str, typ.Any]:
    return {
        "object_kind": kind,
        "ref": ref,
        "user_username": "alice",
        "project": dict(PROJECT),
        "commits": commits if commits is not None else [],
    }


def issue_payload(
    action: str | None = "open",
    *,
    iid: int = 42,
    title: str = "Broken build",
    description: str | None = "It fails",
    url: str | None = "https://git.example/group/proj/-/issues/42",
) -> dict[str, typ.Any]:
    attrs: dict[str, typ.Any] = {"iid": iid, "title": title}
    if description is not None:
        attrs["description"] = description
    if url is not None:
        attrs["url"] = url
    if action is not None:
        attrs["action"] = action
    return {
        "object_kind": "issue",
        "user": {"username": "bob"},
        "project": dict(PROJECT),
        "object_attributes": attrs,
    }


def merge_request_payload(
    action: str | None = "open",
    *,
    iid: int = 7,
    url: str | None = "https://git.example/group/proj/-/merge_requests/7",
) -> dict[str, typ.Any]:
    attrs: dict[str, typ.Any] = {"iid": iid, "title": "Add feature"}
    if url is not None:
        attrs["url"] = url
    if action is not None:
        attrs["action"] = action
    return {
        "object_kind": "merge_request",
        "user": {"username": "carol"},
        "project": dict(PROJECT),
        "object_attributes": attrs,
    }


def note_payload(noteable_type: str, **extra: typ.Any) -> dict[str, typ.Any]:
    attrs = {
        "note": "Looks good",
        "noteable_type": noteable_type,
        "url": "https://git.example/group/proj/note/1",
    }
    if "commit_id" in extra:
        attrs["commit_id"] = extra.pop("commit_id")
    payload = {
        "object_kind": "note",
        "user": {"username": "dave"},
        "project": dict(PROJECT),
        "object_attributes": attrs,
    }
    payload.update(extra)
    return payload


def encode(payload: typ.Any) -> bytes:
    return json.dumps(payload).encode()


class RecordingOneBot:
    """
    ``httpx.MockTransport`` handler that records calls and answers like a
    OneBot implementation would.
    """

    def __init__(
        self,
        *,
        message_id: int = 1001,
        send_response: httpx.Response | None = None,
        fail_with: Exception | None = None,
    ) -> None:
        self.message_id = message_id
        self.send_response = send_response
        self.fail_with = fail_with
        self.calls: list[tuple[str, str, typ.Any]] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        self.calls.append((request.method, request.url.path, body))
        if self.fail_with is not None:
            raise self.fail_with
        if request.url.path == "/get_version_info":
            return httpx.Response(
                200,
                json={
                    "data": {
                        "app_name": "go-cqhttp",
                        "app_version": "v1.0.0",
                        "protocol": 5,
                    },
                    "retcode": 0,
                    "status": "ok",
                },
            )
        if self.send_response is not None:
            return self.send_response
        return httpx.Response(
            200,
            json={
                "data": {"message_id": self.message_id},
                "retcode": 0,
                "status": "ok",
            },
        )

    @property
    def sends(self) -> list[tuple[str, typ.Any]]:
        return [(path, body) for method, path, body in self.calls if method == "POST"]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)
