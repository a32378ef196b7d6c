"""
Conversion of raw backend results into Response objects.

Raw results are the chat-completions and embeddings payload shapes, either
as plain mappings or as SDK objects that expose `model_dump()`.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from .exceptions import MalformedResponseError
from .types import ActionCall, Message, PromptLike, Response, Role

logger = logging.getLogger(__name__)

StreamObserver = Callable[[Message, Optional[str], bool], None]


def _as_mapping(raw: Any) -> Mapping[str, Any]:
    if hasattr(raw, "model_dump"):
        raw = raw.model_dump()
    if not isinstance(raw, Mapping):
        raise MalformedResponseError(
            f"Expected a mapping from the backend, got {type(raw).__name__}", raw
        )
    return raw


def _entry_mapping(entry: Any, key: str, raw: Any) -> Mapping[str, Any]:
    if not isinstance(entry, Mapping):
        raise MalformedResponseError(
            f"Backend '{key}' entry is not a mapping: {type(entry).__name__}", raw
        )
    return entry


def _first_entry(raw: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    entries = raw.get(key)
    if not entries:
        raise MalformedResponseError(f"Backend result has no '{key}' entries", raw)
    return _entry_mapping(entries[0], key, raw)


def _parse_role(value: Optional[str], raw: Any) -> Role:
    if value is None:
        return Role.ASSISTANT
    try:
        return Role(value)
    except ValueError as exc:
        raise MalformedResponseError(f"Unknown message role {value!r}", raw) from exc


def _parse_arguments(arguments: Any, raw: Any) -> Dict[str, Any]:
    if not arguments:
        return {}
    if isinstance(arguments, Mapping):
        return dict(arguments)
    try:
        return json.loads(arguments)
    except json.JSONDecodeError as exc:
        raise MalformedResponseError(f"Tool call arguments are not valid JSON: {exc}", raw) from exc


def _parse_tool_calls(tool_calls: Optional[List[Mapping[str, Any]]], raw: Any) -> List[ActionCall]:
    actions = []
    for call in tool_calls or []:
        function = call.get("function") or {}
        actions.append(
            ActionCall(
                id=call.get("id") or "",
                name=function.get("name") or "",
                arguments=_parse_arguments(function.get("arguments"), raw),
            )
        )
    return actions


def completion_response(prompt: Optional[PromptLike], raw: Any) -> Response:
    """
    Build a Response from a synchronous chat completion result.

    Only the first choice is used. `finish_reason` is read from the choice,
    or from its message when the backend nests it there.

    Raises:
        MalformedResponseError: If the result has no choices
    """
    result = _as_mapping(raw)
    choice = _first_entry(result, "choices")
    payload = _entry_mapping(choice.get("message") or {}, "message", result)
    finish_reason = choice.get("finish_reason") or payload.get("finish_reason")

    message = Message(
        role=_parse_role(payload.get("role"), result),
        content=payload.get("content") or "",
        requested_actions=_parse_tool_calls(payload.get("tool_calls"), result),
        metadata={"finish_reason": finish_reason},
    )
    return Response(prompt=prompt, message=message, raw_response=result)


def embedding_response(prompt: Optional[PromptLike], raw: Any) -> Response:
    """
    Build a Response from an embeddings result.

    The first vector in `data` becomes the message content.

    Raises:
        MalformedResponseError: If the result has no data entries
    """
    result = _as_mapping(raw)
    entry = _first_entry(result, "data")
    if "embedding" not in entry:
        raise MalformedResponseError("Embedding entry has no 'embedding' vector", result)
    message = Message(role=Role.ASSISTANT, content=list(entry["embedding"]))
    return Response(prompt=prompt, message=message, raw_response=result)


class StreamAccumulator:
    """
    Merges streamed completion chunks into one Response.

    Chunks are applied in the order `feed` is called. Content deltas are
    concatenated, the role is fixed by the first chunk that carries one, and
    the last non-empty finish_reason wins. Tool call fragments are merged by
    their `index`.

    Example:
        >>> acc = StreamAccumulator(prompt)
        >>> client.chat({..., "stream": acc.feed})
        >>> response = acc.finish()
    """

    def __init__(self, prompt: Optional[PromptLike], observer: Optional[StreamObserver] = None):
        self.prompt = prompt
        self.observer = observer
        self.chunks: List[Mapping[str, Any]] = []
        self.role: Optional[Role] = None
        self.finish_reason: Optional[str] = None
        self._content: List[str] = []
        self._tool_calls: Dict[int, Dict[str, Any]] = {}
        self._saw_choice = False

    @property
    def content(self) -> str:
        return "".join(self._content)

    def feed(self, chunk: Any) -> None:
        """Apply one chunk."""
        data = _as_mapping(chunk)
        self.chunks.append(data)
        choices = data.get("choices") or []
        if not choices:
            # usage trailer
            return

        self._saw_choice = True
        choice = _entry_mapping(choices[0], "choices", data)
        delta = _entry_mapping(choice.get("delta") or choice.get("message") or {}, "delta", data)

        if self.role is None and delta.get("role"):
            self.role = _parse_role(delta["role"], data)

        finish_reason = choice.get("finish_reason") or delta.get("finish_reason")
        if finish_reason:
            self.finish_reason = finish_reason

        for fragment in delta.get("tool_calls") or []:
            self._merge_tool_call(fragment)

        text = delta.get("content")
        if text:
            self._content.append(text)
            if self.observer is not None:
                self.observer(self._snapshot(), text, False)

    def _merge_tool_call(self, fragment: Mapping[str, Any]) -> None:
        index = fragment.get("index", len(self._tool_calls))
        call = self._tool_calls.setdefault(index, {"id": None, "name": None, "arguments": ""})
        function = fragment.get("function") or {}
        if call["id"] is None and fragment.get("id"):
            call["id"] = fragment["id"]
        if call["name"] is None and function.get("name"):
            call["name"] = function["name"]
        call["arguments"] += function.get("arguments") or ""

    def _snapshot(self) -> Message:
        return Message(
            role=self.role or Role.ASSISTANT,
            content=self.content,
            metadata={"finish_reason": self.finish_reason},
        )

    def finish(self) -> Response:
        """
        Build the final Response once the stream is exhausted.

        Raises:
            MalformedResponseError: If no chunk carried a choice
        """
        if not self._saw_choice:
            raise MalformedResponseError("Stream ended without any choices", self.chunks)

        message = self._snapshot()
        message.requested_actions = [
            ActionCall(
                id=call["id"] or "",
                name=call["name"] or "",
                arguments=_parse_arguments(call["arguments"], self.chunks),
            )
            for _, call in sorted(self._tool_calls.items())
        ]
        logger.debug(
            f"Stream finished after {len(self.chunks)} chunks "
            f"(finish_reason={self.finish_reason})"
        )
        if self.observer is not None:
            self.observer(message, None, True)
        return Response(prompt=self.prompt, message=message, raw_response=list(self.chunks))


__all__ = ["StreamAccumulator", "StreamObserver", "completion_response", "embedding_response"]
