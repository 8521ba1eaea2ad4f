"""Message responses and the tag processor that builds them."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Protocol, Union

from .errors import MalformedPackage
from .protocol import (
    TAG_MESSAGE_RESPONSE_INFO,
    TAG_RESPONSE_ID,
    TAG_RESPONSE_INT_PARAM,
    TAG_RESPONSE_STRING_PARAM,
    TAG_RESPONSE_TARGET,
)
from .tags import Tag

Param = Union[int, str, None]


@dataclass
class Response:
    id: int
    param: Param = None
    target: int | None = None

    def clone(self) -> Response:
        return Response(self.id, self.param, self.target)


@dataclass
class MessageResponse:
    """Rule describing how the owner reacts to message `id`."""

    id: int
    responses: list[Response] = field(default_factory=list)

    def clone(self) -> MessageResponse:
        return MessageResponse(self.id, [r.clone() for r in self.responses])


class HasMessageResponses(Protocol):
    message_responses: list[MessageResponse]


class MessageResponseTagProcessor:
    """Builds MessageResponse lists from RI/Ri/Rp/Rs/Rt tags.

    process_tag() returns False for tags it does not handle so the caller
    can skip them.
    """

    def __init__(self):
        self._target: HasMessageResponses | None = None
        self._current: MessageResponse | None = None
        self._response: Response | None = None

    def _bind(self, target: HasMessageResponses) -> None:
        if target is not self._target:
            self._target = target
            self._current = None
            self._response = None

    def _require_response(self, tag: Tag) -> Response:
        if self._response is None:
            raise MalformedPackage(f"{tag.name} at offset {tag.offset} before any ResponseId")
        return self._response

    def process_tag(self, target: HasMessageResponses, tag: Tag) -> bool:
        self._bind(target)

        if tag.kind == TAG_MESSAGE_RESPONSE_INFO:
            self._current = MessageResponse(tag.value)
            self._response = None
            target.message_responses.append(self._current)
        elif tag.kind == TAG_RESPONSE_ID:
            if self._current is None:
                raise MalformedPackage(
                    f"ResponseId at offset {tag.offset} before any MessageResponseInfo"
                )
            self._response = Response(tag.value)
            self._current.responses.append(self._response)
        elif tag.kind in (TAG_RESPONSE_INT_PARAM, TAG_RESPONSE_STRING_PARAM):
            self._require_response(tag).param = tag.value
        elif tag.kind == TAG_RESPONSE_TARGET:
            self._require_response(tag).target = tag.value
        else:
            return False
        return True


def message_response_tags(responses: list[MessageResponse]) -> Iterator[tuple[int, object]]:
    """Yield (kind, value) pairs that MessageResponseTagProcessor reads back."""
    for mr in responses:
        yield TAG_MESSAGE_RESPONSE_INFO, mr.id
        for r in mr.responses:
            yield TAG_RESPONSE_ID, r.id
            if isinstance(r.param, str):
                yield TAG_RESPONSE_STRING_PARAM, r.param
            elif r.param is not None:
                yield TAG_RESPONSE_INT_PARAM, r.param
            if r.target is not None:
                yield TAG_RESPONSE_TARGET, r.target
