"""Response envelope and JSON/XML serialisation for the posts API.

Every posts response is wrapped in ``{"status": ..., "result": ...}``. The
XML rendering uses the same element names as the JSON keys so both formats
carry the same structure.
"""

from enum import StrEnum
from typing import Any, Literal

from fastapi import Response
from fastapi.responses import JSONResponse
from lxml import etree
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from src.database.messages.models import Message

XML_MEDIA_TYPE = "application/xml; charset=utf-8"

# Marker for responses without a payload, serialised as the bare string "None"
NO_CONTENT = "None"

_ROOT_TAG = "ApiResponse"
_MESSAGE_TAG = "Message"
_MESSAGE_FIELDS = ("id", "posted", "sender", "content")


class ResponseFormatError(Exception):
    """Raised when an envelope cannot be serialised or parsed."""


class ResponseFormat(StrEnum):
    """Supported response encodings."""

    JSON = "json"
    XML = "xml"

    @classmethod
    def from_token(cls, token: str | None) -> "ResponseFormat":
        """Resolve a ``format`` query value.

        Only the exact token ``xml`` selects XML. Anything else, including no
        token at all, falls back to JSON.

        :param token: Raw format token from the request.
        :returns: The format to respond with.
        """
        return cls.XML if token == cls.XML.value else cls.JSON


class ResponseStatus(StrEnum):
    """Envelope status values."""

    OK = "OK"
    ERROR = "Error"


class ItemsContent(BaseModel):
    """A listing of messages."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    items: list[Message] = Field(..., alias="Items")


class ItemContent(BaseModel):
    """A single message."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    item: Message = Field(..., alias="Item")


class ReasonContent(BaseModel):
    """A human-readable error reason."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    reason: str = Field(..., alias="Reason")


ResponseContent = ItemsContent | ItemContent | ReasonContent | Literal["None"]


class ApiResponse(BaseModel):
    """Uniform envelope for posts API responses."""

    status: ResponseStatus = Field(..., description="OK or Error")
    result: ResponseContent = Field(..., description="Payload of the response")

    @classmethod
    def items(cls, messages: list[Message]) -> "ApiResponse":
        return cls(status=ResponseStatus.OK, result=ItemsContent(items=messages))

    @classmethod
    def item(cls, message: Message) -> "ApiResponse":
        return cls(status=ResponseStatus.OK, result=ItemContent(item=message))

    @classmethod
    def empty(cls) -> "ApiResponse":
        return cls(status=ResponseStatus.OK, result=NO_CONTENT)

    @classmethod
    def error(cls, reason: str) -> "ApiResponse":
        return cls(status=ResponseStatus.ERROR, result=ReasonContent(reason=reason))


def to_json(envelope: ApiResponse) -> dict[str, Any]:
    """Convert an envelope to a JSON-compatible dict.

    :param envelope: The response envelope.
    :returns: Dict using the wire field names.
    """
    return envelope.model_dump(mode="json", by_alias=True)


def to_xml(envelope: ApiResponse) -> bytes:
    """Serialise an envelope as an XML document.

    :param envelope: The response envelope.
    :returns: UTF-8 encoded XML with declaration.
    :raises ResponseFormatError: If a value cannot be represented in XML.
    """
    root = etree.Element(_ROOT_TAG)

    try:
        etree.SubElement(root, "status").text = envelope.status.value
        result = etree.SubElement(root, "result")
        content = envelope.result

        if isinstance(content, ItemsContent):
            items = etree.SubElement(result, "Items")
            for message in content.items:
                _append_message(items, _MESSAGE_TAG, message)
        elif isinstance(content, ItemContent):
            _append_message(result, "Item", content.item)
        elif isinstance(content, ReasonContent):
            etree.SubElement(result, "Reason").text = content.reason
        else:
            result.text = NO_CONTENT

    except ValueError as e:
        raise ResponseFormatError(f"Cannot encode response as XML: {e}") from e

    return etree.tostring(root, xml_declaration=True, encoding="UTF-8")


def from_xml(data: bytes | str) -> ApiResponse:
    """Parse an XML document produced by :func:`to_xml`.

    :param data: The XML document.
    :returns: The decoded envelope.
    :raises ResponseFormatError: If the document is not a valid envelope.
    """
    if isinstance(data, str):
        data = data.encode("utf-8")

    try:
        root = etree.fromstring(data)
    except etree.XMLSyntaxError as e:
        raise ResponseFormatError(f"Invalid XML document: {e}") from e

    result = root.find("result")
    if root.tag != _ROOT_TAG or result is None:
        raise ResponseFormatError(f"Expected <{_ROOT_TAG}> with a <result> element")

    items = result.find("Items")
    item = result.find("Item")
    reason = result.find("Reason")

    content: dict[str, Any] | str
    if items is not None:
        content = {"Items": [_read_message(el) for el in items.findall(_MESSAGE_TAG)]}
    elif item is not None:
        content = {"Item": _read_message(item)}
    elif reason is not None:
        content = {"Reason": reason.text or ""}
    else:
        content = (result.text or "").strip()

    try:
        return ApiResponse.model_validate(
            {"status": root.findtext("status", default=""), "result": content}
        )
    except ValidationError as e:
        raise ResponseFormatError(f"Invalid response envelope: {e}") from e


def render(
    envelope: ApiResponse,
    fmt: ResponseFormat = ResponseFormat.JSON,
    status_code: int = 200,
) -> Response:
    """Build an HTTP response for an envelope in the requested format.

    :param envelope: The response envelope.
    :param fmt: Output encoding.
    :param status_code: HTTP status code.
    :returns: JSON or XML response.
    :raises ResponseFormatError: If XML encoding fails.
    """
    if fmt is ResponseFormat.XML:
        return Response(content=to_xml(envelope), status_code=status_code, media_type=XML_MEDIA_TYPE)
    return JSONResponse(content=to_json(envelope), status_code=status_code)


def _append_message(parent: etree._Element, tag: str, message: Message) -> None:
    element = etree.SubElement(parent, tag)
    for name in _MESSAGE_FIELDS:
        etree.SubElement(element, name).text = str(getattr(message, name))


def _read_message(element: etree._Element) -> dict[str, str]:
    # All values are text here; pydantic coerces the id back to int
    return {name: element.findtext(name, default="") for name in _MESSAGE_FIELDS}
