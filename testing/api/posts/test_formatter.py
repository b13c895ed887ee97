"""Tests for the posts response formatter."""

import json
import unittest

from lxml import etree

from src.api.posts.formatter import (
    NO_CONTENT,
    XML_MEDIA_TYPE,
    ApiResponse,
    ItemContent,
    ItemsContent,
    ReasonContent,
    ResponseFormat,
    ResponseFormatError,
    ResponseStatus,
    from_xml,
    render,
    to_json,
    to_xml,
)
from src.database.messages import Message

MESSAGES = [
    Message(id=2, posted="2024-01-02 09:00:00", sender="bob", content="line one\nline two"),
    Message(id=1, posted="2024-01-01 10:00:00", sender="", content="  <b>&amp;</b>  "),
]


class TestResponseFormat(unittest.TestCase):
    """Tests for ResponseFormat.from_token."""

    def test_xml_token(self) -> None:
        """Test that only the exact xml token selects XML."""
        self.assertIs(ResponseFormat.from_token("xml"), ResponseFormat.XML)

    def test_json_token(self) -> None:
        """Test the explicit json token."""
        self.assertIs(ResponseFormat.from_token("json"), ResponseFormat.JSON)

    def test_missing_token_defaults_to_json(self) -> None:
        """Test that no token means JSON."""
        self.assertIs(ResponseFormat.from_token(None), ResponseFormat.JSON)

    def test_unknown_tokens_fall_back_to_json(self) -> None:
        """Test that unrecognised tokens are ignored without error."""
        for token in ("yaml", "XML", " xml", ""):
            with self.subTest(token=token):
                self.assertIs(ResponseFormat.from_token(token), ResponseFormat.JSON)


class TestToJson(unittest.TestCase):
    """Tests for JSON envelopes."""

    def test_items_envelope(self) -> None:
        """Test the listing envelope shape."""
        data = to_json(ApiResponse.items(MESSAGES[:1]))

        self.assertEqual(
            data,
            {
                "status": "OK",
                "result": {
                    "Items": [
                        {
                            "id": 2,
                            "posted": "2024-01-02 09:00:00",
                            "sender": "bob",
                            "content": "line one\nline two",
                        }
                    ]
                },
            },
        )

    def test_item_envelope(self) -> None:
        """Test the single item envelope shape."""
        data = to_json(ApiResponse.item(MESSAGES[1]))

        self.assertEqual(data["status"], "OK")
        self.assertEqual(data["result"]["Item"]["id"], 1)

    def test_error_envelope(self) -> None:
        """Test the error reason envelope."""
        self.assertEqual(
            to_json(ApiResponse.error("API not found")),
            {"status": "Error", "result": {"Reason": "API not found"}},
        )

    def test_empty_envelope(self) -> None:
        """Test that the no-payload marker serialises as the string None."""
        self.assertEqual(to_json(ApiResponse.empty()), {"status": "OK", "result": "None"})

    def test_json_round_trip(self) -> None:
        """Test that every envelope kind parses back from JSON."""
        envelopes = [
            ApiResponse.items(MESSAGES),
            ApiResponse.items([]),
            ApiResponse.item(MESSAGES[0]),
            ApiResponse.error("boom"),
            ApiResponse.empty(),
        ]
        for envelope in envelopes:
            with self.subTest(result=type(envelope.result).__name__):
                decoded = ApiResponse.model_validate(json.loads(json.dumps(to_json(envelope))))
                self.assertEqual(decoded, envelope)


class TestToXml(unittest.TestCase):
    """Tests for XML envelopes."""

    def test_items_structure_matches_json_names(self) -> None:
        """Test that XML element names mirror the JSON keys."""
        root = etree.fromstring(to_xml(ApiResponse.items(MESSAGES)))

        self.assertEqual(root.tag, "ApiResponse")
        self.assertEqual(root.findtext("status"), "OK")
        messages = root.findall("result/Items/Message")
        self.assertEqual(len(messages), 2)
        self.assertEqual(
            [child.tag for child in messages[0]], ["id", "posted", "sender", "content"]
        )
        self.assertEqual(messages[0].findtext("id"), "2")
        self.assertEqual(messages[0].findtext("content"), "line one\nline two")

    def test_has_xml_declaration(self) -> None:
        """Test that the document starts with an XML declaration."""
        self.assertTrue(to_xml(ApiResponse.empty()).startswith(b"<?xml"))

    def test_reason_and_empty(self) -> None:
        """Test the Reason and None result encodings."""
        error_root = etree.fromstring(to_xml(ApiResponse.error("API not found")))
        empty_root = etree.fromstring(to_xml(ApiResponse.empty()))

        self.assertEqual(error_root.findtext("status"), "Error")
        self.assertEqual(error_root.findtext("result/Reason"), "API not found")
        self.assertEqual(empty_root.findtext("result"), NO_CONTENT)

    def test_xml_round_trip(self) -> None:
        """Test that every envelope kind parses back from XML."""
        envelopes = [
            ApiResponse.items(MESSAGES),
            ApiResponse.items([]),
            ApiResponse.item(MESSAGES[1]),
            ApiResponse.error("not here"),
            ApiResponse.empty(),
        ]
        for envelope in envelopes:
            with self.subTest(result=type(envelope.result).__name__):
                self.assertEqual(from_xml(to_xml(envelope)), envelope)

    def test_xml_and_json_carry_same_messages(self) -> None:
        """Test that both encodings decode to the same listing."""
        envelope = ApiResponse.items(MESSAGES)

        from_json = ApiResponse.model_validate(to_json(envelope))

        self.assertEqual(from_xml(to_xml(envelope)), from_json)

    def test_control_characters_raise_format_error(self) -> None:
        """Test that content XML cannot carry raises a typed error."""
        envelope = ApiResponse.item(Message(id=1, content="bell\x07"))

        with self.assertRaises(ResponseFormatError):
            to_xml(envelope)


class TestFromXml(unittest.TestCase):
    """Tests for decoding XML envelopes."""

    def test_accepts_str_input(self) -> None:
        """Test that str documents are decoded."""
        document = to_xml(ApiResponse.item(MESSAGES[0])).decode("utf-8")

        result = from_xml(document).result

        self.assertIsInstance(result, ItemContent)
        assert isinstance(result, ItemContent)
        self.assertEqual(result.item, MESSAGES[0])

    def test_invalid_xml_raises(self) -> None:
        """Test that a syntax error raises ResponseFormatError."""
        with self.assertRaises(ResponseFormatError):
            from_xml(b"<ApiResponse><status>")

    def test_wrong_root_raises(self) -> None:
        """Test that an unexpected root element is rejected."""
        with self.assertRaises(ResponseFormatError):
            from_xml(b"<Other><result>None</result></Other>")

    def test_invalid_status_raises(self) -> None:
        """Test that an unknown status is rejected."""
        with self.assertRaises(ResponseFormatError):
            from_xml(b"<ApiResponse><status>Maybe</status><result>None</result></ApiResponse>")

    def test_non_numeric_id_raises(self) -> None:
        """Test that a message with a bad id is rejected."""
        document = (
            b"<ApiResponse><status>OK</status><result><Item><id>abc</id><posted/>"
            b"<sender/><content/></Item></result></ApiResponse>"
        )
        with self.assertRaises(ResponseFormatError):
            from_xml(document)

    def test_empty_elements_decode_as_empty_strings(self) -> None:
        """Test that self-closing fields become empty strings."""
        document = (
            b"<ApiResponse><status>OK</status><result><Item><id>5</id><posted/>"
            b"<sender/><content/></Item></result></ApiResponse>"
        )

        result = from_xml(document).result

        assert isinstance(result, ItemContent)
        self.assertEqual(result.item, Message(id=5))


class TestApiResponseParsing(unittest.TestCase):
    """Tests for envelope validation from wire data."""

    def test_parses_each_result_kind(self) -> None:
        """Test that the union resolves each result shape."""
        cases = [
            ({"Items": []}, ItemsContent),
            ({"Item": {"id": 1, "posted": "", "sender": "", "content": ""}}, ItemContent),
            ({"Reason": "x"}, ReasonContent),
        ]
        for result, expected in cases:
            with self.subTest(expected=expected.__name__):
                envelope = ApiResponse.model_validate({"status": "OK", "result": result})
                self.assertIsInstance(envelope.result, expected)

    def test_status_values(self) -> None:
        """Test the status enumeration values."""
        self.assertEqual(ResponseStatus.OK.value, "OK")
        self.assertEqual(ResponseStatus.ERROR.value, "Error")


class TestRender(unittest.TestCase):
    """Tests for building HTTP responses."""

    def test_json_response(self) -> None:
        """Test JSON rendering."""
        response = render(ApiResponse.empty())

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.media_type, "application/json")
        self.assertEqual(json.loads(response.body), {"status": "OK", "result": "None"})

    def test_xml_response_with_status(self) -> None:
        """Test XML rendering with a custom status code."""
        response = render(ApiResponse.error("missing"), ResponseFormat.XML, status_code=404)

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.headers["content-type"], XML_MEDIA_TYPE)
        self.assertEqual(from_xml(response.body), ApiResponse.error("missing"))


if __name__ == "__main__":
    unittest.main()
