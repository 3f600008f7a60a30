from property_finder.llm.extractor import extract_json_from_response, parse_verdict


def test_plain_json():
    verdict = parse_verdict('{"isValidLocation": true, "formattedAddress": "123 Main St"}')
    assert verdict.is_valid_location is True
    assert verdict.formatted_address == "123 Main St"


def test_json_wrapped_in_prose_and_code_fence():
    response = 'Sure! ```json\n{"isValidLocation": false, "formattedAddress": "Main St",}\n```'
    verdict = parse_verdict(response)
    assert verdict is not None
    assert verdict.is_valid_location is False


def test_loose_values_are_normalized():
    verdict = parse_verdict("{'is_valid_location': 'Yes', 'formatted_address': '1 Elm St'}")
    assert verdict.is_valid_location is True
    assert verdict.formatted_address == "1 Elm St"


def test_unusable_responses():
    assert parse_verdict("") is None
    assert parse_verdict("I cannot tell from this photo.") is None
    assert parse_verdict('{"formattedAddress": "1 Elm St"}') is None
    assert parse_verdict('["not", "an", "object"]') is None


def test_extract_json_rejects_non_objects():
    assert extract_json_from_response("42") is None
