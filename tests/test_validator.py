import asyncio

from property_finder.llm.client import UnavailableModel
from property_finder.llm.validator import GEOCODE_TOOL_NAME, LocationValidator
from property_finder.models.listing import ValidationErrorKind

from conftest import PHOTO_DATA_URI, FakeGeocoder, chat_reply, fake_model, tool_call

VALID_REPLY = '{"isValidLocation": true, "formattedAddress": "123 Main St"}'


def run(validator, lat=34.05, lng=-118.24, photo=PHOTO_DATA_URI):
    return asyncio.run(validator.validate(lat, lng, photo))


def test_valid_location_end_to_end(geocoder):
    model = fake_model(chat_reply(VALID_REPLY))
    result = run(LocationValidator(model, geocoder))

    assert result.is_valid_location is True
    assert result.formatted_address == "123 Main St"
    assert result.error_kind is None
    assert geocoder.calls == [(34.05, -118.24)]

    call = model.client.calls[0]
    user_message = call["messages"][-1]
    assert "123 Main St" in user_message["content"]
    assert user_message["images"] == [PHOTO_DATA_URI.split(",", 1)[1]]
    assert call["tools"][0]["function"]["name"] == GEOCODE_TOOL_NAME
    assert set(call["format"]["properties"]) == {"isValidLocation", "formattedAddress"}


def test_model_rejects_location(geocoder):
    model = fake_model(chat_reply('{"isValidLocation": false, "formattedAddress": "123 Main St"}'))
    result = run(LocationValidator(model, geocoder))
    assert result.is_valid_location is False
    assert result.error_kind is None


def test_auth_error_from_model_is_classified(geocoder):
    model = fake_model(RuntimeError("400 API_KEY_INVALID: API key expired"))
    result = run(LocationValidator(model, geocoder))

    assert result.is_valid_location is False
    assert result.error_kind == ValidationErrorKind.AUTH_OR_QUOTA
    assert "configuration" in result.formatted_address


def test_geocoding_failure_is_classified_without_calling_model():
    model = fake_model(chat_reply(VALID_REPLY))
    geocoder = FakeGeocoder(error=RuntimeError("Service timed out"))
    result = run(LocationValidator(model, geocoder))

    assert result.is_valid_location is False
    assert result.error_kind == ValidationErrorKind.TIMEOUT
    assert model.client.calls == []


def test_no_structured_output(geocoder):
    model = fake_model(chat_reply("Looks like a nice house!"))
    result = run(LocationValidator(model, geocoder))
    assert result.is_valid_location is False
    assert result.error_kind == ValidationErrorKind.NO_STRUCTURED_OUTPUT
    assert result.formatted_address.startswith("Error:")


def test_empty_output(geocoder):
    result = run(LocationValidator(fake_model(chat_reply(None)), geocoder))
    assert result.error_kind == ValidationErrorKind.NO_STRUCTURED_OUTPUT


def test_tool_calls_are_answered(geocoder):
    model = fake_model(
        chat_reply(tool_calls=[tool_call(GEOCODE_TOOL_NAME, latitude=34.05, longitude=-118.24)]),
        chat_reply(VALID_REPLY),
    )
    result = run(LocationValidator(model, geocoder))

    assert result.is_valid_location is True
    assert len(model.client.calls) == 2
    tool_message = model.client.calls[1]["messages"][-1]
    assert tool_message == {"role": "tool", "content": "123 Main St", "tool_name": GEOCODE_TOOL_NAME}
    assert len(geocoder.calls) == 2


def test_endless_tool_calls_end_with_forced_answer(geocoder):
    looping = chat_reply(tool_calls=[tool_call(GEOCODE_TOOL_NAME, latitude=1, longitude=2)])
    model = fake_model(looping, looping, looping, chat_reply(VALID_REPLY))
    result = run(LocationValidator(model, geocoder))

    assert result.is_valid_location is True
    assert model.client.calls[-1]["tools"] is None


def test_missing_input_makes_no_external_calls(geocoder):
    model = fake_model()
    validator = LocationValidator(model, geocoder)

    for lat, lng, photo in [(34.05, -118.24, None), (None, -118.24, PHOTO_DATA_URI), (34.05, None, "")]:
        result = run(validator, lat, lng, photo)
        assert result.is_valid_location is False
        assert result.error_kind == ValidationErrorKind.MISSING_INPUT

    assert geocoder.calls == []
    assert model.client.calls == []


def test_invalid_input_format_makes_no_external_calls(geocoder):
    model = fake_model()
    validator = LocationValidator(model, geocoder)

    bad_inputs = [
        (34.05, -118.24, "https://example.com/house.jpg"),
        (34.05, -118.24, "data:text/plain;base64,aGVsbG8="),
        (34.05, -118.24, "data:image/png;base64,not base64!!"),
        (95.0, -118.24, PHOTO_DATA_URI),
        (34.05, 200.0, PHOTO_DATA_URI),
    ]
    for lat, lng, photo in bad_inputs:
        result = run(validator, lat, lng, photo)
        assert result.error_kind == ValidationErrorKind.INVALID_INPUT_FORMAT

    assert geocoder.calls == []
    assert model.client.calls == []


def test_unavailable_model(geocoder):
    validator = LocationValidator(UnavailableModel("OLLAMA_MODEL not set"), geocoder)
    result = run(validator)
    assert result.is_valid_location is False
    assert result.error_kind == ValidationErrorKind.MODEL_UNAVAILABLE
    assert "OLLAMA_MODEL not set" in result.formatted_address


def test_results_are_not_cached(geocoder):
    model = fake_model(chat_reply(VALID_REPLY), chat_reply(VALID_REPLY))
    validator = LocationValidator(model, geocoder)
    run(validator)
    run(validator)
    assert len(geocoder.calls) == 2
    assert len(model.client.calls) == 2


def test_wire_shape():
    model = fake_model(chat_reply(VALID_REPLY))
    result = run(LocationValidator(model, FakeGeocoder()))
    assert result.model_dump(by_alias=True) == {
        "isValidLocation": True,
        "formattedAddress": "123 Main St",
    }


def test_model_handle_factory():
    from property_finder.config.settings import Settings
    from property_finder.llm.client import AvailableModel, create_model_handle

    missing = create_model_handle(Settings(ollama_model=""))
    assert isinstance(missing, UnavailableModel)
    assert not missing.available

    handle = create_model_handle(Settings(ollama_host="http://localhost:11434", ollama_model="llava"))
    assert isinstance(handle, AvailableModel)
    assert handle.available
    assert handle.model == "llava"


def test_malformed_tool_arguments_are_reported_back_to_model(geocoder):
    model = fake_model(
        chat_reply(tool_calls=[
            tool_call(GEOCODE_TOOL_NAME, lat=34.05, lng=-118.24),
            tool_call(GEOCODE_TOOL_NAME, latitude="north", longitude=-118.24),
        ]),
        chat_reply(VALID_REPLY),
    )
    result = run(LocationValidator(model, geocoder))

    assert result.is_valid_location is True
    assert result.error_kind is None
    assert len(model.client.calls) == 2
    tool_messages = [m for m in model.client.calls[1]["messages"] if isinstance(m, dict) and m["role"] == "tool"]
    assert len(tool_messages) == 2
    assert all(m["content"].startswith("Invalid arguments") for m in tool_messages)
    # Only the initial address lookup reached the geocoder
    assert geocoder.calls == [(34.05, -118.24)]
