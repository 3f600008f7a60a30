import base64
from types import SimpleNamespace

import pytest

from property_finder.llm.client import AvailableModel
from property_finder.models.listing import Listing

PHOTO_DATA_URI = "data:image/png;base64," + base64.b64encode(b"\x89PNG fake image").decode()


def make_listing(id="1", **overrides) -> Listing:
    data = dict(
        id=id,
        title="Sunny Family Home",
        address="12 Elm St, Pasadena, CA",
        type="sale",
        price=350000,
        bedrooms=3,
        bathrooms=2,
        area=1600,
        coordinates={"lat": 34.1478, "lng": -118.1445},
        negotiable=False,
        accessibility="vehicle",
        utilities={"water": True, "electricity": True},
        garage=False,
        features={"Garden"},
    )
    data.update(overrides)
    return Listing(**data)


def chat_reply(content: str = None, tool_calls=None):
    return SimpleNamespace(
        message=SimpleNamespace(role="assistant", content=content, tool_calls=tool_calls)
    )


def tool_call(name: str, **arguments):
    return SimpleNamespace(function=SimpleNamespace(name=name, arguments=arguments))


class FakeChatClient:
    """Replays canned chat replies (or raises canned errors) in order."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls = []

    async def chat(self, **kwargs):
        self.calls.append(kwargs)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class FakeGeocoder:
    def __init__(self, address="123 Main St", error: Exception = None):
        self.address = address
        self.error = error
        self.calls = []

    def __call__(self, latitude, longitude):
        self.calls.append((latitude, longitude))
        if self.error:
            raise self.error
        return self.address


@pytest.fixture
def geocoder():
    return FakeGeocoder()


def fake_model(*replies) -> AvailableModel:
    return AvailableModel(client=FakeChatClient(*replies), model="test-vision")
