"""Shared fixtures: a fake Gemini image client that never touches the network."""

import asyncio
from typing import List, Optional, Sequence

import pytest

from product_photo_editor.history import HistoryController
from product_photo_editor.images import ImageAsset
from product_photo_editor.orchestrator import Orchestrator
from product_photo_editor.session import StudioSession


def img(name: str, mime: str = "image/png") -> ImageAsset:
    return ImageAsset(data=name.encode(), mime_type=mime)


class FakeImageClient:
    """Records every call and replays scripted outcomes in call order.

    An outcome is an ImageAsset, None (no image in the response) or an
    exception instance to raise. When the script runs out it answers with
    a fresh image per call.
    """

    def __init__(self, outcomes: Optional[list] = None):
        self.outcomes = list(outcomes or [])
        self.calls: List[tuple] = []

    async def generate_image(self, images: Sequence[ImageAsset], instruction: str) -> Optional[ImageAsset]:
        self.calls.append((list(images), instruction))
        if self.outcomes:
            outcome = self.outcomes.pop(0)
        else:
            outcome = img(f"out-{len(self.calls)}")
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def product() -> ImageAsset:
    return img("product", "image/jpeg")


@pytest.fixture
def model_photo() -> ImageAsset:
    return img("model", "image/jpeg")


@pytest.fixture
def reference_photo() -> ImageAsset:
    return img("reference", "image/webp")


@pytest.fixture
def fake_client() -> FakeImageClient:
    return FakeImageClient()


@pytest.fixture
def orchestrator(fake_client) -> Orchestrator:
    return Orchestrator(fake_client)


@pytest.fixture
def history(orchestrator) -> HistoryController:
    return HistoryController(orchestrator)


@pytest.fixture
def session(orchestrator) -> StudioSession:
    return StudioSession(orchestrator)


class GatedImageClient(FakeImageClient):
    """FakeImageClient that holds every call until `gate` is set."""

    def __init__(self, outcomes: Optional[list] = None):
        super().__init__(outcomes)
        self.gate = asyncio.Event()

    async def generate_image(self, images: Sequence[ImageAsset], instruction: str) -> Optional[ImageAsset]:
        self.calls.append((list(images), instruction))
        await self.gate.wait()
        outcome = self.outcomes.pop(0) if self.outcomes else img(f"out-{len(self.calls)}")
        if isinstance(outcome, Exception):
            raise outcome
        return outcome
