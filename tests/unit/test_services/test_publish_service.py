"""Unit tests for the publish service."""

import json
from collections.abc import Callable
from pathlib import Path

import httpx
import pytest

from meta_depot.core.config import ConfigurationError, Settings
from meta_depot.lib.listing.sync import MissingDepotIndexError
from meta_depot.lib.listing.types import DEPOT_INDEX_PATH
from meta_depot.lib.meta_api.client import MetaApiClient
from meta_depot.services.publish_service import publish_listings, reset_destination_folder
from tests.conftest import META_API_BASE_URL, RecordingDepot

_EXPECTED_LISTINGS = [
    "minecraft-releases-with-neoforge",
    "minecraft-versions-with-neoforge",
    "neoforge/21.1.72",
    "neoforge/21.2.0-beta",
]


@pytest.fixture
def make_client(meta_api_transport: Callable[[], httpx.MockTransport]) -> Callable[[], MetaApiClient]:
    def factory() -> MetaApiClient:
        http_client = httpx.AsyncClient(transport=meta_api_transport())
        return MetaApiClient(META_API_BASE_URL, api_key="key", client=http_client)

    return factory


class TestResetDestinationFolder:
    """Tests for reset_destination_folder()."""

    def test_removes_previous_output(self, tmp_path: Path) -> None:
        folder = tmp_path / "output"
        (folder / "neoforge").mkdir(parents=True)
        (folder / "neoforge" / "stale.json").write_text("{}")

        reset_destination_folder(folder)

        assert folder.is_dir()
        assert list(folder.iterdir()) == []


@pytest.mark.asyncio
class TestPublishListings:
    """Tests for publish_listings()."""

    async def test_full_resync_publishes_all_listings(
        self,
        settings: Settings,
        depot: RecordingDepot,
        make_client: Callable[[], MetaApiClient],
    ) -> None:
        result = await publish_listings(settings, full_resync=True, depot=depot, meta_api_client=make_client())

        assert sorted(result.uploaded) == _EXPECTED_LISTINGS
        assert result.listing_count == len(_EXPECTED_LISTINGS)
        assert result.unsafe_versions == ["../evil"]

        index = json.loads((depot.base_path / DEPOT_INDEX_PATH).read_bytes())
        assert [entry["name"] for entry in index] == _EXPECTED_LISTINGS
        neoforge = json.loads((depot.base_path / "neoforge" / "21.1.72.json").read_bytes())
        assert neoforge == {"release_notes": "Bug fixes"}

    async def test_unsafe_version_is_not_written(
        self,
        settings: Settings,
        depot: RecordingDepot,
        make_client: Callable[[], MetaApiClient],
    ) -> None:
        await publish_listings(settings, full_resync=True, depot=depot, meta_api_client=make_client())

        output = Path(settings.destination_folder)
        assert not any("evil" in str(p) for p in output.rglob("*"))
        assert not any("evil" in path for path in depot.written)

    async def test_second_run_uploads_nothing(
        self,
        settings: Settings,
        depot: RecordingDepot,
        make_client: Callable[[], MetaApiClient],
    ) -> None:
        await publish_listings(settings, full_resync=True, depot=depot, meta_api_client=make_client())

        result = await publish_listings(settings, depot=depot, meta_api_client=make_client())

        assert result.uploaded == []
        assert sorted(result.skipped) == _EXPECTED_LISTINGS

    async def test_missing_index_without_full_resync(
        self,
        settings: Settings,
        depot: RecordingDepot,
        make_client: Callable[[], MetaApiClient],
    ) -> None:
        with pytest.raises(MissingDepotIndexError):
            await publish_listings(settings, depot=depot, meta_api_client=make_client())

        assert depot.written == []

    async def test_missing_credentials_fail_before_any_work(self, settings: Settings, depot: RecordingDepot) -> None:
        settings = settings.model_copy(update={"meta_api_api_key": None, "meta_api_token": None})

        with pytest.raises(ConfigurationError, match="META_API_TOKEN"):
            await publish_listings(settings, full_resync=True, depot=depot)

        assert not Path(settings.destination_folder).exists()

    async def test_missing_credentials_fail_before_depot_is_created(
        self, settings: Settings, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        created: list[Settings] = []
        monkeypatch.setattr("meta_depot.services.publish_service.create_depot", created.append)
        settings = settings.model_copy(update={"meta_api_api_key": None, "meta_api_token": None})

        with pytest.raises(ConfigurationError):
            await publish_listings(settings, full_resync=True)

        assert created == []
