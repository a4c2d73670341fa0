"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field
from uuid import uuid4

import pytest

from listing_creatives.adapters.supabase_creative_repository import (
    SupabaseCreativeRepository,
)
from listing_creatives.adapters.supabase_crm_repository import (
    SupabaseCrmPropertyRepository,
)
from listing_creatives.adapters.supabase_storage import SupabaseAssetStorage
from listing_creatives.domain.crm import CrmPropertyStub, CrmPropertyType
from listing_creatives.domain.exports import CreativeRecord
from listing_creatives.domain.slides import Format


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": [], "insert": [], "update": []}
    )
    last_payload: object | None = None
    last_filters: list[tuple[str, object]] = field(default_factory=list)

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "insert"
        self.last_payload = payload
        return self

    def update(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "update"
        self.last_payload = payload
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def execute(self) -> FakeResponse:
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeBucket:
    name: str
    uploads: dict[str, tuple[bytes, dict[str, str]]] = field(default_factory=dict)
    public_base: str = "https://example.supabase.co/storage/v1/object/public"

    def upload(self, path: str, file: bytes, file_options: dict[str, str]) -> None:
        self.uploads[path] = (file, file_options)

    def get_public_url(self, path: str) -> str:
        return f"{self.public_base}/{self.name}/{path}"


@dataclass
class FakeStorage:
    buckets: dict[str, FakeBucket] = field(default_factory=dict)

    def from_(self, name: str) -> FakeBucket:
        if name not in self.buckets:
            self.buckets[name] = FakeBucket(name=name)
        return self.buckets[name]


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)
    storage: FakeStorage = field(default_factory=FakeStorage)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def _stub(**overrides) -> CrmPropertyStub:  # type: ignore[no-untyped-def]
    values = {
        "code": "REV-ABCDEF12",
        "property_type": CrmPropertyType.APARTMENT,
        "city": "Curitiba",
        "state": "PR",
        "sale_value": 500000.0,
        "cover_image_url": "https://cdn.test/covers/REV-ABCDEF12.jpg",
        "source_creative_id": uuid4(),
        "created_by_user_id": uuid4(),
        "neighborhood": "Batel",
    }
    values.update(overrides)
    return CrmPropertyStub(**values)


def test_supabase_storage_uploads_and_returns_public_url() -> None:
    client = FakeSupabaseClient()
    storage = SupabaseAssetStorage(client)

    url = storage.upload("creative-exports", "user/1-1.png", b"png", "image/png")

    bucket = client.storage.buckets["creative-exports"]
    assert bucket.uploads["user/1-1.png"] == (b"png", {"content-type": "image/png"})
    assert url.endswith("/creative-exports/user/1-1.png")


def test_supabase_creative_repository_inserts_row() -> None:
    client = FakeSupabaseClient()
    table = client.table("creatives")
    creative_id = str(uuid4())
    table.queue("insert", [{"id": creative_id}])
    user_id = uuid4()
    record = CreativeRecord(
        user_id=user_id,
        title="Casa Verde",
        property_data={"name": "Casa Verde"},
        photos=["https://img.test/a.jpg"],
        thumbnail_url="https://cdn.test/1.png",
        exported_images=["https://cdn.test/1.png", "https://cdn.test/2.png"],
        format=Format.STORY,
    )

    result = SupabaseCreativeRepository(client).create_creative(record)

    assert str(result) == creative_id
    assert table.last_payload["user_id"] == str(user_id)
    assert table.last_payload["format"] == "story"
    assert table.last_payload["exported_images"] == record.exported_images


def test_supabase_creative_repository_raises_on_empty_response() -> None:
    client = FakeSupabaseClient()
    record = CreativeRecord(
        user_id=uuid4(),
        title="x",
        property_data={},
        photos=[],
        thumbnail_url=None,
        exported_images=[],
        format=Format.FEED,
    )

    with pytest.raises(RuntimeError):
        SupabaseCreativeRepository(client).create_creative(record)


def test_supabase_crm_repository_find_by_code() -> None:
    client = FakeSupabaseClient()
    table = client.table("crm_properties")
    property_id = str(uuid4())
    table.queue("select", [{"id": property_id}])
    repository = SupabaseCrmPropertyRepository(client)

    found = repository.find_by_code("REV-ABCDEF12")
    missing = repository.find_by_code("REV-00000000")

    assert str(found) == property_id
    assert missing is None
    assert ("code", "REV-ABCDEF12") in table.last_filters


def test_supabase_crm_repository_creates_property_with_commission() -> None:
    client = FakeSupabaseClient()
    table = client.table("crm_properties")
    table.queue("insert", [{"id": str(uuid4())}])
    stub = _stub()

    SupabaseCrmPropertyRepository(client).create_property(stub)

    payload = table.last_payload
    assert payload["code"] == "REV-ABCDEF12"
    assert payload["property_type"] == "apartamento"
    assert payload["current_stage"] == "em_anuncio"
    assert payload["commission_percentage"] == 5.0
    assert payload["commission_value"] == 25000.0
    assert payload["has_creatives"] is True
    assert payload["source_creative_id"] == str(stub.source_creative_id)


def test_supabase_crm_repository_refreshes_property() -> None:
    client = FakeSupabaseClient()
    table = client.table("crm_properties")
    property_id = uuid4()
    creative_id = uuid4()

    SupabaseCrmPropertyRepository(client).refresh_property(
        property_id, "https://cdn.test/new.jpg", creative_id
    )

    assert table.last_payload == {
        "cover_image_url": "https://cdn.test/new.jpg",
        "source_creative_id": str(creative_id),
        "has_creatives": True,
    }
    assert ("id", str(property_id)) in table.last_filters
