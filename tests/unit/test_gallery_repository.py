import asyncio
from datetime import datetime, timezone

import pytest

from delights_cms.domain.models import Album, Country, GalleryImage, LocalizedText
from delights_cms.exceptions import NotFoundError, StorageWriteError
from delights_cms.media.blob_lifecycle import BlobLifecycleManager, BlobUpload
from delights_cms.repositories.gallery import GalleryRepository
from tests.mocks.stores import InMemoryBlobStore, InMemoryDocumentStore


def _album(name: str, *locators: str) -> Album:
    return Album(
        name=LocalizedText(en=name),
        images=[GalleryImage(image_url=locator) for locator in locators],
    )


@pytest.mark.unit
def test_saved_country_round_trips(services) -> None:
    country = Country(
        name=LocalizedText(en="Oman", ar="عمان"),
        albums=[
            _album("Muscat", "https://store.test/o/gallery%2F1.png?alt=media"),
            _album("Nizwa", "https://store.test/o/gallery%2F2.png?alt=media", "https://store.test/o/gallery%2F3.png?alt=media"),
        ],
    )

    async def scenario() -> Country:
        country_id = await services.gallery.save_country(country)
        return await services.gallery.get_country(country_id)

    fetched = asyncio.run(scenario())

    assert fetched.name == country.name
    assert [album.id for album in fetched.albums] == [album.id for album in country.albums]
    assert all(album.id for album in fetched.albums)
    assert [album.blob_locators() for album in fetched.albums] == [
        album.blob_locators() for album in country.albums
    ]
    assert fetched.created_at is not None


@pytest.mark.unit
def test_save_country_with_id_replaces_albums(services, document_store) -> None:
    document_store.seed("gallery", "c1", {"name": {"en": "UAE"}, "albums": [{"id": "a", "name": {"en": "Old"}, "images": []}], "createdAt": "2023-05-01T00:00:00+00:00"})

    country = Country(id="c1", name=LocalizedText(en="UAE"), albums=[], created_at=None)
    asyncio.run(services.gallery.save_country(country))

    stored = document_store.raw("gallery", "c1")
    assert stored["albums"] == []
    assert stored["updatedAt"]


@pytest.mark.unit
def test_delete_country_attempts_every_image_blob(services, document_store, blob_store) -> None:
    for path in ("gallery/1.png", "gallery/2.png", "gallery/3.png"):
        blob_store.objects[path] = b"x"
    country = Country(
        name=LocalizedText(en="Qatar"),
        albums=[
            _album("Doha", blob_store.locator("gallery/1.png"), blob_store.locator("gallery/2.png")),
            _album("Empty"),
            _album("Coast", blob_store.locator("gallery/3.png"), blob_store.locator("gallery/missing.png")),
        ],
    )

    async def scenario() -> tuple[str, int]:
        country_id = await services.gallery.save_country(country)
        return country_id, await services.gallery.delete_country(country_id)

    country_id, attempted = asyncio.run(scenario())

    assert attempted == 4
    assert len(blob_store.deletes) == 4
    assert blob_store.objects == {}
    assert asyncio.run(services.gallery.get_country(country_id)) is None
    assert asyncio.run(services.gallery.list_countries()) == []


@pytest.mark.unit
def test_delete_missing_country_is_noop(services, blob_store) -> None:
    assert asyncio.run(services.gallery.delete_country("nope")) == 0
    assert blob_store.deletes == []


@pytest.mark.unit
def test_delete_image_shifts_following_images(services, document_store) -> None:
    locators = [f"https://cdn.test/{i}.png" for i in range(5)]
    document_store.seed(
        "gallery",
        "c1",
        {
            "name": {"en": "UAE"},
            "albums": [{"id": "a1", "name": {"en": "Dubai"}, "images": [{"imageUrl": url} for url in locators]}],
        },
    )

    removed = asyncio.run(services.gallery.delete_image_from_album("c1", "a1", 2))

    images = document_store.raw("gallery", "c1")["albums"][0]["images"]
    assert removed.image_url == locators[2]
    assert [image["imageUrl"] for image in images] == locators[:2] + locators[3:]


@pytest.mark.unit
@pytest.mark.parametrize("index", [-1, 1, 5])
def test_delete_image_out_of_range_raises_not_found(services, document_store, blob_store, index) -> None:
    document_store.seed(
        "gallery",
        "c1",
        {"name": {"en": "UAE"}, "albums": [{"id": "a1", "name": {}, "images": [{"imageUrl": "u"}]}]},
    )

    with pytest.raises(NotFoundError):
        asyncio.run(services.gallery.delete_image_from_album("c1", "a1", index))
    assert blob_store.deletes == []


@pytest.mark.unit
def test_album_ids_are_unique_within_country(services, document_store) -> None:
    document_store.seed("gallery", "c1", {"name": {"en": "KSA"}, "albums": []})

    async def scenario() -> list[str]:
        for i in range(25):
            await services.gallery.save_album("c1", _album(f"album {i}"))
        country = await services.gallery.get_country("c1")
        return [album.id for album in country.albums]

    ids = asyncio.run(scenario())

    assert len(ids) == 25
    assert len(set(ids)) == 25


@pytest.mark.unit
def test_save_country_rejects_duplicate_album_ids(services, document_store) -> None:
    first = _album("Muscat")
    first.id = "same"
    second = _album("Nizwa")
    second.id = "same"
    country = Country(id="c1", name=LocalizedText(en="Oman"), albums=[first, second, _album("Sur")])

    with pytest.raises(ValueError, match="same"):
        asyncio.run(services.gallery.save_country(country))

    assert document_store.writes == []
    assert document_store.raw("gallery", "c1") is None


@pytest.mark.unit
def test_save_country_stamps_albums_and_images_missing_timestamps(services, document_store) -> None:
    kept = Album(
        id="a1",
        name=LocalizedText(en="Muscat"),
        images=[GalleryImage(image_url="https://cdn.test/old.png", created_at=datetime(2023, 2, 1, tzinfo=timezone.utc))],
        created_at=datetime(2023, 1, 1, tzinfo=timezone.utc),
        updated_at=datetime(2023, 3, 1, tzinfo=timezone.utc),
    )
    fresh = Album(id="a2", name=LocalizedText(en="Nizwa"), images=[GalleryImage(image_url="https://cdn.test/new.png")])
    country = Country(id="c1", name=LocalizedText(en="Oman"), albums=[kept, fresh])

    asyncio.run(services.gallery.save_country(country))

    stored = document_store.raw("gallery", "c1")["albums"]
    assert stored[0]["createdAt"] == "2023-01-01T00:00:00+00:00"
    assert stored[0]["updatedAt"] == "2023-03-01T00:00:00+00:00"
    assert stored[0]["images"][0]["createdAt"] == "2023-02-01T00:00:00+00:00"
    assert stored[1]["createdAt"] and stored[1]["updatedAt"]
    assert stored[1]["images"][0]["createdAt"]


@pytest.mark.unit
def test_save_album_edit_keeps_created_at(services, document_store) -> None:
    document_store.seed(
        "gallery",
        "c1",
        {
            "name": {"en": "KSA"},
            "albums": [{"id": "a1", "name": {"en": "Riyadh"}, "images": [], "createdAt": "2023-01-01T00:00:00+00:00"}],
        },
    )
    edited = _album("Riyadh 2024", "https://cdn.test/1.png")
    edited.id = "a1"

    saved = asyncio.run(services.gallery.save_album("c1", edited))

    stored = document_store.raw("gallery", "c1")["albums"]
    assert len(stored) == 1
    assert stored[0]["name"]["en"] == "Riyadh 2024"
    assert stored[0]["createdAt"] == "2023-01-01T00:00:00+00:00"
    assert saved.updated_at is not None


@pytest.mark.unit
def test_mutations_on_unknown_country_or_album_raise_not_found(services, document_store) -> None:
    document_store.seed("gallery", "c1", {"name": {"en": "KSA"}, "albums": []})

    with pytest.raises(NotFoundError):
        asyncio.run(services.gallery.save_album("missing", _album("x")))
    unknown = _album("x")
    unknown.id = "ghost"
    with pytest.raises(NotFoundError):
        asyncio.run(services.gallery.save_album("c1", unknown))
    with pytest.raises(NotFoundError):
        asyncio.run(services.gallery.add_image_to_album("c1", "ghost", "https://cdn.test/a.png"))
    with pytest.raises(NotFoundError):
        asyncio.run(services.gallery.delete_album("c1", "ghost"))


@pytest.mark.unit
def test_rename_album_keeps_images(services, document_store) -> None:
    document_store.seed(
        "gallery",
        "c1",
        {"name": {"en": "KSA"}, "albums": [{"id": "a1", "name": {"en": "Old"}, "images": [{"imageUrl": "u1"}]}]},
    )

    asyncio.run(services.gallery.rename_album("c1", "a1", LocalizedText(en="New", ar="جديد")))

    album = document_store.raw("gallery", "c1")["albums"][0]
    assert album["name"] == {"en": "New", "ar": "جديد"}
    assert [image["imageUrl"] for image in album["images"]] == ["u1"]


@pytest.mark.unit
def test_delete_album_removes_album_and_its_blobs(services, document_store, blob_store) -> None:
    blob_store.objects["gallery/9.png"] = b"x"
    document_store.seed(
        "gallery",
        "c1",
        {
            "name": {"en": "KSA"},
            "albums": [
                {"id": "a1", "name": {}, "images": [{"imageUrl": blob_store.locator("gallery/9.png")}]},
                {"id": "a2", "name": {}, "images": []},
            ],
        },
    )

    attempted = asyncio.run(services.gallery.delete_album("c1", "a1"))

    assert attempted == 1
    assert [album["id"] for album in document_store.raw("gallery", "c1")["albums"]] == ["a2"]
    assert blob_store.objects == {}


@pytest.mark.unit
def test_upload_images_appends_all_locators_with_one_write(services, document_store, blob_store) -> None:
    document_store.seed("gallery", "c1", {"name": {}, "albums": [{"id": "a1", "name": {}, "images": []}]})
    uploads = [BlobUpload(data=b"1", filename="one.png"), BlobUpload(data=b"2", filename="two.png")]

    images = asyncio.run(services.gallery.upload_images_to_album("c1", "a1", uploads))

    stored = document_store.raw("gallery", "c1")["albums"][0]["images"]
    assert [image["imageUrl"] for image in stored] == [image.image_url for image in images]
    assert len(blob_store.objects) == 2
    assert document_store.writes == [("gallery", "c1")]


@pytest.mark.unit
def test_failed_upload_leaves_album_untouched(services, document_store, blob_store) -> None:
    document_store.seed("gallery", "c1", {"name": {}, "albums": [{"id": "a1", "name": {}, "images": []}]})
    blob_store.fail_puts.add("bad")
    uploads = [BlobUpload(data=b"1", filename="good.png"), BlobUpload(data=b"2", filename="bad.png")]

    with pytest.raises(StorageWriteError):
        asyncio.run(services.gallery.upload_images_to_album("c1", "a1", uploads))

    assert document_store.raw("gallery", "c1")["albums"][0]["images"] == []
    assert document_store.writes == []


@pytest.mark.unit
def test_list_countries_degrades_on_read_failure(services, document_store) -> None:
    document_store.fail_reads = True

    assert asyncio.run(services.gallery.list_countries()) == []


@pytest.mark.unit
def test_concurrent_album_edits_lose_one_write(services, document_store) -> None:
    document_store.seed(
        "gallery",
        "c1",
        {
            "name": {"en": "UAE"},
            "albums": [
                {"id": "A", "name": {"en": "A"}, "images": []},
                {"id": "B", "name": {"en": "B"}, "images": []},
            ],
        },
    )
    edit_a = _album("A edited")
    edit_a.id = "A"
    edit_b = _album("B edited")
    edit_b.id = "B"

    async def scenario() -> None:
        await asyncio.gather(
            services.gallery.save_album("c1", edit_a),
            services.gallery.save_album("c1", edit_b),
        )

    asyncio.run(scenario())

    names = [album["name"]["en"] for album in document_store.raw("gallery", "c1")["albums"]]
    persisted = {"A edited" in names, "B edited" in names}
    assert names != ["A edited", "B edited"]
    assert persisted == {True, False}


@pytest.mark.unit
def test_album_image_lifecycle_round_trip() -> None:
    document_store = InMemoryDocumentStore()
    blob_store = InMemoryBlobStore(base_url="https://store")
    gallery = GalleryRepository(document_store, BlobLifecycleManager(store=blob_store))
    document_store.seed("gallery", "c1", {"name": {"en": "UAE"}, "albums": []})
    locator = "https://store/o/gallery%2F123.png?alt=media"

    async def scenario() -> None:
        album = await gallery.save_album("c1", Album(name=LocalizedText(en="Dubai Trip")))
        country = await gallery.get_country("c1")
        assert len(country.albums) == 1
        assert country.albums[0].id == album.id
        assert album.id
        assert country.albums[0].images == []

        await gallery.add_image_to_album("c1", album.id, locator)
        country = await gallery.get_country("c1")
        assert [image.image_url for image in country.albums[0].images] == [locator]

        await gallery.delete_image_from_album("c1", album.id, 0)
        country = await gallery.get_country("c1")
        assert country.albums[0].images == []

    asyncio.run(scenario())

    assert blob_store.deletes == ["gallery/123.png"]
