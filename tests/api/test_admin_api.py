from __future__ import annotations

from fastapi.testclient import TestClient

from delights_cms.main import create_app


def build_client(services) -> TestClient:
    return TestClient(create_app(services=services))


def test_gallery_country_album_image_flow(services, blob_store) -> None:
    with build_client(services) as client:
        created = client.post("/api/gallery/countries", json={"name": {"en": "UAE", "ar": "الإمارات"}})
        assert created.status_code == 201
        country_id = created.json()["id"]

        album = client.post(
            f"/api/gallery/countries/{country_id}/albums",
            json={"name": {"en": "Dubai Trip"}},
        )
        assert album.status_code == 201
        album_id = album.json()["id"]
        assert album.json()["images"] == []

        uploaded = client.post(
            f"/api/gallery/countries/{country_id}/albums/{album_id}/images",
            files=[
                ("files", ("a.png", b"aaa", "image/png")),
                ("files", ("b.png", b"bbb", "image/png")),
            ],
        )
        assert uploaded.status_code == 201
        assert len(uploaded.json()) == 2
        assert len(blob_store.objects) == 2

        removed = client.delete(f"/api/gallery/countries/{country_id}/albums/{album_id}/images/0")
        assert removed.status_code == 200
        assert removed.json()["imageUrl"] == uploaded.json()[0]["imageUrl"]

        country = client.get(f"/api/gallery/countries/{country_id}").json()
        assert [image["imageUrl"] for image in country["albums"][0]["images"]] == [
            uploaded.json()[1]["imageUrl"]
        ]
        assert len(blob_store.objects) == 1

        deleted = client.delete(f"/api/gallery/countries/{country_id}")
        assert deleted.json() == {"blob_deletes": 1}
        assert client.get("/api/gallery").json() == []


def test_unknown_album_returns_not_found(services, document_store) -> None:
    document_store.seed("gallery", "c1", {"name": {"en": "UAE"}, "albums": []})

    with build_client(services) as client:
        response = client.post(
            "/api/gallery/countries/c1/albums/ghost/image-urls",
            json={"imageUrl": "https://cdn.test/a.png"},
        )

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "not_found"


def test_image_index_out_of_range_returns_not_found(services, document_store) -> None:
    document_store.seed("gallery", "c1", {"name": {}, "albums": [{"id": "a1", "name": {}, "images": []}]})

    with build_client(services) as client:
        response = client.delete("/api/gallery/countries/c1/albums/a1/images/3")

    assert response.status_code == 404


def test_replace_country_keeps_created_at(services, document_store) -> None:
    document_store.seed(
        "gallery",
        "c1",
        {
            "name": {"en": "UAE"},
            "albums": [
                {
                    "id": "a1",
                    "name": {"en": "Dubai"},
                    "images": [{"imageUrl": "https://cdn.test/1.png", "createdAt": "2023-06-01T00:00:00+00:00"}],
                    "createdAt": "2023-05-02T00:00:00+00:00",
                    "updatedAt": "2023-06-01T00:00:00+00:00",
                },
                {
                    "id": "a2",
                    "name": {"en": "Sharjah"},
                    "images": [],
                    "createdAt": "2023-05-03T00:00:00+00:00",
                    "updatedAt": "2023-05-03T00:00:00+00:00",
                },
            ],
            "createdAt": "2023-05-01T00:00:00+00:00",
        },
    )

    with build_client(services) as client:
        response = client.put(
            "/api/gallery/countries/c1",
            json={
                "name": {"en": "United Arab Emirates"},
                "albums": [
                    {"id": "a1", "name": {"en": "Dubai"}, "images": [{"imageUrl": "https://cdn.test/1.png"}]},
                    {
                        "id": "a2",
                        "name": {"en": "Sharjah"},
                        "images": [{"imageUrl": "https://cdn.test/2.png"}],
                    },
                    {"name": {"en": "Abu Dhabi"}},
                ],
            },
        )

    stored = document_store.raw("gallery", "c1")
    dubai, sharjah, abu_dhabi = stored["albums"]
    assert response.status_code == 200
    assert stored["createdAt"] == "2023-05-01T00:00:00+00:00"
    assert dubai["createdAt"] == "2023-05-02T00:00:00+00:00"
    assert dubai["updatedAt"] == "2023-06-01T00:00:00+00:00"
    assert dubai["images"][0]["createdAt"] == "2023-06-01T00:00:00+00:00"
    assert sharjah["createdAt"] == "2023-05-03T00:00:00+00:00"
    assert sharjah["updatedAt"] > "2023-05-03T00:00:00+00:00"
    assert sharjah["images"][0]["createdAt"]
    assert abu_dhabi["id"]
    assert abu_dhabi["createdAt"] and abu_dhabi["updatedAt"]


def test_replace_country_with_duplicate_album_ids_is_rejected(services, document_store) -> None:
    document_store.seed("gallery", "c1", {"name": {"en": "UAE"}, "albums": []})

    with build_client(services) as client:
        response = client.put(
            "/api/gallery/countries/c1",
            json={
                "name": {"en": "UAE"},
                "albums": [{"id": "x", "name": {"en": "One"}}, {"id": "x", "name": {"en": "Two"}}],
            },
        )

    assert response.status_code == 422
    assert document_store.raw("gallery", "c1")["albums"] == []


def test_collection_crud(services, document_store) -> None:
    with build_client(services) as client:
        created = client.post(
            "/api/collections/heroSlides",
            json={"image": "https://cdn.test/hero.png", "title": {"en": "Harvest"}},
        )
        slide_id = created.json()["id"]
        listed = client.get("/api/collections/heroSlides").json()
        assert [slide["order"] for slide in listed] == [1]

        replaced = client.put(
            f"/api/collections/heroSlides/{slide_id}",
            json={"image": "", "title": {"en": "Season"}, "order": 4},
        )
        assert replaced.status_code == 200
        assert client.get(f"/api/collections/heroSlides/{slide_id}").json()["order"] == 4

        assert client.delete(f"/api/collections/heroSlides/{slide_id}").status_code == 204
        assert client.get(f"/api/collections/heroSlides/{slide_id}").status_code == 404


def test_unknown_collection_returns_not_found(services) -> None:
    with build_client(services) as client:
        response = client.get("/api/collections/recipes")

    assert response.status_code == 404


def test_collection_upload_uses_collection_folder(services, blob_store) -> None:
    with build_client(services) as client:
        response = client.post(
            "/api/collections/products/uploads",
            files={"file": ("box.png", b"png", "image/png")},
        )
        rejected = client.post(
            "/api/collections/orders/uploads",
            files={"file": ("box.png", b"png", "image/png")},
        )

    assert response.status_code == 201
    assert "/o/products%2F" in response.json()["url"]
    assert rejected.status_code == 422


def test_upload_failure_maps_to_bad_gateway(services, blob_store) -> None:
    blob_store.fail_puts.add("news")

    with build_client(services) as client:
        response = client.post(
            "/api/collections/news/uploads",
            files={"file": ("cover.png", b"png", "image/png")},
        )

    assert response.status_code == 502
    assert response.json()["error"]["code"] == "storage_write_failed"


def test_order_status_and_message_flags(services, document_store) -> None:
    document_store.seed("orders", "o1", {"contactName": "Huda", "status": "new"})
    document_store.seed("contactMessages", "m1", {"name": "Omar", "seen": False})

    with build_client(services) as client:
        status_response = client.patch("/api/orders/o1/status", json={"status": "completed"})
        invalid = client.patch("/api/orders/o1/status", json={"status": "lost"})
        seen = client.post("/api/messages/m1/seen")
        resolved = client.put("/api/messages/m1/resolved", json={"resolved": True})

    assert status_response.status_code == 204
    assert invalid.status_code == 422
    assert seen.status_code == 204
    assert resolved.status_code == 204
    assert document_store.raw("orders", "o1")["status"] == "completed"
    assert document_store.raw("contactMessages", "m1")["seen"] is True
    assert document_store.raw("contactMessages", "m1")["resolved"] is True


def test_category_merge_by_slug(services, document_store) -> None:
    with build_client(services) as client:
        response = client.post(
            "/api/categories/by-slug",
            json={"slug": "ajwa-dates", "name": {"en": "Ajwa"}},
        )
        missing_slug = client.post("/api/categories/by-slug", json={"name": {"en": "x"}})

    assert response.json() == {"id": "ajwa-dates"}
    assert document_store.raw("productCategories", "ajwa-dates")["order"] == 1
    assert missing_slug.status_code == 422


def test_website_settings_round_trip(services) -> None:
    with build_client(services) as client:
        defaults = client.get("/api/settings/website").json()
        defaults["socialLinks"]["facebook"] = "https://facebook.test/delights"
        client.put("/api/settings/website", json=defaults)
        reloaded = client.get("/api/settings/website").json()

    assert reloaded["socialLinks"]["facebook"] == "https://facebook.test/delights"
    assert reloaded["phones"][0]["id"] == defaults["phones"][0]["id"]


def test_sections_and_video_upload(services, blob_store) -> None:
    with build_client(services) as client:
        video = client.post(
            "/api/sections/uploads",
            files={"file": ("intro.mp4", b"mp4", "video/mp4")},
        ).json()["url"]
        saved = client.put("/api/sections/video", json={"videoUrl": video})
        fetched = client.get("/api/sections/video")
        unknown = client.get("/api/sections/footer")
        deleted = client.delete("/api/sections/video")

    assert saved.status_code == 200
    assert fetched.json()["videoUrl"] == video
    assert unknown.status_code == 422
    assert deleted.status_code == 204
    assert blob_store.objects == {}


def test_seed_endpoint_is_idempotent(services) -> None:
    with build_client(services) as client:
        first = client.post("/api/seed").json()
        second = client.post("/api/seed").json()

    assert sum(report["inserted"] for report in first) == 20
    assert sum(report["inserted"] for report in second) == 0


def test_read_failure_maps_to_service_unavailable(services, document_store) -> None:
    document_store.fail_reads = True

    with build_client(services) as client:
        response = client.get("/api/gallery/countries/c1")

    assert response.status_code == 503
    assert response.json()["error"]["code"] == "persistence_failed"
