"""API tests for listing and creating memories."""

from datetime import date

from fastapi.testclient import TestClient

from app.config import UPLOADS_PREFIX
from app.core.errors import DataStoreError
from app.main import create_app


def post_memory(client, form, content=None, filename="sunset.jpg", content_type="image/jpeg"):
    files = {"file": (filename, content, content_type)} if content is not None else None
    return client.post("/memories", data=form, files=files)


def uploaded_files(settings):
    root = settings.local_storage_path
    return list(root.iterdir()) if root.exists() else []


def test_list_memories_empty(client):
    response = client.get("/memories")
    assert response.status_code == 200
    assert response.json() == []


def test_create_sunset_without_prompt(client, sunset_form, jpeg_bytes):
    response = post_memory(client, sunset_form, jpeg_bytes)
    assert response.status_code == 201
    body = response.json()
    assert body["memory_name"] == "Sunset"
    assert body["memory_date"] == "2024-05-01"
    assert body["place"] == "Golden Gate Bridge"
    assert body["latitude"] == 37.8199
    assert body["longitude"] == -122.4783
    assert body["prompt_id"] is None
    assert body["prompt_text"] is None
    assert body["category_color"] is None
    assert body["user_id"] == "anonymous"
    assert body["file_url"].startswith(UPLOADS_PREFIX + "/")
    assert body["file_url"].endswith(".jpg")


def test_file_url_serves_exact_bytes(client, sunset_form, jpeg_bytes):
    body = post_memory(client, sunset_form, jpeg_bytes).json()
    response = client.get(body["file_url"])
    assert response.status_code == 200
    assert response.content == jpeg_bytes
    assert response.headers["content-type"] == "image/jpeg"


def test_missing_file_is_rejected_before_any_write(client, settings, seeded_store, sunset_form):
    response = post_memory(client, sunset_form)
    assert response.status_code == 400
    assert response.json() == {"error": "Missing file"}
    assert seeded_store.memories == {}
    assert uploaded_files(settings) == []


def test_missing_required_field_is_rejected(client, settings, seeded_store, sunset_form, jpeg_bytes):
    for field in ("memory_name", "memory_date", "place"):
        form = {k: v for k, v in sunset_form.items() if k != field}
        response = post_memory(client, form, jpeg_bytes)
        assert response.status_code == 400
        assert field in response.json()["error"]
    blank = dict(sunset_form, memory_name="   ")
    assert post_memory(client, blank, jpeg_bytes).status_code == 400
    assert seeded_store.memories == {}
    assert uploaded_files(settings) == []


def test_blank_coordinates_become_null(client, sunset_form, jpeg_bytes):
    form = dict(sunset_form, latitude="", longitude="null")
    response = post_memory(client, form, jpeg_bytes)
    assert response.status_code == 201
    assert response.json()["latitude"] is None
    assert response.json()["longitude"] is None


def test_out_of_range_coordinates_are_rejected(client, sunset_form, jpeg_bytes):
    response = post_memory(client, dict(sunset_form, latitude="91"), jpeg_bytes)
    assert response.status_code == 400
    assert "latitude" in response.json()["error"]
    response = post_memory(client, dict(sunset_form, longitude="-180.5"), jpeg_bytes)
    assert response.status_code == 400


def test_bad_date_and_visibility_are_rejected(client, sunset_form, jpeg_bytes):
    assert post_memory(client, dict(sunset_form, memory_date="yesterday"), jpeg_bytes).status_code == 400
    assert post_memory(client, dict(sunset_form, visibility="friends"), jpeg_bytes).status_code == 400


def test_visibility_defaults_to_private(client, sunset_form, jpeg_bytes):
    form = {k: v for k, v in sunset_form.items() if k != "visibility"}
    assert post_memory(client, form, jpeg_bytes).json()["visibility"] == "private"


def test_unsupported_media_is_rejected(client, settings, sunset_form):
    response = post_memory(client, sunset_form, b"%PDF-1.4", filename="notes.pdf", content_type="application/pdf")
    assert response.status_code == 400
    assert "Unsupported file type" in response.json()["error"]
    assert uploaded_files(settings) == []


def test_create_with_prompt_joins_text_and_color(client, sunset_form, jpeg_bytes):
    body = post_memory(client, dict(sunset_form, prompt_id="1"), jpeg_bytes).json()
    assert body["prompt_id"] == 1
    assert body["prompt_text"] == "Where did you feel most at peace?"
    assert body["category_color"] == "#2ECC71"


def test_unknown_prompt_is_rejected(client, settings, sunset_form, jpeg_bytes):
    response = post_memory(client, dict(sunset_form, prompt_id="99"), jpeg_bytes)
    assert response.status_code == 400
    assert uploaded_files(settings) == []


def test_list_is_sorted_by_memory_date_desc(client, sunset_form, jpeg_bytes):
    for day in ("2023-07-04", "2024-05-01", "2021-12-25", "2024-01-15"):
        post_memory(client, dict(sunset_form, memory_date=day), jpeg_bytes)
    dates = [date.fromisoformat(m["memory_date"]) for m in client.get("/memories").json()]
    assert len(dates) == 4
    assert all(a >= b for a, b in zip(dates, dates[1:]))


def test_created_record_round_trips_through_listing(client, sunset_form, jpeg_bytes):
    created = post_memory(client, dict(sunset_form, prompt_id="2", description="Fog rolling in"), jpeg_bytes).json()
    listed = client.get("/memories").json()
    assert created in listed


def test_listing_is_idempotent(client, sunset_form, jpeg_bytes):
    post_memory(client, sunset_form, jpeg_bytes)
    assert client.get("/memories").json() == client.get("/memories").json()


def test_resubmission_creates_a_duplicate(client, sunset_form, jpeg_bytes):
    first = post_memory(client, sunset_form, jpeg_bytes).json()
    second = post_memory(client, sunset_form, jpeg_bytes).json()
    assert first["memory_id"] != second["memory_id"]
    assert first["file_url"] != second["file_url"]
    assert len(client.get("/memories").json()) == 2


def test_bearer_token_sets_user_id(client, sunset_form, jpeg_bytes):
    from jose import jwt

    token = jwt.encode({"sub": "user-42"}, "test-secret", algorithm="HS256")
    response = client.post(
        "/memories",
        data=sunset_form,
        files={"file": ("sunset.jpg", jpeg_bytes, "image/jpeg")},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert response.json()["user_id"] == "user-42"


def test_insert_failure_returns_generic_error(client, seeded_store, sunset_form, jpeg_bytes):
    seeded_store.fail_inserts = True
    response = post_memory(client, sunset_form, jpeg_bytes)
    assert response.status_code == 500
    assert response.json() == {"error": "DB error inserting memory"}


def test_upload_path_traversal_is_refused(client):
    assert client.get("/uploads/..%2F..%2Fetc%2Fpasswd").status_code == 404
    assert client.get("/uploads/missing.jpg").status_code == 404


def test_store_failure_on_listing_returns_generic_error(client, seeded_store):
    async def broken():
        raise DataStoreError("DB error fetching memories")

    seeded_store.list_memories = broken
    response = client.get("/memories")
    assert response.status_code == 500
    assert response.json() == {"error": "DB error fetching memories"}


def test_unexpected_error_is_generic_500_with_cors(settings, seeded_store, storage):
    async def broken():
        raise RuntimeError("connection pool exploded")

    seeded_store.list_memories = broken
    app = create_app(settings=settings, store=seeded_store, storage=storage)
    with TestClient(app, raise_server_exceptions=False) as test_client:
        response = test_client.get("/memories", headers={"Origin": "http://localhost:3000"})
    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}
    assert response.headers["access-control-allow-origin"] == "*"
