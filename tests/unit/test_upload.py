import base64
import io

from fastapi.testclient import TestClient
from starlette.datastructures import UploadFile
from PIL import Image

from pvinspect.main import create_app
from pvinspect.services.intake_validator import IntakeValidator

def test_upload_flow(client, png_bytes):
    """
    Test the full lifecycle:
    1. Upload image
    2. List and fetch content
    3. Delete it
    4. Clear session
    """
    client.cookies.set("session_id", "test-upload-session-001")

    # 1. Upload
    resp = client.post("/api/upload", files={"files": ("roof.png", png_bytes, "image/png")})
    assert resp.status_code == 200
    data = resp.json()
    assert data["filename"] == "roof.png"
    assert data["metadata"] == {"size": len(png_bytes), "width": 64, "height": 32, "format": "png"}

    thumbnail = Image.open(io.BytesIO(base64.b64decode(data["thumbnail_base64"])))
    assert thumbnail.format == "JPEG"
    assert thumbnail.size == (64, 32) # never enlarged
    image_id = data["image_id"]

    # 2. List / content
    listing = client.get("/api/upload").json()
    assert [item["image_id"] for item in listing] == [image_id]

    content = client.get(f"/api/upload/{image_id}/content")
    assert content.status_code == 200
    assert content.content == png_bytes
    assert content.headers["content-type"] == "image/png"

    # 3. Delete
    assert client.delete(f"/api/upload/{image_id}").status_code == 200
    assert client.get(f"/api/upload/{image_id}/content").status_code == 404
    assert client.delete(f"/api/upload/{image_id}").status_code == 404

    # 4. Clear
    client.post("/api/upload", files={"files": ("again.png", png_bytes, "image/png")})
    assert client.delete("/api/upload").status_code == 200
    assert client.get("/api/upload").json() == []

def test_large_thumbnail_is_shrunk(client):
    buffered = io.BytesIO()
    Image.new('RGB', (1200, 600), color='gray').save(buffered, format="JPEG")
    client.cookies.set("session_id", "test-thumbnail")

    data = client.post("/api/upload", files={"files": ("wide.jpg", buffered.getvalue(), "image/jpeg")}).json()
    thumbnail = Image.open(io.BytesIO(base64.b64decode(data["thumbnail_base64"])))
    assert thumbnail.size == (300, 150)

def test_upload_requires_session(png_bytes):
    client = TestClient(create_app())
    response = client.post("/api/upload", files={"files": ("roof.png", png_bytes, "image/png")})
    assert response.status_code == 400

def test_unsupported_type_rejected(client):
    client.cookies.set("session_id", "test-bad-type")
    response = client.post("/api/upload", files={"files": ("anim.gif", b"GIF89a", "image/gif")})
    assert response.status_code == 415
    detail = response.json()["detail"]
    assert detail["type"] == "UNSUPPORTED_FORMAT"
    assert detail["retryable"] is False

def test_file_too_large_rejected(png_bytes):
    client = TestClient(create_app(validator=IntakeValidator(max_size=16)))
    client.cookies.set("session_id", "test-too-large")
    response = client.post("/api/upload", files={"files": ("roof.png", png_bytes, "image/png")})
    assert response.status_code == 413
    assert response.json()["detail"]["type"] == "FILE_TOO_LARGE"

def test_bytes_that_are_not_an_image(client):
    client.cookies.set("session_id", "test-not-image")
    response = client.post("/api/upload", files={"files": ("fake.png", b"not really a png", "image/png")})
    assert response.status_code == 415
    assert response.json()["detail"]["type"] == "UNSUPPORTED_FORMAT"

def test_first_accepted_file_wins(client, png_bytes):
    client.cookies.set("session_id", "test-multi")
    files = [
        ("files", ("skip.gif", b"GIF89a", "image/gif")),
        ("files", ("first.png", png_bytes, "image/png")),
        ("files", ("second.png", png_bytes, "image/png")),
    ]
    response = client.post("/api/upload", files=files)
    assert response.status_code == 200
    assert response.json()["filename"] == "first.png"
    assert len(client.get("/api/upload").json()) == 1

def test_annotate_upload(client, aggregator):
    buffered = io.BytesIO()
    Image.new('RGB', (400, 300), color='white').save(buffered, format="PNG")
    client.cookies.set("session_id", "test-annotate")
    image_id = client.post("/api/upload", files={"files": ("panel.png", buffered.getvalue(), "image/png")}).json()["image_id"]

    samples = aggregator.get_by_id("demo-5").expected_results
    response = client.post(f"/api/upload/{image_id}/annotate",
                           json={"results": [s.model_dump(mode="json") for s in samples]})
    assert response.status_code == 200
    assert response.headers["content-type"] == "image/jpeg"

    annotated = Image.open(io.BytesIO(response.content)).convert("RGB")
    assert annotated.size == (400, 300)
    # Left edge of the OTHER box (x=200, y=80..180) is drawn in red
    r, g, b = annotated.getpixel((200, 130))
    assert r > 170 and g < 130 and b < 130

def test_annotate_missing_upload(client):
    client.cookies.set("session_id", "test-annotate-missing")
    assert client.post("/api/upload/nope/annotate", json={"results": []}).status_code == 404

def test_uploads_listed_newest_first(client, png_bytes):
    client.cookies.set("session_id", "test-order")
    first = client.post("/api/upload", files={"files": ("a.png", png_bytes, "image/png")}).json()["image_id"]
    second = client.post("/api/upload", files={"files": ("b.png", png_bytes, "image/png")}).json()["image_id"]
    assert [item["image_id"] for item in client.get("/api/upload").json()] == [second, first]

def test_only_accepted_file_is_read(monkeypatch):
    read_names = []
    original_read = UploadFile.read

    async def tracking_read(self, *args, **kwargs):
        read_names.append(self.filename)
        return await original_read(self, *args, **kwargs)

    monkeypatch.setattr(UploadFile, "read", tracking_read)

    buffered = io.BytesIO()
    Image.new('RGB', (1, 1)).save(buffered, format="PNG")
    client = TestClient(create_app(validator=IntakeValidator(max_size=1024)))
    client.cookies.set("session_id", "test-no-read")
    files = [
        ("files", ("huge.png", b"\0" * 4096, "image/png")),
        ("files", ("tiny.png", buffered.getvalue(), "image/png")),
    ]
    response = client.post("/api/upload", files=files)
    assert response.status_code == 200
    assert response.json()["filename"] == "tiny.png"
    assert read_names == ["tiny.png"]

def test_too_large_file_is_not_read(monkeypatch):
    read_names = []

    async def tracking_read(self, *args, **kwargs):
        read_names.append(self.filename)
        return b""

    monkeypatch.setattr(UploadFile, "read", tracking_read)
    client = TestClient(create_app(validator=IntakeValidator(max_size=1024)))
    client.cookies.set("session_id", "test-too-large-unread")
    response = client.post("/api/upload", files={"files": ("huge.png", b"\0" * 4096, "image/png")})
    assert response.status_code == 413
    assert read_names == []

def test_oversized_pixel_count_rejected(client, png_bytes, monkeypatch):
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)
    client.cookies.set("session_id", "test-bomb")
    response = client.post("/api/upload", files={"files": ("bomb.png", png_bytes, "image/png")})
    assert response.status_code == 415
    assert response.json()["detail"]["type"] == "UNSUPPORTED_FORMAT"
