"""Tests for image uploads and the public asset endpoints."""
import io
import json
import re

import pytest
from PIL import Image

import config
from theming.services.stylesheet import ScssCompiler
from web.api.dependencies import get_scss_compiler
from web.api.main import app

IMAGE_EXPIRES = "Wed, 15 Nov 2023 22:13:20 GMT"  # frozen time + 24h
SCRIPT_EXPIRES = "Tue, 14 Nov 2023 22:13:20 GMT"  # frozen time


async def _upload(client, headers, **files):
    return await client.post("/api/theming/images", files=files, headers=headers)


# --- uploads ---


@pytest.mark.asyncio
async def test_upload_without_files_is_unprocessable(client, auth_headers):
    r = await client.post("/api/theming/images", headers=auth_headers)
    assert r.status_code == 422
    assert r.json() == {"data": {"message": "No file uploaded"}}

    assert (await client.get("/api/theming/logo")).status_code == 404
    assert (await client.get("/api/theming/loginbackground")).status_code == 404
    assert (await client.get("/api/theming")).json()["cachebuster"] == "0"


@pytest.mark.asyncio
async def test_upload_logo(client, auth_headers, png_bytes, frozen_time):
    r = await _upload(client, auth_headers, uploadlogo=("brand.png", png_bytes, "image/png"))
    assert r.status_code == 200
    assert r.json() == {"data": {"name": "brand.png", "message": "Saved"}, "status": "success"}

    r = await client.get("/api/theming/logo")
    assert r.status_code == 200
    assert r.content == png_bytes
    assert r.headers["content-type"] == "image/png"
    assert r.headers["cache-control"] == "max-age=3600, must-revalidate"
    assert r.headers["expires"] == IMAGE_EXPIRES
    assert r.headers["pragma"] == "cache"

    data = (await client.get("/api/theming")).json()
    assert data["logo"] == "/api/theming/logo"
    assert data["background"] == "/core/img/background.jpg"
    assert data["cachebuster"] == "1"


@pytest.mark.asyncio
async def test_logo_is_stored_verbatim(client, auth_headers):
    svg = b'<svg xmlns="http://www.w3.org/2000/svg" width="10" height="10"/>'
    r = await _upload(client, auth_headers, uploadlogo=("logo.svg", svg, "image/svg+xml"))
    assert r.json()["status"] == "success"

    r = await client.get("/api/theming/logo")
    assert r.content == svg
    assert r.headers["content-type"] == "image/svg+xml"


@pytest.mark.asyncio
async def test_upload_background_is_scaled_and_reencoded(client, auth_headers, image_factory, frozen_time):
    big = image_factory(3840, 2160)
    r = await _upload(
        client, auth_headers, **{"upload-login-background": ("wallpaper.png", big, "image/png")}
    )
    assert r.status_code == 200
    assert r.json() == {"data": {"name": "wallpaper.png", "message": "Saved"}, "status": "success"}

    r = await client.get("/api/theming/loginbackground")
    assert r.status_code == 200
    assert r.headers["content-type"] == "image/jpeg"
    assert r.headers["cache-control"] == "max-age=3600, must-revalidate"
    assert r.headers["expires"] == IMAGE_EXPIRES
    assert r.headers["pragma"] == "cache"
    with Image.open(io.BytesIO(r.content)) as img:
        assert img.format == "JPEG"
        assert img.size == (1920, 1080)
        assert img.info.get("progressive")

    data = (await client.get("/api/theming")).json()
    assert data["background"] == "/api/theming/loginbackground"


@pytest.mark.asyncio
async def test_small_background_keeps_its_size(client, auth_headers, image_factory):
    r = await _upload(
        client, auth_headers, **{"upload-login-background": ("small.png", image_factory(800, 600), "image/png")}
    )
    assert r.json()["status"] == "success"

    r = await client.get("/api/theming/loginbackground")
    with Image.open(io.BytesIO(r.content)) as img:
        assert img.size == (800, 600)


@pytest.mark.asyncio
async def test_unsupported_background_keeps_previous_one(client, auth_headers, image_factory):
    await _upload(
        client, auth_headers, **{"upload-login-background": ("ok.png", image_factory(100, 50), "image/png")}
    )
    previous = (await client.get("/api/theming/loginbackground")).content

    r = await _upload(
        client, auth_headers, **{"upload-login-background": ("bad.jpg", b"definitely not an image", "image/jpeg")}
    )
    assert r.status_code == 422
    assert r.json() == {"data": {"message": "Unsupported image type"}, "status": "failure"}

    r = await client.get("/api/theming/loginbackground")
    assert r.status_code == 200
    assert r.content == previous


@pytest.mark.asyncio
async def test_valid_logo_survives_bad_background_in_same_request(client, auth_headers, png_bytes):
    r = await _upload(
        client,
        auth_headers,
        uploadlogo=("logo.png", png_bytes, "image/png"),
        **{"upload-login-background": ("bad.jpg", b"\x00\x01garbage", "image/jpeg")},
    )
    assert r.status_code == 422
    assert r.json()["status"] == "failure"

    r = await client.get("/api/theming/logo")
    assert r.status_code == 200
    assert r.content == png_bytes
    assert (await client.get("/api/theming/loginbackground")).status_code == 404


@pytest.mark.asyncio
async def test_upload_both_returns_background_name(client, auth_headers, png_bytes, image_factory):
    r = await _upload(
        client,
        auth_headers,
        uploadlogo=("logo.png", png_bytes, "image/png"),
        **{"upload-login-background": ("bg.png", image_factory(200, 100), "image/png")},
    )
    assert r.json() == {"data": {"name": "bg.png", "message": "Saved"}, "status": "success"}
    assert (await client.get("/api/theming")).json()["cachebuster"] == "2"


@pytest.mark.asyncio
async def test_missing_blob_falls_back_to_default_url(client, auth_headers, png_bytes):
    await _upload(client, auth_headers, uploadlogo=("logo.png", png_bytes, "image/png"))
    (config.APP_DATA_DIR / "theming" / "images" / "logo").unlink()

    assert (await client.get("/api/theming")).json()["logo"] == "/core/img/logo.svg"
    assert (await client.get("/api/theming/logo")).status_code == 404


@pytest.mark.asyncio
async def test_logo_without_recorded_mime_is_octet_stream(client):
    images = config.APP_DATA_DIR / "theming" / "images"
    images.mkdir(parents=True)
    (images / "logo").write_bytes(b"logo")

    r = await client.get("/api/theming/logo")
    assert r.status_code == 200
    assert r.headers["content-type"] == "application/octet-stream"
    assert r.content == b"logo"


# --- stylesheet ---


@pytest.mark.asyncio
async def test_stylesheet(client, frozen_time):
    r = await client.get("/api/theming/styles")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/css")
    assert r.headers["cache-control"] == "max-age=86400, must-revalidate"
    assert r.headers["expires"] == IMAGE_EXPIRES
    assert r.headers["pragma"] == "cache"
    assert "#0082c9" in r.text
    assert "/core/img/logo.svg" in r.text
    assert (config.APP_DATA_DIR / "css" / "0" / "theming.css").is_file()


@pytest.mark.asyncio
async def test_stylesheet_follows_color_and_cache_buster(client, auth_headers):
    await client.post("/api/theming/settings", json={"setting": "color", "value": "#123456"}, headers=auth_headers)

    r = await client.get("/api/theming/styles")
    assert r.status_code == 200
    assert "#123456" in r.text
    assert "#0082c9" not in r.text
    assert (config.APP_DATA_DIR / "css" / "1" / "theming.css").is_file()


@pytest.mark.asyncio
async def test_stylesheet_uses_uploaded_logo(client, auth_headers, png_bytes):
    await _upload(client, auth_headers, uploadlogo=("logo.png", png_bytes, "image/png"))

    r = await client.get("/api/theming/styles")
    assert "/api/theming/logo" in r.text


@pytest.mark.asyncio
async def test_stylesheet_not_found_when_nothing_compiled(client):
    class NoopCompiler(ScssCompiler):
        def process(self, cache_buster, variables):
            return False

    app.dependency_overrides[get_scss_compiler] = lambda: NoopCompiler(get_scss_compiler().app_data)

    r = await client.get("/api/theming/styles")
    assert r.status_code == 404


# --- script ---


@pytest.mark.asyncio
async def test_javascript_defaults(client, frozen_time):
    r = await client.get("/api/theming/js")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/javascript")
    assert r.headers["cache-control"] == "max-age=3600, must-revalidate"
    assert r.headers["expires"] == SCRIPT_EXPIRES
    assert r.headers["pragma"] == "cache"
    assert r.headers["content-disposition"] == 'attachment; filename="javascript"'

    body = r.text
    assert body.startswith("(function() {")
    assert body.endswith("})();")
    assert 'name: "Nextcloud",' in body
    assert 'url: "https://nextcloud.com",' in body
    assert 'color: "#0082c9",' in body
    assert "inverted: false," in body
    assert 'cacheBuster: "0"' in body


@pytest.mark.asyncio
async def test_javascript_reflects_settings(client, auth_headers):
    headers = auth_headers
    await client.post("/api/theming/settings", json={"setting": "name", "value": 'Acme "Cloud"'}, headers=headers)
    await client.post("/api/theming/settings", json={"setting": "slogan", "value": "<i>safe</i>"}, headers=headers)
    await client.post("/api/theming/settings", json={"setting": "color", "value": "#ffffff"}, headers=headers)

    body = (await client.get("/api/theming/js")).text
    fields = dict(re.findall(r"^\t\t(\w+): (.*?),?$", body, flags=re.MULTILINE))
    assert json.loads(fields["name"]) == 'Acme "Cloud"'
    assert json.loads(fields["slogan"]) == "&lt;i&gt;safe&lt;/i&gt;"
    assert json.loads(fields["color"]) == "#ffffff"
    assert json.loads(fields["inverted"]) is True
    assert json.loads(fields["cacheBuster"]) == "3"
