import json

import openai
import pytest
from fastapi.testclient import TestClient

from server import INTERNAL_ERROR, NO_IMAGE, app, get_openai_client
from settings import Settings, get_settings


@pytest.fixture()
def client():
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def use_openai(fake_openai):
    def install(**kwargs):
        fake = fake_openai(**kwargs)
        app.dependency_overrides[get_openai_client] = lambda: fake
        return fake
    return install


def logo(data, name='logo.png', content_type='image/png'):
    return {"logo": (name, data, content_type)}


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


class TestLogoText:
    def test_success(self, client, use_openai, three_color_png):
        fake = use_openai(content=json.dumps({"output": "ACME"}))
        response = client.post("/api/logo/text", files=logo(three_color_png))
        assert response.status_code == 200
        assert response.json() == {"message": "Success.", "data": "ACME"}
        assert len(fake.completions.calls) == 1

    def test_missing_logo(self, client, use_openai):
        use_openai(content=json.dumps({"output": "ACME"}))
        response = client.post("/api/logo/text", data={"image": "nope"})
        assert response.status_code == 400
        assert response.json() == {"error": NO_IMAGE}

    def test_logo_field_not_a_file(self, client, use_openai):
        use_openai(content=json.dumps({"output": "ACME"}))
        response = client.post("/api/logo/text", data={"logo": "nope"})
        assert response.status_code == 400
        assert response.json() == {"error": NO_IMAGE}

    def test_service_failure(self, client, use_openai, three_color_png):
        use_openai(error=openai.OpenAIError("quota exceeded"))
        response = client.post("/api/logo/text", files=logo(three_color_png))
        assert response.status_code == 500
        assert response.json() == {"error": INTERNAL_ERROR}

    def test_malformed_payload(self, client, use_openai, three_color_png):
        use_openai(content="{}")
        response = client.post("/api/logo/text", files=logo(three_color_png))
        assert response.status_code == 500

    def test_missing_api_key(self, client, three_color_png):
        app.dependency_overrides[get_settings] = lambda: Settings(_env_file=None, openai_api_key=None)
        response = client.post("/api/logo/text", files=logo(three_color_png))
        assert response.status_code == 500
        assert response.json() == {"error": INTERNAL_ERROR}


class TestLogoColors:
    def test_swatches(self, client, three_color_png):
        response = client.post("/api/logo/colors", files=logo(three_color_png))
        assert response.status_code == 200
        data = response.json()["data"]
        assert [s["hex"] for s in data] == ["#ff0000", "#0000ff", "#ffffff"]
        assert data[0]["area"] == pytest.approx(0.5)

    def test_unsupported_type(self, client, three_color_png):
        response = client.post("/api/logo/colors", files=logo(three_color_png, 'anim.gif', 'image/gif'))
        assert response.status_code == 400
        assert response.json() == {"error": "File anim.gif was rejected"}

    def test_too_large(self, client, three_color_png):
        app.dependency_overrides[get_settings] = lambda: Settings(_env_file=None, max_upload_bytes=16)
        response = client.post("/api/logo/colors", files=logo(three_color_png))
        assert response.status_code == 400

    def test_corrupt(self, client, corrupt_png):
        response = client.post("/api/logo/colors", files=logo(corrupt_png))
        assert response.status_code == 422
        assert "error" in response.json()

    def test_svg_without_cairo(self, client, cairo_missing):
        svg = b'<svg xmlns="http://www.w3.org/2000/svg" width="4" height="4"/>'
        response = client.post("/api/logo/colors", files=logo(svg, 'logo.svg', 'image/svg+xml'))
        assert response.status_code == 422
        assert "SVG rendering is unavailable" in response.json()["error"]


class TestStyleGuide:
    def test_renders_html(self, client, three_color_png):
        response = client.post(
            "/api/style-guide",
            files=logo(three_color_png),
            data={"primary": "#ff0000", "secondary": "0000FF", "wordmark": "ACME"},
        )
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        html = response.text
        assert "background:#ff0000" in html
        assert "background:#0000ff" in html
        assert "ACME" in html
        assert "data:image/png;base64," in html

    def test_invalid_color(self, client, three_color_png):
        response = client.post(
            "/api/style-guide",
            files=logo(three_color_png),
            data={"primary": "red", "secondary": "#0000ff"},
        )
        assert response.status_code == 400

    def test_same_colors(self, client, three_color_png):
        response = client.post(
            "/api/style-guide",
            files=logo(three_color_png),
            data={"primary": "#ff0000", "secondary": "#FF0000"},
        )
        assert response.status_code == 400

    def test_corrupt_logo(self, client, corrupt_png):
        response = client.post(
            "/api/style-guide",
            files=logo(corrupt_png),
            data={"primary": "#ff0000", "secondary": "#0000ff"},
        )
        assert response.status_code == 422
