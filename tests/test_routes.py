"""HTTP routing for both services."""

import json

from fastapi.testclient import TestClient

from clockdemo import clock_service


def test_hello(hello_client):
    response = hello_client.get("/hello")
    assert response.status_code == 200
    assert response.text == "Hello World!"
    assert response.headers["content-type"].startswith("text/plain")


def test_hello_wrong_method_is_405_with_empty_body(hello_client):
    response = hello_client.post("/hello")
    assert response.status_code == 405
    assert response.text == ""
    assert "GET" in response.headers["allow"]


def test_unknown_route_is_404(hello_client):
    assert hello_client.get("/nope").status_code == 404


def test_assets_index(hello_client):
    response = hello_client.get("/assets/")
    assert response.status_code == 200
    assert response.headers["content-type"] == "text/html; charset=utf-8"
    assert "clock" in response.text


def test_assets_file_content_type(hello_client):
    response = hello_client.get("/assets/app.css")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/css")


def test_assets_directory_without_index_is_listed(hello_client):
    response = hello_client.get("/assets/sub/")
    assert response.status_code == 200
    assert response.headers["content-type"] == "text/html; charset=utf-8"
    assert response.text == '<pre>\n<a href="a.txt">a.txt</a>\n<a href="nested/">nested/</a>\n</pre>\n'


def test_assets_directory_without_slash_redirects(hello_client):
    response = hello_client.get("/assets/sub", follow_redirects=False)
    assert response.status_code in (307, 308)
    assert response.headers["location"].endswith("/assets/sub/")


def test_assets_missing_file_is_404(hello_client):
    assert hello_client.get("/assets/missing.js").status_code == 404


def test_hello_service_has_no_clock_routes(hello_client):
    assert hello_client.get("/time").status_code == 404
    assert hello_client.get("/ws").status_code == 404


def test_clock_service_keeps_hello_and_assets(clock_client):
    assert clock_client.get("/hello").text == "Hello World!"
    assert clock_client.get("/assets/").status_code == 200


def test_time_returns_json_string(clock_client):
    response = clock_client.get("/time")
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/json"
    assert json.loads(response.content) == "Tue Jan 02 15:04:05 UTC 2024"


def test_time_wrong_method_is_405(clock_client):
    response = clock_client.post("/time")
    assert response.status_code == 405
    assert response.text == ""


def test_time_encode_failure_is_500(settings):
    class BrokenFormatter:
        def now(self):
            return object()

    with TestClient(clock_service.create_app(settings, BrokenFormatter())) as client:
        response = client.get("/time")
    assert response.status_code == 500
    assert response.text == ""
