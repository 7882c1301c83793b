from __future__ import annotations

import csv
import io

import orjson

CLIENT_KEY = "api-key-1"


def save(client, form, key=CLIENT_KEY):
    headers = {"x-client-key": key} if key is not None else {}
    return client.post("/api/save-form", json=form, headers=headers)


def test_index(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json() == {"message": "form builder", "version": "1.0.0"}


def test_healthz(client):
    assert client.get("/healthz").json() == {"status": "ok"}


def test_save_form(client, sample_form, form_build_dir):
    response = save(client, sample_form)

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Form saved successfully"
    form_id = body["form_id"]
    assert body["path"] == str(form_build_dir / form_id / "form.json")
    stored = orjson.loads((form_build_dir / form_id / "form.json").read_bytes())
    assert stored["title"] == "Contact"
    assert [field["name"] for field in stored["fields"]] == ["name", "email"]


def test_save_form_requires_key(client, sample_form, form_build_dir):
    response = save(client, sample_form, key=None)

    assert response.status_code == 403
    assert response.json()["detail"] == "x-client-key header is required"
    assert list(form_build_dir.iterdir()) == []


def test_save_form_rejects_unknown_key(client, sample_form):
    response = save(client, sample_form, key="nope")

    assert response.status_code == 403
    assert response.json()["detail"] == "key is not found"


def test_save_form_rejects_invalid_form(client, sample_form, form_build_dir):
    sample_form["fields"].append({"label": "Bad", "type": "select", "name": "bad name"})

    response = save(client, sample_form)

    assert response.status_code == 400
    assert "fields[2].type" in response.json()["detail"]
    assert "fields[2].name" in response.json()["detail"]
    assert list(form_build_dir.iterdir()) == []


def test_save_form_rejects_malformed_body(client):
    response = client.post(
        "/api/save-form",
        content=b"{not json",
        headers={"x-client-key": CLIENT_KEY, "content-type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid form structure"


def test_save_form_rejects_non_object_body(client):
    response = client.post("/api/save-form", json=[1, 2], headers={"x-client-key": CLIENT_KEY})

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid form structure"


def test_get_form_renders_html(client, sample_form):
    form_id = save(client, sample_form).json()["form_id"]

    response = client.get(f"/api/get-form/{form_id}")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert f'action="http://forms.test/api/submit-form/{form_id}"' in response.text
    assert 'value="x.y.z"' in response.text
    assert "Your name" in response.text


def test_get_form_is_repeatable(client, sample_form):
    form_id = save(client, sample_form).json()["form_id"]

    first = client.get(f"/api/get-form/{form_id}").text
    second = client.get(f"/api/get-form/{form_id}").text

    assert first == second


def test_get_form_is_open(client, sample_form):
    form_id = save(client, sample_form).json()["form_id"]

    response = client.get(f"/api/get-form/{form_id}", headers={"x-client-key": "nope"})

    assert response.status_code == 200


def test_get_unknown_form(client):
    response = client.get("/api/get-form/01ARZ3NDEKTSV4RRFFQ69G5FAV")

    assert response.status_code == 404
    assert response.json()["detail"].startswith("Failed get form")


def test_get_form_blank_id(client):
    response = client.get("/api/get-form/%20")

    assert response.status_code == 400
    assert response.json()["detail"] == "Missing mandatory parameter"


def test_get_form_corrupt_file(client, form_build_dir):
    (form_build_dir / "broken").mkdir()
    (form_build_dir / "broken" / "form.json").write_text("{", encoding="utf-8")

    response = client.get("/api/get-form/broken")

    assert response.status_code == 500
    assert response.json()["detail"] == "Internal Server Error"


def test_submit_form(client, form_build_dir):
    response = client.post(
        "/api/submit-form/123",
        data={
            "formID": "123",
            "clientXToken": "x",
            "referrer": "http://x",
            "name": "Alice",
            "email": "a@b.com",
        },
    )

    assert response.status_code == 200
    assert 'content="3;url=http://x"' in response.text
    text = (form_build_dir / "123" / "form_answer.csv").read_text(encoding="utf-8")
    assert list(csv.reader(io.StringIO(text))) == [["email", "name"], ["a@b.com", "Alice"]]


def test_submit_twice_writes_one_header(client, form_build_dir):
    for name in ("Alice", "Bob"):
        client.post("/api/submit-form/123", data={"formID": "123", "name": name})

    with (form_build_dir / "123" / "form_answer.csv").open(newline="", encoding="utf-8") as fp:
        assert list(csv.reader(fp)) == [["name"], ["Alice"], ["Bob"]]


def test_submit_requires_form_id(client, form_build_dir):
    response = client.post("/api/submit-form/123", data={"name": "Alice"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid form data"
    assert not (form_build_dir / "123").exists()


def test_submit_rejects_mismatched_form_id(client):
    response = client.post("/api/submit-form/123", data={"formID": "456", "name": "Alice"})

    assert response.status_code == 400


def test_submit_rejects_file_uploads(client):
    response = client.post(
        "/api/submit-form/123",
        data={"formID": "123"},
        files={"cv": ("cv.txt", b"hello", "text/plain")},
    )

    assert response.status_code == 400


def test_rendered_form_round_trip(client, sample_form, form_build_dir):
    form_id = save(client, sample_form).json()["form_id"]
    assert client.get(f"/api/get-form/{form_id}").status_code == 200

    client.post(
        f"/api/submit-form/{form_id}",
        data={"formID": form_id, "clientXToken": "x.y.z", "referrer": "", "name": "Alice", "email": "a@b.com"},
    )

    assert sorted(path.name for path in (form_build_dir / form_id).iterdir() if not path.name.endswith(".lock")) == [
        "form.json",
        "form_answer.csv",
    ]


def test_export_answers(client):
    client.post("/api/submit-form/123", data={"formID": "123", "name": "Alice"})

    response = client.get("/api/forms/123/answers", headers={"x-client-key": CLIENT_KEY})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert response.text == "name\nAlice\n"


def test_export_answers_is_gated(client):
    assert client.get("/api/forms/123/answers").status_code == 403


def test_export_answers_unknown_form(client):
    response = client.get("/api/forms/nothing/answers", headers={"x-client-key": CLIENT_KEY})

    assert response.status_code == 404


def test_submit_rejects_form_id_with_line_break(client, form_build_dir):
    response = client.post("/api/submit-form/abc%0A", data={"formID": "abc\n", "x": "1"})

    assert response.status_code == 400
    assert list(form_build_dir.iterdir()) == []
