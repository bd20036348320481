def test_upload_ok(client):
    resp = client.post(
        "/api/upload",
        files={"file": ("plan.md", "📜 Title\n\n- Hello".encode("utf-8"), "text/markdown")},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert "plan_id" in data and data["plan_id"]
    assert [b["type"] for b in data["blocks"]] == ["heading", "spacer", "list"]

    plan = client.get(f"/api/plans/{data['plan_id']}").json()
    assert plan["source"] == "uploaded"
    assert plan["html"].startswith("<h1>Title</h1>")


def test_upload_rejects_non_md_txt(client):
    resp = client.post(
        "/api/upload",
        files={"file": ("plan.pdf", b"%PDF", "application/pdf")},
    )
    assert resp.status_code == 400


def test_upload_tolerates_invalid_utf8(client):
    resp = client.post(
        "/api/upload",
        files={"file": ("plan.txt", b"caf\xe9 time", "text/plain")},
    )
    assert resp.status_code == 200
    assert resp.json()["blocks"][0]["type"] == "paragraph"
