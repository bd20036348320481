def test_render_emoji_plan(client, sample_plan):
    resp = client.post("/api/render", json={"text": sample_plan})
    assert resp.status_code == 200
    blocks = resp.json()["blocks"]
    assert len(blocks) == 10
    assert blocks[0] == {
        "type": "heading",
        "key": "line-0",
        "level": 1,
        "spans": [{"text": "Study Plan", "emphasized": False}],
    }
    assert blocks[3]["type"] == "list"
    assert blocks[3]["items"][0]["spans"][1] == {"text": "Review", "emphasized": True}


def test_render_markdown_style(client):
    resp = client.post("/api/render", json={"text": "## Week 1\n* Run", "marker_style": "markdown"})
    blocks = resp.json()["blocks"]
    assert [b["type"] for b in blocks] == ["heading", "list"]
    assert blocks[0]["level"] == 2


def test_render_empty_text(client):
    resp = client.post("/api/render", json={"text": ""})
    assert resp.status_code == 200
    assert resp.json()["blocks"] == []


def test_render_rejects_unknown_style(client):
    resp = client.post("/api/render", json={"text": "x", "marker_style": "rst"})
    assert resp.status_code == 422


def test_root(client):
    assert client.get("/").json()["service"] == "planwise"
