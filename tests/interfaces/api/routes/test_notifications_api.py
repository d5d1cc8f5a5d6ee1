"""Tests for the notification feed endpoints and websocket."""


def test_emergency_feed_is_seeded(client):
    body = client.get("/notifications/emergency").json()

    assert [item["id"] for item in body["items"]] == ["emergency-system", "emergency-app"]
    assert body["unread"] == 2


def test_mark_read_delete_and_read_all(client):
    read = client.post("/notifications/emergency/emergency-system/read").json()
    assert read["unread"] == 1

    ignored = client.post("/notifications/emergency/unknown/read").json()
    assert ignored["unread"] == 1

    deleted = client.delete("/notifications/emergency/emergency-app")
    assert deleted.status_code == 204

    remaining = client.post("/notifications/emergency/read-all").json()
    assert [item["id"] for item in remaining["items"]] == ["emergency-system"]
    assert remaining["unread"] == 0


def test_admin_notice_snapshot(client):
    body = client.get("/notifications/admin").json()

    assert body["state"] in {"idle", "fetching"}
    assert body["degraded"] is False
    assert isinstance(body["items"], list)


def test_websocket_sends_init_and_broadcasts_changes(client):
    with client.websocket_connect("/notifications/emergency/ws") as websocket:
        init = websocket.receive_json()
        assert init["type"] == "init"
        assert init["data"]["unread"] == 2

        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}

        websocket.send_json({"type": "ack", "id": "emergency-system"})
        update = websocket.receive_json()
        assert update["type"] == "emergency_feed"
        assert update["data"]["unread"] == 1

        websocket.send_json({"type": "ack_all"})
        update = websocket.receive_json()
        assert update["data"]["unread"] == 0
