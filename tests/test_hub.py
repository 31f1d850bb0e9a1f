import threading

from groovebox.relay.hub import Delivery, RelayHub


def test_health_is_ok_regardless_of_connections():
    hub = RelayHub()
    assert hub.health()["status"] == "OK"
    for i in range(5):
        hub.on_connect(f"s{i}")
    assert hub.health() == {"status": "OK", "message": "Groovebox Server is running!"}

def test_connect_and_disconnect_track_sessions():
    hub = RelayHub()
    hub.on_connect("a")
    hub.on_connect("b")
    assert hub.session_count == 2
    hub.on_disconnect("a")
    hub.on_disconnect("ghost")
    assert list(hub.sessions) == ["b"]

def test_messages_are_only_logged_by_default():
    hub = RelayHub()
    hub.on_connect("a")
    hub.on_connect("b")
    assert hub.on_message("a", "trigger", {"step": 1, "type": "KICK"}) == []
    assert hub.sessions["a"].messages == 1

def test_broadcast_goes_to_everyone_else_verbatim():
    hub = RelayHub(broadcast=True)
    for sid in ("a", "b", "c"):
        hub.on_connect(sid)
    payload = {"anything": ["goes", 1]}
    out = hub.on_message("b", "custom", payload)
    assert out == [Delivery("a", "custom", payload), Delivery("c", "custom", payload)]

def test_step_updates_mirror_the_live_pattern():
    hub = RelayHub(broadcast=True)
    hub.on_connect("a")
    hub.on_connect("b")
    out = hub.on_message("a", "stepUpdate", {"step": 4, "active": True})
    assert hub.pattern[3] is True
    assert [d.event for d in out] == ["stepUpdate", "patternUpdated"]
    assert out[1].to == "b"
    assert out[1].payload["name"] == "live"
    assert out[1].payload["steps"][3] is True

def test_malformed_step_update_is_relayed_not_mirrored():
    hub = RelayHub(broadcast=True)
    hub.on_connect("a")
    hub.on_connect("b")
    for bad in ({"step": 99, "active": True}, {"step": "1", "active": True},
                {"step": 1}, "junk", None):
        out = hub.on_message("a", "stepUpdate", bad)
        assert [d.event for d in out] == ["stepUpdate"]
    assert hub.pattern.active_count() == 0

def test_step_updates_mirror_without_broadcast():
    hub = RelayHub()
    hub.on_connect("a")
    assert hub.on_message("a", "stepUpdate", {"step": 1, "active": True}) == []
    assert hub.pattern[0] is True

def test_message_counts_are_exact_across_threads():
    hub = RelayHub()
    hub.on_connect("a")
    hub.on_connect("b")
    def send(sid):
        for _ in range(200):
            hub.on_message(sid, "trigger", {"step": 1, "type": "KICK"})
    threads = [threading.Thread(target=send, args=(sid,)) for sid in ("a", "a", "b", "b")]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert hub.sessions["a"].messages == 400
    assert hub.sessions["b"].messages == 400

def test_message_from_unknown_session_is_still_logged():
    hub = RelayHub()
    assert hub.on_message("ghost", "bpm", {"bpm": 90}) == []
    assert "ghost" not in hub.sessions
