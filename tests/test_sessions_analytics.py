from datetime import datetime, timedelta

from rose_assistant.analytics import AnalyticsSink, hash_phone_number
from rose_assistant.sessions import SessionStore


def test_session_created_with_default_language():
    store = SessionStore(default_language="ta-IN")
    conv = store.get_or_create("919876543210")
    assert conv.language == "ta-IN"
    assert store.get_or_create("919876543210") is conv
    assert store.get("other") is None


def test_recent_returns_copies_of_last_turns():
    store = SessionStore()
    for i in range(5):
        store.append("1", "user", f"msg {i}")
    recent = store.recent("1", 2)
    assert [m.content for m in recent] == ["msg 3", "msg 4"]
    recent[0].content = "changed"
    assert store.get("1").messages[3].content == "msg 3"
    assert store.recent("1", 0) == []
    assert store.recent("missing") == []


def test_record_intent_and_language():
    store = SessionStore()
    store.record_intent("1", "franchise")
    store.record_intent("1", "ordering")
    store.set_language("1", "hi-IN")
    conv = store.get("1")
    assert conv.last_intent == "ordering"
    assert conv.total_interactions == 2
    assert conv.language == "hi-IN"


def test_all_sorted_by_last_update():
    store = SessionStore()
    store.append("a", "user", "x")
    store.append("b", "user", "y")
    store.get("a").last_updated = datetime.utcnow() + timedelta(seconds=5)
    assert [c.phone_number for c in store.all()] == ["a", "b"]


def test_hash_phone_number():
    h = hash_phone_number("919876543210")
    assert len(h) == 8
    assert h == hash_phone_number("919876543210")
    assert h != hash_phone_number("919876543211")


def test_log_interaction_writes_jsonl(tmp_path):
    sink = AnalyticsSink(str(tmp_path / "events" / "analytics.jsonl"))
    sink.log_interaction("919876543210", "x" * 300, "reply", "en-IN", "greeting", 120, products_found=2)
    events = sink.read_events()
    assert len(events) == 1
    ev = events[0]
    assert ev["phone_last4"] == "3210"
    assert ev["phone_hash"] == hash_phone_number("919876543210")
    assert len(ev["user_message"]) == 200
    assert ev["products_found"] == 2
    assert ev["session_id"].startswith(ev["phone_hash"] + "_")
    assert "919876543210" not in (tmp_path / "events" / "analytics.jsonl").read_text(encoding="utf-8")


def test_log_event_never_raises(tmp_path):
    # parent path is a file, so the directory cannot be created
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    sink = AnalyticsSink(str(blocker / "analytics.jsonl"))
    sink.log_event({"event": "x"})
    assert sink.read_events() == []


def test_summarize(tmp_path):
    sink = AnalyticsSink(str(tmp_path / "a.jsonl"))
    assert sink.summarize() is None
    now = datetime.utcnow()
    sink.log_event({"ts": (now - timedelta(days=30)).isoformat(), "phone_hash": "old", "intent": "greeting",
                    "language": "en-IN", "response_ms": 999})
    sink.log_interaction("911111111111", "hi", "hello", "en-IN", "greeting", 100)
    sink.log_interaction("911111111111", "kit", "list", "en-IN", "diy_kit_inquiry", 300)
    sink.log_interaction("922222222222", "kit", "list", "ta-IN", "diy_kit_inquiry", 200)
    summary = sink.summarize(days=7, now=now + timedelta(seconds=1))
    assert summary["total_interactions"] == 3
    assert summary["unique_users"] == 2
    assert summary["avg_response_ms"] == 200
    assert summary["top_intents"][0] == ("diy_kit_inquiry", 2)
    assert dict(summary["top_languages"]) == {"en-IN": 2, "ta-IN": 1}


def test_stored_turns_are_bounded():
    store = SessionStore(max_messages=10)
    for i in range(1000):
        store.append("1", "user", f"msg {i}")
    messages = store.get("1").messages
    assert len(messages) == 10
    assert messages[-1].content == "msg 999"
    assert [m.content for m in store.recent("1", 2)] == ["msg 998", "msg 999"]


def test_least_recently_updated_conversation_evicted():
    store = SessionStore(max_sessions=2)
    store.get_or_create("a").last_updated = datetime.utcnow() - timedelta(minutes=5)
    store.get_or_create("b")
    store.get_or_create("c")
    assert store.get("a") is None
    assert {c.phone_number for c in store.all()} == {"b", "c"}
