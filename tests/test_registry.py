from registry import Connection, ConnectionRegistry, RoomDirectory


def test_register_returns_replaced_entry():
    registry = ConnectionRegistry()
    assert registry.register(Connection("c1", "Alice", "r1")) is None
    previous = registry.register(Connection("c1", "Alice", "r2"))
    assert previous == Connection("c1", "Alice", "r1")
    assert registry.get("c1").room_id == "r2"
    assert len(registry) == 1


def test_remove_unknown_connection_is_noop():
    registry = ConnectionRegistry()
    assert registry.remove("missing") is None
    assert "missing" not in registry


def test_room_deleted_when_last_member_leaves():
    rooms = RoomDirectory()
    rooms.add_member("r1", "a")
    rooms.add_member("r1", "b")
    assert rooms.remove_member("r1", "a") is False
    assert rooms.members("r1") == ["b"]
    assert rooms.remove_member("r1", "b") is True
    assert rooms.members("r1") == []
    assert len(rooms) == 0


def test_remove_from_unknown_room():
    rooms = RoomDirectory()
    assert rooms.remove_member("nowhere", "a") is False
    assert len(rooms) == 0


def test_connection_as_user():
    assert Connection("c1", "Alice", "r1").as_user() == {"id": "c1", "name": "Alice"}
