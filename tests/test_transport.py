import asyncio
from coordinator import Emit
from transport import Transport


def recorder(log, connection_id):
    async def send(event, payload):
        log.append((connection_id, event, payload))
    return send


def test_deliver_fans_out_to_registered_connections():
    transport = Transport()
    log = []
    transport.register("A", recorder(log, "A"))
    transport.register("B", recorder(log, "B"))

    sent = asyncio.run(transport.deliver([Emit("receive-message", {"message": "hi"}, ("A", "B"))]))

    assert sent == 2
    assert sorted(log) == [("A", "receive-message", {"message": "hi"}), ("B", "receive-message", {"message": "hi"})]


def test_deliver_skips_connections_without_sender():
    transport = Transport()
    log = []
    transport.register("A", recorder(log, "A"))
    sent = asyncio.run(transport.deliver([Emit("user-left", {}, ("A", "gone"))]))
    assert sent == 1
    assert log == [("A", "user-left", {})]


def test_failed_send_does_not_block_other_recipients():
    transport = Transport()
    log = []

    async def broken(event, payload):
        raise ConnectionError("socket closed")

    transport.register("A", broken)
    transport.register("B", recorder(log, "B"))
    sent = asyncio.run(transport.deliver([Emit("receive-message", {}, ("A", "B"))]))
    assert sent == 2
    assert log == [("B", "receive-message", {})]


def test_unregister_and_clear():
    transport = Transport()
    transport.register("A", recorder([], "A"))
    transport.register("B", recorder([], "B"))
    transport.unregister("A")
    transport.unregister("A")
    assert not transport.is_connected("A")
    assert len(transport) == 1
    transport.clear()
    assert len(transport) == 0


def test_deliver_nothing():
    assert asyncio.run(Transport().deliver([])) == 0
