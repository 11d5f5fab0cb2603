import mock
import pytest

from tracebridge import events


START = events.ROUTER_DISPATCH_START
STOP = events.ROUTER_DISPATCH_STOP
OTHER = ("some", "other", "event")


def test_attach_many_and_execute():
    handler = mock.Mock()
    events.attach_many("test-handler", [START, STOP], handler, config={"a": 1})

    events.execute(START, {"system_time": 1}, {"conn": "c"})
    events.execute(STOP, {"duration": 2}, {"conn": "c"})
    events.execute(OTHER, {}, {})

    assert handler.call_args_list == [
        mock.call(START, {"system_time": 1}, {"conn": "c"}, {"a": 1}),
        mock.call(STOP, {"duration": 2}, {"conn": "c"}, {"a": 1}),
    ]


def test_execute_defaults_to_empty_mappings():
    handler = mock.Mock()
    events.attach_many("test-handler", [START], handler)

    events.execute(START)

    handler.assert_called_once_with(START, {}, {}, None)


def test_execute_without_handlers():
    # DEV: The test is that no exception is thrown
    events.execute(OTHER, {}, {})


def test_events_are_normalized_to_tuples():
    handler = mock.Mock()
    events.attach_many("test-handler", [list(START)], handler)

    events.execute(list(START))

    assert handler.call_count == 1
    assert events.list_handlers(START) == ["test-handler"]


def test_attach_many_replaces_handler_with_same_id():
    first, second = mock.Mock(), mock.Mock()
    events.attach_many("test-handler", [START, STOP], first)
    events.attach_many("test-handler", [START], second)

    events.execute(START)
    events.execute(STOP)

    first.assert_not_called()
    second.assert_called_once_with(START, {}, {}, None)
    assert events.list_handlers(STOP) == []


def test_several_handlers_receive_the_same_event():
    first, second = mock.Mock(), mock.Mock()
    events.attach_many("first", [START], first)
    events.attach_many("second", [START], second)

    events.execute(START)

    assert first.call_count == 1
    assert second.call_count == 1
    assert sorted(events.list_handlers(START)) == ["first", "second"]


def test_detach():
    handler = mock.Mock()
    events.attach_many("test-handler", [START], handler)

    assert events.detach("test-handler") is True
    assert events.detach("test-handler") is False

    events.execute(START)
    handler.assert_not_called()
    assert events.list_handlers() == []


def test_failing_handler_is_logged_and_detached():
    handler = mock.Mock(side_effect=ValueError("boom"))
    healthy = mock.Mock()
    events.attach_many("failing", [START, STOP], handler)
    events.attach_many("healthy", [START, STOP], healthy)

    with mock.patch.object(events, "log") as log:
        events.execute(START)
        events.execute(STOP)

    assert handler.call_count == 1
    assert healthy.call_count == 2
    assert events.list_handlers() == ["healthy"]
    log.error.assert_called_once_with(
        "handler %r has failed and has been detached. event=%r", "failing", START, exc_info=True
    )


def test_signals_available():
    assert events.signals_available is True


def test_without_blinker():
    handler = mock.Mock()

    with mock.patch.object(events, "signals_available", False):
        with pytest.raises(RuntimeError, match="blinker"):
            events.attach_many("test-handler", [START], handler)
        # DEV: The test is that no exception is thrown
        events.execute(START, {}, {})

    handler.assert_not_called()
    assert events.list_handlers() == []
