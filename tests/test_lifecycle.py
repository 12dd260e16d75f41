from hello_app.lifecycle import Phase, ServiceState


def test_starts_in_starting_phase():
    state = ServiceState()
    assert state.phase is Phase.STARTING
    assert not state.is_ready


def test_serving_then_stopped():
    state = ServiceState()

    assert state.mark_serving() is True
    assert state.is_ready
    assert state.phase is Phase.SERVING

    assert state.mark_stopped() is True
    assert state.phase is Phase.STOPPED
    assert not state.is_ready


def test_stopped_is_terminal():
    state = ServiceState()
    state.mark_stopped()

    assert state.mark_serving() is False
    assert state.phase is Phase.STOPPED


def test_repeated_transitions_are_idempotent():
    state = ServiceState()
    state.mark_serving()
    assert state.mark_serving() is True
    assert state.mark_stopped() is True
    assert state.mark_stopped() is False
