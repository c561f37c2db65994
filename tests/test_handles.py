from appwire.registry import CompositeHandle, Handle


def test_handle_runs_callback_once():
    calls = []
    handle = Handle(lambda: calls.append("destroyed"))

    handle.destroy()
    handle.destroy()

    assert calls == ["destroyed"]
    assert handle.destroyed is True


def test_handle_as_context_manager():
    calls = []

    with Handle(lambda: calls.append(1)) as handle:
        assert handle.destroyed is False

    assert calls == [1]


def test_composite_destroys_each_child_once():
    calls = []
    first = Handle(lambda: calls.append("first"))
    second = Handle(lambda: calls.append("second"))
    composite = CompositeHandle([first, second])

    second.destroy()
    composite.destroy()
    composite.destroy()

    assert calls == ["second", "first"]
    assert len(composite) == 0


def test_composite_destroys_children_added_after_destruction():
    calls = []
    composite = CompositeHandle()
    composite.destroy()

    composite.add(Handle(lambda: calls.append("late")))

    assert calls == ["late"]
