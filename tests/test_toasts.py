from eventtimers.models import EventId
from eventtimers.toasts import ToastQueue

EID = EventId("World", "Boss")


def _push(queue, minutes=10):
    return queue.push(EID, 7200, minutes, reminder_name="Soon", reminder_color=(1.0, 1.0, 1.0, 1.0))


def test_ids_are_monotonic(clock):
    queue = ToastQueue(clock=clock)
    ids = [_push(queue).id for _ in range(3)]
    preview = queue.show_preview("Preview", (1.0, 0.0, 0.0, 1.0))
    assert ids == [0, 1, 2]
    assert preview.id == 3
    assert _push(queue).id == 4


def test_fade_law(clock):
    queue = ToastQueue(clock=clock)
    toast = _push(queue)

    clock.advance(3.9)
    queue.tick(5.0, 10)
    assert toast.opacity == 1.0

    opacities = []
    for _ in range(5):
        clock.advance(0.2)
        queue.tick(5.0, 10)
        opacities.append(toast.opacity)
    assert all(a > b for a, b in zip(opacities, opacities[1:]))
    assert opacities[0] < 1.0

    clock.advance(0.2)
    queue.tick(5.0, 10)
    assert len(queue) == 0


def test_dismissed_toast_is_removed_on_next_tick(clock):
    queue = ToastQueue(clock=clock)
    first = _push(queue)
    second = _push(queue)

    assert queue.dismiss(first.id)
    assert not queue.dismiss(999)
    queue.tick(5.0, 10)

    assert [t.id for t in queue] == [second.id]
    assert first.opacity == 0.0


def test_oldest_evicted_beyond_max_visible(clock):
    queue = ToastQueue(clock=clock)
    toasts = [_push(queue) for _ in range(5)]
    queue.tick(5.0, 3)
    assert [t.id for t in queue] == [t.id for t in toasts[2:]]


def test_preview_slot_fades_independently(clock):
    queue = ToastQueue(clock=clock)
    preview = queue.show_preview("Happening now!", (0.5, 1.0, 0.5, 1.0))
    assert preview.event_id == EventId("Example Track", "Example Event")
    assert preview.copy_text == "[&Example]"
    assert len(queue) == 0

    clock.advance(4.5)
    queue.tick_preview(5.0)
    assert 0.0 < queue.preview.opacity < 1.0

    clock.advance(0.6)
    queue.tick_preview(5.0)
    assert queue.preview is None


def test_preview_can_be_dismissed(clock):
    queue = ToastQueue(clock=clock)
    preview = queue.show_preview("Soon", (1.0, 1.0, 1.0, 1.0))
    assert queue.dismiss(preview.id)
    queue.tick_preview(5.0)
    assert queue.preview is None


def test_time_text(clock):
    queue = ToastQueue(clock=clock)
    assert _push(queue, 10).time_text == "Soon (10 min)"
    assert _push(queue, -3).time_text == "Soon (3 min ago)"
    assert _push(queue, 0).time_text == "Soon (now!)"
