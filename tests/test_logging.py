import logging

from app.core.logging import ContextFilter, LogContext, get_logger


def make_record(**extra):
    logger = get_logger("test")
    return logger.makeRecord(logger.name, logging.INFO, __file__, 1, "message", None, None, extra=extra or None)


def test_context_fields_are_added():
    with LogContext(phone="972501234567", state="idle"):
        record = make_record()
        ContextFilter().filter(record)

    assert record.phone == "972501234567"
    assert record.state == "idle"


def test_extra_inside_context_does_not_collide():
    with LogContext(phone="111"):
        record = make_record(phone="222")
        ContextFilter().filter(record)

    assert record.phone == "222"


def test_nested_contexts_merge_and_unwind():
    with LogContext(phone="111"):
        with LogContext(state="connected"):
            inner = make_record()
            ContextFilter().filter(inner)
        outer = make_record()
        ContextFilter().filter(outer)

    after = make_record()
    ContextFilter().filter(after)

    assert (inner.phone, inner.state) == ("111", "connected")
    assert outer.phone == "111" and not hasattr(outer, "state")
    assert not hasattr(after, "phone")


def test_record_factory_is_left_alone():
    factory = logging.getLogRecordFactory()

    with LogContext(phone="111"):
        assert logging.getLogRecordFactory() is factory
