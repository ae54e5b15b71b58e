"""Tests for the contextual logger."""

import logging

from tierwise.core.logging import ContextualLogger


def test_with_context_merges_dimensions():
    base = ContextualLogger(logging.getLogger("tierwise.tests"), dimensions={"request_id": "r1"})

    scoped = base.with_context(plan_id="p1").with_context(subscriber="user:u1")

    assert scoped.dimensions == {"request_id": "r1", "plan_id": "p1", "subscriber": "user:u1"}
    assert base.dimensions == {"request_id": "r1"}


def test_dimensions_reach_the_record():
    scoped = ContextualLogger(logging.getLogger("tierwise.tests"), prefix="[billing] ")

    msg, kwargs = scoped.with_context(plan_id="p1").process("quoted", {})

    assert msg == "[billing] quoted"
    assert kwargs["extra"]["custom_dimensions"] == {"plan_id": "p1"}
