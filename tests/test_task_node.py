"""
Tests for TaskNode and RunContext
"""

import pytest

from studyhub.events import NodeRun, ResultNotReadyError, RunContext, TaskNode


def make_node(node_id, work):
    return TaskNode(node_id, node_id.title(), f"{node_id} step", work)


class TestTaskNode:
    """Test cases for TaskNode.execute"""

    @pytest.mark.asyncio
    async def test_execute_stores_and_returns_result(self):
        async def work(ctx):
            return {"id": "course-1"}

        node = make_node("create-course", work)
        context = RunContext()

        value = await node.execute(context)

        assert value == {"id": "course-1"}
        assert context.result("create-course") == {"id": "course-1"}

    @pytest.mark.asyncio
    async def test_execute_failure_stores_nothing(self):
        async def work(ctx):
            raise RuntimeError("database down")

        node = make_node("create-course", work)
        context = RunContext()

        with pytest.raises(RuntimeError, match="database down"):
            await node.execute(context)

        with pytest.raises(ResultNotReadyError):
            context.result("create-course")

    @pytest.mark.asyncio
    async def test_work_reads_inputs_and_predecessor_results(self):
        async def work(ctx):
            return f"{ctx.inputs['prefix']}-{ctx.result('auth')['id']}"

        context = RunContext({"prefix": "enroll"})
        context.set_result("auth", {"id": "user-1"})

        assert await make_node("enroll", work).execute(context) == "enroll-user-1"

    def test_nodes_compare_by_id_only(self):
        async def one(ctx):
            return 1

        async def two(ctx):
            return 2

        assert make_node("auth", one) == TaskNode("auth", "Other label", "other", two)
        assert len({make_node("auth", one), make_node("auth", two)}) == 1
        assert make_node("auth", one) != make_node("validate", one)


class TestRunContext:
    """Test cases for the per-run result store"""

    def test_reading_unset_result_raises(self):
        context = RunContext()

        with pytest.raises(ResultNotReadyError) as exc_info:
            context.result("auth")

        assert exc_info.value.node_id == "auth"

    def test_result_slot_is_write_once(self):
        context = RunContext()
        context.set_result("auth", {"id": "user-1"})

        with pytest.raises(RuntimeError):
            context.set_result("auth", {"id": "user-2"})

        assert context.result("auth") == {"id": "user-1"}

    def test_none_is_a_valid_result(self):
        context = RunContext()
        context.set_result("notify", None)

        assert context.result("notify") is None

        # A None result still occupies the slot
        with pytest.raises(RuntimeError):
            context.set_result("notify", "again")

    def test_inputs_are_read_only(self):
        form = {"name": "Course"}
        context = RunContext({"form": form})

        with pytest.raises(TypeError):
            context.inputs["form"] = {}

        assert context.inputs["form"] is form


def test_node_run_duration():
    run = NodeRun("auth")
    assert run.duration is None

    run.started_at = 10.0
    run.finished_at = 10.5
    assert run.duration == pytest.approx(0.5)
