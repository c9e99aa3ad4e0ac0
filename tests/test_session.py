import asyncio

from remix_ai.errors import GenerationFailure, NoImageReturned
from remix_ai.models import GenerationResult, ImageInput, SessionStatus, Slot
from remix_ai.session import RemixSession, SessionState

IMAGE_A = ImageInput(data=b"a" * 10, mime_type="image/jpeg", filename="a.jpg")
IMAGE_B = ImageInput(data=b"b" * 20, mime_type="image/png", filename="b.png")
RESULT = GenerationResult(image_url="data:image/png;base64,YWJj", text="done")


class FakeService:

    def __init__(self, result=RESULT, error=None, gate=None):
        self.result = result
        self.error = error
        self.gate = gate
        self.calls = []

    async def generate(self, image_a, image_b, prompt):
        self.calls.append((image_a, image_b, prompt))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.result


def ready_session(service) -> RemixSession:
    session = RemixSession(service)
    session.set_image(Slot.A, IMAGE_A)
    session.set_image(Slot.B, IMAGE_B)
    session.set_prompt("make it blue")
    return session


def assert_invariant(session: RemixSession):
    state = session.state
    assert not (state.in_progress and (state.result is not None or state.error is not None))


def test_initial_state_is_idle():
    session = RemixSession(FakeService())
    assert session.status is SessionStatus.IDLE
    assert session.state == SessionState()
    assert not session.can_generate


def test_ready_once_both_images_and_prompt_are_set():
    session = ready_session(FakeService())
    assert session.status is SessionStatus.READY
    assert session.can_generate


def test_generate_is_noop_when_inputs_missing():
    cases = [
        (None, IMAGE_B, "prompt"),
        (IMAGE_A, None, "prompt"),
        (IMAGE_A, IMAGE_B, ""),
        (IMAGE_A, IMAGE_B, "   "),
    ]
    for image_a, image_b, prompt in cases:
        service = FakeService()
        session = RemixSession(service)
        session.set_image(Slot.A, image_a)
        session.set_image(Slot.B, image_b)
        session.set_prompt(prompt)
        before = session.snapshot()

        assert asyncio.run(session.generate()) is False
        assert session.snapshot() == before
        assert service.calls == []


def test_successful_generation():
    service = FakeService()
    session = ready_session(service)

    assert asyncio.run(session.generate()) is True

    assert service.calls == [(IMAGE_A, IMAGE_B, "make it blue")]
    assert session.status is SessionStatus.SUCCEEDED
    assert session.state.result == RESULT
    assert session.state.error is None
    assert not session.state.in_progress
    assert_invariant(session)


def test_generating_state_while_request_is_pending():
    async def scenario():
        gate = asyncio.Event()
        session = ready_session(FakeService(gate=gate))
        task = asyncio.create_task(session.generate())
        await asyncio.sleep(0)

        assert session.status is SessionStatus.GENERATING
        assert session.state.in_progress
        assert_invariant(session)

        gate.set()
        await task
        assert session.status is SessionStatus.SUCCEEDED

    asyncio.run(scenario())


def test_generate_clears_previous_result_and_error():
    async def scenario():
        gate = asyncio.Event()
        service = FakeService(error=GenerationFailure("Failed to generate image: boom"))
        session = ready_session(service)
        await session.generate()
        assert session.state.error is not None

        service.error = None
        service.gate = gate
        task = asyncio.create_task(session.generate())
        await asyncio.sleep(0)
        assert session.state.error is None
        assert session.state.result is None
        gate.set()
        await task

    asyncio.run(scenario())


def test_concurrent_generate_is_rejected():
    async def scenario():
        gate = asyncio.Event()
        service = FakeService(gate=gate)
        session = ready_session(service)
        first = asyncio.create_task(session.generate())
        await asyncio.sleep(0)

        assert await session.generate() is False
        gate.set()
        assert await first is True
        assert len(service.calls) == 1

    asyncio.run(scenario())


def test_failure_becomes_error_state():
    service = FakeService(error=GenerationFailure("Failed to generate image: timeout"))
    session = ready_session(service)

    assert asyncio.run(session.generate()) is True

    assert session.status is SessionStatus.FAILED
    assert session.state.error == "Failed to generate image: timeout"
    assert session.state.result is None
    assert_invariant(session)


def test_no_image_returned_becomes_error_state():
    session = ready_session(FakeService(error=NoImageReturned()))
    asyncio.run(session.generate())
    assert session.status is SessionStatus.FAILED
    assert "did not return an image" in session.state.error


def test_unexpected_exception_never_escapes():
    session = ready_session(FakeService(error=KeyError()))
    asyncio.run(session.generate())
    assert session.status is SessionStatus.FAILED
    assert session.state.error


def test_user_can_retry_after_failure():
    service = FakeService(error=GenerationFailure("Failed to generate image: timeout"))
    session = ready_session(service)
    asyncio.run(session.generate())

    service.error = None
    asyncio.run(session.generate())

    assert session.status is SessionStatus.SUCCEEDED
    assert len(service.calls) == 2


def test_set_image_keeps_previous_result():
    session = ready_session(FakeService())
    asyncio.run(session.generate())

    session.set_image(Slot.B, None)

    assert session.state.result == RESULT
    assert session.state.prompt == "make it blue"
    assert not session.can_generate


def test_reset_is_idempotent():
    session = ready_session(FakeService())
    asyncio.run(session.generate())

    session.reset()
    once = session.snapshot()
    session.reset()

    assert session.snapshot() == once
    assert once.state == SessionState()
    assert once.status is SessionStatus.IDLE


def test_late_success_after_reset_is_discarded():
    async def scenario():
        gate = asyncio.Event()
        session = ready_session(FakeService(gate=gate))
        task = asyncio.create_task(session.generate())
        await asyncio.sleep(0)

        session.reset()
        after_reset = session.snapshot()
        gate.set()
        await task

        assert session.snapshot() == after_reset

    asyncio.run(scenario())


def test_late_failure_after_reset_is_discarded():
    async def scenario():
        gate = asyncio.Event()
        error = GenerationFailure("Failed to generate image: timeout")
        session = ready_session(FakeService(error=error, gate=gate))
        task = asyncio.create_task(session.generate())
        await asyncio.sleep(0)

        session.reset()
        after_reset = session.snapshot()
        gate.set()
        await task

        assert session.snapshot() == after_reset
        assert session.state.error is None

    asyncio.run(scenario())


def test_subscribers_see_every_transition():
    async def scenario():
        session = ready_session(FakeService())
        queue = session.subscribe()
        await session.generate()
        statuses = []
        while not queue.empty():
            statuses.append(queue.get_nowait().status)
        session.unsubscribe(queue)
        session.reset()
        assert queue.empty()
        return statuses

    assert asyncio.run(scenario()) == [SessionStatus.GENERATING, SessionStatus.SUCCEEDED]


def test_removing_image_after_success_returns_to_idle():
    session = ready_session(FakeService())
    asyncio.run(session.generate())
    assert session.status is SessionStatus.SUCCEEDED

    session.set_image(Slot.B, None)

    assert session.status is SessionStatus.IDLE
    assert session.state.result == RESULT


def test_prompt_edit_after_failure_returns_to_ready():
    session = ready_session(FakeService(error=GenerationFailure("x")))
    asyncio.run(session.generate())
    assert session.status is SessionStatus.FAILED

    session.set_prompt("make it red")

    assert session.status is SessionStatus.READY
    assert session.can_generate
    assert session.state.error == "x"


def test_edits_during_generation_keep_generating_status():
    async def scenario():
        gate = asyncio.Event()
        session = ready_session(FakeService(gate=gate))
        task = asyncio.create_task(session.generate())
        await asyncio.sleep(0)

        session.set_prompt("")
        assert session.status is SessionStatus.GENERATING

        gate.set()
        await task
        assert session.status is SessionStatus.SUCCEEDED

    asyncio.run(scenario())
