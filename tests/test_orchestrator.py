import asyncio

import pytest

from motion_control.jobs.errors import JobNotFoundError, MissingInputError, ProviderError
from motion_control.jobs.models import JobStatus
from motion_control.jobs.orchestrator import GenerationOrchestrator
from motion_control.jobs.provider import normalize_output
from motion_control.jobs.registry import JobRegistry

IMAGE = "http://testserver/uploads/1-aaaa.png"
VIDEO = "http://testserver/uploads/2-bbbb.mp4"


@pytest.fixture
def registry():
    return JobRegistry()


@pytest.fixture
def orchestrator(registry, provider, settings):
    return GenerationOrchestrator(registry, provider, settings)


def test_generate_submits_fixed_model_configuration(orchestrator, provider, settings):
    job = asyncio.run(orchestrator.generate(IMAGE, VIDEO, "dancing"))

    assert job.status == JobStatus.PROCESSING
    assert job.provider_job_id == "pred-1"
    model_ref, payload = provider.submissions[0]
    assert model_ref == settings.model_ref
    assert payload == {
        "path": VIDEO,
        "seed": 255224557,
        "steps": 25,
        "prompt": "dancing",
        "n_prompt": settings.negative_prompt,
        "motion_module": "mm_sd_v14",
        "guidance_scale": 7.5,
    }


def test_generate_uses_default_prompt(orchestrator, provider):
    job = asyncio.run(orchestrator.generate(IMAGE, VIDEO))

    assert provider.submissions[0][1]["prompt"] == "high quality, best quality"
    assert job.prompt is None


@pytest.mark.parametrize("image,video", [(None, VIDEO), (IMAGE, None), ("", VIDEO), (IMAGE, "")])
def test_generate_missing_input_creates_nothing(orchestrator, registry, provider, image, video):
    with pytest.raises(MissingInputError):
        asyncio.run(orchestrator.generate(image, video))

    assert len(registry) == 0
    assert provider.submissions == []


def test_generate_provider_failure_creates_nothing(orchestrator, registry, provider):
    provider.submit_error = RuntimeError("Invalid token")

    with pytest.raises(ProviderError, match="Invalid token"):
        asyncio.run(orchestrator.generate(IMAGE, VIDEO))
    assert len(registry) == 0


def test_poll_unknown_job(orchestrator, provider):
    with pytest.raises(JobNotFoundError):
        asyncio.run(orchestrator.poll_status("nonexistent-id"))
    assert provider.fetch_count == 0


def test_poll_reconciles_provider_state(orchestrator, registry, provider):
    job = asyncio.run(orchestrator.generate(IMAGE, VIDEO))

    first = asyncio.run(orchestrator.poll_status(job.id))
    assert first.status == "starting"
    assert first.video_url is None
    assert registry.get(job.id).status == JobStatus.STARTING

    provider.set_state("pred-1", "succeeded", output="https://cdn/out.mp4")
    done = asyncio.run(orchestrator.poll_status(job.id))
    assert done.status == "succeeded"
    assert done.video_url == "https://cdn/out.mp4"
    assert registry.get(job.id).output_url == "https://cdn/out.mp4"


def test_poll_is_idempotent_without_provider_change(orchestrator, provider):
    job = asyncio.run(orchestrator.generate(IMAGE, VIDEO))
    provider.set_state("pred-1", "processing")

    a = asyncio.run(orchestrator.poll_status(job.id))
    b = asyncio.run(orchestrator.poll_status(job.id))
    assert (a.status, a.video_url) == (b.status, b.video_url)
    assert provider.fetch_count == 2


def test_poll_fetch_failure_leaves_record_unchanged(orchestrator, registry, provider):
    job = asyncio.run(orchestrator.generate(IMAGE, VIDEO))
    provider.set_state("pred-1", "succeeded", output="https://cdn/out.mp4")
    asyncio.run(orchestrator.poll_status(job.id))
    before = registry.get(job.id)

    provider.fetch_error = ConnectionError("network unreachable")
    with pytest.raises(ProviderError, match="network unreachable"):
        asyncio.run(orchestrator.poll_status(job.id))

    after = registry.get(job.id)
    assert after.status == JobStatus.SUCCEEDED
    assert after.output_url == before.output_url
    assert after.updated_at == before.updated_at


def test_video_url_never_reverts_to_null(orchestrator, provider):
    job = asyncio.run(orchestrator.generate(IMAGE, VIDEO))
    provider.set_state("pred-1", "succeeded", output="https://cdn/out.mp4")
    asyncio.run(orchestrator.poll_status(job.id))

    provider.set_state("pred-1", "succeeded", output=None)
    view = asyncio.run(orchestrator.poll_status(job.id))
    assert view.video_url == "https://cdn/out.mp4"


def test_poll_reports_provider_failure(orchestrator, registry, provider):
    job = asyncio.run(orchestrator.generate(IMAGE, VIDEO))
    provider.set_state("pred-1", "failed", error="CUDA out of memory")

    view = asyncio.run(orchestrator.poll_status(job.id))
    assert view.status == "failed"
    assert view.error == "CUDA out of memory"
    assert view.video_url is None
    assert registry.get(job.id).error == "CUDA out of memory"


def test_unrecognized_provider_status_keeps_local_status(orchestrator, registry, provider):
    job = asyncio.run(orchestrator.generate(IMAGE, VIDEO))
    provider.set_state("pred-1", "warming_up")

    view = asyncio.run(orchestrator.poll_status(job.id))
    assert view.status == "warming_up"
    assert registry.get(job.id).status == JobStatus.PROCESSING


def test_overlapping_polls_of_one_job_are_serialized(orchestrator, provider):
    job = asyncio.run(orchestrator.generate(IMAGE, VIDEO))
    active = 0
    peak = 0
    original_fetch = provider.fetch

    async def slow_fetch(prediction_id):
        nonlocal active, peak
        active += 1
        peak = max(peak, active)
        await asyncio.sleep(0.01)
        active -= 1
        return await original_fetch(prediction_id)

    provider.fetch = slow_fetch

    async def poll_many():
        return await asyncio.gather(*(orchestrator.poll_status(job.id) for _ in range(3)))

    views = asyncio.run(poll_many())
    assert len(views) == 3
    assert peak == 1


def test_normalize_output():
    assert normalize_output(None) is None
    assert normalize_output([]) is None
    assert normalize_output(["https://cdn/a.mp4", "https://cdn/b.mp4"]) == "https://cdn/a.mp4"
    assert normalize_output("https://cdn/a.mp4") == "https://cdn/a.mp4"
