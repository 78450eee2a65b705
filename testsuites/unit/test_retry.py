import pytest

from testsuites.ui_testing.framework.retry import (
    AttemptState,
    ExhaustedFailure,
    InteractionExhaustedError,
    RetryPolicy,
    Success,
    run_with_retry,
)


def flaky(failures):
    """Action failing `failures` times (None: always) before returning 'done'."""
    calls = []

    async def action():
        calls.append(len(calls) + 1)
        if failures is None or len(calls) <= failures:
            raise RuntimeError(f"attempt {len(calls)} failed")
        return "done"

    return action, calls


async def _run(action, policy, structured_log, fake_sleep):
    return await run_with_retry(
        action,
        policy,
        label="click",
        target="#submit",
        log=structured_log,
        sleep=fake_sleep,
    )


@pytest.mark.parametrize("max_attempts", [1, 2, 3, 5])
async def test_always_failing_action_makes_exactly_n_attempts(max_attempts, structured_log, fake_sleep, sleeps):
    action, calls = flaky(None)

    outcome = await _run(action, RetryPolicy(max_attempts=max_attempts, backoff_ms=250), structured_log, fake_sleep)

    assert isinstance(outcome, ExhaustedFailure)
    assert not outcome.ok
    assert outcome.state is AttemptState.FAILED
    assert outcome.attempts == max_attempts
    assert len(calls) == max_attempts
    # Backoff only between attempts
    assert sleeps == [0.25] * (max_attempts - 1)

    with pytest.raises(InteractionExhaustedError) as exc_info:
        outcome.unwrap()

    error = exc_info.value
    assert error.retry_count == max_attempts
    assert error.attempts == max_attempts
    assert str(error.last_error) == f"attempt {max_attempts} failed"
    assert error.__cause__ is error.last_error
    assert "#submit" in str(error) and f"attempt {max_attempts} failed" in str(error)


@pytest.mark.parametrize("max_attempts, succeed_on", [(1, 1), (3, 1), (3, 2), (3, 3), (5, 4)])
async def test_success_on_attempt_k_makes_exactly_k_attempts(max_attempts, succeed_on, structured_log, fake_sleep, sleeps):
    action, calls = flaky(succeed_on - 1)

    outcome = await _run(action, RetryPolicy(max_attempts=max_attempts, backoff_ms=1000), structured_log, fake_sleep)

    assert isinstance(outcome, Success)
    assert outcome.ok
    assert outcome.state is AttemptState.SUCCEEDED
    assert outcome.attempts == succeed_on
    assert outcome.unwrap() == "done"
    assert len(calls) == succeed_on
    assert sleeps == [1.0] * (succeed_on - 1)


async def test_retries_and_exhaustion_are_logged(structured_log, fake_sleep, log_lines):
    action, _ = flaky(None)

    await _run(action, RetryPolicy(max_attempts=2, backoff_ms=0), structured_log, fake_sleep)

    retry_lines = [line for line in log_lines if "Retrying action: click" in line]
    assert len(retry_lines) == 1
    assert "[Retry: 1]" in retry_lines[0]
    assert "(Error: attempt 1 failed)" in retry_lines[0]

    final = [line for line in log_lines if "[ERROR]" in line]
    assert len(final) == 1
    assert "[CLICK] [Retry: 2] Failed to click element after 2 attempt(s): #submit (Error: attempt 2 failed)" in final[0]


async def test_success_logs_performance(structured_log, fake_sleep, log_lines):
    action, _ = flaky(0)

    await _run(action, RetryPolicy(), structured_log, fake_sleep)

    assert any("Element: click on #submit - SUCCESS" in line for line in log_lines)
    assert any("Performance: click took" in line for line in log_lines)


@pytest.mark.parametrize("kwargs", [{"max_attempts": 0}, {"backoff_ms": -1}])
def test_invalid_policy(kwargs):
    with pytest.raises(ValueError):
        RetryPolicy(**kwargs)
