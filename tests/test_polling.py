from unittest.mock import AsyncMock, patch

import pytest

from job_harvester.polling import RetryPolicy, poll_until


@pytest.mark.asyncio
async def test_returns_true_immediately_when_satisfied():
    """Test that a satisfied predicate needs no waiting besides the settle delay."""
    predicate = AsyncMock(return_value=True)
    policy = RetryPolicy(interval=0.5, max_attempts=3, settle_delay=1.0)

    with patch("job_harvester.polling.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
        assert await poll_until(predicate, policy) is True

    predicate.assert_awaited_once()
    mock_sleep.assert_awaited_once_with(1.0)


@pytest.mark.asyncio
async def test_retries_until_satisfied():
    """Test that the predicate is checked again after each interval."""
    predicate = AsyncMock(side_effect=[False, False, True])
    policy = RetryPolicy(interval=0.5, max_attempts=3)

    with patch("job_harvester.polling.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
        assert await poll_until(predicate, policy) is True

    assert predicate.await_count == 3
    assert [c.args[0] for c in mock_sleep.await_args_list] == [0.5, 0.5]


@pytest.mark.asyncio
async def test_gives_up_after_max_attempts():
    """Test that running out of attempts returns False without raising."""
    predicate = AsyncMock(return_value=False)
    policy = RetryPolicy(interval=0.1, max_attempts=2, settle_delay=1.0)

    with patch("job_harvester.polling.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
        assert await poll_until(predicate, policy, "nothing") is False

    # Initial check plus one per retry
    assert predicate.await_count == 3
    assert mock_sleep.await_count == 2


@pytest.mark.asyncio
async def test_predicate_errors_count_as_not_ready():
    """Test that a raising predicate is treated as unsatisfied."""
    predicate = AsyncMock(side_effect=[RuntimeError("not yet"), True])
    policy = RetryPolicy(interval=0.1, max_attempts=1)

    with patch("job_harvester.polling.asyncio.sleep", new_callable=AsyncMock):
        assert await poll_until(predicate, policy) is True


@pytest.mark.asyncio
async def test_zero_attempts_checks_once():
    """Test that a zero retry budget still checks the predicate once."""
    predicate = AsyncMock(return_value=False)

    with patch("job_harvester.polling.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
        assert await poll_until(predicate, RetryPolicy(interval=1.0, max_attempts=0)) is False

    predicate.assert_awaited_once()
    mock_sleep.assert_not_awaited()
