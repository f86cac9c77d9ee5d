from __future__ import annotations

import asyncio

from github_stats.rate_limiter import Throttle


class FakeClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def test_throttle_first_call_does_not_wait():
    clock = FakeClock(now=10.0)
    throttle = Throttle(1.0, clock=clock, sleep=clock.sleep)

    asyncio.run(throttle.wait())

    assert clock.sleeps == []
    assert throttle.last_call == 10.0


def test_throttle_waits_for_remaining_interval():
    clock = FakeClock()
    throttle = Throttle(1.0, clock=clock, sleep=clock.sleep)

    async def scenario() -> None:
        await throttle.wait()
        first = throttle.last_call
        clock.now += 0.5
        await throttle.wait()
        assert throttle.last_call - first >= 1.0

    asyncio.run(scenario())

    assert clock.sleeps == [0.5]


def test_throttle_does_not_wait_after_interval_elapsed():
    clock = FakeClock()
    throttle = Throttle(1.0, clock=clock, sleep=clock.sleep)

    async def scenario() -> None:
        await throttle.wait()
        clock.now += 2.5
        await throttle.wait()

    asyncio.run(scenario())

    assert clock.sleeps == []
    assert throttle.last_call == 2.5


def test_throttle_spaces_concurrent_callers():
    clock = FakeClock()
    throttle = Throttle(1.0, clock=clock, sleep=clock.sleep)
    starts: list[float] = []

    async def caller() -> None:
        await throttle.wait()
        starts.append(clock())

    async def scenario() -> None:
        await asyncio.gather(caller(), caller(), caller())

    asyncio.run(scenario())

    assert starts == [0.0, 1.0, 2.0]


def test_throttle_with_zero_interval_never_sleeps():
    clock = FakeClock()
    throttle = Throttle(0.0, clock=clock, sleep=clock.sleep)

    async def scenario() -> None:
        for _ in range(3):
            await throttle.wait()

    asyncio.run(scenario())

    assert clock.sleeps == []
