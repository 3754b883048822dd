import asyncio

from flight_data.single_flight import SingleFlight


def test_concurrent_callers_share_one_task():
    calls = []

    async def scenario():
        gate = asyncio.Event()
        sf = SingleFlight()

        async def work():
            calls.append(1)
            await gate.wait()
            return "record"

        waiters = [asyncio.ensure_future(sf.run("k", work)) for _ in range(5)]
        await asyncio.sleep(0)
        assert len(sf) == 1
        gate.set()
        results = await asyncio.gather(*waiters)
        await asyncio.sleep(0)
        return results, len(sf)

    results, remaining = asyncio.run(scenario())
    assert results == ["record"] * 5
    assert len(calls) == 1
    assert remaining == 0


def test_sequential_calls_run_again():
    calls = []

    async def work():
        calls.append(1)
        return len(calls)

    async def scenario():
        sf = SingleFlight()
        return await sf.run("k", work), await sf.run("k", work)

    assert asyncio.run(scenario()) == (1, 2)


def test_different_keys_do_not_coalesce():
    calls = []

    async def work():
        calls.append(1)
        await asyncio.sleep(0)

    async def scenario():
        sf = SingleFlight()
        await asyncio.gather(sf.run("a", work), sf.run("b", work))

    asyncio.run(scenario())
    assert len(calls) == 2


def test_failure_reaches_every_waiter():
    async def work():
        await asyncio.sleep(0)
        raise ValueError("boom")

    async def scenario():
        sf = SingleFlight()
        return await asyncio.gather(sf.run("k", work), sf.run("k", work), return_exceptions=True)

    results = asyncio.run(scenario())
    assert all(isinstance(r, ValueError) for r in results)
