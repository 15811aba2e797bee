import asyncio
import inspect

import pytest


def pytest_configure(config):
    config.addinivalue_line("markers", "asyncio: mark test to run in event loop")


def pytest_pyfunc_call(pyfuncitem):
    if "asyncio" not in pyfuncitem.keywords:
        return None

    test_func = pyfuncitem.obj
    if not inspect.iscoroutinefunction(test_func):
        return None

    loop = asyncio.new_event_loop()
    try:
        asyncio.set_event_loop(loop)
        funcargs = pyfuncitem.funcargs
        kwargs = {name: funcargs[name] for name in pyfuncitem._fixtureinfo.argnames}
        loop.run_until_complete(test_func(**kwargs))
    finally:
        loop.close()
        asyncio.set_event_loop(None)

    return True


class RecordingClient:
    """Stands in for ``GitHubClient``; records calls and replays canned results.

    Each queued result is returned (or raised, for exceptions) by the next
    ``rest``/``graphql`` call in order.
    """

    def __init__(self, *results):
        self.calls = []
        self._results = list(results)

    def _next(self):
        if not self._results:
            raise AssertionError("unexpected upstream call")
        result = self._results.pop(0)
        if isinstance(result, BaseException):
            raise result
        return result

    async def rest(self, path, *, method="GET", params=None, body=None, headers=None):
        self.calls.append(
            {
                "kind": "rest",
                "method": method,
                "path": path,
                "params": params,
                "body": body,
                "headers": headers,
            }
        )
        return self._next()

    async def graphql(self, query, variables=None):
        self.calls.append({"kind": "graphql", "query": query, "variables": variables})
        return self._next()


@pytest.fixture
def recording_client():
    return RecordingClient
