"""Pytest configuration and fixtures."""

import pytest
from httpx import ASGITransport, AsyncClient

from app.main import app
from src.signal_planner import decode_text


# Three streets forming a loop through intersections 0 -> 1 -> 2 -> 0,
# with two cars.
PARIS_LOOP = """\
6 3 3 2 0
0 1 rue-de-londres 1
1 2 rue-d-amsterdam 1
2 0 rue-d-athenes 1
3 rue-de-londres rue-d-amsterdam rue-d-athenes
2 rue-d-amsterdam rue-d-athenes
"""

# Five streets, four intersections, two cars, 1000 points bonus.
PARIS_CROSS = """\
6 4 5 2 1000
2 0 rue-de-londres 1
0 1 rue-d-amsterdam 1
3 1 rue-d-athenes 1
2 3 rue-de-rome 2
1 2 rue-de-moscou 3
4 rue-de-londres rue-d-amsterdam rue-de-moscou rue-de-rome
3 rue-d-athenes rue-de-moscou rue-de-londres
"""


@pytest.fixture
async def client():
    """Async test client fixture."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def loop_text():
    return PARIS_LOOP


@pytest.fixture
def loop_simulation():
    return decode_text(PARIS_LOOP)


@pytest.fixture
def cross_text():
    return PARIS_CROSS


@pytest.fixture
def cross_simulation():
    return decode_text(PARIS_CROSS)
