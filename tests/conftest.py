import pytest

from fractals.base import Viewport
from utils.enums import BackendType


@pytest.fixture(params=[BackendType.PYTHON, BackendType.CPU], ids=lambda b: b.name.lower())
def backend(request):
    """Run the test once on the reference backend and once on numba."""
    return request.param


@pytest.fixture
def full_view():
    """The classic overview of the set."""
    return Viewport(complex(-2.0, 1.2), complex(0.8, -1.2))
