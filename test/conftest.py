import pytest
import dec96.error


def pytest_addoption(parser):
    parser.addoption(
        "--dec96-debug",
        action="store_true",
        default=False,
        help="Include stack traces in dec96 error reports",
    )


@pytest.fixture(autouse=True)
def configure_dec96_debug(request):
    """Automatically configure dec96.error.debug based on --dec96-debug flag."""
    original_debug = dec96.error.debug
    dec96.error.debug = request.config.getoption("--dec96-debug")
    yield
    dec96.error.debug = original_debug
