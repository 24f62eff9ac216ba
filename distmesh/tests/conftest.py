import datetime
import io
import logging
import pathlib

import numpy as np
import pytest

LOG_DIR = pathlib.Path(__file__).parent / "test-logs"
_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    # keep each phase's report on the item; capture_test_logs reads rep_call in teardown
    outcome = yield
    rep = outcome.get_result()
    setattr(item, "rep_" + rep.when, rep)


def _dump_log(node, text: str) -> pathlib.Path:
    LOG_DIR.mkdir(exist_ok=True)
    stamp = datetime.datetime.now().strftime("%Y%m%dT%H%M%S")
    safe_id = node.nodeid.replace("::", "__").replace("/", "_")
    path = LOG_DIR / f"{safe_id}__{stamp}.log"
    path.write_text(f"=== Test: {node.nodeid}\n=== Timestamp: {stamp}\n\n{text}", encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def capture_test_logs(request):
    """Record the 'distmesh' logger family at DEBUG for every test.

    The buffer is written under ``test-logs/`` only when the test body
    failed, so a failing relaxation run comes with its per-step trace.
    """
    pkg = logging.getLogger("distmesh")
    saved = (pkg.level, pkg.propagate)
    buf = io.StringIO()
    handler = logging.StreamHandler(buf)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(_FORMAT))
    pkg.addHandler(handler)
    pkg.setLevel(logging.DEBUG)
    try:
        yield buf
    finally:
        pkg.removeHandler(handler)
        pkg.setLevel(saved[0])
        pkg.propagate = saved[1]
        rep = getattr(request.node, "rep_call", None)
        if rep is not None and rep.failed:
            _dump_log(request.node, buf.getvalue())


@pytest.fixture
def square_corners():
    return np.array([[-1.0, -1.0], [1.0, -1.0], [1.0, 1.0], [-1.0, 1.0]])
