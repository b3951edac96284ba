import pytest

from core.models import ReadPolicy
from discovery.service_factory import get_read_many_files_service


class DummyMCP:
    """Minimal FastMCP stand-in to capture tool registration."""

    def __init__(self) -> None:
        self.tools = {}
        self.tool_options = {}

    def tool(self, *, name: str, **kwargs):
        def _decorator(fn):
            self.tools[name] = fn
            self.tool_options[name] = kwargs
            return fn
        return _decorator


@pytest.fixture
def dummy_mcp():
    return DummyMCP()


@pytest.fixture
def ws(tmp_path):
    root = tmp_path / "ws"
    root.mkdir()
    return root


@pytest.fixture
def make_service(ws):
    def _make(**overrides):
        kwargs = dict(
            project_root=ws,
            workspace_dirs=[],
            policy=ReadPolicy(max_lines=1000),
            context_filename=lambda: "CONTEXT.md",
            respect_git_ignore=True,
            respect_tool_ignore=True,
            max_concurrency=4,
        )
        kwargs.update(overrides)
        return get_read_many_files_service(**kwargs)
    return _make
