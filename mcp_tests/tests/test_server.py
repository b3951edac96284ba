import sys
import types
import uuid
import importlib.util
from pathlib import Path


def _find_server_py() -> Path:
    root = Path(__file__).resolve().parents[2]
    candidates = [
        root / "src" / "server" / "server.py",
        root / "server" / "server.py",
    ]
    for p in candidates:
        if p.exists():
            return p
    raise FileNotFoundError(f"Could not find server.py. Tried: {candidates}")


def _install_fake_modules(monkeypatch, captures: dict):
    # ---- Fake mcp.server.fastmcp.FastMCP ----
    mcp_mod = types.ModuleType("mcp")
    mcp_server_mod = types.ModuleType("mcp.server")
    fastmcp_mod = types.ModuleType("mcp.server.fastmcp")

    class DummyFastMCP:
        def __init__(self, name: str):
            captures["fastmcp_name"] = name
            captures["mcp_instance"] = self
            self.run_calls = []

        def run(self, *, transport: str):
            self.run_calls.append({"transport": transport})
            captures["run_calls"] = list(self.run_calls)

    fastmcp_mod.FastMCP = DummyFastMCP

    mcp_mod.__path__ = []
    mcp_server_mod.__path__ = []

    monkeypatch.setitem(sys.modules, "mcp", mcp_mod)
    monkeypatch.setitem(sys.modules, "mcp.server", mcp_server_mod)
    monkeypatch.setitem(sys.modules, "mcp.server.fastmcp", fastmcp_mod)

    # ---- Fake config ----
    config_mod = types.ModuleType("config")
    config_mod.LOG_LEVEL = "DEBUG"
    config_mod.PROJECT_ROOT = Path("/srv/project")
    config_mod.WORKSPACE_DIRS = [Path("/srv/shared")]
    monkeypatch.setitem(sys.modules, "config", config_mod)

    def _ensure_pkg(name: str):
        pkg = types.ModuleType(name)
        pkg.__path__ = []
        monkeypatch.setitem(sys.modules, name, pkg)

    for name in ("core", "discovery", "sources", "tools"):
        _ensure_pkg(name)

    # ---- Fake workspace / service / source ----
    workspace_mod = types.ModuleType("core.workspace")
    factory_mod = types.ModuleType("discovery.service_factory")
    source_mod = types.ModuleType("sources.local_source")

    class FakeWorkspaceContext:
        def __init__(self, target_dir, additional_dirs=()):
            captures["workspace_ctor_calls"] = captures.get("workspace_ctor_calls", []) + [
                {"target_dir": target_dir, "additional_dirs": list(additional_dirs)}
            ]
            captures["workspace_instance"] = self

    def get_read_many_files_service(**kwargs):
        captures["service_factory_calls"] = captures.get("service_factory_calls", []) + [kwargs]
        svc = object()
        captures["service_instance"] = svc
        return svc

    def default_read_policy():
        return "POLICY"

    class FakeLocalSource:
        def __init__(self, *, workspace, policy):
            captures["source_ctor_calls"] = captures.get("source_ctor_calls", []) + [
                {"workspace": workspace, "policy": policy}
            ]
            captures["source_instance"] = self

    workspace_mod.WorkspaceContext = FakeWorkspaceContext
    factory_mod.get_read_many_files_service = get_read_many_files_service
    factory_mod.default_read_policy = default_read_policy
    source_mod.LocalSource = FakeLocalSource

    monkeypatch.setitem(sys.modules, "core.workspace", workspace_mod)
    monkeypatch.setitem(sys.modules, "discovery.service_factory", factory_mod)
    monkeypatch.setitem(sys.modules, "sources.local_source", source_mod)

    # ---- Fake tools ----
    tools_many_mod = types.ModuleType("tools.read_many_files")
    tools_list_mod = types.ModuleType("tools.list_files")
    tools_read_mod = types.ModuleType("tools.read_file")

    def register_read_many_files(mcp, *, service=None):
        captures["register_read_many_files_calls"] = captures.get("register_read_many_files_calls", []) + [
            {"mcp": mcp, "service": service}
        ]

    def register_list_files(mcp, *, service=None):
        captures["register_list_files_calls"] = captures.get("register_list_files_calls", []) + [
            {"mcp": mcp, "service": service}
        ]

    def register_read_file(mcp, *, source=None):
        captures["register_read_file_calls"] = captures.get("register_read_file_calls", []) + [
            {"mcp": mcp, "source": source}
        ]

    tools_many_mod.register = register_read_many_files
    tools_list_mod.register = register_list_files
    tools_read_mod.register = register_read_file

    monkeypatch.setitem(sys.modules, "tools.read_many_files", tools_many_mod)
    monkeypatch.setitem(sys.modules, "tools.list_files", tools_list_mod)
    monkeypatch.setitem(sys.modules, "tools.read_file", tools_read_mod)


def _load_server_module(monkeypatch, captures: dict):
    _install_fake_modules(monkeypatch, captures)

    server_path = _find_server_py()
    mod_name = f"server_under_test_{uuid.uuid4().hex}"
    spec = importlib.util.spec_from_file_location(mod_name, server_path)
    assert spec and spec.loader

    module = importlib.util.module_from_spec(spec)
    monkeypatch.setitem(sys.modules, mod_name, module)
    spec.loader.exec_module(module)
    return module


def test_server_register_tools_and_di(monkeypatch):
    captures = {}
    module = _load_server_module(monkeypatch, captures)

    assert captures["fastmcp_name"] == "read-many-files"
    mcp = captures["mcp_instance"]

    # One workspace built from config, shared by the service and the source
    assert captures["workspace_ctor_calls"] == [
        {"target_dir": Path("/srv/project"), "additional_dirs": [Path("/srv/shared")]}
    ]
    ws = captures["workspace_instance"]
    assert captures["service_factory_calls"] == [{"workspace": ws}]
    assert captures["source_ctor_calls"] == [{"workspace": ws, "policy": "POLICY"}]

    assert len(captures.get("register_read_many_files_calls", [])) == 1
    assert len(captures.get("register_list_files_calls", [])) == 1
    assert len(captures.get("register_read_file_calls", [])) == 1

    # read_many_files and list_files share the SAME service instance
    svc1 = captures["register_read_many_files_calls"][0]["service"]
    svc2 = captures["register_list_files_calls"][0]["service"]
    assert svc1 is svc2
    assert svc1 is captures["service_instance"]
    assert captures["register_read_many_files_calls"][0]["mcp"] is mcp

    assert captures["register_read_file_calls"][0]["source"] is captures["source_instance"]

    # main() runs stdio transport
    monkeypatch.setattr(module.logging, "basicConfig", lambda **kwargs: captures.setdefault("log_config", kwargs))
    module.main()
    assert captures["run_calls"] == [{"transport": "stdio"}]
    assert captures["log_config"]["level"] == "DEBUG"
    assert captures["log_config"]["stream"] is sys.stderr
