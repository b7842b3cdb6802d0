"""Flow module loading for the CLI."""

from __future__ import annotations

import importlib.util
import sys
from pathlib import Path
from types import ModuleType

from .models import Flow

FLOWS_ATTRIBUTE = "FLOWS"


def import_flow_module(path: Path) -> ModuleType:
    """Import a flow declaration file with its directory on ``sys.path``."""

    path = Path(path).resolve()
    if not path.is_file():
        raise FileNotFoundError(f"Flow file not found: {path}")
    module_dir = str(path.parent)
    if module_dir not in sys.path:
        sys.path.insert(0, module_dir)

    module_name = f"apit_flows_{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot import flow file {path}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(module_name, None)
        raise
    return module


def collect_flows(module: ModuleType) -> list[Flow]:
    """``FLOWS`` when the module defines it, else every module-level Flow in definition order."""

    declared = getattr(module, FLOWS_ATTRIBUTE, None)
    if declared is not None:
        flows = list(declared)
        invalid = [item for item in flows if not isinstance(item, Flow)]
        if invalid:
            raise ValueError(f"{FLOWS_ATTRIBUTE} in {module.__name__} must only contain Flow objects")
        return flows
    return [value for value in vars(module).values() if isinstance(value, Flow)]


def load_flows(path: Path) -> list[Flow]:
    module = import_flow_module(path)
    flows = collect_flows(module)
    if not flows:
        raise ValueError(f"No flows declared in {path}")
    return flows
