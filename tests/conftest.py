"""
Shared fixtures: a compiled module with its extractor manifest and a
workflow bound to a temporary state directory.
"""

import json

import pytest

from type_dependencies.analysis.analyzer import EdgeManifestAnalyzer
from type_dependencies.state.session_finder import CurrentSessionFinder
from type_dependencies.state.state_manager import AnalysisStateManager
from type_dependencies.tools.workflow import CLI_HINTS, TypeDependencyWorkflow

# Normalised graph:
#   Shop.OrderService -> Shop.Order, Shop.IRepository`1
#   Shop.Order        -> Shop.Order+Line, Shop.Customer
#   Shop.Order+Line   -> Shop.Product, Shop.Order
#   Shop.Customer     -> Shop.Order
#   <>c               -> Shop.Order
SHOP_EDGES = {
    "Shop.OrderService": ["Shop.Order", "Shop.IRepository`1<Shop.Order>", "System.String"],
    "Shop.Order": ["Shop.Order/Line", "Shop.Customer", "System.DateTime"],
    "Shop.Order/Line": ["Shop.Product", "Shop.Order"],
    "Shop.Customer": ["Shop.Order"],
    "<>c": ["Shop.Order"],
}


@pytest.fixture
def state_dir(tmp_path):
    return tmp_path / "state"


@pytest.fixture
def shop_dll(tmp_path):
    path = tmp_path / "build" / "Shop.dll"
    path.parent.mkdir(parents=True)
    path.write_bytes(b"MZ")
    (path.parent / "Shop.dll.deps.json").write_text(json.dumps(SHOP_EDGES))
    return path


@pytest.fixture
def state_manager(state_dir):
    return AnalysisStateManager(state_dir)


@pytest.fixture
def make_workflow(state_manager, state_dir):
    def _make(hints=CLI_HINTS, hide_anonymous_types=True, default_export_format="dot"):
        return TypeDependencyWorkflow(
            state_manager=state_manager,
            analyzer=EdgeManifestAnalyzer(),
            session_finder=CurrentSessionFinder(state_dir),
            hints=hints,
            default_export_format=default_export_format,
            hide_anonymous_types=hide_anonymous_types,
        )
    return _make


@pytest.fixture
def workflow(make_workflow):
    return make_workflow()


@pytest.fixture
def generated(workflow, shop_dll):
    """A workflow whose current session already holds the Shop graph."""
    workflow.init()
    workflow.add(str(shop_dll))
    workflow.generate()
    return workflow
