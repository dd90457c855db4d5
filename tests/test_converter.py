"""Tests for editor graph ⇄ workflow record conversion."""

from flowbuilder.workflow.converter import (
    to_editor_graph,
    to_editor_model,
    to_workflow,
)
from flowbuilder.workflow.editor_model import EditorEdge, EditorNode
from flowbuilder.workflow.workflow_model import (
    ComponentData,
    Position,
    Workflow,
    WorkflowComponent,
    WorkflowConnection,
)


def _etl_workflow() -> Workflow:
    return Workflow(
        id="wf-1",
        name="ETL",
        components=[
            WorkflowComponent(
                id="input-1",
                position=Position(x=10, y=20),
                data=ComponentData(label="Input 1", type="input", config={"inputType": "text"}),
            ),
            WorkflowComponent(
                id="output-1",
                position=Position(x=300, y=20),
                data=ComponentData(
                    label="Output 1",
                    type="output",
                    config={"outputFormat": "csv", "fileName": "out.csv"},
                ),
                style={"width": 180},
            ),
        ],
        connections=[
            WorkflowConnection(
                id="edge-input-1right-output-1left",
                source="input-1",
                target="output-1",
                source_handle="right",
                target_handle="left",
            ),
        ],
    )


def test_round_trip_preserves_graph():
    workflow = _etl_workflow()
    graph = to_workflow(*to_editor_graph(workflow))

    assert [c.to_wire() for c in graph.components] == [c.to_wire() for c in workflow.components]
    assert [c.to_wire() for c in graph.connections] == [c.to_wire() for c in workflow.connections]


def test_round_trip_without_handles():
    workflow = Workflow(
        name="bare",
        components=[WorkflowComponent(id="a"), WorkflowComponent(id="b")],
        connections=[WorkflowConnection(id="e", source="a", target="b")],
    )
    graph = to_workflow(*to_editor_graph(workflow))
    assert graph.connections[0].to_wire() == {"id": "e", "source": "a", "target": "b"}


def test_no_workflow_gives_empty_graph():
    assert to_editor_graph(None) == ([], [])
    model = to_editor_model(None)
    assert model.nodes == [] and model.edges == []


def test_empty_workflow_round_trips_to_empty_graph():
    graph = to_workflow(*to_editor_graph(Workflow(name="empty")))
    assert graph.components == [] and graph.connections == []


def test_restored_nodes_use_custom_node_kind():
    workflow = _etl_workflow()
    workflow.components[0].type = "default"
    nodes, _ = to_editor_graph(workflow)
    assert {n.type for n in nodes} == {"customNode"}


def test_missing_node_fields_are_normalized():
    node = EditorNode(id="n1", type=None, data=ComponentData())
    component = to_workflow([node], []).components[0]
    assert component.type == "customNode"
    assert component.data.to_wire() == {"label": "", "type": "", "config": {}}
    assert component.style == {}


def test_empty_handles_become_absent():
    edge = EditorEdge(id="e", source="a", target="b", source_handle="", target_handle="")
    connection = to_workflow([], [edge]).connections[0]
    assert connection.source_handle is None
    assert "sourceHandle" not in connection.to_wire()


def test_saved_config_is_independent_of_editor_node():
    node = EditorNode(id="n1", data=ComponentData(label="P", type="process", config={"logic": "a"}),
                      style={"border": "1px"})
    component = to_workflow([node], []).components[0]

    node.data.config["logic"] = "changed"
    node.style["border"] = "2px"
    assert component.data.config == {"logic": "a"}
    assert component.style == {"border": "1px"}


def test_restored_nodes_do_not_share_state_with_workflow():
    workflow = _etl_workflow()
    nodes, _ = to_editor_graph(workflow)
    nodes[0].data.config["inputType"] = "number"
    nodes[1].style["width"] = 1
    assert workflow.components[0].data.config == {"inputType": "text"}
    assert workflow.components[1].style == {"width": 180}


def test_null_fields_from_service_restore_as_empty():
    workflow = Workflow.model_validate({
        "id": "wf-1",
        "name": "Draft",
        "components": None,
        "connections": None,
        "configurations": None,
    })
    assert to_editor_graph(workflow) == ([], [])
    assert workflow.configurations == {}


def test_null_component_fields_restore_as_defaults():
    workflow = Workflow.model_validate({
        "name": "Draft",
        "components": [{
            "id": "n1",
            "type": None,
            "position": None,
            "style": None,
            "data": {"label": None, "type": None, "config": None},
        }],
    })
    nodes, edges = to_editor_graph(workflow)
    assert nodes[0].type == "customNode"
    assert nodes[0].style == {}
    assert nodes[0].data.to_wire() == {"label": "", "type": "", "config": {}}
    assert edges == []

    component = to_workflow(nodes, edges).components[0]
    assert component.to_wire() == {
        "id": "n1",
        "type": "customNode",
        "position": {"x": 0.0, "y": 0.0},
        "data": {"label": "", "type": "", "config": {}},
        "style": {},
    }
