#!/usr/bin/env python3

import dataclasses

import pytest

from sysml_api.services.domain.sysml.kinds import kind_to_label, label_to_node_kind
from sysml_api.services.domain.sysml.viewpoints import (
    ALL_VIEWPOINTS,
    REQUIREMENT,
    get_available_types_for_viewpoint,
    get_viewpoint_by_id,
    is_known_edge_kind,
    is_known_node_kind,
)


class TestViewpointCatalog:
    """Test suite for the static viewpoint catalog"""

    def test_catalog_order(self):
        assert [vp.id for vp in ALL_VIEWPOINTS] == [
            "sysml.structuralDefinition",
            "sysml.usageStructure",
            "sysml.behaviorControl",
            "sysml.interaction",
            "sysml.state",
            "sysml.requirement",
            "sysml.useCase",
        ]

    def test_ids_are_unique(self):
        ids = [vp.id for vp in ALL_VIEWPOINTS]
        assert len(ids) == len(set(ids))

    def test_viewpoints_are_immutable(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            REQUIREMENT.name = "changed"

    def test_to_dict_returns_fresh_copies(self):
        data = REQUIREMENT.to_dict()
        data["includeNodeKinds"].append("part-usage")

        assert "part-usage" not in REQUIREMENT.include_node_kinds
        assert REQUIREMENT.to_dict()["includeNodeKinds"] == ["requirement-definition", "requirement-usage"]

    def test_to_dict_uses_client_field_names(self):
        data = get_viewpoint_by_id("sysml.interaction").to_dict()
        assert data == {
            "id": "sysml.interaction",
            "name": "Interaction Viewpoint",
            "description": "Sequence lifelines and messages for interaction scenarios.",
            "includeNodeKinds": ["sequence-lifeline"],
            "includeEdgeKinds": ["message"],
        }

    @pytest.mark.parametrize("viewpoint", ALL_VIEWPOINTS, ids=lambda vp: vp.id)
    def test_catalog_kinds_round_trip_through_labels(self, viewpoint):
        for kind in viewpoint.include_node_kinds:
            assert label_to_node_kind(kind_to_label(kind)) == kind


class TestViewpointLookup:
    """Test suite for viewpoint lookup and projection"""

    def test_get_viewpoint_by_id(self):
        viewpoint = get_viewpoint_by_id("sysml.state")
        assert viewpoint is not None
        assert "state-machine" in viewpoint.include_node_kinds

    def test_get_viewpoint_by_unknown_id(self):
        assert get_viewpoint_by_id("unknown-id") is None

    def test_requirement_types(self):
        assert get_available_types_for_viewpoint("sysml.requirement") == {
            "nodeKinds": ["requirement-definition", "requirement-usage"],
            "edgeKinds": ["satisfy", "refine", "verify", "dependency"],
        }

    def test_unknown_viewpoint_types_are_empty(self):
        assert get_available_types_for_viewpoint("unknown-id") == {"nodeKinds": [], "edgeKinds": []}

    def test_available_types_cannot_mutate_catalog(self):
        types = get_available_types_for_viewpoint("sysml.useCase")
        types["edgeKinds"].clear()

        assert get_available_types_for_viewpoint("sysml.useCase")["edgeKinds"] == [
            "include", "extend", "dependency", "definition",
        ]

    def test_known_kinds(self):
        assert is_known_node_kind("part-definition")
        assert is_known_node_kind("sequence-lifeline")
        assert not is_known_node_kind("made-up-kind")
        assert is_known_edge_kind("succession-as-usage")
        assert not is_known_edge_kind("part-definition")
