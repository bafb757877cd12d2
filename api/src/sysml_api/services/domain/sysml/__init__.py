"""
SysML Domain

Mapping between the SysML v2 domain model and the Neo4j property graph:
- Kind translation (kebab-case kinds <-> labels / relationship types)
- Property codec (element specs <-> flat node properties)
- Viewpoint catalog (which kinds belong to which concern)
"""

from .codec import (
    DecodeIssue,
    decode_properties,
    decode_properties_with_diagnostics,
    decode_relationship,
    encode_properties,
    encode_relationship_properties,
)
from .kinds import (
    BASE_LABEL,
    ElementKind,
    edge_kind_to_rel_type,
    get_element_kind,
    get_node_labels,
    kind_to_label,
    label_to_node_kind,
    rel_type_to_edge_kind,
)
from .viewpoints import (
    ALL_VIEWPOINTS,
    Viewpoint,
    get_available_types_for_viewpoint,
    get_viewpoint_by_id,
    is_known_edge_kind,
    is_known_node_kind,
)

__all__ = [
    # Kinds
    'BASE_LABEL',
    'ElementKind',
    'kind_to_label',
    'label_to_node_kind',
    'edge_kind_to_rel_type',
    'rel_type_to_edge_kind',
    'get_node_labels',
    'get_element_kind',
    # Codec
    'DecodeIssue',
    'encode_properties',
    'decode_properties',
    'decode_properties_with_diagnostics',
    'encode_relationship_properties',
    'decode_relationship',
    # Viewpoints
    'Viewpoint',
    'ALL_VIEWPOINTS',
    'get_viewpoint_by_id',
    'get_available_types_for_viewpoint',
    'is_known_node_kind',
    'is_known_edge_kind',
]
