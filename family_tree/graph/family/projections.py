"""Read projections of the relationship graph for the dashboard."""

import logging
from collections import defaultdict

from family_tree.graph.errors import StoreError
from family_tree.graph.labels import DEFAULT_LINK_TYPE, normalize_label
from family_tree.graph.models import (
    FailureReason,
    GraphResult,
    PersonalViewEntry,
    VisualizationData,
    VisualizationLink,
    VisualizationNode,
)
from family_tree.graph.repository.base import FamilyRepository

logger = logging.getLogger(__name__)


class VisualizationProjector:
    """Builds the node/link graph of a tree."""

    def __init__(self, repository: FamilyRepository):
        self.repository = repository

    async def get_visualization_result(self, family_tree_id: str) -> GraphResult:
        try:
            members = await self.repository.list_members(family_tree_id)
            edges = await self.repository.list_edges(family_tree_id)
        except StoreError as e:
            logger.exception("Error getting family tree visualization data for %s", family_tree_id)
            return GraphResult.fail(FailureReason.STORE_ERROR, str(e))

        outgoing = defaultdict(list)
        for edge in edges:
            outgoing[edge.source_id].append(edge)

        nodes = [
            VisualizationNode(
                id=m.user_id,
                name=m.name,
                status=m.status,
                my_relationship=m.my_relationship,
                profile_picture=m.profile_picture,
            )
            for m in members
        ]
        node_ids = {node.id for node in nodes}

        links = []
        for node in nodes:
            for edge in outgoing.get(node.id, []):
                # Skip dangling targets so every link endpoint is a node
                if edge.target_id is None or edge.target_id not in node_ids:
                    continue
                links.append(VisualizationLink(
                    source=node.id,
                    target=edge.target_id,
                    type=normalize_label(edge.relationship) or DEFAULT_LINK_TYPE,
                ))

        return GraphResult.ok(VisualizationData(nodes=nodes, links=links))

    async def get_family_tree_visualization_data(self, family_tree_id: str) -> dict:
        result = await self.get_visualization_result(family_tree_id)
        return result.unwrap_or(VisualizationData()).to_dict()


class PersonalViewProjector:
    """
    A viewer's own stated relationship to every member.

    Only the viewer's outgoing edges count: the view shows how the
    viewer describes each person, not how others describe the viewer.
    """

    def __init__(self, repository: FamilyRepository):
        self.repository = repository

    async def get_personal_view_result(self, user_id: str, family_tree_id: str) -> GraphResult:
        logger.info("Getting personal family view for user %s", user_id)
        try:
            viewer = await self.repository.find_member(family_tree_id, user_id)
            if viewer is None:
                return GraphResult.fail(FailureReason.NOT_FOUND, f"No member {user_id} in {family_tree_id}")
            members = await self.repository.list_members(family_tree_id)
            edges = await self.repository.list_edges(family_tree_id)
        except StoreError as e:
            logger.exception("Error getting personal family view for user %s", user_id)
            return GraphResult.fail(FailureReason.STORE_ERROR, str(e))

        stated = {}
        for edge in edges:
            if edge.source_id == user_id:
                stated.setdefault(edge.target_id, edge.relationship)

        entries = [
            PersonalViewEntry(
                user_id=m.user_id,
                name=m.name,
                email=m.email,
                status=m.status,
                profile_picture=m.profile_picture,
                relationship=normalize_label(stated.get(m.user_id)),
            )
            for m in members
        ]
        return GraphResult.ok(entries)

    async def get_user_personal_family_view(self, user_id: str, family_tree_id: str) -> list[dict]:
        result = await self.get_personal_view_result(user_id, family_tree_id)
        return [entry.to_dict() for entry in result.unwrap_or([])]
