"""FastAPI backend serving family tree data to the dashboard."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from family_tree.graph import CreationError, FailureReason, FamilyTreeGraph, GraphResult

logger = logging.getLogger(__name__)


class CreateTreeRequest(BaseModel):
    familyTreeId: str = Field(min_length=1)
    createdBy: str = Field(min_length=1)
    createdAt: Optional[str] = None


class InviteRequest(BaseModel):
    userId: str
    name: str
    email: Optional[str] = None
    myRelationship: Optional[str] = None
    profilePicture: Optional[str] = None


class RelationshipRequest(BaseModel):
    userId1: str
    userId2: str
    relationship1: str = Field(min_length=1)
    relationship2: Optional[str] = Field(default=None, min_length=1)
    gender: Optional[str] = None  # of userId2, used when relationship2 is omitted


STATUS_FOR_REASON = {
    FailureReason.NOT_FOUND: 404,
    FailureReason.INVALID_INPUT: 422,
    FailureReason.PARTIAL_SUCCESS: 409,
    FailureReason.STORE_ERROR: 503,
}


def _raise_for(result: GraphResult) -> None:
    if not result.success:
        raise HTTPException(status_code=STATUS_FOR_REASON[result.reason], detail=result.error.message)


def create_app(graph: Optional[FamilyTreeGraph] = None) -> FastAPI:
    """Build the API around a graph (configured store when omitted)."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.graph = graph or FamilyTreeGraph.from_settings()
        await app.state.graph.open()
        yield
        if graph is None:
            await app.state.graph.close()

    app = FastAPI(title="Family Tree API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def get_graph(request: Request) -> FamilyTreeGraph:
        return request.app.state.graph

    @app.post("/api/trees", status_code=201)
    async def create_tree(req: CreateTreeRequest, g: FamilyTreeGraph = Depends(get_graph)):
        try:
            return await g.create_family_tree(req.model_dump(exclude_none=True))
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e))
        except CreationError as e:
            raise HTTPException(status_code=409, detail=str(e))

    @app.get("/api/trees/{tree_id}")
    async def get_tree(tree_id: str, g: FamilyTreeGraph = Depends(get_graph)):
        tree = await g.get_family_tree(tree_id)
        if tree is None:
            raise HTTPException(status_code=404, detail="Family tree not found")
        return tree

    @app.get("/api/trees/{tree_id}/members")
    async def list_members(tree_id: str, g: FamilyTreeGraph = Depends(get_graph)):
        return await g.get_family_members(tree_id)

    @app.post("/api/trees/{tree_id}/members", status_code=201)
    async def invite_member(tree_id: str, req: InviteRequest, g: FamilyTreeGraph = Depends(get_graph)):
        result = await g.invite_member(
            tree_id,
            req.userId,
            req.name,
            email=req.email,
            my_relationship=req.myRelationship,
            profile_picture=req.profilePicture,
        )
        _raise_for(result)
        return result.data.to_dict()

    @app.get("/api/trees/{tree_id}/summary")
    async def member_summary(tree_id: str, viewer: Optional[str] = None, g: FamilyTreeGraph = Depends(get_graph)):
        return await g.get_member_summary(tree_id, viewer)

    @app.get("/api/trees/{tree_id}/relationships")
    async def list_relationships(tree_id: str, g: FamilyTreeGraph = Depends(get_graph)):
        return await g.get_family_relationships(tree_id)

    @app.post("/api/trees/{tree_id}/relationships")
    async def set_relationship(tree_id: str, req: RelationshipRequest, g: FamilyTreeGraph = Depends(get_graph)):
        if req.relationship2 is not None:
            result = await g.synchronizer.replace_pair(
                tree_id, req.userId1, req.userId2, req.relationship1, req.relationship2
            )
        else:
            result = await g.relate(tree_id, req.userId1, req.userId2, req.relationship1, req.gender)
        _raise_for(result)
        return {"success": True}

    @app.get("/api/trees/{tree_id}/visualization")
    async def visualization(tree_id: str, g: FamilyTreeGraph = Depends(get_graph)):
        return await g.get_family_tree_visualization_data(tree_id)

    @app.get("/api/trees/{tree_id}/members/{user_id}/view")
    async def personal_view(tree_id: str, user_id: str, g: FamilyTreeGraph = Depends(get_graph)):
        return await g.get_user_personal_family_view(user_id, tree_id)

    return app
