"""Test the Neo4j client, record parser and Cypher repository."""

import asyncio

import pytest
from neo4j.exceptions import ServiceUnavailable

from family_tree.graph.errors import StoreError
from family_tree.graph.models import FamilyTree, Member
from family_tree.graph.repository.cypher import (
    CREATE_TREE,
    LIST_EDGES,
    REPLACE_EDGE_PAIR,
    CypherRepository,
)
from family_tree.graph.store.neo4j_client import Neo4jClient
from family_tree.graph.store.parser import RecordParser

from conftest import FakeNode, RecordingExecutor


class FakeRecord:
    def __init__(self, **values):
        self._values = values

    def items(self):
        return self._values.items()


class FakeResult:
    def __init__(self, records):
        self._records = list(records)

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for record in self._records:
            yield record


class FakeSession:
    def __init__(self, driver):
        self.driver = driver

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    async def run(self, template, parameters):
        if self.driver.error:
            raise self.driver.error
        self.driver.queries.append((template, parameters))
        return FakeResult(self.driver.records)

    async def execute_write(self, work):
        self.driver.transactions += 1
        return await work(self)


class FakeDriver:
    def __init__(self, records=(), error=None):
        self.records = records
        self.error = error
        self.queries = []
        self.transactions = 0
        self.closed = False
        self.databases = []

    def session(self, database=None):
        self.databases.append(database)
        return FakeSession(self)

    async def close(self):
        self.closed = True


class TestNeo4jClient:
    """Tests for the driver-backed executor."""

    def test_execute_returns_record_mappings(self):
        driver = FakeDriver(records=[FakeRecord(ok=1)])
        client = Neo4jClient(driver=driver)
        assert asyncio.run(client.execute("RETURN 1 AS ok", {})) == [{"ok": 1}]
        assert driver.databases == [client.config.database]

    def test_execute_write_runs_in_transaction(self):
        driver = FakeDriver(records=[FakeRecord(created=2)])
        client = Neo4jClient(driver=driver)
        records = asyncio.run(client.execute_write(REPLACE_EDGE_PAIR, {"familyTreeId": "t1"}))
        assert records == [{"created": 2}]
        assert driver.transactions == 1

    def test_driver_errors_become_store_errors(self):
        client = Neo4jClient(driver=FakeDriver(error=ServiceUnavailable("down")))
        with pytest.raises(StoreError):
            asyncio.run(client.execute("MATCH (n) RETURN n", {}))
        with pytest.raises(StoreError):
            asyncio.run(client.execute_write("CREATE (n)", {}))

    def test_verify(self):
        assert asyncio.run(Neo4jClient(driver=FakeDriver(records=[FakeRecord(ok=1)])).verify())
        assert not asyncio.run(Neo4jClient(driver=FakeDriver(error=ServiceUnavailable("down"))).verify())

    def test_init_schema_applies_constraints(self):
        driver = FakeDriver()
        assert asyncio.run(Neo4jClient(driver=driver).init_schema())
        assert all("CONSTRAINT" in q for q, _ in driver.queries)

    def test_close(self):
        driver = FakeDriver()
        asyncio.run(Neo4jClient(driver=driver).close())
        assert driver.closed


class TestRecordParser:
    """Tests for node unwrapping."""

    def test_properties_of_variants(self):
        assert RecordParser.properties_of({"a": 1}) == {"a": 1}
        assert RecordParser.properties_of(FakeNode(a=1)) == {"a": 1}
        assert RecordParser.properties_of(FakeRecord(a=1)) == {"a": 1}
        assert RecordParser.properties_of(None) is None

    def test_rejects_scalars(self):
        with pytest.raises(TypeError):
            RecordParser.properties_of(42)


class TestCypherRepository:
    """Tests for the Cypher-backed repository."""

    def test_create_tree_parameters_and_result(self):
        node = FakeNode(familyTreeId="t1", createdBy="u0", createdAt="2024-01-01")
        executor = RecordingExecutor([[{"ft": node}]])
        repo = CypherRepository(executor)

        tree = asyncio.run(repo.create_tree(FamilyTree("t1", "u0", "2024-01-01")))
        assert tree == FamilyTree("t1", "u0", "2024-01-01")
        kind, template, params = executor.calls[0]
        assert (kind, template) == ("write", CREATE_TREE)
        assert params == {"familyTreeId": "t1", "createdBy": "u0", "createdAt": "2024-01-01"}

    def test_create_tree_without_record_is_none(self):
        repo = CypherRepository(RecordingExecutor([[]]))
        assert asyncio.run(repo.create_tree(FamilyTree("t1", "u0"))) is None

    def test_get_tree_missing(self):
        repo = CypherRepository(RecordingExecutor([[]]))
        assert asyncio.run(repo.get_tree("t1")) is None

    def test_list_members_unwraps_nodes(self):
        executor = RecordingExecutor([[
            {"u": FakeNode(userId="u1", familyTreeId="t1", name="Ramesh", status="active")},
            {"u": {"userId": "u2", "familyTreeId": "t1", "name": "Priya", "status": "invited"}},
        ]])
        members = asyncio.run(CypherRepository(executor).list_members("t1"))
        assert [m.user_id for m in members] == ["u1", "u2"]
        assert members[1].status == "invited"

    def test_add_member_sends_camel_case(self):
        executor = RecordingExecutor([[{"u": FakeNode(userId="u1", familyTreeId="t1", name="Ramesh")}]])
        member = Member("u1", "t1", "Ramesh", profile_picture="p.png", my_relationship="Son")
        asyncio.run(CypherRepository(executor).add_member(member))
        params = executor.calls[0][2]
        assert params["profilePicture"] == "p.png"
        assert params["myRelationship"] == "Son"

    def test_update_member_maps_field_names(self):
        executor = RecordingExecutor([[{"u": FakeNode(userId="u1", familyTreeId="t1", name="R")}]])
        asyncio.run(CypherRepository(executor).update_member("t1", "u1", profile_picture="x.png", bogus=1))
        assert executor.calls[0][2]["properties"] == {"profilePicture": "x.png"}

    def test_replace_edge_pair_is_one_write(self):
        executor = RecordingExecutor([[{"created": 2}]])
        created = asyncio.run(CypherRepository(executor).replace_edge_pair("t1", "u1", "u2", "Father", "Son"))
        assert created == 2
        assert len(executor.calls) == 1
        kind, template, params = executor.calls[0]
        assert (kind, template) == ("write", REPLACE_EDGE_PAIR)
        assert params["relationship1"] == "Father"
        assert params["relationship2"] == "Son"

    def test_replace_edge_pair_no_match(self):
        repo = CypherRepository(RecordingExecutor([[{"created": 0}]]))
        assert asyncio.run(repo.replace_edge_pair("t1", "u1", "ghost", "Father", "Son")) == 0

    def test_list_edges(self):
        executor = RecordingExecutor([[
            {"source": "u1", "target": "u2", "type": "Father", "sourceName": "A", "targetName": "B"},
        ]])
        edges = asyncio.run(CypherRepository(executor).list_edges("t1"))
        assert executor.calls[0][1] == LIST_EDGES
        assert edges[0].relationship == "Father"
        assert edges[0].target_name == "B"

    def test_close_closes_executor(self):
        executor = RecordingExecutor()
        asyncio.run(CypherRepository(executor).close())
        assert executor.closed

    def test_init_applies_schema_when_reachable(self):
        executor = RecordingExecutor()
        assert asyncio.run(CypherRepository(executor).init())
        assert executor.schema_applied

    def test_init_skips_schema_when_unreachable(self):
        executor = RecordingExecutor(reachable=False)
        assert not asyncio.run(CypherRepository(executor).init())
        assert not executor.schema_applied
