"""
Search 서비스 테스트
통합 검색, 타입별 검색, 검색 인덱스 유지
"""
from sqlalchemy import select

import pytest

from schemajeli.models import EntityType, SearchIndex
from schemajeli.services.abbreviation_service import AbbreviationService
from schemajeli.services.search_service import (
    SearchIndexer,
    build_index_content,
    resolve_entity_type,
    search_all,
    search_entity,
    search_index,
)
from schemajeli.services.server_service import ServerService
from schemajeli.utils.errors import ValidationError


@pytest.fixture
def abbreviations(db_session, settings):
    service = AbbreviationService(db_session, settings)
    return [
        service.create({"source": "Account", "abbreviation": "ACCT", "definition": "customer account"}),
        service.create({"source": "Accounting Period", "abbreviation": "ACPR", "definition": "acct period"}),
        service.create({"source": "Amount", "abbreviation": "AMT", "definition": "money value"}),
    ]


class TestResolveEntityType:

    @pytest.mark.parametrize("value", ["servers", "server", "SERVER", " Servers "])
    def test_aliases(self, value):
        assert resolve_entity_type(value) is EntityType.SERVER

    def test_users_not_searchable(self):
        with pytest.raises(ValidationError):
            resolve_entity_type("users")

    def test_unknown(self):
        with pytest.raises(ValidationError) as exc_info:
            resolve_entity_type("widgets")

        assert "abbreviations" in exc_info.value.details["supported"]


class TestSearch:
    """엔티티 테이블 직접 검색"""

    def test_abbreviation_list_search(self, db_session, settings, abbreviations):
        """source/abbreviation/definition 중 하나라도 대소문자 무시 포함"""
        items, total = AbbreviationService(db_session, settings).list(search="ACCT")

        assert total == 2
        assert {a.abbreviation for a in items} == {"ACCT", "ACPR"}

    def test_search_entity(self, db_session, abbreviations):
        results = search_entity(db_session, "abbreviations", "acct")

        assert [a.abbreviation for a in results] == ["ACCT", "ACPR"]

    def test_search_entity_excludes_deleted(self, db_session, settings, abbreviations):
        AbbreviationService(db_session, settings).soft_delete(abbreviations[0].id)

        results = search_entity(db_session, EntityType.ABBREVIATION, "acct")

        assert [a.abbreviation for a in results] == ["ACPR"]

    def test_search_entity_limit(self, db_session, abbreviations):
        assert len(search_entity(db_session, "abbreviations", "a", limit=1)) == 1

    def test_search_all(self, db_session, server, database, table):
        results = search_all(db_session, "acct")

        assert [t.name for t in results["tables"]] == ["ACCT_MASTER"]
        assert results["servers"] == []
        assert results["totalResults"] == 1

    def test_wildcard_characters_are_literal(self, db_session, settings, abbreviations):
        """% 와 _ 는 LIKE 와일드카드가 아니라 문자 그대로 검색"""
        service = AbbreviationService(db_session, settings)
        service.create({"source": "Percent", "abbreviation": "PCT", "definition": "50% share"})

        items, total = service.list(search="%")
        assert total == 1
        assert items[0].abbreviation == "PCT"

        _, total = service.list(search="A_C")
        assert total == 0

        assert [a.abbreviation for a in search_entity(db_session, "abbreviations", "%")] == ["PCT"]
        assert search_entity(db_session, "abbreviations", "A_C") == []

    def test_blank_query_rejected(self, db_session):
        with pytest.raises(ValidationError) as exc_info:
            search_all(db_session, "   ")

        assert exc_info.value.message == "Search query is required"


class TestSearchIndex:
    """SearchIndex 유지 및 조회"""

    def test_create_indexes_entity(self, db_session, server):
        row = db_session.scalars(select(SearchIndex).where(SearchIndex.entity_id == server.id)).one()

        assert row.entity_type == "SERVER"
        assert row.content == "prod-db-01 10.0.0.1 Seoul"
        assert row.index_metadata == {"label": "prod-db-01"}

    def test_metadata_includes_parent(self, db_session, server, database):
        row = db_session.scalars(select(SearchIndex).where(SearchIndex.entity_id == database.id)).one()

        assert row.index_metadata["server_id"] == str(server.id)

    def test_update_refreshes_index(self, db_session, settings, server):
        ServerService(db_session, settings).update(server.id, {"description": "billing primary"})

        items, total = search_index(db_session, "billing")

        assert total == 1
        assert items[0].entity_id == server.id

    def test_delete_removes_and_restore_reindexes(self, db_session, settings, server):
        service = ServerService(db_session, settings)
        service.soft_delete(server.id)
        assert search_index(db_session, "prod")[1] == 0

        service.restore(server.id)
        assert search_index(db_session, "prod")[1] == 1

    def test_wildcard_characters_are_literal(self, db_session, settings, abbreviations):
        AbbreviationService(db_session, settings).create(
            {"source": "Percent", "abbreviation": "PCT", "definition": "50% share"}
        )

        items, total = search_index(db_session, "%")

        assert total == 1
        assert items[0].content == "Percent PCT 50% share"
        assert search_index(db_session, "A_C")[1] == 0

    def test_entity_type_filter(self, db_session, server, database):
        _, total = search_index(db_session, "s", entity_type="databases")

        assert total == 1

    def test_build_index_content_skips_empty(self, server):
        server.location = None

        assert build_index_content(EntityType.SERVER, server) == "prod-db-01 10.0.0.1"

    def test_indexer_ignores_users(self, db_session, admin_user):
        SearchIndexer(db_session).upsert(EntityType.USER, admin_user)

        assert db_session.scalars(select(SearchIndex)).all() == []
