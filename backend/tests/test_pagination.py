"""
Pagination helper tests
"""
import pytest
from sqlalchemy import select

from schemajeli.models import Server
from schemajeli.shared.pagination import (
    create_paginated_response,
    paginate,
    success_response,
    total_pages,
)


class TestTotalPages:
    @pytest.mark.parametrize(
        "total,limit,expected",
        [(0, 10, 0), (1, 10, 1), (10, 10, 1), (11, 10, 2), (25, 5, 5)],
    )
    def test_ceil(self, total, limit, expected):
        assert total_pages(total, limit) == expected

    def test_zero_limit(self):
        assert total_pages(5, 0) == 0


class TestEnvelopes:
    def test_paginated_response(self):
        response = create_paginated_response([{"id": 1}], total=21, page=3, limit=10)

        assert response == {
            "status": "success",
            "data": [{"id": 1}],
            "pagination": {"page": 3, "limit": 10, "total": 21, "totalPages": 3},
        }

    def test_success_response(self):
        assert success_response({"a": 1}) == {"status": "success", "data": {"a": 1}}


class TestPaginate:
    def test_offset_and_total(self, db_session, settings):
        from schemajeli.services.server_service import ServerService

        service = ServerService(db_session, settings)
        for i in range(5):
            service.create({"name": f"srv-{i}", "rdbms_type": "MYSQL"})

        items, total = paginate(db_session, select(Server).order_by(Server.name), page=2, limit=2)

        assert total == 5
        assert [s.name for s in items] == ["srv-2", "srv-3"]

    def test_page_beyond_end(self, db_session, server):
        items, total = paginate(db_session, select(Server), page=9, limit=10)

        assert items == []
        assert total == 1
