"""
Abbreviation 서비스
명명 규칙 약어 사전 관리
"""
import logging
from typing import Any, Dict

from sqlalchemy import func

from schemajeli.models import Abbreviation, EntityType
from schemajeli.shared.base_service import SoftDeleteService
from schemajeli.utils.errors import ConflictError, raise_not_found

logger = logging.getLogger(__name__)


class AbbreviationService(SoftDeleteService[Abbreviation]):
    """약어 서비스 (약어 문자열은 전역 유일, 상위/하위 엔티티 없음)"""

    model = Abbreviation
    entity_type = EntityType.ABBREVIATION

    unique_fields = ("abbreviation",)

    search_fields = ("source", "abbreviation", "definition")
    exact_filters = ("is_prime_class",)
    substring_filters = ("category",)
    order_by = ("abbreviation",)

    def conflict_error(self, field: str) -> ConflictError:
        return ConflictError("Abbreviation already exists")

    def lookup(self, abbreviation: str) -> Abbreviation:
        """
        약어 문자열로 조회

        정확히 일치하는 약어를 우선하고, 없으면 대소문자를 무시해 찾는다
        (ACCT와 acct가 함께 있으면 각자 자기 자신이 조회됨)

        Raises:
            NotFoundError: 해당 약어 없음
        """
        text = abbreviation.strip()
        found = self.repo.find_active(abbreviation=text)
        if found is None:
            stmt = (
                self.repo.select()
                .where(func.lower(Abbreviation.abbreviation) == text.lower())
                .order_by(Abbreviation.abbreviation.asc())
            )
            found = self.db.scalars(stmt.limit(1)).first()
        if found is None:
            raise_not_found("Abbreviation", text)
        return found

    def stats(self) -> Dict[str, Any]:
        """
        약어 통계

        Returns:
            {"total", "primeClass", "byCategory": [{category, count}] (상위 10개, 미분류 제외)}
        """
        return {
            "total": self._active_count(),
            "primeClass": self._active_count(Abbreviation.is_prime_class.is_(True)),
            "byCategory": self._group_counts("category", "category", limit=10, skip_null=True),
        }
