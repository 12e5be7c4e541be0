"""
Side-effect durability

durable: 실패가 그대로 전파되어 호출자의 트랜잭션 전체가 롤백된다.
best_effort: SAVEPOINT 안에서 실행하며 실패 시 SAVEPOINT만 롤백하고 로그를 남긴다.
"""
import logging
from typing import Callable, Optional, TypeVar

from sqlalchemy.orm import Session

from schemajeli.utils.metrics import record_side_effect_failure

logger = logging.getLogger(__name__)

DURABLE = "durable"
BEST_EFFORT = "best_effort"
DURABILITY_MODES = (DURABLE, BEST_EFFORT)

R = TypeVar("R")


def validate_durability(mode: str) -> str:
    if mode not in DURABILITY_MODES:
        raise ValueError(f"Unknown durability mode: {mode!r} (expected one of {DURABILITY_MODES})")
    return mode


def run_side_effect(
    db: Session,
    mode: str,
    action: Callable[[], R],
    label: str,
) -> Optional[R]:
    """
    부수 효과를 설정된 내구성에 따라 실행

    Args:
        db: 호출자의 세션 (트랜잭션 진행 중)
        mode: durable 또는 best_effort
        action: 실행할 함수 (db에 쓰고 flush)
        label: 로그용 이름

    Returns:
        action의 반환값 (best_effort 실패 시 None)
    """
    if mode == DURABLE:
        return action()

    try:
        with db.begin_nested():
            return action()
    except Exception:
        logger.error(f"Best-effort side effect failed: {label}", exc_info=True)
        record_side_effect_failure(label)
        return None
