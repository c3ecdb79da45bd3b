"""
지역별 배송비 관리

배송비 레코드 목록을 저장소에서 읽어오고, 중복 지역을 감지하며,
추가/수정/삭제/중복 정리 작업을 수행한다. 모든 쓰기 작업 뒤에는
목록 전체를 다시 읽어오며, 메모리 목록은 조회에 성공했을 때만 통째로 교체된다.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from flowershop.config import COLLECTION_DELIVERY_FEES, DEFAULT_RETENTION_POLICY
from flowershop.exceptions import BackendUnavailableError, ValidationError
from flowershop.logger import get_logger
from flowershop.store import DocumentStore
from flowershop.utils import korean_sort_key, parse_fee

logger = get_logger(__name__)


@dataclass(frozen=True)
class DeliveryFeeRecord:
    """배송비 레코드"""
    id: str
    district: str
    fee: int
    updated_at: Optional[str] = None

    @classmethod
    def from_document(cls, record: Dict[str, Any]) -> "DeliveryFeeRecord":
        return cls(
            id=record["id"],
            district=record.get("district", ""),
            fee=int(record.get("fee", 0)),
            updated_at=record.get("updatedAt"),
        )


@dataclass
class DuplicateGroup:
    """같은 지역명을 가진 레코드 묶음 (저장하지 않음)"""
    district: str
    items: List[DeliveryFeeRecord] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.items)


def sort_records(records: Sequence[DeliveryFeeRecord]) -> List[DeliveryFeeRecord]:
    """지역명 가나다순 정렬"""
    return sorted(records, key=lambda r: korean_sort_key(r.district))


def detect_duplicates(records: Sequence[DeliveryFeeRecord]) -> List[DuplicateGroup]:
    """
    중복 지역 감지

    지역명이 정확히 같은 레코드끼리 묶고, 2개 이상인 묶음만 반환한다.
    묶음 순서와 묶음 내부 순서는 입력 목록에서 처음 나온 순서를 따른다.

    Args:
        records: 배송비 레코드 목록

    Returns:
        List[DuplicateGroup]: 중복 묶음 목록 (중복이 없으면 빈 목록)

    사용 예:
        groups = detect_duplicates(registry.records)
        if not groups:
            print("중복 없음")
    """
    groups: Dict[str, DuplicateGroup] = {}
    for record in records:
        group = groups.get(record.district)
        if group is None:
            group = groups[record.district] = DuplicateGroup(district=record.district)
        group.items.append(record)
    return [g for g in groups.values() if g.count > 1]


def keep_first(items: Sequence[DeliveryFeeRecord]) -> DeliveryFeeRecord:
    """목록에서 가장 먼저 나온 레코드 유지"""
    return items[0]


def keep_latest(items: Sequence[DeliveryFeeRecord]) -> DeliveryFeeRecord:
    """가장 최근에 수정된 레코드 유지 (동률이면 먼저 나온 레코드)"""
    latest = items[0]
    for item in items[1:]:
        if (item.updated_at or "") > (latest.updated_at or ""):
            latest = item
    return latest


def keep_lowest_fee(items: Sequence[DeliveryFeeRecord]) -> DeliveryFeeRecord:
    """배송비가 가장 낮은 레코드 유지 (동률이면 먼저 나온 레코드)"""
    return min(items, key=lambda r: r.fee)


RetentionPolicy = Callable[[Sequence[DeliveryFeeRecord]], DeliveryFeeRecord]

RETENTION_POLICIES: Dict[str, RetentionPolicy] = {
    "keep_first": keep_first,
    "keep_latest": keep_latest,
    "keep_lowest_fee": keep_lowest_fee,
}


def resolve_policy(policy: Union[str, RetentionPolicy, None]) -> RetentionPolicy:
    if policy is None:
        policy = DEFAULT_RETENTION_POLICY
    if callable(policy):
        return policy
    if policy not in RETENTION_POLICIES:
        raise ValidationError(
            f"알 수 없는 유지 정책입니다: {policy} (가능한 값: {', '.join(RETENTION_POLICIES)})"
        )
    return RETENTION_POLICIES[policy]


class DistrictFeeRegistry:
    """
    지역별 배송비 레지스트리

    Args:
        store: 문서 저장소
        collection: 배송비 컬렉션 이름
        reject_duplicate_insert: True이면 이미 있는 지역명 추가를 거부

    사용 예:
        registry = DistrictFeeRegistry(store)
        registry.refresh()
        registry.add_district("강남구", 15000)
        registry.merge_duplicates()
    """

    def __init__(
        self,
        store: DocumentStore,
        collection: str = COLLECTION_DELIVERY_FEES,
        reject_duplicate_insert: bool = False,
    ):
        self.store = store
        self.collection = collection
        self.reject_duplicate_insert = reject_duplicate_insert
        self._records: List[DeliveryFeeRecord] = []

    @property
    def records(self) -> List[DeliveryFeeRecord]:
        """마지막으로 조회에 성공한 목록"""
        return list(self._records)

    def refresh(self) -> List[DeliveryFeeRecord]:
        """
        저장소에서 목록 전체를 다시 읽어온다

        실패하면 기존 메모리 목록을 그대로 두고 BackendUnavailableError를 전달한다.
        """
        try:
            documents = self.store.list_all(self.collection)
        except BackendUnavailableError:
            logger.error("배송비 목록 조회 실패, 기존 목록 유지")
            raise
        self._records = sort_records(DeliveryFeeRecord.from_document(d) for d in documents)
        return self.records

    def list(self) -> List[DeliveryFeeRecord]:
        """지역명 가나다순으로 정렬된 최신 목록 (매번 새로 조회)"""
        return self.refresh()

    def update_fee(self, fee_id: str, new_fee: Any) -> List[DeliveryFeeRecord]:
        """
        배송비 수정

        Args:
            fee_id: 레코드 ID
            new_fee: 새 배송비 (0 이상의 정수)

        Returns:
            List[DeliveryFeeRecord]: 수정 후 다시 조회한 목록

        Raises:
            ValidationError: 배송비가 올바르지 않은 경우 (저장소 호출 없음)
            BackendUnavailableError: 저장소 작업 실패
        """
        fee = parse_fee(new_fee)
        self.store.update_fields(self.collection, fee_id, {"fee": fee})
        logger.info(f"배송비 수정: {fee_id} -> {fee}")
        return self.refresh()

    def add_district(self, name: str, fee: Any) -> List[DeliveryFeeRecord]:
        """
        새 지역 추가

        기본적으로 중복 여부를 확인하지 않는다. 중복은 merge_duplicates로 정리한다.

        Raises:
            ValidationError: 지역명이 비었거나 배송비가 올바르지 않은 경우
        """
        district = (name or "").strip()
        if not district:
            raise ValidationError("지역명과 배송비를 모두 입력해주세요.")
        fee_value = parse_fee(fee)
        if self.reject_duplicate_insert and any(r.district == district for r in self._records):
            raise ValidationError(f"이미 등록된 지역입니다: {district}")
        new_id = self.store.insert(self.collection, {"district": district, "fee": fee_value})
        logger.info(f"지역 추가: {district} ({fee_value}) id={new_id}")
        return self.refresh()

    def delete_district(self, fee_id: str, name: str, confirmed: bool = False) -> List[DeliveryFeeRecord]:
        """
        지역 삭제

        Args:
            fee_id: 레코드 ID
            name: 확인 메시지에 표시할 지역명
            confirmed: 사용자 확인 여부

        Raises:
            ValidationError: 확인하지 않은 경우
        """
        if not confirmed:
            raise ValidationError(f"'{name}' 지역을 삭제하려면 확인이 필요합니다.")
        self.store.delete_by_id(self.collection, fee_id)
        logger.info(f"지역 삭제: {name} id={fee_id}")
        return self.refresh()

    def detect_duplicates(self, records: Optional[Sequence[DeliveryFeeRecord]] = None) -> List[DuplicateGroup]:
        """현재 메모리 목록(또는 주어진 목록)의 중복 묶음"""
        return detect_duplicates(self._records if records is None else records)

    def merge_duplicates(self, policy: Union[str, RetentionPolicy, None] = None) -> List[str]:
        """
        중복 지역 정리

        중복 묶음마다 정책에 따라 하나만 남기고 나머지를 하나씩 삭제한 뒤
        목록을 한 번 다시 읽어온다. 중복이 없으면 아무 작업도 하지 않는다.

        Args:
            policy: 유지 정책 이름 (keep_first, keep_latest, keep_lowest_fee) 또는 함수

        Returns:
            List[str]: 삭제한 레코드 ID 목록
        """
        retain = resolve_policy(policy)
        groups = self.detect_duplicates()
        if not groups:
            return []

        removed = []
        for group in groups:
            keeper = retain(group.items)
            for item in group.items:
                if item.id == keeper.id:
                    continue
                self.store.delete_by_id(self.collection, item.id)
                removed.append(item.id)
            logger.info(f"중복 정리: {group.district} {group.count}건 중 {keeper.id} 유지")

        self.refresh()
        return removed

    def summary(self) -> Dict[str, int]:
        """
        통계 정보

        Returns:
            dict: 총 지역 수, 평균 배송비(원 단위 반올림), 중복 지역 수, 중복 항목 수
        """
        total = len(self._records)
        groups = self.detect_duplicates()
        average = int(sum(r.fee for r in self._records) / total + 0.5) if total else 0
        return {
            "total_districts": total,
            "average_fee": average,
            "duplicate_districts": len(groups),
            "duplicate_items": sum(g.count for g in groups),
        }
