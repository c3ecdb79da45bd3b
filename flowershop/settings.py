"""
시스템 설정

system/settings 문서 하나에 전체 설정을 저장한다. 저장된 값이 없는 항목은
기본값으로 채운다.
"""

import copy
from typing import Any, Dict

from flowershop.config import COLLECTION_SYSTEM, FALLBACK_FONTS, SETTINGS_DOC_ID
from flowershop.logger import get_logger
from flowershop.store import DocumentStore

logger = get_logger(__name__)

# 저장소가 붙이는 메타 필드
META_FIELDS = ("id", "createdAt", "updatedAt")

DEFAULT_SETTINGS: Dict[str, Any] = {
    # 브랜드 정보
    "brandName": "플라워샵",
    "brandLogo": "",
    "brandFavicon": "/favicon.ico",
    "brandContactPhone": "02-1234-5678",
    "brandAddress": "서울특별시 종로구 광화문로 123",
    "businessNumber": "123-45-67890",
    "businessOwner": "홍길동",
    "onlineShoppingMall": "",

    # 사이트 정보
    "siteName": "플라워샵 ERP",
    "siteDescription": "플라워샵 주문관리 및 가맹점 관리를 위한 ERP 시스템",
    "contactEmail": "admin@example.com",
    "contactPhone": "02-1234-5678",

    # 기본 배송비
    "defaultDeliveryFee": 3000,
    "freeDeliveryThreshold": 50000,

    # 알림
    "emailNotifications": True,
    "smsNotifications": False,

    # 시스템
    "autoBackup": True,
    "backupFrequency": "daily",
    "dataRetentionDays": 365,

    # 포인트
    "pointEarnRate": 2,
    "pointUseRate": 1,

    # 주문
    "orderNumberPrefix": "ORD",
    "autoOrderNumber": True,

    # 보안
    "sessionTimeout": 30,
    "requirePasswordChange": False,
    "passwordMinLength": 8,

    # 메시지 출력
    "messageFont": "Noto Sans KR",
    "messageFontSize": 14,
    "messageColor": "#000000",
    "messageTemplate": "안녕하세요! {고객명}님의 주문이 {상태}되었습니다. 감사합니다.",
    "availableFonts": FALLBACK_FONTS[:3] + [
        "Nanum Myeongjo",
        "Gaegu",
        "Noto Serif KR",
        "Source Code Pro",
        "Roboto",
        "Open Sans",
        "Lato",
        "Montserrat",
        "Poppins",
    ] + FALLBACK_FONTS[3:] + [
        "Georgia",
        "Verdana",
        "Tahoma",
        "Courier New",
        "Impact",
        "Comic Sans MS",
    ],

    # 자동 이메일
    "autoEmailDeliveryComplete": True,
    "autoEmailOrderConfirm": True,
    "autoEmailStatusChange": False,
    "autoEmailBirthday": True,
    "emailTemplateOrderConfirm": (
        "안녕하세요 {고객명}님!\n\n주문이 성공적으로 접수되었습니다.\n\n"
        "주문번호: {주문번호}\n주문일: {주문일}\n총 금액: {총금액}원\n\n감사합니다.\n{회사명}"
    ),
    "emailTemplateStatusChange": (
        "안녕하세요 {고객명}님!\n\n주문 상태가 변경되었습니다.\n\n"
        "주문번호: {주문번호}\n이전 상태: {이전상태}\n현재 상태: {현재상태}\n\n감사합니다.\n{회사명}"
    ),
    "emailTemplateBirthday": (
        "안녕하세요 {고객명}님!\n\n생일을 진심으로 축하드립니다!\n\n"
        "특별한 할인 혜택을 드립니다.\n\n감사합니다.\n{회사명}"
    ),

    # 할인
    "defaultDiscountRate": 0,
    "maxDiscountRate": 10,
    "discountReason": "회원 할인",

    # 배송완료 사진
    "autoDeleteDeliveryPhotos": False,
    "deliveryPhotoRetentionDays": 90,

    # 이메일 사진 첨부
    "emailPhotoAttachment": True,
    "attachOrderPhotos": True,
    "attachDeliveryPhotos": True,
    "attachBrandLogo": True,
    "maxPhotoSize": 5,  # MB

    # 메뉴
    "menuSettings": {
        "dashboard": {"visible": True, "order": 1, "label": "대시보드"},
        "orders/new": {"visible": True, "order": 2, "label": "주문접수"},
        "orders": {"visible": True, "order": 3, "label": "주문현황"},
        "customers": {"visible": True, "order": 4, "label": "고객관리"},
        "products": {"visible": True, "order": 5, "label": "상품관리"},
        "materials": {"visible": True, "order": 6, "label": "자재관리"},
        "pickup-delivery": {"visible": True, "order": 7, "label": "픽업/배송"},
        "delivery-fees": {"visible": True, "order": 8, "label": "배송비관리"},
        "partners": {"visible": True, "order": 9, "label": "거래처관리"},
        "reports": {"visible": True, "order": 10, "label": "리포트분석"},
        "hr": {"visible": True, "order": 11, "label": "인사관리"},
        "settings": {"visible": True, "order": 12, "label": "설정"},
    },
}



def _without_meta(document: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in document.items() if k not in META_FIELDS}


class SettingsService:
    """
    시스템 설정 로드/저장

    사용 예:
        settings = SettingsService(store).load()
        fonts = settings["availableFonts"]
    """

    def __init__(self, store: DocumentStore):
        self.store = store

    def load(self) -> Dict[str, Any]:
        """
        설정 로드

        저장된 문서가 없으면 기본값을 먼저 저장한다.
        """
        stored = self.store.get(COLLECTION_SYSTEM, SETTINGS_DOC_ID)
        if stored is None:
            logger.info("저장된 설정이 없어 기본 설정으로 초기화")
            self.store.set(COLLECTION_SYSTEM, SETTINGS_DOC_ID, DEFAULT_SETTINGS)
            return copy.deepcopy(DEFAULT_SETTINGS)

        settings = copy.deepcopy(DEFAULT_SETTINGS)
        settings.update(_without_meta(stored))
        return settings

    def save(self, settings: Dict[str, Any]) -> Dict[str, Any]:
        merged = self.load()
        merged.update(_without_meta(settings))
        self.store.set(COLLECTION_SYSTEM, SETTINGS_DOC_ID, merged)
        logger.info("시스템 설정 저장")
        return self.load()

    def get(self, key: str) -> Any:
        return self.load().get(key)

    def available_fonts(self):
        return self.load().get("availableFonts") or list(FALLBACK_FONTS)
