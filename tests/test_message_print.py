"""
주문 메시지 인쇄 API 테스트
"""

import pytest

ORDERS = "orders"


@pytest.fixture
def order_id(store):
    return store.insert(ORDERS, {
        "orderer": {"name": "김주문"},
        "message": {"type": "card", "content": "생일 축하해\n---\n엄마가"},
    })


@pytest.fixture
def plain_order_id(store):
    return store.insert(ORDERS, {
        "orderer": {"name": "김주문"},
        "message": {"type": "card", "content": "감사합니다"},
    })


def test_label_sheets(client, staff_headers):
    response = client.get("/api/orders/label-sheets", headers=staff_headers)
    assert response.status_code == 200
    assert [(s["id"], s["cell_count"]) for s in response.json()] == [
        ("formtec-3107", 6), ("formtec-3108", 8), ("formtec-3109", 12)
    ]


def test_initial_options_split_sender(client, staff_headers, order_id):
    response = client.get(f"/api/orders/{order_id}/message-print", headers=staff_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["options"]["messageContent"] == "생일 축하해"
    assert data["options"]["senderName"] == "엄마가"
    assert data["options"]["labelType"] == "formtec-3107"
    assert data["options"]["startPosition"] == 1
    assert data["options"]["messageFontSize"] == 14
    assert data["options"]["senderFontSize"] == 12
    assert data["options"]["messageFont"] == data["fonts"][0]
    assert len(data["preview"]["cells"]) == 6


def test_initial_options_fall_back_to_orderer(client, staff_headers, plain_order_id):
    data = client.get(f"/api/orders/{plain_order_id}/message-print", headers=staff_headers).json()
    assert data["options"]["messageContent"] == "감사합니다"
    assert data["options"]["senderName"] == "김주문"


def test_unknown_order(client, staff_headers):
    response = client.get("/api/orders/missing/message-print", headers=staff_headers)
    assert response.status_code == 404


def test_submit_builds_payload(client, staff_headers, order_id):
    response = client.post(
        f"/api/orders/{order_id}/message-print",
        json={
            "labelType": "formtec-3109",
            "startPosition": 5,
            "messageFont": "Nanum Gothic",
            "messageFontSize": 16,
            "senderName": "아빠가",
        },
        headers=staff_headers
    )
    assert response.status_code == 200
    data = response.json()
    assert data["payload"] == {
        "orderId": order_id,
        "labelType": "formtec-3109",
        "startPosition": 5,
        "messageFont": "Nanum Gothic",
        "messageFontSize": 16,
        "senderFont": "Noto Sans KR",
        "senderFontSize": 12,
        "messageContent": "생일 축하해",
        "senderName": "아빠가",
    }
    filled = [c["position"] for c in data["preview"]["cells"] if c["filled"]]
    assert filled == [5]
    assert len(data["preview"]["cells"]) == 12


@pytest.mark.parametrize("body", [
    {"labelType": "formtec-3107", "startPosition": 7},
    {"labelType": "formtec-3107", "startPosition": 0},
    {"labelType": "formtec-0000", "startPosition": 1},
    {"labelType": "formtec-3107", "startPosition": 1, "messageFont": "Wingdings"},
    {"labelType": "formtec-3107", "startPosition": 1, "messageContent": ""},
])
def test_submit_rejects_invalid_options(client, staff_headers, order_id, body):
    response = client.post(f"/api/orders/{order_id}/message-print", json=body, headers=staff_headers)
    assert response.status_code == 400


def test_submit_does_not_modify_order(client, staff_headers, store, order_id):
    client.post(
        f"/api/orders/{order_id}/message-print",
        json={"labelType": "formtec-3108", "startPosition": 2, "messageContent": "바뀐 메시지"},
        headers=staff_headers
    )
    assert store.get(ORDERS, order_id)["message"]["content"] == "생일 축하해\n---\n엄마가"


def test_update_message_joins_sender(client, staff_headers, store, plain_order_id):
    response = client.put(
        f"/api/orders/{plain_order_id}/message",
        json={"messageContent": "늘 고마워요", "senderName": "딸"},
        headers=staff_headers
    )
    assert response.status_code == 200
    message = store.get(ORDERS, plain_order_id)["message"]
    assert message["content"] == "늘 고마워요\n---\n딸"
    assert message["type"] == "card"

    data = client.get(f"/api/orders/{plain_order_id}/message-print", headers=staff_headers).json()
    assert (data["options"]["messageContent"], data["options"]["senderName"]) == ("늘 고마워요", "딸")
