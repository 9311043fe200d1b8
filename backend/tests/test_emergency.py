"""
Test emergency info, the emergency cards and the Health ID endpoints.
"""

import json

import pytest
from fastapi.testclient import TestClient

from healthvault.core.exceptions import ValidationError
from healthvault.core.security import TokenService
from healthvault.schemas.emergency import EmergencyInfoUpdate
from healthvault.services.emergency_service import EmergencyService

CONTACTS = [
    {"name": "Ana", "phone": "+15550001", "relation": "sister"},
    {"name": "Ben", "phone": "+15550002", "relation": "friend"},
    {"name": "Cleo", "phone": "+15550003"},
]

FULL_INFO = {
    "bloodGroup": "O+",
    "allergies": ["Penicillin", "  ", "Peanuts"],
    "chronicDiseases": ["Asthma"],
    "medications": ["Salbutamol"],
    "emergencyContacts": CONTACTS,
    "organDonor": True,
}


def _health_code(client: TestClient, headers):
    return client.get("/api/v1/health-id", headers=headers).json()["healthCode"]


def test_emergency_info_defaults(client: TestClient, auth_headers):
    response = client.get("/api/v1/emergency", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["bloodGroup"] is None
    assert data["allergies"] == []
    assert data["emergencyContacts"] == []
    assert data["organDonor"] is False


def test_emergency_update_is_partial(client: TestClient, auth_headers):
    """Test fields left out of the body keep their stored values."""
    client.put("/api/v1/emergency", json=FULL_INFO, headers=auth_headers)

    response = client.put(
        "/api/v1/emergency", json={"allergies": ["Latex"]}, headers=auth_headers
    )

    assert response.status_code == 200
    data = response.json()
    assert data["allergies"] == ["Latex"]
    assert data["bloodGroup"] == "O+"
    assert data["medications"] == ["Salbutamol"]
    assert [c["name"] for c in data["emergencyContacts"]] == ["Ana", "Ben", "Cleo"]
    assert data["organDonor"] is True


def test_emergency_update_null_clears(client: TestClient, auth_headers):
    client.put("/api/v1/emergency", json=FULL_INFO, headers=auth_headers)

    response = client.put(
        "/api/v1/emergency",
        json={"medications": None, "bloodGroup": None},
        headers=auth_headers,
    )

    data = response.json()
    assert data["medications"] == []
    assert data["bloodGroup"] is None
    assert data["allergies"] == ["Penicillin", "Peanuts"]


def test_emergency_update_rejects_unknown_blood_group(client: TestClient, auth_headers):
    response = client.put(
        "/api/v1/emergency", json={"bloodGroup": "Z+"}, headers=auth_headers
    )
    assert response.status_code == 422


def test_emergency_card_is_complete(client: TestClient, auth_headers):
    client.put("/api/v1/emergency", json=FULL_INFO, headers=auth_headers)

    response = client.get("/api/v1/emergency/card", headers=auth_headers)

    assert response.status_code == 200
    card = response.json()
    assert card["name"] == "Api User"
    assert card["healthCode"] == _health_code(client, auth_headers)
    assert card["chronicDiseases"] == ["Asthma"]
    assert card["medications"] == ["Salbutamol"]
    assert len(card["emergencyContacts"]) == 3
    assert card["organDonor"] is True


def test_public_card_is_redacted(client: TestClient, auth_headers):
    """Test the public card only exposes name, blood group, allergies, two contacts."""
    client.put("/api/v1/emergency", json=FULL_INFO, headers=auth_headers)
    code = _health_code(client, auth_headers)

    response = client.get(f"/api/v1/emergency/public/{code}")

    assert response.status_code == 200
    card = response.json()
    assert set(card) == {"name", "bloodGroup", "allergies", "emergencyContacts"}
    assert card["name"] == "Api User"
    assert card["bloodGroup"] == "O+"
    assert card["allergies"] == ["Penicillin", "Peanuts"]
    assert [c["name"] for c in card["emergencyContacts"]] == ["Ana", "Ben"]


def test_public_card_without_emergency_info(client: TestClient, auth_headers):
    code = _health_code(client, auth_headers)

    card = client.get(f"/api/v1/emergency/public/{code}").json()

    assert card["bloodGroup"] is None
    assert card["allergies"] == []
    assert card["emergencyContacts"] == []


def test_public_card_bad_format_is_422(client: TestClient):
    for bad in ("HV-2024-abcd-EFGH", "HV-2024-ABCD", "XX-2024-ABCD-EFGH"):
        response = client.get(f"/api/v1/emergency/public/{bad}")
        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"


def test_public_card_unknown_code_is_404(client: TestClient):
    response = client.get("/api/v1/emergency/public/HV-2024-ZZZZ-ZZZZ")

    assert response.status_code == 404
    assert response.json()["statusCode"] == 404


def test_public_card_service_limits_contacts(db_session, verified_user):
    service = EmergencyService(db_session)
    service.update_emergency_info(
        verified_user.user.id,
        EmergencyInfoUpdate(emergency_contacts=CONTACTS),
    )

    card = service.get_public_card(verified_user.user.health_code)

    assert len(card.emergency_contacts) == 2
    assert not hasattr(card, "medications")


def test_health_id(client: TestClient, auth_headers):
    response = client.get("/api/v1/health-id", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["healthCode"].startswith("HV-")
    assert data["createdAt"]


def test_health_id_missing_before_verification(client: TestClient, registered_user, settings):
    """Test an unverified user has no Health ID."""
    user_id, _ = registered_user
    token = TokenService(settings).issue(user_id)

    response = client.get(
        "/api/v1/health-id", headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 404


def test_health_id_qr_payload(client: TestClient, auth_headers):
    client.put("/api/v1/emergency", json=FULL_INFO, headers=auth_headers)

    response = client.get("/api/v1/health-id/qr", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["user"] == {"firstName": "Api", "lastName": "User", "bloodGroup": "O+"}

    payload = json.loads(data["qrData"])
    assert payload["type"] == "HEALTHVAULT_EMERGENCY"
    assert payload["healthId"] == data["healthCode"]
    assert payload["allergies"] == ["Penicillin", "Peanuts"]
    assert len(payload["emergencyContacts"]) == 2
    assert "medications" not in payload


def test_public_card_service_rejects_malformed_code(db_session):
    with pytest.raises(ValidationError):
        EmergencyService(db_session).get_public_card("hv-2024-abcd-efgh")
