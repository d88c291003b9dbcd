from datetime import timedelta

from app.models.subscriber import EmailSubscriber
from app.utils.dates import utcnow

SUBSCRIBERS = "/api/subscribers"


def _subscriber(db, email):
    return db.query(EmailSubscriber).filter(EmailSubscriber.email == email).first()


def test_subscribe_issues_tokens(client, db):
    response = client.post(SUBSCRIBERS, json={"email": "Reader@Example.com", "source": "footer"})

    assert response.status_code == 201
    assert response.json()["message"] == "Subscription successful"

    subscriber = _subscriber(db, "reader@example.com")
    assert subscriber.verification_token
    assert subscriber.unsubscribe_token
    assert subscriber.source == "footer"
    assert subscriber.preferences == {"comics": True, "blog": True, "announcements": True, "weekly_digest": True}


def test_subscribe_rejects_invalid_email(client):
    assert client.post(SUBSCRIBERS, json={"email": "not-an-email"}).status_code == 400


def test_verify_then_subscribe_again_reports_already_subscribed(client, db):
    client.post(SUBSCRIBERS, json={"email": "fan@example.com"})
    token = _subscriber(db, "fan@example.com").verification_token

    verified = client.get(f"{SUBSCRIBERS}/verify/{token}")
    again = client.post(SUBSCRIBERS, json={"email": "fan@example.com"})

    assert verified.status_code == 200
    assert again.json()["message"] == "Already subscribed"


def test_expired_verification_token_is_rejected(client, db):
    client.post(SUBSCRIBERS, json={"email": "late@example.com"})
    subscriber = _subscriber(db, "late@example.com")
    subscriber.verification_sent_at = utcnow() - timedelta(hours=25)
    db.commit()

    response = client.get(f"{SUBSCRIBERS}/verify/{subscriber.verification_token}")

    assert response.status_code == 400


def test_unsubscribe_and_resubscribe_merges_preferences(client, db):
    client.post(SUBSCRIBERS, json={"email": "fickle@example.com"})
    token = _subscriber(db, "fickle@example.com").unsubscribe_token

    assert client.get(f"{SUBSCRIBERS}/unsubscribe/{token}").status_code == 200
    assert _subscriber(db, "fickle@example.com").is_subscribed is False

    client.post(SUBSCRIBERS, json={
        "email": "fickle@example.com",
        "preferences": {"comics": True, "blog": False, "announcements": True, "weekly_digest": False}
    })

    subscriber = _subscriber(db, "fickle@example.com")
    db.refresh(subscriber)
    assert subscriber.is_subscribed is True
    assert subscriber.unsubscribed_at is None
    assert subscriber.preferences["blog"] is False


def test_unsubscribe_with_unknown_token_is_404(client):
    assert client.get(f"{SUBSCRIBERS}/unsubscribe/nope").status_code == 404


def test_admin_list_and_detail(client, db, admin_headers):
    client.post(SUBSCRIBERS, json={"email": "a@gmail.com"})
    client.post(SUBSCRIBERS, json={"email": "b@royalbird.studio"})

    listing = client.get(SUBSCRIBERS, headers=admin_headers).json()
    assert listing["meta"]["total"] == 2

    corporate = _subscriber(db, "b@royalbird.studio")
    detail = client.get(f"{SUBSCRIBERS}/{corporate.id}", headers=admin_headers).json()["data"]
    assert detail["meta"] == {"provider": "royalbird.studio", "is_corporate": True, "tenure_days": 0}


def test_admin_list_verified_filter(client, db, admin_headers):
    client.post(SUBSCRIBERS, json={"email": "v@example.com"})
    client.post(SUBSCRIBERS, json={"email": "u@example.com"})
    client.get(f"{SUBSCRIBERS}/verify/{_subscriber(db, 'v@example.com').verification_token}")

    data = client.get(SUBSCRIBERS, params={"verified": True}, headers=admin_headers).json()["data"]

    assert [s["email"] for s in data] == ["v@example.com"]


def test_subscriber_admin_routes_need_admin(client, user_headers):
    assert client.get(SUBSCRIBERS, headers=user_headers).status_code == 403
    assert client.get(f"{SUBSCRIBERS}/stats").status_code == 401


def test_growth_stats(client, db, admin_headers):
    client.post(SUBSCRIBERS, json={"email": "new@example.com"})
    client.post(SUBSCRIBERS, json={"email": "gone@example.com"})
    client.get(f"{SUBSCRIBERS}/unsubscribe/{_subscriber(db, 'gone@example.com').unsubscribe_token}")

    stats = client.get(f"{SUBSCRIBERS}/stats", headers=admin_headers).json()["data"]

    assert stats["total"] == 1
    assert stats["new_signups"] == 1
    assert stats["unsubscribes"] == 1
    assert stats["net_growth"] == 0
    assert stats["trend"] == 100.0
    assert stats["growth_percentage"] == "100.0"
