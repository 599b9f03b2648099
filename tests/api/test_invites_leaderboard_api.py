from __future__ import annotations

from tests.game.game_fixtures import _befriend, _create_products, _create_user


def _seed(api, *usernames: str) -> list[int]:  # noqa: ANN001
    return [api.run(_create_user, api.session_factory, username) for username in usernames]


def _private_session(api, creator_id: int) -> int:  # noqa: ANN001
    api.run(_create_products, api.session_factory)
    response = api.client.post(
        "/api/sessions",
        json={"name": "Invite only", "visibility": "private"},
        headers=api.auth(creator_id),
    )
    assert response.status_code == 201, response.text
    return response.json()["id"]


def test_invite_accept_flow(api) -> None:  # noqa: ANN001
    creator_id, guest_id = _seed(api, "alice", "bob")
    session_id = _private_session(api, creator_id)

    before = api.client.post(f"/api/sessions/{session_id}/join", headers=api.auth(guest_id))
    assert before.status_code == 403
    assert before.json()["detail"]["reason"] == "PrivateSession"

    sent = api.client.post(
        f"/api/sessions/{session_id}/invite",
        json={"invitee_username": "bob"},
        headers=api.auth(creator_id),
    )
    assert sent.status_code == 201
    assert sent.json()["status"] == "pending"
    assert sent.json()["resent"] is False
    invite_id = sent.json()["id"]

    duplicate = api.client.post(
        f"/api/sessions/{session_id}/invite",
        json={"invitee_id": guest_id},
        headers=api.auth(creator_id),
    )
    assert duplicate.status_code == 409
    assert duplicate.json()["detail"]["code"] == "E_INVITE_PENDING"

    received = api.client.get("/api/invites", headers=api.auth(guest_id))
    assert [item["id"] for item in received.json()] == [invite_id]
    assert received.json()[0]["inviter_username"] == "alice"

    sent_list = api.client.get("/api/invites/sent", headers=api.auth(creator_id))
    assert [item["invitee_username"] for item in sent_list.json()] == ["bob"]

    accepted = api.client.post(f"/api/invites/{invite_id}/accept", headers=api.auth(guest_id))
    assert accepted.status_code == 200
    assert accepted.json()["invite"]["status"] == "accepted"
    assert accepted.json()["participant"]["user_id"] == guest_id

    again = api.client.post(f"/api/invites/{invite_id}/accept", headers=api.auth(guest_id))
    assert again.status_code == 409
    assert again.json()["detail"]["code"] == "E_INVITE_ALREADY_PROCESSED"

    products = api.client.get(f"/api/sessions/{session_id}/products", headers=api.auth(guest_id))
    assert products.status_code == 200


def test_invite_requires_an_invitee(api) -> None:  # noqa: ANN001
    (creator_id,) = _seed(api, "alice")
    session_id = _private_session(api, creator_id)

    response = api.client.post(
        f"/api/sessions/{session_id}/invite",
        json={},
        headers=api.auth(creator_id),
    )

    assert response.status_code == 400
    assert response.json()["detail"]["field"] == "invitee"


def test_reject_and_cancel_invite(api) -> None:  # noqa: ANN001
    creator_id, guest_id, other_id = _seed(api, "alice", "bob", "carol")
    session_id = _private_session(api, creator_id)
    invite_id = api.client.post(
        f"/api/sessions/{session_id}/invite",
        json={"invitee_id": guest_id},
        headers=api.auth(creator_id),
    ).json()["id"]

    rejected = api.client.post(f"/api/invites/{invite_id}/reject", headers=api.auth(guest_id))
    assert rejected.status_code == 200
    assert rejected.json()["status"] == "rejected"

    only_pending = api.client.get(
        "/api/invites",
        params={"status": "pending"},
        headers=api.auth(guest_id),
    )
    assert only_pending.json() == []

    session_invites = api.client.get(f"/api/sessions/{session_id}/invites", headers=api.auth(creator_id))
    assert [item["status"] for item in session_invites.json()] == ["rejected"]
    hidden = api.client.get(f"/api/sessions/{session_id}/invites", headers=api.auth(other_id))
    assert hidden.status_code == 403

    not_inviter = api.client.delete(f"/api/invites/{invite_id}", headers=api.auth(other_id))
    assert not_inviter.status_code == 403
    assert not_inviter.json()["detail"]["reason"] == "NotInviterOrAdmin"

    canceled = api.client.delete(f"/api/invites/{invite_id}", headers=api.auth(creator_id))
    assert canceled.status_code == 204
    gone = api.client.post(f"/api/invites/{invite_id}/accept", headers=api.auth(guest_id))
    assert gone.status_code == 404
    assert gone.json() == {"detail": {"code": "E_INVITE_NOT_FOUND"}}


def test_global_and_friends_leaderboards(api) -> None:  # noqa: ANN001
    creator_id, player_id, friend_id = _seed(api, "alice", "bob", "carol")
    api.run(_create_products, api.session_factory)
    api.run(_befriend, api.session_factory, friend_id, player_id)
    session_id = api.client.post(
        "/api/sessions",
        json={"name": "Ranked"},
        headers=api.auth(creator_id),
    ).json()["id"]
    api.client.post(f"/api/sessions/{session_id}/join", headers=api.auth(player_id))
    products = api.client.get(f"/api/sessions/{session_id}/products", headers=api.auth(player_id))
    for item in products.json():
        api.client.post(
            f"/api/sessions/{session_id}/answer",
            json={"product_id": item["id"], "guessed_price": "0"},
            headers=api.auth(player_id),
        )

    global_board = api.client.get("/api/leaderboard/global", params={"limit": 500})
    friends_board = api.client.get("/api/leaderboard/friends", headers=api.auth(friend_id))
    session_board = api.client.get(
        f"/api/leaderboard/session/{session_id}",
        headers=api.auth(creator_id),
    )

    assert global_board.status_code == 200
    assert global_board.json()["scope"] == "global"
    assert [entry["username"] for entry in global_board.json()["entries"]] == ["bob"]
    assert global_board.json()["entries"][0]["games_played"] == 1
    assert [
        (entry["username"], entry["is_me"]) for entry in friends_board.json()["entries"]
    ] == [("bob", False), ("carol", True)]
    assert session_board.status_code == 200
    assert session_board.json()["entries"][0]["completed"] is True


def test_friends_leaderboard_requires_authentication(api) -> None:  # noqa: ANN001
    response = api.client.get("/api/leaderboard/friends")

    assert response.status_code == 401
