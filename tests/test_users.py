"""
Test suite for user endpoints.

Tests cover:
- Admin user creation
- Listing and retrieval (no password or admin flag in responses)
- Partial update, including the admin-only isAdmin field
- Deletion
"""

from jobly.core.security import decode_token, verify_password
from jobly.models.user import User

NEW_USER = {
    "username": "u-new",
    "firstName": "First-new",
    "lastName": "Last-newL",
    "password": "password-new",
    "email": "new@email.com",
    "isAdmin": False,
}


class TestUserCreation:
    """Tests for POST /users"""

    def test_create_non_admin(self, client, admin_headers):
        """Test admin creates a regular user and gets their token"""
        response = client.post("/api/v1/users", json=NEW_USER, headers=admin_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["user"] == {
            "username": "u-new",
            "firstName": "First-new",
            "lastName": "Last-newL",
            "email": "new@email.com",
        }
        payload = decode_token(data["token"])
        assert payload["sub"] == "u-new"
        assert payload["is_admin"] is False

    def test_create_admin(self, client, admin_headers):
        """Test admin creates another admin"""
        response = client.post("/api/v1/users", json={**NEW_USER, "isAdmin": True}, headers=admin_headers)

        assert response.status_code == 201
        assert decode_token(response.json()["token"])["is_admin"] is True

    def test_create_without_password(self, client, admin_headers, db_session):
        """Test a random password is stored when none is given"""
        body = {key: value for key, value in NEW_USER.items() if key != "password"}
        response = client.post("/api/v1/users", json=body, headers=admin_headers)

        assert response.status_code == 201
        stored = db_session.get(User, "u-new")
        assert stored.password.startswith("$2")

    def test_unauthorized_for_regular_user(self, client, user_headers):
        response = client.post("/api/v1/users", json=NEW_USER, headers=user_headers)
        assert response.status_code == 401

    def test_duplicate_username(self, client, admin_headers):
        """Test a taken username is rejected"""
        response = client.post("/api/v1/users", json={**NEW_USER, "username": "u2"}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Duplicate username: u2"

    def test_invalid_email(self, client, admin_headers):
        response = client.post("/api/v1/users", json={**NEW_USER, "email": "not-an-email"}, headers=admin_headers)
        assert response.status_code == 400


class TestUserList:
    """Tests for GET /users"""

    def test_list_as_admin(self, client, admin_headers, job_ids):
        """Test admin lists users with their applied jobs"""
        response = client.get("/api/v1/users", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {
            "users": [
                {
                    "username": "u1",
                    "firstName": "U1F",
                    "lastName": "U1L",
                    "email": "user1@user.com",
                    "jobs": [job_ids["j1"], job_ids["j2"]],
                },
                {
                    "username": "u2",
                    "firstName": "U2F",
                    "lastName": "U2L",
                    "email": "user2@user.com",
                    "jobs": [],
                },
                {
                    "username": "u3",
                    "firstName": "U3F",
                    "lastName": "U3L",
                    "email": "user3@user.com",
                    "jobs": [],
                },
            ]
        }

    def test_unauthorized_for_regular_user(self, client, user_headers):
        response = client.get("/api/v1/users", headers=user_headers)
        assert response.status_code == 401

    def test_unauthorized_for_anon(self, client):
        response = client.get("/api/v1/users")
        assert response.status_code == 401


class TestUserRetrieval:
    """Tests for GET /users/{username}"""

    def test_self(self, client, user_headers):
        """Test a user reads their own profile"""
        response = client.get("/api/v1/users/u2", headers=user_headers)

        assert response.status_code == 200
        assert response.json() == {
            "user": {
                "username": "u2",
                "firstName": "U2F",
                "lastName": "U2L",
                "email": "user2@user.com",
                "jobs": [],
            }
        }

    def test_admin_for_someone_else(self, client, admin_headers):
        response = client.get("/api/v1/users/u3", headers=admin_headers)
        assert response.status_code == 200

    def test_no_sensitive_fields(self, client, admin_headers):
        """Test password and admin flag never leave the server"""
        user = client.get("/api/v1/users/u1", headers=admin_headers).json()["user"]

        assert "password" not in user
        assert "isAdmin" not in user

    def test_unauthorized_for_other_user(self, client, user_headers):
        response = client.get("/api/v1/users/u3", headers=user_headers)
        assert response.status_code == 401

    def test_unauthorized_for_anon(self, client):
        response = client.get("/api/v1/users/u2")
        assert response.status_code == 401

    def test_not_found(self, client, admin_headers):
        response = client.get("/api/v1/users/nope", headers=admin_headers)
        assert response.status_code == 404


class TestUserUpdate:
    """Tests for PATCH /users/{username}"""

    def test_self_update(self, client, user_headers):
        """Test a user updates their own name"""
        response = client.patch("/api/v1/users/u2", json={"firstName": "New"}, headers=user_headers)

        assert response.status_code == 200
        assert response.json() == {
            "user": {
                "username": "u2",
                "firstName": "New",
                "lastName": "U2L",
                "email": "user2@user.com",
            }
        }

    def test_admin_updates_someone_else(self, client, admin_headers):
        response = client.patch("/api/v1/users/u3", json={"lastName": "Changed"}, headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["user"]["lastName"] == "Changed"

    def test_password_is_hashed(self, client, user_headers, db_session):
        """Test a new password is stored hashed"""
        response = client.patch("/api/v1/users/u2", json={"password": "new-password"}, headers=user_headers)
        assert response.status_code == 200

        stored = db_session.get(User, "u2")
        db_session.refresh(stored)
        assert stored.password != "new-password"
        assert verify_password("new-password", stored.password)

    def test_admin_can_grant_admin(self, client, admin_headers, db_session):
        """Test admin promotes another user"""
        response = client.patch("/api/v1/users/u2", json={"isAdmin": True}, headers=admin_headers)
        assert response.status_code == 200

        stored = db_session.get(User, "u2")
        db_session.refresh(stored)
        assert stored.is_admin is True

    def test_self_cannot_grant_admin(self, client, user_headers):
        """Test a user cannot make themselves admin"""
        response = client.patch("/api/v1/users/u2", json={"isAdmin": True}, headers=user_headers)
        assert response.status_code == 401

    def test_unauthorized_for_other_user(self, client, user_headers):
        response = client.patch("/api/v1/users/u3", json={"firstName": "x"}, headers=user_headers)
        assert response.status_code == 401

    def test_cannot_change_username(self, client, user_headers):
        response = client.patch("/api/v1/users/u2", json={"username": "u2-new"}, headers=user_headers)
        assert response.status_code == 400

    def test_empty_update(self, client, user_headers):
        """Test an update with no fields fails"""
        response = client.patch("/api/v1/users/u2", json={}, headers=user_headers)
        assert response.status_code == 400

    def test_not_found(self, client, admin_headers):
        response = client.patch("/api/v1/users/nope", json={"firstName": "x"}, headers=admin_headers)
        assert response.status_code == 404


class TestUserDeletion:
    """Tests for DELETE /users/{username}"""

    def test_self_delete(self, client, user_headers):
        response = client.delete("/api/v1/users/u2", headers=user_headers)

        assert response.status_code == 200
        assert response.json() == {"deleted": "u2"}

    def test_admin_deletes_user_with_applications(self, client, admin_headers):
        """Test deleting a user also drops their applications"""
        response = client.delete("/api/v1/users/u1", headers=admin_headers)

        assert response.status_code == 200
        assert client.get("/api/v1/users/u1", headers=admin_headers).status_code == 404

    def test_unauthorized_for_other_user(self, client, user_headers):
        response = client.delete("/api/v1/users/u3", headers=user_headers)
        assert response.status_code == 401

    def test_not_found(self, client, admin_headers):
        response = client.delete("/api/v1/users/nope", headers=admin_headers)
        assert response.status_code == 404
