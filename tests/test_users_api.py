"""
User management API tests (ADMIN only).
"""

from inovasi.models import db
from inovasi.models.user import ROLE_ADMIN, STATUS_AKTIF, STATUS_TIDAK_AKTIF, User

from payloads import PASSWORD


class TestListUsers:

    def test_list_paginates(self, client, admin, opd_user, other_opd, auth_headers):
        res = client.get("/api/users?limit=2&sortBy=username&sortOrder=asc",
                         headers=auth_headers(admin))
        assert res.status_code == 200
        data = res.get_json()["data"]
        assert data["pagination"] == {"total": 3, "page": 1, "limit": 2, "totalPages": 2}
        assert [u["username"] for u in data["items"]] == ["admin_utama", "dinas_kesehatan"]

    def test_limit_is_capped(self, client, admin, auth_headers):
        res = client.get("/api/users?limit=1000", headers=auth_headers(admin))
        assert res.get_json()["data"]["pagination"]["limit"] == 100

    def test_search_and_filters(self, client, admin, opd_user, inactive_opd, auth_headers):
        res = client.get("/api/users?search=KESEHATAN", headers=auth_headers(admin))
        items = res.get_json()["data"]["items"]
        assert [u["id"] for u in items] == [opd_user.id]

        res = client.get(f"/api/users?status={STATUS_TIDAK_AKTIF}", headers=auth_headers(admin))
        assert [u["id"] for u in res.get_json()["data"]["items"]] == [inactive_opd.id]

        res = client.get(f"/api/users?role={ROLE_ADMIN}", headers=auth_headers(admin))
        assert [u["id"] for u in res.get_json()["data"]["items"]] == [admin.id]

    def test_unknown_sort_field(self, client, admin, auth_headers):
        res = client.get("/api/users?sortBy=password", headers=auth_headers(admin))
        assert res.status_code == 400
        assert res.get_json()["errors"][0]["field"] == "sortBy"

    def test_invalid_page(self, client, admin, auth_headers):
        res = client.get("/api/users?page=0", headers=auth_headers(admin))
        assert res.status_code == 400

    def test_stats(self, client, admin, opd_user, inactive_opd, auth_headers):
        res = client.get("/api/users/stats", headers=auth_headers(admin))
        assert res.get_json()["data"] == {
            "total": 3, "active": 2, "inactive": 1, "admin": 1, "opd": 2,
        }


class TestCreateUpdateUser:

    def test_create(self, client, admin, auth_headers):
        res = client.post("/api/users", json={
            "username": "bappeda", "password": PASSWORD, "nama": "Bappeda", "role": "OPD",
        }, headers=auth_headers(admin))
        assert res.status_code == 201
        assert User.query.filter_by(username="bappeda").count() == 1

    def test_create_duplicate(self, client, admin, opd_user, auth_headers):
        res = client.post("/api/users", json={
            "username": opd_user.username, "password": PASSWORD, "nama": "Lagi",
        }, headers=auth_headers(admin))
        assert res.status_code == 409

    def test_create_invalid_role(self, client, admin, auth_headers):
        res = client.post("/api/users", json={
            "username": "bappeda", "password": PASSWORD, "nama": "Bappeda", "role": "ROOT",
        }, headers=auth_headers(admin))
        assert res.status_code == 400
        assert res.get_json()["errors"][0]["field"] == "role"

    def test_get_includes_profil_count(self, client, admin, opd_user, auth_headers, create_profil):
        create_profil(opd_user)
        res = client.get(f"/api/users/{opd_user.id}", headers=auth_headers(admin))
        assert res.get_json()["data"]["profilInovasiCount"] == 1

    def test_get_unknown(self, client, admin, auth_headers):
        res = client.get("/api/users/does-not-exist", headers=auth_headers(admin))
        assert res.status_code == 404
        assert res.get_json()["message"] == "User not found"

    def test_update_username_conflict(self, client, admin, opd_user, other_opd, auth_headers):
        res = client.put(f"/api/users/{opd_user.id}", json={"username": other_opd.username},
                         headers=auth_headers(admin))
        assert res.status_code == 409

    def test_update_partial(self, client, admin, opd_user, auth_headers):
        res = client.put(f"/api/users/{opd_user.id}", json={"nama": "Dinkes Provinsi"},
                         headers=auth_headers(admin))
        assert res.status_code == 200
        data = res.get_json()["data"]
        assert data["nama"] == "Dinkes Provinsi"
        assert data["username"] == "dinas_kesehatan"

    def test_change_password(self, client, admin, opd_user, auth_headers):
        url = f"/api/users/{opd_user.id}/password"
        res = client.patch(url, json={
            "currentPassword": PASSWORD, "newPassword": "GantiBaru9!", "confirmPassword": "Beda9!!!x",
        }, headers=auth_headers(admin))
        assert res.status_code == 400

        res = client.patch(url, json={
            "currentPassword": "Salah123!", "newPassword": "GantiBaru9!",
            "confirmPassword": "GantiBaru9!",
        }, headers=auth_headers(admin))
        assert res.status_code == 400

        res = client.patch(url, json={
            "currentPassword": PASSWORD, "newPassword": "GantiBaru9!",
            "confirmPassword": "GantiBaru9!",
        }, headers=auth_headers(admin))
        assert res.status_code == 200
        login = client.post("/api/auth/login", json={
            "username": opd_user.username, "password": "GantiBaru9!",
        })
        assert login.status_code == 200


class TestToggleAndDelete:

    def test_toggle_other_user(self, client, admin, opd_user, auth_headers):
        res = client.patch(f"/api/users/{opd_user.id}/toggle-status", headers=auth_headers(admin))
        assert res.status_code == 200
        assert res.get_json()["data"]["status"] == STATUS_TIDAK_AKTIF

    def test_cannot_toggle_self(self, client, admin, auth_headers):
        res = client.patch(f"/api/users/{admin.id}/toggle-status", headers=auth_headers(admin))
        assert res.status_code == 400
        assert db.session.get(User, admin.id).status == STATUS_AKTIF

    def test_cannot_change_own_status_or_role(self, client, admin, auth_headers):
        url = f"/api/users/{admin.id}"
        res = client.put(url, json={"status": STATUS_TIDAK_AKTIF}, headers=auth_headers(admin))
        assert res.status_code == 400
        res = client.put(url, json={"role": "OPD"}, headers=auth_headers(admin))
        assert res.status_code == 400

        user = db.session.get(User, admin.id)
        assert user.status == STATUS_AKTIF
        assert user.role == ROLE_ADMIN

    def test_update_own_nama(self, client, admin, auth_headers):
        res = client.put(f"/api/users/{admin.id}", json={"nama": "Admin Provinsi", "role": "ADMIN"},
                         headers=auth_headers(admin))
        assert res.status_code == 200
        assert res.get_json()["data"]["nama"] == "Admin Provinsi"

    def test_cannot_delete_self(self, client, admin, auth_headers):
        res = client.delete(f"/api/users/{admin.id}", headers=auth_headers(admin))
        assert res.status_code == 400
        assert db.session.get(User, admin.id) is not None

    def test_delete_without_profil_is_hard(self, client, admin, other_opd, auth_headers):
        user_id = other_opd.id
        res = client.delete(f"/api/users/{user_id}", headers=auth_headers(admin))
        assert res.status_code == 200
        assert res.get_json()["data"] == {"id": user_id, "softDeleted": False}
        assert User.query.filter_by(id=user_id).count() == 0

    def test_delete_with_profil_is_soft(self, client, admin, opd_user, auth_headers,
                                        create_profil):
        create_profil(opd_user)
        res = client.delete(f"/api/users/{opd_user.id}", headers=auth_headers(admin))
        assert res.status_code == 200
        assert res.get_json()["data"]["softDeleted"] is True
        assert db.session.get(User, opd_user.id).status == STATUS_TIDAK_AKTIF
