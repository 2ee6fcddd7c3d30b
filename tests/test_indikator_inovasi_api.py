"""
Indikator Inovasi API tests — multipart evidence bundles.

Tests cover:
  - create: one stored file per evidence field, YouTube URL check
  - 1:0..1 with its parent profil (duplicate and simulated race -> 409)
  - upload rollback: no file left behind on any failed create
  - ownership (403) / unknown profil (404) / malformed id (400)
  - partial update swapping single files
  - ADMIN delete removing files from disk
"""

import dataclasses
import os

from inovasi.models.inovasi import INDIKATOR_FILE_FIELDS, IndikatorInovasi
from inovasi.services import indikator_inovasi_service
from inovasi.services.inovasi_status import IndikatorCheck

from payloads import PNG_BYTES, evidence_files, indikator_form, stored_files

URL = "/api/indikator-inovasi"
FIRST_FIELD = INDIKATOR_FILE_FIELDS[0][0]
LAST_FIELD = INDIKATOR_FILE_FIELDS[-1][0]


def _post(client, headers, form):
    return client.post(URL, data=form, headers=headers, content_type="multipart/form-data")


class TestCreateIndikator:

    def test_create(self, client, opd_user, auth_headers, create_profil, upload_dir):
        profil = create_profil(opd_user)
        res = _post(client, auth_headers(opd_user), indikator_form(profil["id"]))
        assert res.status_code == 201
        data = res.get_json()["data"]
        assert data["profilInovasiId"] == profil["id"]
        assert data["kualitasInovasiDaerah"].startswith("https://www.youtube.com/")

        files = stored_files(upload_dir)
        assert len(files) == len(INDIKATOR_FILE_FIELDS) == 19
        for field, _ in INDIKATOR_FILE_FIELDS:
            assert data[field] in files
            assert data[field].startswith(f"{profil['id']}/")

    def test_stored_file_is_served(self, client, opd_user, create_profil, create_indikator):
        profil = create_profil(opd_user)
        indikator = create_indikator(opd_user, profil["id"])
        res = client.get(f"/uploads/{indikator[FIRST_FIELD]}")
        assert res.status_code == 200
        assert res.data.startswith(b"%PDF")

    def test_duplicate_rejected_without_new_files(self, client, opd_user, auth_headers,
                                                  create_profil, create_indikator, upload_dir):
        profil = create_profil(opd_user)
        create_indikator(opd_user, profil["id"])
        before = stored_files(upload_dir)

        res = _post(client, auth_headers(opd_user), indikator_form(profil["id"]))
        assert res.status_code == 409
        assert stored_files(upload_dir) == before

    def test_race_past_eligibility_check(self, client, opd_user, auth_headers, create_profil,
                                         create_indikator, upload_dir, monkeypatch):
        profil = create_profil(opd_user)
        create_indikator(opd_user, profil["id"])
        before = stored_files(upload_dir)

        # Second request saw no bundle yet; the unique constraint catches it
        monkeypatch.setattr(
            indikator_inovasi_service, "can_user_create_indikator",
            lambda *args: IndikatorCheck(True),
        )
        res = _post(client, auth_headers(opd_user), indikator_form(profil["id"]))
        assert res.status_code == 409
        assert stored_files(upload_dir) == before
        assert IndikatorInovasi.query.count() == 1

    def test_bad_mime_on_last_field_rolls_back(self, client, opd_user, auth_headers,
                                               create_profil, upload_dir):
        profil = create_profil(opd_user)
        form = indikator_form(profil["id"])
        form[LAST_FIELD] = evidence_files(b"GIF89a", "image/gif", "x.gif")[LAST_FIELD]

        res = _post(client, auth_headers(opd_user), form)
        assert res.status_code == 400
        assert res.get_json()["errors"][0]["field"] == LAST_FIELD
        assert stored_files(upload_dir) == []
        assert not os.path.exists(os.path.join(upload_dir, profil["id"]))
        assert IndikatorInovasi.query.count() == 0

    def test_missing_file_rolls_back(self, client, opd_user, auth_headers, create_profil,
                                     upload_dir):
        profil = create_profil(opd_user)
        form = indikator_form(profil["id"])
        del form[FIRST_FIELD]

        res = _post(client, auth_headers(opd_user), form)
        assert res.status_code == 400
        assert [e["field"] for e in res.get_json()["errors"]] == [FIRST_FIELD]
        assert stored_files(upload_dir) == []

    def test_invalid_youtube_url(self, client, opd_user, auth_headers, create_profil,
                                 upload_dir):
        profil = create_profil(opd_user)
        form = indikator_form(profil["id"], kualitasInovasiDaerah="https://vimeo.com/12345")

        res = _post(client, auth_headers(opd_user), form)
        assert res.status_code == 400
        assert res.get_json()["errors"][0]["field"] == "kualitasInovasiDaerah"
        assert stored_files(upload_dir) == []

    def test_oversize_file(self, client, opd_user, auth_headers, create_profil, upload_dir,
                           monkeypatch):
        profil = create_profil(opd_user)
        monkeypatch.setattr(
            indikator_inovasi_service, "INDIKATOR_POLICY",
            dataclasses.replace(indikator_inovasi_service.INDIKATOR_POLICY, max_bytes=8),
        )
        res = _post(client, auth_headers(opd_user), indikator_form(profil["id"]))
        assert res.status_code == 400
        assert res.get_json()["errors"][0]["field"] == FIRST_FIELD
        assert stored_files(upload_dir) == []

    def test_unexpected_file_field(self, client, opd_user, auth_headers, create_profil,
                                   upload_dir):
        profil = create_profil(opd_user)
        form = indikator_form(profil["id"])
        form["lampiranLain"] = evidence_files()[FIRST_FIELD]

        res = _post(client, auth_headers(opd_user), form)
        assert res.status_code == 400
        assert stored_files(upload_dir) == []

    def test_other_opd_forbidden(self, client, opd_user, other_opd, auth_headers, create_profil,
                                 upload_dir):
        profil = create_profil(opd_user)
        res = _post(client, auth_headers(other_opd), indikator_form(profil["id"]))
        assert res.status_code == 403
        assert stored_files(upload_dir) == []

    def test_admin_may_create_for_any_profil(self, client, admin, opd_user, auth_headers,
                                             create_profil):
        profil = create_profil(opd_user)
        res = _post(client, auth_headers(admin), indikator_form(profil["id"]))
        assert res.status_code == 201

    def test_unknown_profil(self, client, opd_user, auth_headers, upload_dir):
        res = _post(client, auth_headers(opd_user),
                    indikator_form("8f14e45f-ceea-467f-a0d6-1f5c3f1a0000"))
        assert res.status_code == 404
        assert stored_files(upload_dir) == []

    def test_malformed_profil_id(self, client, opd_user, auth_headers):
        res = _post(client, auth_headers(opd_user), indikator_form("bukan-uuid"))
        assert res.status_code == 400
        assert res.get_json()["errors"][0]["field"] == "profilInovasiId"


class TestReadIndikator:

    def test_get_by_profil(self, client, opd_user, auth_headers, create_profil,
                           create_indikator):
        profil = create_profil(opd_user)
        indikator = create_indikator(opd_user, profil["id"])
        res = client.get(f"{URL}/profil/{profil['id']}", headers=auth_headers(opd_user))
        assert res.status_code == 200
        data = res.get_json()["data"]
        assert data["id"] == indikator["id"]
        assert data["profilInovasi"]["namaInovasi"] == profil["namaInovasi"]

    def test_get_by_profil_without_bundle(self, client, opd_user, auth_headers, create_profil):
        profil = create_profil(opd_user)
        res = client.get(f"{URL}/profil/{profil['id']}", headers=auth_headers(opd_user))
        assert res.status_code == 404

    def test_list_is_role_scoped(self, client, admin, opd_user, other_opd, auth_headers,
                                 create_profil, create_indikator):
        profil = create_profil(opd_user)
        create_indikator(opd_user, profil["id"])

        res = client.get(URL, headers=auth_headers(other_opd))
        assert res.get_json()["data"]["pagination"]["total"] == 0

        for user in (opd_user, admin):
            res = client.get(URL, headers=auth_headers(user))
            assert res.get_json()["data"]["pagination"]["total"] == 1

    def test_other_opd_cannot_read(self, client, opd_user, other_opd, auth_headers,
                                   create_profil, create_indikator):
        profil = create_profil(opd_user)
        indikator = create_indikator(opd_user, profil["id"])
        res = client.get(f"{URL}/{indikator['id']}", headers=auth_headers(other_opd))
        assert res.status_code == 403


class TestUpdateDeleteIndikator:

    def test_swap_single_file(self, client, opd_user, auth_headers, create_profil,
                              create_indikator, upload_dir):
        profil = create_profil(opd_user)
        indikator = create_indikator(opd_user, profil["id"])
        old_path = indikator[FIRST_FIELD]

        res = client.patch(
            f"{URL}/{indikator['id']}",
            data={FIRST_FIELD: evidence_files(PNG_BYTES, "image/png", "foto.png")[FIRST_FIELD]},
            headers=auth_headers(opd_user), content_type="multipart/form-data",
        )
        assert res.status_code == 200
        new_path = res.get_json()["data"][FIRST_FIELD]
        assert new_path.endswith(".png")

        files = stored_files(upload_dir)
        assert new_path in files
        assert old_path not in files
        assert len(files) == 19

    def test_update_url_only(self, client, opd_user, auth_headers, create_profil,
                             create_indikator):
        profil = create_profil(opd_user)
        indikator = create_indikator(opd_user, profil["id"])
        res = client.patch(
            f"{URL}/{indikator['id']}", data={"kualitasInovasiDaerah": "https://youtu.be/abc123"},
            headers=auth_headers(opd_user), content_type="multipart/form-data",
        )
        assert res.status_code == 200
        assert res.get_json()["data"]["kualitasInovasiDaerah"] == "https://youtu.be/abc123"

    def test_failed_swap_keeps_existing_files(self, client, opd_user, auth_headers,
                                              create_profil, create_indikator, upload_dir):
        profil = create_profil(opd_user)
        indikator = create_indikator(opd_user, profil["id"])
        before = stored_files(upload_dir)

        form = {
            FIRST_FIELD: evidence_files()[FIRST_FIELD],
            LAST_FIELD: evidence_files(b"x", "text/plain", "x.txt")[LAST_FIELD],
        }
        res = client.patch(f"{URL}/{indikator['id']}", data=form,
                           headers=auth_headers(opd_user), content_type="multipart/form-data")
        assert res.status_code == 400
        assert stored_files(upload_dir) == before

    def test_empty_update(self, client, opd_user, auth_headers, create_profil,
                          create_indikator):
        profil = create_profil(opd_user)
        indikator = create_indikator(opd_user, profil["id"])
        res = client.patch(f"{URL}/{indikator['id']}", data={"catatan": "tidak ada"},
                           headers=auth_headers(opd_user), content_type="multipart/form-data")
        assert res.status_code == 400

    def test_opd_cannot_delete(self, client, opd_user, auth_headers, create_profil,
                               create_indikator):
        profil = create_profil(opd_user)
        indikator = create_indikator(opd_user, profil["id"])
        res = client.delete(f"{URL}/{indikator['id']}", headers=auth_headers(opd_user))
        assert res.status_code == 403

    def test_admin_delete_removes_files(self, client, admin, opd_user, auth_headers,
                                        create_profil, create_indikator, upload_dir):
        profil = create_profil(opd_user)
        indikator = create_indikator(opd_user, profil["id"])
        res = client.delete(f"{URL}/{indikator['id']}", headers=auth_headers(admin))
        assert res.status_code == 200
        assert stored_files(upload_dir) == []
        assert not os.path.exists(os.path.join(upload_dir, profil["id"]))

        res = client.get(f"/api/profil-inovasi/{profil['id']}/status",
                         headers=auth_headers(opd_user))
        assert res.get_json()["data"]["stage"] == "PROFIL_ONLY"
