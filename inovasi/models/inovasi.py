"""
Innovation models — ProfilInovasi (base submission) and IndikatorInovasi
(the evidence bundle attached to at most one profil).

The 1:0..1 relation is enforced by the unique constraint on
``indikator_inovasi.profil_inovasi_id``; application-level checks in
``inovasi.services.inovasi_status`` only short-circuit the common case.
"""

from inovasi.models import db, iso, new_uuid, utcnow

JENIS_DIGITAL = "DIGITAL"
JENIS_NON_DIGITAL = "NON_DIGITAL"
JENIS_INOVASI = (JENIS_DIGITAL, JENIS_NON_DIGITAL)

# (multipart / JSON field name, column attribute) in form order
INDIKATOR_FILE_FIELDS = (
    ("regulasiInovasiDaerah", "regulasi_inovasi_daerah"),
    ("ketersediaanSDM", "ketersediaan_sdm"),
    ("dukunganAnggaran", "dukungan_anggaran"),
    ("alatKerja", "alat_kerja"),
    ("bimtekInovasi", "bimtek_inovasi"),
    ("integrasiProgramRKPD", "integrasi_program_rkpd"),
    ("keterlibatanAktorInovasi", "keterlibatan_aktor_inovasi"),
    ("pelaksanaInovasiDaerah", "pelaksana_inovasi_daerah"),
    ("jejaringInovasi", "jejaring_inovasi"),
    ("sosialisasiInovasiDaerah", "sosialisasi_inovasi_daerah"),
    ("pedomanTeknis", "pedoman_teknis"),
    ("kemudahanInformasiLayanan", "kemudahan_informasi_layanan"),
    ("kemudahanProsesInovasi", "kemudahan_proses_inovasi"),
    ("penyelesaianLayananPengaduan", "penyelesaian_layanan_pengaduan"),
    ("layananTerintegrasi", "layanan_terintegrasi"),
    ("replikasi", "replikasi"),
    ("kecepatanPenciptaanInovasi", "kecepatan_penciptaan_inovasi"),
    ("kemanfaatanInovasi", "kemanfaatan_inovasi"),
    ("monitoringEvaluasiInovasiDaerah", "monitoring_evaluasi_inovasi_daerah"),
)
INDIKATOR_URL_FIELD = ("kualitasInovasiDaerah", "kualitas_inovasi_daerah")


class ProfilInovasi(db.Model):
    __tablename__ = "profil_inovasi"

    id = db.Column(db.String(36), primary_key=True, default=new_uuid)
    nama_inovasi = db.Column(db.String(200), nullable=False)
    inovator = db.Column(db.String(100), nullable=False)
    jenis_inovasi = db.Column(db.String(20), nullable=False)
    bentuk_inovasi = db.Column(db.String(100), nullable=False)
    tanggal_uji_coba = db.Column(db.Date, nullable=False)
    tanggal_penerapan = db.Column(db.Date, nullable=False)
    rancang_bangun = db.Column(db.Text, nullable=False)
    tujuan_inovasi = db.Column(db.Text, nullable=False)
    manfaat_inovasi = db.Column(db.Text, nullable=False)
    hasil_inovasi = db.Column(db.Text, nullable=False)
    user_id = db.Column(
        db.String(36), db.ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True,
    )
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    user = db.relationship("User", back_populates="profil_inovasi")
    indikator_inovasi = db.relationship(
        "IndikatorInovasi", back_populates="profil_inovasi", uselist=False,
        cascade="all, delete-orphan", passive_deletes=True,
    )

    def to_dict(self, include_indikator=False):
        d = {
            "id": self.id,
            "namaInovasi": self.nama_inovasi,
            "inovator": self.inovator,
            "jenisInovasi": self.jenis_inovasi,
            "bentukInovasi": self.bentuk_inovasi,
            "tanggalUjiCoba": iso(self.tanggal_uji_coba),
            "tanggalPenerapan": iso(self.tanggal_penerapan),
            "rancangBangun": self.rancang_bangun,
            "tujuanInovasi": self.tujuan_inovasi,
            "manfaatInovasi": self.manfaat_inovasi,
            "hasilInovasi": self.hasil_inovasi,
            "userId": self.user_id,
            "user": self.user.to_summary() if self.user else None,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }
        if include_indikator:
            d["indikatorInovasi"] = (
                self.indikator_inovasi.to_dict() if self.indikator_inovasi else None
            )
        return d


class IndikatorInovasi(db.Model):
    __tablename__ = "indikator_inovasi"

    id = db.Column(db.String(36), primary_key=True, default=new_uuid)
    profil_inovasi_id = db.Column(
        db.String(36), db.ForeignKey("profil_inovasi.id", ondelete="CASCADE"), nullable=False,
    )

    regulasi_inovasi_daerah = db.Column(db.String(500), nullable=False)
    ketersediaan_sdm = db.Column(db.String(500), nullable=False)
    dukungan_anggaran = db.Column(db.String(500), nullable=False)
    alat_kerja = db.Column(db.String(500), nullable=False)
    bimtek_inovasi = db.Column(db.String(500), nullable=False)
    integrasi_program_rkpd = db.Column(db.String(500), nullable=False)
    keterlibatan_aktor_inovasi = db.Column(db.String(500), nullable=False)
    pelaksana_inovasi_daerah = db.Column(db.String(500), nullable=False)
    jejaring_inovasi = db.Column(db.String(500), nullable=False)
    sosialisasi_inovasi_daerah = db.Column(db.String(500), nullable=False)
    pedoman_teknis = db.Column(db.String(500), nullable=False)
    kemudahan_informasi_layanan = db.Column(db.String(500), nullable=False)
    kemudahan_proses_inovasi = db.Column(db.String(500), nullable=False)
    penyelesaian_layanan_pengaduan = db.Column(db.String(500), nullable=False)
    layanan_terintegrasi = db.Column(db.String(500), nullable=False)
    replikasi = db.Column(db.String(500), nullable=False)
    kecepatan_penciptaan_inovasi = db.Column(db.String(500), nullable=False)
    kemanfaatan_inovasi = db.Column(db.String(500), nullable=False)
    monitoring_evaluasi_inovasi_daerah = db.Column(db.String(500), nullable=False)
    kualitas_inovasi_daerah = db.Column(db.String(500), nullable=False)

    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        db.UniqueConstraint("profil_inovasi_id", name="uq_indikator_profil_inovasi"),
    )

    profil_inovasi = db.relationship("ProfilInovasi", back_populates="indikator_inovasi")

    def file_paths(self):
        """Relative paths of every stored evidence file."""
        return [getattr(self, attr) for _, attr in INDIKATOR_FILE_FIELDS if getattr(self, attr)]

    def to_dict(self, include_profil=False):
        d = {"id": self.id, "profilInovasiId": self.profil_inovasi_id}
        for field, attr in INDIKATOR_FILE_FIELDS:
            d[field] = getattr(self, attr)
        d[INDIKATOR_URL_FIELD[0]] = self.kualitas_inovasi_daerah
        d["createdAt"] = iso(self.created_at)
        d["updatedAt"] = iso(self.updated_at)
        if include_profil and self.profil_inovasi:
            d["profilInovasi"] = self.profil_inovasi.to_dict()
        return d
