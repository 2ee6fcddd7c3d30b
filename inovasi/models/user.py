"""
User model — ADMIN / OPD accounts.

The password column holds a bcrypt digest and is never serialised.
"""

from inovasi.models import db, iso, new_uuid, utcnow

ROLE_ADMIN = "ADMIN"
ROLE_OPD = "OPD"
USER_ROLES = (ROLE_ADMIN, ROLE_OPD)

STATUS_AKTIF = "AKTIF"
STATUS_TIDAK_AKTIF = "TIDAK_AKTIF"
USER_STATUSES = (STATUS_AKTIF, STATUS_TIDAK_AKTIF)


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.String(36), primary_key=True, default=new_uuid)
    username = db.Column(db.String(50), unique=True, nullable=False)
    password = db.Column(db.String(255), nullable=False)
    nama = db.Column(db.String(100), nullable=False)
    role = db.Column(db.String(10), nullable=False, default=ROLE_OPD)
    status = db.Column(db.String(20), nullable=False, default=STATUS_AKTIF)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    profil_inovasi = db.relationship("ProfilInovasi", back_populates="user", lazy="dynamic")

    @property
    def is_active(self):
        return self.status == STATUS_AKTIF

    @property
    def profil_inovasi_count(self):
        return self.profil_inovasi.count()

    def to_dict(self, include_count=False):
        d = {
            "id": self.id,
            "username": self.username,
            "nama": self.nama,
            "role": self.role,
            "status": self.status,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }
        if include_count:
            d["profilInovasiCount"] = self.profil_inovasi_count
        return d

    def to_summary(self):
        """Owner block embedded in profil payloads."""
        return {"id": self.id, "username": self.username, "nama": self.nama, "role": self.role}

    def __repr__(self):
        return f"<User {self.username} ({self.role})>"
