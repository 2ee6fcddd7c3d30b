"""
Site content models — homepage carousel, site title and contact info.

Independent entities managed by administrators; the public homepage reads
the active carousel images and titles without authentication.
"""

from inovasi.models import db, iso, new_uuid, utcnow


class CarouselImage(db.Model):
    __tablename__ = "carousel_images"

    id = db.Column(db.String(36), primary_key=True, default=new_uuid)
    title = db.Column(db.String(255))
    path = db.Column(db.String(500), nullable=False)  # relative to UPLOAD_FOLDER
    sort_order = db.Column(db.Integer, nullable=False, default=0)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (db.Index("ix_carousel_images_sort_order", "sort_order"),)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "path": self.path,
            "sortOrder": self.sort_order,
            "isActive": self.is_active,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }


class SystemTitle(db.Model):
    __tablename__ = "system_titles"

    id = db.Column(db.String(36), primary_key=True, default=new_uuid)
    title = db.Column(db.String(1000), nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "isActive": self.is_active,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }


class Kontak(db.Model):
    __tablename__ = "kontak"

    id = db.Column(db.String(36), primary_key=True, default=new_uuid)
    nama_dinas = db.Column(db.String(200), nullable=False)
    alamat = db.Column(db.Text, nullable=False)
    telepon = db.Column(db.String(50), nullable=False)
    email = db.Column(db.String(200), nullable=False)
    kode_pos = db.Column(db.String(10), nullable=False)
    latitude = db.Column(db.String(30), nullable=False)
    longitude = db.Column(db.String(30), nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "namaDinas": self.nama_dinas,
            "alamat": self.alamat,
            "telepon": self.telepon,
            "email": self.email,
            "kodePos": self.kode_pos,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "createdAt": iso(self.created_at),
            "updatedAt": iso(self.updated_at),
        }
