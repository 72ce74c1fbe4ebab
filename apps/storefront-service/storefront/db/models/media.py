from sqlalchemy import Column, String, Text, Integer, DateTime, Index
from .base import Base, now_utc, new_id
from ..types import JSONList


class MediaFile(Base):
    __tablename__ = 'media_files'
    id = Column(String(36), primary_key=True, default=new_id)
    filename = Column(String(255), nullable=False)
    url = Column(Text, nullable=False)
    thumbnail_url = Column(Text)
    mime_type = Column(String(100))
    file_size = Column(Integer)
    width = Column(Integer)
    height = Column(Integer)
    alt_text = Column(Text)
    folder = Column(String(100), default='general')
    tags = Column(JSONList())
    cloudinary_public_id = Column(String(255))
    created_at = Column(DateTime(timezone=True), default=now_utc)

    __table_args__ = (
        Index('idx_media_files_folder', 'folder'),
    )
