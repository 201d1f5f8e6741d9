from __future__ import annotations
from datetime import datetime
from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text
from .db import Base


class Feedback(Base):
	__tablename__ = "feedback"
	id = Column(Integer, primary_key=True, autoincrement=True)
	user_id = Column(String(128), nullable=False, index=True)
	name = Column(String(256), nullable=False)
	email = Column(String(256), nullable=False)
	photo_url = Column(String(1024), nullable=True)
	message = Column(Text, nullable=False)
	rating = Column(Integer, nullable=False)
	is_anonymous = Column(Boolean, default=False, nullable=False)
	submitted_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
	reply = Column(Text, nullable=True)
	replied_at = Column(DateTime, nullable=True)


class VersionEntry(Base):
	__tablename__ = "versions"
	id = Column(Integer, primary_key=True, autoincrement=True)
	version = Column(String(32), nullable=False)
	date = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
	title = Column(String(256), nullable=False)
	description = Column(Text, nullable=False)
