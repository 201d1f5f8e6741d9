from __future__ import annotations
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from ..auth import Admin, require_admin
from ..db import get_db
from ..models import Feedback, VersionEntry

router = APIRouter(tags=["feedback"])
logger = logging.getLogger(__name__)

ANONYMOUS_NAME = "Anonymous"

INITIAL_VERSIONS = [
	("v1.2.1", "Bug Fixes & Minor Improvements", "- Fact Check Enhancement: Fixed the fact-checking prompt.\n- News Search Fix: Corrected the news fetching step.\n- Streamlined Input: Removed 'Auto-Detect Language' from Text Check for clarity."),
	("v1.2.0", "Advanced Content & Fact-Checking Tools", "- Fact-Checking Integration: AI-powered fact-checking for text and published articles in all supported languages.\n- Real-time News for Fact-Checking: SerpApi search results back every verdict.\n- UI Refinements: Better error handling throughout."),
	("v1.1.0", "Expanded Language Support & Feature Enhancements", "- Multi-Language Check: Spelling and grammar checks for Tamil, Kannada, and Hindi.\n- Published Article Analysis: Verify content straight from a URL.\n- Article Converter: Translate and correct articles into other languages."),
	("v1.0.0", "Core Bhasha Guard Launch", "- Malayalam Spell Check: Core spelling and grammar checking for Malayalam text.\n- English Hashtag Check: Spelling check for English hashtags and keywords."),
]


class FeedbackCreate(BaseModel):
	user_id: str
	name: str
	email: str
	photo_url: Optional[str] = None
	message: str
	rating: int
	is_anonymous: bool = False


class PublicFeedback(BaseModel):
	model_config = ConfigDict(from_attributes=True)
	id: int
	name: str
	photo_url: Optional[str] = None
	message: str
	rating: int
	submitted_at: datetime
	reply: Optional[str] = None
	replied_at: Optional[datetime] = None


class FeedbackOut(PublicFeedback):
	user_id: str
	email: str
	is_anonymous: bool


class ReplyRequest(BaseModel):
	reply: str


class VersionCreate(BaseModel):
	version: str
	title: str
	description: str


class VersionOut(BaseModel):
	model_config = ConfigDict(from_attributes=True)
	id: int
	version: str
	date: datetime
	title: str
	description: str


def _to_public(row: Feedback) -> PublicFeedback:
	item = PublicFeedback.model_validate(row)
	if row.is_anonymous:
		return item.model_copy(update={"name": ANONYMOUS_NAME, "photo_url": None})
	return item


def _get_feedback_or_404(db: Session, feedback_id: int) -> Feedback:
	row = db.get(Feedback, feedback_id)
	if row is None:
		raise HTTPException(status_code=404, detail="Feedback not found")
	return row


@router.post("/feedback", status_code=201, response_model=PublicFeedback)
async def submit_feedback(req: FeedbackCreate, db: Session = Depends(get_db)):
	if not (req.message or "").strip():
		raise HTTPException(status_code=400, detail="Feedback message cannot be empty.")
	if req.rating < 1 or req.rating > 5:
		raise HTTPException(status_code=400, detail="Invalid rating value.")
	row = Feedback(**req.model_dump())
	db.add(row)
	db.commit()
	db.refresh(row)
	return _to_public(row)


@router.get("/feedback", response_model=List[PublicFeedback])
async def list_public_feedback(db: Session = Depends(get_db)):
	rows = db.query(Feedback).order_by(Feedback.submitted_at.desc(), Feedback.id.desc()).all()
	return [_to_public(row) for row in rows]


@router.get("/feedback/admin", response_model=List[FeedbackOut])
async def list_feedback(admin: Admin = Depends(require_admin), db: Session = Depends(get_db)):
	return db.query(Feedback).order_by(Feedback.submitted_at.desc(), Feedback.id.desc()).all()


@router.post("/feedback/{feedback_id}/reply", response_model=FeedbackOut)
async def reply_to_feedback(feedback_id: int, req: ReplyRequest, admin: Admin = Depends(require_admin), db: Session = Depends(get_db)):
	if not (req.reply or "").strip():
		raise HTTPException(status_code=400, detail="Reply cannot be empty.")
	row = _get_feedback_or_404(db, feedback_id)
	row.reply = req.reply
	row.replied_at = datetime.utcnow()
	db.add(row)
	db.commit()
	db.refresh(row)
	return row


@router.delete("/feedback/{feedback_id}", status_code=204)
async def delete_feedback(feedback_id: int, admin: Admin = Depends(require_admin), db: Session = Depends(get_db)):
	row = _get_feedback_or_404(db, feedback_id)
	db.delete(row)
	db.commit()


def ensure_versions_seeded(db: Session) -> None:
	if db.query(VersionEntry).first() is not None:
		return
	logger.info("No version history found, seeding database...")
	now = datetime.utcnow()
	for version, title, description in INITIAL_VERSIONS:
		db.add(VersionEntry(version=version, date=now, title=title, description=description))
	db.commit()


@router.get("/versions", response_model=List[VersionOut])
async def list_versions(db: Session = Depends(get_db)):
	ensure_versions_seeded(db)
	return db.query(VersionEntry).order_by(VersionEntry.date.desc(), VersionEntry.id.asc()).all()


@router.post("/versions", status_code=201, response_model=VersionOut)
async def add_version(req: VersionCreate, admin: Admin = Depends(require_admin), db: Session = Depends(get_db)):
	if not all(value.strip() for value in (req.version, req.title, req.description)):
		raise HTTPException(status_code=400, detail="Version, Title, and Description are required.")
	row = VersionEntry(version=req.version, title=req.title, description=req.description)
	db.add(row)
	db.commit()
	db.refresh(row)
	return row
