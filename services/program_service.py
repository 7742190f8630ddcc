# services/program_service.py
"""
Program Service - program administration and public program views.

collected_amount is never written here; it belongs to services.ledger_service.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session

from models import Donation, DonationStatus, Program, ProgramStatus
from models.program import PUBLIC_STATUSES
from services.errors import Conflict, NotFound, ValidationFailed
from slugify import slugify

logger = logging.getLogger(__name__)

PUBLIC_RECENT_DONATIONS = 20


def _as_program_status(status) -> ProgramStatus:
     return ProgramStatus(status.value if hasattr(status, "value") else status)


class ProgramService:
     """Service class for program-related business logic."""

     @staticmethod
     def get_program(db: Session, program_id: int) -> Program:
          program = db.get(Program, program_id)
          if program is None:
               raise NotFound("Program not found.")
          return program

     @staticmethod
     def _resolve_slug(db: Session, slug: Optional[str], title: str, program_id: Optional[int] = None) -> str:
          slug = slugify(slug) if slug and slug.strip() else slugify(title)
          if not slug:
               raise ValidationFailed.for_field("slug", "The slug could not be derived from the title.")

          query = db.query(Program.id).filter(Program.slug == slug)
          if program_id is not None:
               query = query.filter(Program.id != program_id)
          if query.first() is not None:
               raise ValidationFailed.for_field("slug", "The slug has already been taken.")
          return slug

     @staticmethod
     def create_program(db: Session, data: Dict[str, Any]) -> Program:
          """
          Create a program. The slug is derived from the title when not given,
          and collected_amount always starts at zero.

          Raises:
               ValidationFailed: If the slug is already taken
          """
          data = dict(data)
          data["slug"] = ProgramService._resolve_slug(db, data.get("slug"), data["title"])
          data["status"] = _as_program_status(data["status"])

          program = Program(**data)
          db.add(program)
          db.flush()
          logger.info("Program %s created (%s)", program.id, program.slug)
          return program

     @staticmethod
     def update_program(db: Session, program_id: int, data: Dict[str, Any]) -> Program:
          """
          Update a program with the provided fields only.

          Raises:
               NotFound: If the program doesn't exist
               ValidationFailed: If the slug is already taken
          """
          program = ProgramService.get_program(db, program_id)
          data = dict(data)

          if "slug" in data or "title" in data:
               title = data.get("title") or program.title
               data["slug"] = ProgramService._resolve_slug(db, data.get("slug"), title, program_id=program.id)
          if data.get("status") is not None:
               data["status"] = _as_program_status(data["status"])

          for field, value in data.items():
               setattr(program, field, value)

          db.flush()
          return program

     @staticmethod
     def delete_program(db: Session, program_id: int) -> None:
          """
          Delete a program that has no donations.

          Raises:
               NotFound: If the program doesn't exist
               Conflict: If any donation references the program
          """
          program = ProgramService.get_program(db, program_id)

          has_donations = (
               db.query(Donation.id).filter(Donation.program_id == program.id).first() is not None
          )
          if has_donations:
               raise Conflict("Program has donations and cannot be deleted.")

          db.delete(program)
          db.flush()
          logger.info("Program %s deleted", program_id)

     @staticmethod
     def set_status(db: Session, program_id: int, status) -> Program:
          program = ProgramService.get_program(db, program_id)
          program.status = _as_program_status(status)
          db.flush()
          return program

     @staticmethod
     def toggle_highlight(db: Session, program_id: int) -> Program:
          program = ProgramService.get_program(db, program_id)
          program.is_highlight = not program.is_highlight
          db.flush()
          return program

     @staticmethod
     def list_programs(
          db: Session,
          q: Optional[str] = None,
          status=None,
          category: Optional[str] = None,
          highlight: bool = False,
          public: bool = False,
          page: int = 1,
          page_size: int = 15,
     ) -> Tuple[List[Program], int]:
          """
          List programs with optional filters.

          public=True restricts to statuses visible on the public site (unless
          a status is given) and orders highlighted programs first.
          """
          query = db.query(Program)

          if q and q.strip():
               term = f"%{q.strip()}%"
               query = query.filter(or_(Program.title.like(term), Program.category.like(term)))
          if status:
               query = query.filter(Program.status == _as_program_status(status))
          elif public:
               query = query.filter(Program.status.in_(PUBLIC_STATUSES))
          if category and category.strip():
               query = query.filter(Program.category == category.strip())
          if highlight:
               query = query.filter(Program.is_highlight.is_(True))

          total = query.count()
          if public:
               query = query.order_by(Program.is_highlight.desc(), Program.created_at.desc(), Program.id.desc())
          else:
               query = query.order_by(Program.created_at.desc(), Program.id.desc())
          programs = query.offset((page - 1) * page_size).limit(page_size).all()
          return programs, total

     @staticmethod
     def get_public_program(db: Session, slug: str) -> Tuple[Program, List[Donation]]:
          """
          Public program detail with its most recent paid donations.

          Raises:
               NotFound: If no publicly visible program has this slug
          """
          program = (
               db.query(Program)
               .filter(Program.slug == slug, Program.status.in_(PUBLIC_STATUSES))
               .first()
          )
          if program is None:
               raise NotFound("Program not found.")

          recent = (
               db.query(Donation)
               .filter(Donation.program_id == program.id, Donation.status == DonationStatus.PAID)
               .order_by(Donation.paid_at.desc(), Donation.id.desc())
               .limit(PUBLIC_RECENT_DONATIONS)
               .all()
          )
          return program, recent
