from typing import Any, List

from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from folio.db import get_session
from folio.models import Category
from folio.schemas import CategoryOut

router = APIRouter()


@router.get("", response_model=List[CategoryOut])
def list_categories(session: Session = Depends(get_session)) -> Any:
    return session.exec(select(Category).order_by(Category.name)).all()
