from typing import List
from fastapi import APIRouter, Response, status
from sqlmodel import select

from app.api.deps import AdminAccess, DbSession
from app.core.errors import NotFound
from app.models.challenge import WeeklyChallenge, WeeklyChallengeCreate, WeeklyChallengeUpdate

router = APIRouter()

@router.get("", response_model=List[WeeklyChallenge])
def list_challenges(db: DbSession, active_only: bool = False):
    statement = select(WeeklyChallenge).order_by(WeeklyChallenge.id)
    if active_only:
        statement = statement.where(WeeklyChallenge.is_active == True)  # noqa: E712
    return db.exec(statement).all()

@router.post("", response_model=WeeklyChallenge, status_code=status.HTTP_201_CREATED)
def create_challenge(body: WeeklyChallengeCreate, db: DbSession, _admin: AdminAccess):
    challenge = WeeklyChallenge.model_validate(body)
    db.add(challenge)
    db.commit()
    db.refresh(challenge)
    return challenge

@router.patch("/{challenge_id}", response_model=WeeklyChallenge)
def update_challenge(challenge_id: int, body: WeeklyChallengeUpdate, db: DbSession, _admin: AdminAccess):
    challenge = db.get(WeeklyChallenge, challenge_id)
    if challenge is None:
        raise NotFound()
    challenge.sqlmodel_update(body.model_dump(exclude_unset=True))
    db.add(challenge)
    db.commit()
    db.refresh(challenge)
    return challenge

@router.delete("/{challenge_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_challenge(challenge_id: int, db: DbSession, _admin: AdminAccess):
    challenge = db.get(WeeklyChallenge, challenge_id)
    if challenge is None:
        raise NotFound()
    db.delete(challenge)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
