"""System settings singleton access."""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.system_settings import DEFAULT_PASSING_CRITERIA, SETTINGS_ROW_ID, SystemSettings


def get_or_create_settings(db: Session) -> SystemSettings:
    """Get the settings row, creating it with defaults on first access."""
    settings = db.query(SystemSettings).filter(SystemSettings.id == SETTINGS_ROW_ID).first()
    if settings:
        return settings

    settings = SystemSettings(id=SETTINGS_ROW_ID, locked_increments=[])
    db.add(settings)
    try:
        db.commit()
    except IntegrityError:
        # Another request created it first
        db.rollback()
        return db.query(SystemSettings).filter(SystemSettings.id == SETTINGS_ROW_ID).one()
    db.refresh(settings)
    return settings


def pass_mark_percent(db: Session) -> int:
    """Pass mark used by the pass-rate reports."""
    settings = db.query(SystemSettings.passing_criteria).filter(
        SystemSettings.id == SETTINGS_ROW_ID
    ).scalar()
    return DEFAULT_PASSING_CRITERIA if settings is None else settings


def is_increment_locked(db: Session, increment: int) -> bool:
    settings = db.query(SystemSettings).filter(SystemSettings.id == SETTINGS_ROW_ID).first()
    return bool(settings and increment in (settings.locked_increments or []))


def set_increment_lock(db: Session, increment: int, locked: bool) -> SystemSettings:
    settings = get_or_create_settings(db)
    current = set(settings.locked_increments or [])
    if locked:
        current.add(increment)
    else:
        current.discard(increment)
    # Assign a new list so the JSON column is flagged dirty
    settings.locked_increments = sorted(current)
    db.commit()
    db.refresh(settings)
    return settings
