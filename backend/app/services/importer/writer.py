"""Write parsed questions into the question bank."""

from sqlalchemy.orm import Session

from app.core.logging import get_logger
from app.models.question import Question, QuestionStatus
from app.services.importer.text_parser import ParsedQuestion

logger = get_logger(__name__)


class QuestionWriter:
    """Insert imported questions, optionally replacing an earlier import of the same source."""

    def __init__(self, db: Session):
        self.db = db

    def delete_source(self, source: str) -> int:
        deleted = self.db.query(Question).filter(Question.source == source).delete(synchronize_session=False)
        logger.info(f"Deleted {deleted} existing questions (source={source})")
        return deleted

    def insert(self, parsed: list[ParsedQuestion], status: str = QuestionStatus.DRAFT.value) -> int:
        for item in parsed:
            question = Question(
                id=item.id,
                question=item.question,
                correct=item.correct,
                source=item.source,
                status=status,
            )
            question.options = item.options
            self.db.add(question)
        self.db.flush()
        logger.info(f"Inserted {len(parsed)} questions")
        return len(parsed)
