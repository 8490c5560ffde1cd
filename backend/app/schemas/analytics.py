"""Analytics and dashboard response schemas."""

from datetime import datetime

from app.schemas.base import CamelModel


class TrendPoint(CamelModel):
    date: str
    exams: int
    accuracy: float


class IncrementQuestionCount(CamelModel):
    increment: int
    total: int
    published: int


class AdminOverviewResponse(CamelModel):
    user_count: int
    question_count: int
    exam_count: int
    trend: list[TrendPoint]
    questions_by_increment: list[IncrementQuestionCount]
    pass_rate: float
    active_exam_configs: int


class MissedQuestion(CamelModel):
    question_id: int
    missed_count: int
    question: str | None = None
    category: str | None = None
    topic: str | None = None
    increment: int | None = None


class IncrementAccuracy(CamelModel):
    increment: int | None = None
    average_accuracy: float
    total_questions: int


class AnalyticsOverviewResponse(CamelModel):
    total_exams: int
    passed: int
    failed: int
    pass_rate: float
    average_accuracy: float
    most_failed_questions: list[MissedQuestion]
    average_by_increment: list[IncrementAccuracy]


class RecentExam(CamelModel):
    created_at: datetime | None = None
    mode: str
    accuracy: float
    score: int
    total_questions: int
    duration_seconds: int


class CategoryAccuracy(CamelModel):
    category: str
    total: int
    correct: int
    accuracy: float


class TopicAccuracy(CamelModel):
    topic: str
    total: int
    correct: int
    accuracy: float


class PerformanceResponse(CamelModel):
    exam_count: int
    average_accuracy: float
    total_duration_seconds: int
    recent: list[RecentExam]
    by_category: list[CategoryAccuracy]
    by_topic: list[TopicAccuracy]


class WeakAreasResponse(CamelModel):
    worst_categories: list[CategoryAccuracy]
    most_missed: list[MissedQuestion]
