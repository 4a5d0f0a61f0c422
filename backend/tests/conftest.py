import os
import random
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from fastapi.testclient import TestClient  # noqa: E402

from main import app  # noqa: E402


@pytest.fixture()
def client():
    return TestClient(app)


@pytest.fixture
def bulletin_subjects():
    """Subjects of a small Form 4 bulletin as the template sends them."""
    return [
        {
            "subject": "Religion",
            "firstSemester": {"period1": "8", "period2": "7", "exam": "15", "total": ""},
            "secondSemester": {"period3": "9", "period4": "8", "exam": "16", "total": ""},
            "overallTotal": "",
            "maxima": {"periodMaxima": 10, "examMaxima": 20, "totalMaxima": 40},
        },
        {
            "subject": "Physics",
            "firstSemester": {"period1": "34", "period2": "32", "exam": "68", "total": ""},
            "secondSemester": {"period3": "30", "period4": "", "exam": "60", "total": ""},
            "overallTotal": "",
            "maxima": {"periodMaxima": 40, "examMaxima": 80, "totalMaxima": 160},
        },
        {
            "subject": "Civics",
            "firstSemester": {"period1": "6", "period2": "9", "exam": "12", "total": ""},
            "secondSemester": {"period3": "", "period4": "", "exam": "", "total": ""},
            "overallTotal": "",
            "maxima": {"periodMaxima": 10, "examMaxima": 20, "totalMaxima": 40},
        },
        {
            "subject": "French",
            "firstSemester": {"period1": "15", "period2": "16", "exam": "30", "total": ""},
            "secondSemester": {"period3": "14", "period4": "17", "exam": "31", "total": ""},
            "overallTotal": "",
            "maxima": {"periodMaxima": 20, "examMaxima": 40, "totalMaxima": 80},
        },
    ]


RANDOM_SCALES = [
    (10, 20, 40),
    (20, 40, 80),
    # Same total as 20/40/80 with a different split.
    (30, 20, 80),
    (40, 80, 160),
    (50, 60, 160),
]
RANDOM_SCORES = ["", "0", "5", "12", "17.5", "24,5", "abc", None, 9, 14.5]


@pytest.fixture
def make_random_records():
    """Factory for seeded random flat record lists."""
    from core.records import PeriodScores, ScoringScale, SubjectRecord

    def _make(seed: int, size: int = 20, unscaled_ratio: float = 0.2):
        rng = random.Random(seed)
        records = []
        for record_id in range(size):
            scale = None
            if rng.random() >= unscaled_ratio:
                period, exam, total = rng.choice(RANDOM_SCALES)
                scale = ScoringScale(period_maximum=period, exam_maximum=exam, total_maximum=total)
            records.append(SubjectRecord(
                id=record_id,
                name=rng.choice(["", "Maths", "French", "Maths", "Biology"]),
                first_period_scores=PeriodScores(
                    a=rng.choice(RANDOM_SCORES),
                    b=rng.choice(RANDOM_SCORES),
                    exam_score=rng.choice(RANDOM_SCORES),
                ),
                second_period_scores=PeriodScores(
                    a=rng.choice(RANDOM_SCORES),
                    b=rng.choice(RANDOM_SCORES),
                    exam_score=rng.choice(RANDOM_SCORES),
                ),
                scale=scale,
            ))
        rng.shuffle(records)
        return records

    return _make
