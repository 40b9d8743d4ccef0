import asyncio

from enrollment_admin.core.config import settings
from enrollment_admin.core.firebase import get_reference, init_firebase
from enrollment_admin.models.course import CourseIn, LearningPoint
from enrollment_admin.services.normalizer import normalize_courses
from enrollment_admin.services.remote_store import FirebaseRemoteStore

courses = [
    CourseIn(
        title="Intro to Coding",
        age_range="5-7",
        short_description="Block-based puzzles that teach sequencing and loops.",
        what_you_will_learn=[
            LearningPoint(
                title="Sequencing",
                description="Put instructions in the right order.",
                subtopic_title="Activities",
                subtopic_points=["Robot maze", "Dance routine"],
            ),
        ],
        learning_outcomes="Reads simple programs\nWrites a loop",
        duration="8 weeks",
        schedule="Saturdays",
        session_length="60 minutes",
    ),
    CourseIn(
        title="Web & App Builders",
        age_range="8-10",
        short_description="Build and publish a first web page.",
        duration="10 weeks",
        schedule="Wednesdays",
        session_length="75 minutes",
    ),
    CourseIn(
        title="Game Dev Studio",
        age_range="10-12",
        short_description="Design a platformer from sprites to scoring.",
        duration="12 weeks",
        schedule="Saturdays",
        session_length="90 minutes",
    ),
    CourseIn(
        title="AI & Future Tech Lab",
        age_range="12-14",
        short_description="Train small models and talk about how they work.",
        duration="12 weeks",
        schedule="Sundays",
        session_length="90 minutes",
        prerequisites="Game Dev Studio or equivalent",
    ),
]


async def seed():
    init_firebase()
    store = FirebaseRemoteStore()

    existing = normalize_courses(get_reference(settings.COURSES_PATH).get())
    titles = {c.title for c in existing}
    live = len(existing)

    for course in courses:
        if course.title in titles:
            print(f"Skipped {course.title} (Exists)")
            continue
        if live >= settings.COURSE_CAP:
            print(f"Skipped {course.title} (course cap of {settings.COURSE_CAP} reached)")
            continue
        course_id = await store.create(settings.COURSES_PATH, course.to_store())
        live += 1
        print(f"Added {course.title} -> {course_id}")


if __name__ == "__main__":
    asyncio.run(seed())
