import unittest

from enrollment_admin.services.normalizer import (
    normalize_course,
    normalize_courses,
    normalize_enrollment,
    normalize_enrollments,
)


class TestEnrollmentNormalizer(unittest.TestCase):
    def test_missing_status_defaults_to_pending(self):
        record = normalize_enrollment("e1", {"childName": "Ava"})
        self.assertEqual(record.status, "pending")

    def test_unknown_status_defaults_to_pending(self):
        record = normalize_enrollment("e1", {"status": "rejected"})
        self.assertEqual(record.status, "pending")

    def test_status_is_kept_when_valid(self):
        record = normalize_enrollment("e1", {"status": "Waitlisted"})
        self.assertEqual(record.status, "waitlisted")

    def test_empty_snapshot(self):
        self.assertEqual(normalize_enrollments(None), [])
        self.assertEqual(normalize_enrollments({}), [])

    def test_ids_and_key_order(self):
        records = normalize_enrollments({
            "-b": {"childName": "Ben"},
            "-a": {"childName": "Ava"},
        })
        self.assertEqual([r.id for r in records], ["-b", "-a"])
        self.assertEqual(records[1].child_name, "Ava")

    def test_legacy_names_resolve(self):
        record = normalize_enrollment("e1", {
            "kidName": "Leo",
            "kidAge": 6,
            "timestamp": 1700000000000,
            "guardianName": "Maria",
        })
        self.assertEqual(record.child_name, "Leo")
        self.assertEqual(record.child_age, "6")
        self.assertEqual(record.submitted_at, 1700000000000)
        self.assertEqual(record.parent_name, "Maria")

    def test_newer_name_wins_over_legacy(self):
        record = normalize_enrollment("e1", {
            "kidName": "Old",
            "childName": "New",
            "timestamp": 1,
            "submittedAt": "2024-05-01T10:00:00Z",
        })
        self.assertEqual(record.child_name, "New")
        self.assertEqual(record.submitted_at, "2024-05-01T10:00:00Z")

    def test_empty_newer_name_falls_back_to_legacy(self):
        record = normalize_enrollment("e1", {"childName": "  ", "kidName": "Leo"})
        self.assertEqual(record.child_name, "Leo")

    def test_kid_interests_map_keeps_truthy_values_in_order(self):
        record = normalize_enrollment("e1", {
            "kidInterests": {"a": "Robots", "b": "", "c": None, "d": False, "e": "Art", "f": 0},
        })
        self.assertEqual(record.interests, ["Robots", "Art"])

    def test_interests_list(self):
        record = normalize_enrollment("e1", {"interests": ["Lego", None, "", "Space"]})
        self.assertEqual(record.interests, ["Lego", "Space"])

    def test_interests_comma_string(self):
        record = normalize_enrollment("e1", {"interests": "Lego, Space,"})
        self.assertEqual(record.interests, ["Lego", "Space"])

    def test_missing_fields_become_empty_strings(self):
        record = normalize_enrollment("e1", {})
        self.assertEqual(record.child_name, "")
        self.assertEqual(record.course_id, "")
        self.assertEqual(record.submitted_at, "")
        self.assertEqual(record.interests, [])
        self.assertEqual(record.notes, "")

    def test_malformed_record_never_raises(self):
        records = normalize_enrollments({"x": "garbage", "y": 42, "z": {"childName": {"nested": 1}}})
        self.assertEqual([r.id for r in records], ["x", "y", "z"])
        self.assertEqual(records[2].child_name, "")
        self.assertEqual(records[0].status, "pending")

    def test_list_snapshot_uses_indices_and_skips_holes(self):
        records = normalize_enrollments([None, {"childName": "Ava"}, {"childName": "Ben"}])
        self.assertEqual([r.id for r in records], ["1", "2"])

    def test_serializes_with_camel_case_aliases(self):
        dumped = normalize_enrollment("e1", {"childName": "Ava"}).model_dump(by_alias=True)
        self.assertEqual(dumped["childName"], "Ava")
        self.assertIn("courseId", dumped)


class TestCourseNormalizer(unittest.TestCase):
    def test_learning_points_from_map(self):
        course = normalize_course("c1", {
            "title": "Game Dev Studio",
            "whatYouWillLearn": {
                "0": {"title": "Sprites", "description": "Draw them", "subtopicPoints": {"0": "Pixels", "1": "Frames"}},
                "1": {"title": "Physics"},
            },
        })
        self.assertEqual([p.title for p in course.what_you_will_learn], ["Sprites", "Physics"])
        self.assertEqual(course.what_you_will_learn[0].subtopic_points, ["Pixels", "Frames"])
        self.assertEqual(course.what_you_will_learn[1].subtopic_points, [""])
        self.assertEqual(course.what_you_will_learn[1].subtopic_title, "")

    def test_learning_points_from_list(self):
        course = normalize_course("c1", {"whatYouWillLearn": [{"title": "Loops"}, None, "Variables"]})
        self.assertEqual([p.title for p in course.what_you_will_learn], ["Loops", "Variables"])

    def test_missing_fields_default(self):
        course = normalize_course("c1", {})
        self.assertEqual(course.title, "")
        self.assertEqual(course.age_range, "")
        self.assertEqual(course.what_you_will_learn, [])
        self.assertIsNone(course.created_at)

    def test_timestamps(self):
        course = normalize_course("c1", {"createdAt": 1700000000000, "updatedAt": 1700000001000})
        self.assertEqual(course.created_at, 1700000000000)
        self.assertEqual(course.updated_at, 1700000001000)

    def test_learning_outcome_lines(self):
        course = normalize_course("c1", {"learningOutcomes": "Reads code\n\n  Writes loops  \n"})
        self.assertEqual(course.learning_outcome_lines(), ["Reads code", "Writes loops"])

    def test_collection(self):
        self.assertEqual(normalize_courses(None), [])
        self.assertEqual(len(normalize_courses({"a": {}, "b": {}})), 2)


if __name__ == '__main__':
    unittest.main()
