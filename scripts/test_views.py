import unittest

from enrollment_admin.models.enrollment import Enrollment, EnrollmentFilters
from enrollment_admin.services.views import (
    aggregate,
    apply_filters,
    overview_cards,
    paginate,
    select_active,
)


def make(id, child="", parent="", course_id="", status="pending"):
    return Enrollment(id=id, child_name=child, parent_name=parent, course_id=course_id, status=status)


RECORDS = [
    make("ENR-001", "Ava Stone", "Maria Stone", "playgroup", "pending"),
    make("ENR-002", "Ben Cole", "Tom Cole", "junior", "approved"),
    make("ENR-003", "Cara Lee", "Ann Lee", "playgroup", "waitlisted"),
    make("ENR-004", "Dan Avery", "Sue Avery", "senior", "approved"),
]


class TestApplyFilters(unittest.TestCase):
    def test_neutral_filters_return_everything_in_order(self):
        out = apply_filters(RECORDS, EnrollmentFilters())
        self.assertEqual(out, RECORDS)

    def test_search_without_match_is_empty(self):
        out = apply_filters(RECORDS, EnrollmentFilters(search="zzz"))
        self.assertEqual(out, [])

    def test_search_is_case_insensitive_over_child_parent_and_id(self):
        self.assertEqual([r.id for r in apply_filters(RECORDS, EnrollmentFilters(search="AVA"))], ["ENR-001"])
        self.assertEqual([r.id for r in apply_filters(RECORDS, EnrollmentFilters(search="tom"))], ["ENR-002"])
        self.assertEqual([r.id for r in apply_filters(RECORDS, EnrollmentFilters(search="enr-003"))], ["ENR-003"])
        # "av" hits a child name and a parent name
        self.assertEqual([r.id for r in apply_filters(RECORDS, EnrollmentFilters(search="av"))], ["ENR-001", "ENR-004"])

    def test_course_and_status_are_anded(self):
        out = apply_filters(RECORDS, EnrollmentFilters(course="playgroup", status="waitlisted"))
        self.assertEqual([r.id for r in out], ["ENR-003"])

    def test_course_filter(self):
        out = apply_filters(RECORDS, EnrollmentFilters(course="playgroup"))
        self.assertEqual([r.id for r in out], ["ENR-001", "ENR-003"])

    def test_time_range_is_not_applied(self):
        out = apply_filters(RECORDS, EnrollmentFilters(time_range="7d"))
        self.assertEqual(out, RECORDS)

    def test_absent_fields_do_not_raise(self):
        class Bare:
            id = None

        self.assertEqual(apply_filters([Bare()], EnrollmentFilters(search="x", course="c", status="pending")), [])


class TestSelectActive(unittest.TestCase):
    def test_selected_record(self):
        self.assertEqual(select_active(RECORDS[:3], "ENR-002").id, "ENR-002")

    def test_falls_back_to_first(self):
        self.assertEqual(select_active(RECORDS[:3], "ENR-004").id, "ENR-001")
        self.assertEqual(select_active(RECORDS[:3], None).id, "ENR-001")

    def test_empty_list(self):
        self.assertIsNone(select_active([], "ENR-001"))


class TestPaginate(unittest.TestCase):
    def setUp(self):
        self.items = [make(f"E{i}") for i in range(1, 11)]

    def test_second_page(self):
        page = paginate(self.items, 7, 2)
        self.assertEqual([r.id for r in page.items], ["E8", "E9", "E10"])
        self.assertEqual(page.total_pages, 2)
        self.assertEqual(page.page, 2)

    def test_empty(self):
        page = paginate([], 7, 1)
        self.assertEqual(page.items, [])
        self.assertEqual(page.total_pages, 1)

    def test_page_is_clamped(self):
        self.assertEqual(paginate(self.items, 7, 9).page, 2)
        self.assertEqual(paginate(self.items, 7, 0).page, 1)
        self.assertEqual(paginate([], 7, 3).page, 1)

    def test_invalid_page_size(self):
        with self.assertRaises(ValueError):
            paginate(self.items, 0, 1)


class TestAggregate(unittest.TestCase):
    def test_counts_sum_to_total(self):
        stats = aggregate(RECORDS)
        self.assertEqual(stats.total, 4)
        self.assertEqual((stats.pending, stats.approved, stats.waitlisted), (1, 2, 1))
        self.assertEqual(stats.pending + stats.approved + stats.waitlisted, stats.total)

    def test_counts_follow_the_filtered_list(self):
        stats = aggregate(apply_filters(RECORDS, EnrollmentFilters(status="approved")))
        self.assertEqual((stats.total, stats.pending, stats.approved, stats.waitlisted), (2, 0, 2, 0))

    def test_overview_cards_are_zero_padded(self):
        cards = overview_cards(aggregate(RECORDS))
        self.assertEqual([c["value"] for c in cards], ["04", "01", "02", "01"])
        self.assertEqual(cards[0]["label"], "Total Applications")


if __name__ == '__main__':
    unittest.main()
