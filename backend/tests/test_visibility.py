"""
Unit tests for services/visibility.py: pure functions only, no data source.

Tests cover:
  - the six example situations (group match, other group, assign-to-all,
    other class, archived post, soft-deleted work)
  - universality of assign-to-all, group gating, archival and soft-delete
    exclusion, class isolation, idempotence
  - orphaned references, type mismatches, hidden work, direct targeting
  - explain / hidden_work / summarize reporting
"""
import logging

import pytest

from classwork.schemas.classwork import WorkKind
from classwork.services.visibility import (
    ExclusionReason,
    explain,
    hidden_work,
    summarize,
    visible_work,
)

from conftest import GROUP, OTHER_STUDENT, STUDENT, direct, membership, stream_item, work


def ids(works):
    return [w.id for w in works]


def resolve(scenario, student_id=STUDENT, group=GROUP, **kwargs):
    return visible_work(student_id, group, scenario["memberships"], scenario["stream_items"], scenario["work"], **kwargs)


# ── example situations ─────────────────────────────────────────────────────────

class TestScenarios:
    def test_group_targeted_work_is_visible(self, scenario):
        assert "A1" in ids(resolve(scenario))

    def test_other_group_work_is_not_visible(self, scenario):
        assert "A2" not in ids(resolve(scenario))

    def test_assign_to_all_is_visible(self, scenario):
        assert "A3" in ids(resolve(scenario))

    def test_other_class_is_not_visible(self, scenario):
        assert "A4" not in ids(resolve(scenario))

    def test_archived_post_is_not_visible(self, scenario):
        assert "A5" not in ids(resolve(scenario))

    def test_soft_deleted_work_is_not_visible(self, scenario):
        assert "A6" not in ids(resolve(scenario))

    def test_full_result_in_input_order(self, scenario):
        assert ids(resolve(scenario)) == ["A1", "A3"]


# ── properties ─────────────────────────────────────────────────────────────────

class TestAssignToAll:
    @pytest.mark.parametrize("group", [GROUP, "Tribu1", None])
    def test_visible_to_every_member_regardless_of_group(self, group):
        result = visible_work(
            STUDENT, group,
            [membership(STUDENT, "C1")],
            [stream_item("si-A", "C1")],
            [work("A", assign_to_all=True, assigned_groups=["Tribu7"])],
        )
        assert ids(result) == ["A"]


class TestGroupGating:
    @pytest.mark.parametrize("groups,group,enrolled,expected", [
        ([GROUP], GROUP, True, True),
        ([GROUP], GROUP, False, False),
        (["Tribu1"], GROUP, True, False),
        ([GROUP], None, True, False),
        ([], GROUP, True, False),
    ])
    def test_visible_iff_group_listed_and_enrolled(self, groups, group, enrolled, expected):
        memberships = [membership(STUDENT, "C1")] if enrolled else [membership(STUDENT, "C2")]
        result = visible_work(STUDENT, group, memberships, [stream_item("si-A", "C1")],
                              [work("A", assigned_groups=groups)])
        assert bool(result) is expected


class TestExclusions:
    def test_archived_wins_over_distribution(self):
        result = visible_work(STUDENT, GROUP, [membership()], [stream_item("si-A", archived=True)],
                              [work("A", assign_to_all=True, assigned_groups=[GROUP])])
        assert result == []

    def test_deleted_wins_over_distribution(self):
        result = visible_work(STUDENT, GROUP, [membership()], [stream_item("si-A")],
                              [work("A", assign_to_all=True, deleted=True)])
        assert result == []

    def test_class_isolation_wins_over_assign_to_all(self):
        result = visible_work(STUDENT, GROUP, [membership(STUDENT, "C1")], [stream_item("si-A", "C2")],
                              [work("A", assign_to_all=True)])
        assert result == []

    def test_hidden_work_is_excluded(self):
        result = visible_work(STUDENT, GROUP, [membership()], [stream_item("si-A")],
                              [work("A", assign_to_all=True, visible=False)])
        assert result == []

    def test_post_without_class_is_excluded(self):
        result = visible_work(STUDENT, GROUP, [membership()], [stream_item("si-A", class_id=None)],
                              [work("A", assign_to_all=True)])
        assert result == []


class TestOrphanedReferences:
    def test_missing_stream_item_is_silently_excluded(self, caplog):
        with caplog.at_level(logging.WARNING, logger="classwork.services.visibility"):
            result = visible_work(STUDENT, GROUP, [membership()], [stream_item("si-B")],
                                  [work("A", "si-missing", assign_to_all=True),
                                   work("B", "si-B", assign_to_all=True)])
        assert ids(result) == ["B"]
        assert "si-missing" in caplog.text

    def test_stream_item_of_other_type_is_treated_as_orphan(self):
        decisions = explain(STUDENT, GROUP, [membership()], [stream_item("si-A", type="quiz")],
                            [work("A", "si-A", assign_to_all=True)])
        assert decisions[0].reason is ExclusionReason.ORPHANED_REFERENCE

    def test_untyped_stream_item_resolves(self):
        assert ids(visible_work(STUDENT, GROUP, [membership()], [stream_item("si-A", type=None)],
                                [work("A", "si-A", assign_to_all=True)])) == ["A"]

    def test_first_duplicate_stream_item_wins(self):
        items = [stream_item("si-A", "C1"), stream_item("si-A", "C2")]
        assert ids(visible_work(STUDENT, GROUP, [membership(STUDENT, "C1")], items,
                                [work("A", assign_to_all=True)])) == ["A"]


class TestMissingCollections:
    def test_all_none(self):
        assert visible_work(STUDENT, GROUP, None, None, None) == []

    def test_no_memberships(self, scenario):
        assert visible_work(STUDENT, GROUP, None, scenario["stream_items"], scenario["work"]) == []

    def test_no_stream_items_excludes_everything(self, scenario):
        assert visible_work(STUDENT, GROUP, scenario["memberships"], None, scenario["work"]) == []


class TestDirectTargeting:
    def test_directly_targeted_student_sees_work(self):
        result = visible_work(STUDENT, None, [membership()], [stream_item("si-A")],
                              [work("A", assigned_groups=["Tribu1"])],
                              direct_assignments=[direct("A")])
        assert ids(result) == ["A"]

    def test_direct_row_of_another_student_does_not_count(self):
        result = visible_work(STUDENT, None, [membership()], [stream_item("si-A")],
                              [work("A")], direct_assignments=[direct("A", student_id=OTHER_STUDENT)])
        assert result == []

    def test_direct_row_is_scoped_to_its_kind(self):
        result = visible_work(STUDENT, None, [membership()], [stream_item("si-A")],
                              [work("A")], direct_assignments=[direct("A", kind=WorkKind.QUIZ)])
        assert result == []

    def test_direct_targeting_does_not_cross_classes(self):
        result = visible_work(STUDENT, None, [membership(STUDENT, "C1")], [stream_item("si-A", "C2")],
                              [work("A")], direct_assignments=[direct("A")])
        assert result == []


class TestPurity:
    def test_idempotent_and_order_preserving(self, scenario):
        first = resolve(scenario)
        second = resolve(scenario)
        assert first == second
        assert ids(first) == ["A1", "A3"]

    def test_returns_input_objects_unchanged(self, scenario):
        result = resolve(scenario)
        assert result[0] is scenario["work"][0]
        assert result[1] is scenario["work"][2]

    def test_inputs_are_not_mutated(self, scenario):
        before = [list(scenario[k]) for k in ("memberships", "stream_items", "work")]
        resolve(scenario)
        assert [list(scenario[k]) for k in ("memberships", "stream_items", "work")] == before

    def test_order_follows_input_not_ids(self):
        items = [stream_item("si-Z"), stream_item("si-A")]
        works = [work("Z", "si-Z", assign_to_all=True), work("A", "si-A", assign_to_all=True)]
        assert ids(visible_work(STUDENT, GROUP, [membership()], items, works)) == ["Z", "A"]


# ── reporting ──────────────────────────────────────────────────────────────────

class TestExplain:
    def test_reason_per_work_item(self, scenario):
        decisions = explain(STUDENT, GROUP, scenario["memberships"], scenario["stream_items"], scenario["work"])
        assert [d.reason for d in decisions] == [
            None,
            ExclusionReason.NOT_DISTRIBUTED,
            None,
            ExclusionReason.NOT_ENROLLED,
            ExclusionReason.ARCHIVED,
            ExclusionReason.DELETED,
        ]

    def test_archived_is_reported_before_deleted(self):
        decisions = explain(STUDENT, GROUP, [membership()], [stream_item("si-A", archived=True)],
                            [work("A", deleted=True)])
        assert decisions[0].reason is ExclusionReason.ARCHIVED

    def test_decision_carries_stream_item(self, scenario):
        decision = explain(STUDENT, GROUP, scenario["memberships"], scenario["stream_items"], scenario["work"])[0]
        assert decision.visible
        assert decision.stream_item.id == "si-A1"


class TestHiddenWork:
    def test_lists_only_undistributed_work_in_own_classes(self, scenario):
        decisions = explain(STUDENT, GROUP, scenario["memberships"], scenario["stream_items"], scenario["work"])
        assert [d.work.id for d in hidden_work(decisions)] == ["A2"]

    def test_student_without_group_sees_group_work_as_hidden(self, scenario):
        decisions = explain(STUDENT, None, scenario["memberships"], scenario["stream_items"], scenario["work"])
        assert [d.work.id for d in hidden_work(decisions)] == ["A1", "A2"]


class TestSummarize:
    def test_counts(self, scenario):
        decisions = explain(STUDENT, GROUP, scenario["memberships"], scenario["stream_items"], scenario["work"])
        report = summarize(decisions)
        assert report.total == 6
        assert report.visible == 2
        assert report.excluded == {
            ExclusionReason.NOT_DISTRIBUTED: 1,
            ExclusionReason.NOT_ENROLLED: 1,
            ExclusionReason.ARCHIVED: 1,
            ExclusionReason.DELETED: 1,
        }
        assert report.orphaned == 0

    def test_orphans_are_counted(self):
        decisions = explain(STUDENT, GROUP, [membership()], [], [work("A"), work("B")])
        assert summarize(decisions).orphaned == 2

    def test_empty(self):
        report = summarize([])
        assert report.total == 0
        assert report.visible == 0
        assert report.excluded == {}
