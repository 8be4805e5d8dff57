"""
Application store: role-scoped listing, role-gated mutations, change-driven refresh.
Run from the project root: python -m pytest tests/test_application_store.py -v
"""
import unittest
from unittest import mock

from sqlalchemy.exc import OperationalError

from services.session_context import SessionContext
from services.application_store import ApplicationStore
from tests.helpers import BackendTestCase


class TestApplicationListing(BackendTestCase):
    async def test_list_is_scoped_by_role(self):
        """Admin sees all, applicants their own, reviewers their assignments."""
        other = await self.add_profile("applicant", "Bea", "Second")
        first = await self.submit(self.applicant, "First", "one")
        await self.submit(self.applicant, "Second", "two")
        await self.submit(other, "Third", "three")
        await self.applications_for(self.admin).assign_reviewer(first.id, self.reviewer.id)

        admin_rows = await self.applications_for(self.admin).refresh()
        mine = await self.applications_for(self.applicant).refresh()
        theirs = await self.applications_for(other).refresh()
        assigned = await self.applications_for(self.reviewer).refresh()

        self.assertEqual(len(admin_rows), 3)
        self.assertEqual(len(mine), 2)
        self.assertTrue(all(a.applicant_id == self.applicant.id for a in mine))
        self.assertEqual([a.title for a in theirs], ["Third"])
        self.assertEqual([a.id for a in assigned], [first.id])

    async def test_newest_submission_first(self):
        await self.submit(self.applicant, "Older", "a")
        await self.submit(self.applicant, "Newer", "b")
        rows = await self.applications_for(self.applicant).refresh()
        self.assertEqual([a.title for a in rows], ["Newer", "Older"])

    async def test_rows_embed_applicant_and_reviewer(self):
        app = await self.submit(self.applicant)
        await self.applications_for(self.admin).assign_reviewer(app.id, self.reviewer.id)
        (row,) = await self.applications_for(self.admin).refresh()
        self.assertEqual(row.applicant.first_name, "Alan")
        self.assertEqual(row.assigned_reviewer.last_name, "Reviewer")

    async def test_without_profile_nothing_is_fetched(self):
        await self.submit(self.applicant)
        store = ApplicationStore(self.backend, SessionContext(user_id="auth-unknown"))
        self.assertEqual(await store.refresh(), [])
        self.assertFalse(store.loading)

    async def test_get_hides_rows_outside_scope(self):
        app = await self.submit(self.applicant)
        found = await self.applications_for(self.applicant).get(app.id)
        self.assertEqual(found.data.id, app.id)
        hidden = await self.applications_for(self.reviewer).get(app.id)
        self.assertEqual(hidden.error.code, "not_found")

    async def test_get_reports_backend_failure(self):
        app = await self.submit(self.applicant)
        failure = OperationalError("SELECT", {}, Exception("connection lost"))
        with mock.patch.object(self.backend, "session", side_effect=failure):
            with self.assertLogs("services.application_store", level="ERROR"):
                result = await self.applications_for(self.applicant).get(app.id)
        self.assertEqual(result.error.code, "backend")
        self.assertEqual(result.error.message, "Failed to fetch application")

    async def test_failed_fetch_keeps_previous_rows(self):
        await self.submit(self.applicant)
        store = self.applications_for(self.applicant)
        await store.refresh()
        failure = OperationalError("SELECT", {}, Exception("connection lost"))
        with mock.patch.object(self.backend, "session", side_effect=failure):
            with self.assertLogs("services.application_store", level="ERROR"):
                rows = await store.refresh()
        self.assertEqual(len(rows), 1)
        self.assertEqual(len(store.applications), 1)
        self.assertEqual(store.error.code, "backend")
        self.assertEqual(store.error.message, "Failed to fetch applications")

        await store.refresh()
        self.assertIsNone(store.error)


class TestApplicationMutations(BackendTestCase):
    async def test_create_starts_pending_without_reviewer(self):
        store = self.applications_for(self.applicant)
        result = await store.create("T", "D")
        self.assertTrue(result.ok)
        self.assertEqual(result.data.status, "pending")
        self.assertIsNone(result.data.assigned_reviewer_id)
        self.assertEqual(len(store.applications), 1)

    async def test_create_as_non_applicant_fails_without_mutation(self):
        for profile in (self.admin, self.reviewer):
            store = self.applications_for(profile)
            await store.refresh()
            result = await store.create("T", "D")
            self.assertFalse(result.ok)
            self.assertEqual(result.error.code, "forbidden")
            self.assertEqual(store.applications, [])
        self.assertEqual(await self.applications_for(self.admin).refresh(), [])

    async def test_create_requires_title_and_description(self):
        result = await self.applications_for(self.applicant).create("  ", "D")
        self.assertEqual(result.error.code, "invalid")
        self.assertEqual(result.error.message, "Please fill in all fields")

    async def test_update_status_as_applicant_fails(self):
        app = await self.submit(self.applicant)
        result = await self.applications_for(self.applicant).update_status(app.id, "approved")
        self.assertEqual(result.error.code, "forbidden")
        (row,) = await self.applications_for(self.admin).refresh()
        self.assertEqual(row.status, "pending")

    async def test_update_status_persists_for_admin_and_reviewer(self):
        app = await self.submit(self.applicant)
        await self.applications_for(self.admin).assign_reviewer(app.id, self.reviewer.id)

        result = await self.applications_for(self.admin).update_status(app.id, "under_review")
        self.assertTrue(result.ok)
        result = await self.applications_for(self.reviewer).update_status(app.id, "rejected")
        self.assertTrue(result.ok)

        (row,) = await self.applications_for(self.applicant).refresh()
        self.assertEqual(row.status, "rejected")

    async def test_any_status_may_follow_any_other(self):
        app = await self.submit(self.applicant)
        admin = self.applications_for(self.admin)
        for status in ("rejected", "pending", "approved", "under_review", "pending"):
            result = await admin.update_status(app.id, status)
            self.assertTrue(result.ok)
            self.assertEqual(result.data.status, status)

    async def test_status_change_advances_updated_at(self):
        app = await self.submit(self.applicant)
        store = self.applications_for(self.applicant)
        (before,) = await store.refresh()
        await self.applications_for(self.admin).update_status(app.id, "under_review")
        (after,) = await store.refresh()
        self.assertGreater(after.updated_at, before.updated_at)
        self.assertEqual(after.submitted_at, before.submitted_at)

    async def test_unknown_status_is_rejected(self):
        app = await self.submit(self.applicant)
        result = await self.applications_for(self.admin).update_status(app.id, "archived")
        self.assertEqual(result.error.code, "invalid")

    async def test_reviewer_cannot_update_unassigned_application(self):
        app = await self.submit(self.applicant)
        result = await self.applications_for(self.reviewer).update_status(app.id, "approved")
        self.assertEqual(result.error.code, "not_found")

    async def test_assign_reviewer_is_admin_only(self):
        app = await self.submit(self.applicant)
        for profile in (self.applicant, self.reviewer):
            result = await self.applications_for(profile).assign_reviewer(app.id, self.reviewer.id)
            self.assertEqual(result.error.code, "forbidden")
        (row,) = await self.applications_for(self.admin).refresh()
        self.assertIsNone(row.assigned_reviewer_id)

    async def test_assign_reviewer_leaves_status_unchanged(self):
        app = await self.submit(self.applicant)
        admin = self.applications_for(self.admin)
        await admin.update_status(app.id, "under_review")
        result = await admin.assign_reviewer(app.id, self.reviewer.id)
        self.assertTrue(result.ok)
        self.assertEqual(result.data.assigned_reviewer_id, self.reviewer.id)
        self.assertEqual(result.data.status, "under_review")

    async def test_assignee_must_be_a_reviewer(self):
        app = await self.submit(self.applicant)
        admin = self.applications_for(self.admin)
        result = await admin.assign_reviewer(app.id, self.applicant.id)
        self.assertEqual(result.error.code, "invalid")
        result = await admin.assign_reviewer(app.id, "prf-missing")
        self.assertEqual(result.error.code, "invalid")

    async def test_failed_mutation_reports_generic_error(self):
        store = self.applications_for(self.applicant)
        failure = OperationalError("INSERT", {}, Exception("connection lost"))
        with mock.patch.object(self.backend, "session", side_effect=failure):
            with self.assertLogs("services.application_store", level="ERROR"):
                result = await store.create("T", "D")
        self.assertEqual(result.error.code, "backend")
        self.assertEqual(result.error.message, "Failed to create application")
        self.assertEqual(store.applications, [])

    async def test_submit_assign_approve_walkthrough(self):
        applicant_store = self.applications_for(self.applicant)
        await applicant_store.create("T", "D")
        (row,) = applicant_store.applications
        self.assertEqual((row.status, row.assigned_reviewer_id), ("pending", None))

        result = await self.applications_for(self.admin).assign_reviewer(row.id, self.reviewer.id)
        self.assertEqual(result.data.assigned_reviewer_id, self.reviewer.id)

        result = await self.applications_for(self.reviewer).update_status(row.id, "approved")
        self.assertEqual(result.data.status, "approved")

        (row,) = await applicant_store.refresh()
        self.assertEqual(row.status, "approved")
        self.assertEqual(row.assigned_reviewer_id, self.reviewer.id)


class TestApplicationSubscriptions(BackendTestCase):
    async def test_mounted_store_follows_changes_from_other_callers(self):
        app = await self.submit(self.applicant)
        async with self.applications_for(self.applicant) as watcher:
            self.assertEqual(watcher.applications[0].status, "pending")
            await self.applications_for(self.admin).update_status(app.id, "under_review")
            self.assertEqual(watcher.applications[0].status, "under_review")

        # Unmounted: no further updates
        await self.applications_for(self.admin).update_status(app.id, "approved")
        self.assertEqual(watcher.applications[0].status, "under_review")
        self.assertEqual(self.backend.feed.channels, [])

    async def test_listeners_run_after_each_refresh(self):
        store = self.applications_for(self.admin)
        seen = []
        store.add_listener(lambda s: seen.append(len(s.applications)))
        await store.mount()
        await self.submit(self.applicant)
        store.unmount()
        self.assertEqual(seen[0], 0)
        self.assertEqual(seen[-1], 1)


if __name__ == "__main__":
    unittest.main()
