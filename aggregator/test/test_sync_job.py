"""
Tests for the sync job entity.
"""

import unittest

from mock import patch
import pytest

from aggregator.links import AdminLinkBuilder
from aggregator.repository import DocumentNotFoundError
from aggregator.service_layer import NetworkIndex, SyncJob

from .helpers import PORTAL, PORTAL_DOMAIN, SOURCE, SOURCE_DOMAIN, NetworkMixin


class SyncJobTestBase(unittest.TestCase, NetworkMixin):
    def setUp(self):
        self.setUpNetwork()
        self.links = AdminLinkBuilder(self.repo)

    def tearDown(self):
        self.tearDownNetwork()

    def job(self, portal=PORTAL, source=SOURCE):
        return SyncJob(portal, source, self.repo, self.repo, self.repo, self.links)

    def sourceMeta(self, documentId, key):
        self.repo.switch_to(SOURCE)
        try:
            return self.repo.get_meta(documentId, key)
        finally:
            self.repo.switch_back()


class TestConstruction(SyncJobTestBase):
    def test_existing_job(self):
        self.addJobDocument(
            title="Auto Draft", documentId=100, post_types=["post", "page"],
            taxonomies=["category"], author=3)
        job = self.job()

        self.assertEqual("9_100", job.composite_id)
        self.assertEqual("Job #100", job.title)
        self.assertEqual(["post", "page"], job.get_post_types())
        self.assertEqual(["category"], job.get_taxonomies())
        self.assertEqual(3, job.get_author())
        self.assertEqual(100, job.document_id)
        self.assertTrue(job.exists())
        self.assertEqual(1, self.repo.current_tenant_id())

    def test_names_and_ids(self):
        self.addJobDocument()
        job = self.job()
        self.assertEqual(PORTAL, job.portal_id)
        self.assertEqual(SOURCE, job.source_id)
        self.assertEqual(PORTAL_DOMAIN, job.get_portal_name())
        self.assertEqual(SOURCE_DOMAIN, job.get_source_name())

    def test_real_title_kept(self):
        self.addJobDocument(title="Weekly Sync")
        self.assertEqual("Weekly Sync", self.job().title)

    def test_no_document(self):
        job = self.job()
        self.assertEqual("9_", job.composite_id)
        self.assertEqual(0, job.get_term_count())
        self.assertEqual([], job.get_post_types())
        self.assertEqual([], job.get_taxonomies())
        self.assertEqual(1, job.get_author())
        self.assertIsNone(job.document_id)
        self.assertFalse(job.exists())
        self.assertEqual(1, self.repo.current_tenant_id())

    def test_document_for_other_portal_ignored(self):
        self.addJobDocument(portal=77)
        self.assertEqual("9_", self.job().composite_id)

    def test_document_in_other_tenant_ignored(self):
        self.repo.add_tenant(10, "other.example.com")
        self.addJobDocument(source=10)
        self.assertEqual("9_", self.job().composite_id)

    def test_most_recent_document_wins(self):
        self.addJobDocument(title="Old")
        newer = self.addJobDocument(title="New")
        job = self.job()
        self.assertEqual(newer.id, job.document_id)
        self.assertEqual("New", job.title)

    def test_missing_meta_keeps_defaults(self):
        self.addJobDocument()
        job = self.job()
        self.assertEqual([], job.get_post_types())
        self.assertEqual([], job.get_taxonomies())
        self.assertEqual(1, job.get_author())

    def test_terms_grouped(self):
        doc = self.addJobDocument(taxonomies=["category", "post_tag"])
        self.repo.switch_to(SOURCE)
        self.repo.set_terms(doc.id, "category", ["News", "Sports"])
        self.repo.set_terms(doc.id, "post_tag", ["Local"])
        self.repo.set_terms(doc.id, "series", ["Ignored"])
        self.repo.switch_back()

        job = self.job()
        self.assertEqual(["News", "Sports"], [t.name for t in job.get_terms("category")])
        self.assertEqual(["Local"], [t.name for t in job.get_terms("post_tag")])
        self.assertIsNone(job.get_terms("series"))
        self.assertEqual(3, job.get_term_count())

    def test_unknown_tenant_fails_on_dereference(self):
        with self.assertRaises(AttributeError):
            self.job(portal=404)
        self.assertEqual(1, self.repo.current_tenant_id())


@pytest.mark.parametrize("portal, source", [
    (0, 9),
    (5, 0),
    (-5, 9),
    ("abc", 9),
    (5, None),
    (5.5, 9),
])
def testInvalidIdsLeaveDefaults(portal, source):
    with patch("aggregator.service_layer.sync_job.TenantContextGuard") as guard:
        job = SyncJob(portal, source, None, None, None)
    guard.assert_not_called()
    assert job.composite_id is None
    assert job.portal is None
    assert job.source is None
    assert job.get_post_types() == []
    assert job.get_taxonomies() == []
    assert job.get_term_count() == 0
    assert job.get_author() == 1
    assert not job.exists()


def testUnlinkedJobIgnoresCalls():
    job = SyncJob(0, 9, None, None, None)
    job.set_post_types(["post"])
    job.set_taxonomies(["category"])
    job.set_author(3)
    job.set_portal_meta()
    job.update_network_options()
    job.delete_job()
    assert job.get_post_types() == []
    assert job.get_taxonomies() == []
    assert job.get_author() == 1
    assert job.get_edit_link() is None
    assert job.get_delete_link() is None


class TestMutators(SyncJobTestBase):
    def setUp(self):
        super().setUp()
        self.doc = self.addJobDocument(post_types=["post"], taxonomies=["category"], author=3)
        self.syncJob = self.job()

    def test_set_post_types(self):
        self.syncJob.set_post_types(["page", "post", "page"])
        self.assertEqual(["page", "post", "page"], self.syncJob.get_post_types())
        self.assertEqual(["page", "post", "page"], self.sourceMeta(self.doc.id, "post_types"))
        self.assertEqual(1, self.repo.current_tenant_id())

    def test_set_taxonomies(self):
        self.syncJob.set_taxonomies(("category", "post_tag"))
        self.assertEqual(["category", "post_tag"], self.syncJob.get_taxonomies())
        self.assertEqual(["category", "post_tag"], self.sourceMeta(self.doc.id, "taxonomies"))
        self.assertEqual(["category", "post_tag"], self.job().get_taxonomies())

    def test_set_author(self):
        self.syncJob.set_author(7)
        self.assertEqual(7, self.syncJob.get_author())
        self.assertEqual(7, self.sourceMeta(self.doc.id, "author"))

    def test_set_author_from_string(self):
        self.syncJob.set_author("8")
        self.assertEqual(8, self.syncJob.get_author())
        self.assertEqual(8, self.job().get_author())

    def test_set_author_invalid_is_noop(self):
        for value in (0, -1, "abc", None, 2.5):
            with patch.object(self.repo, "set_meta") as setMeta, \
                    patch.object(self.repo, "switch_to") as switchTo:
                self.syncJob.set_author(value)
            setMeta.assert_not_called()
            switchTo.assert_not_called()
            self.assertEqual(3, self.syncJob.get_author())
        self.assertEqual(3, self.sourceMeta(self.doc.id, "author"))

    def test_set_portal_meta(self):
        self.repo.switch_to(SOURCE)
        self.repo.set_meta(self.doc.id, "portal", 0)
        self.repo.switch_back()
        self.syncJob.set_portal_meta()
        self.assertEqual(PORTAL, self.sourceMeta(self.doc.id, "portal"))

    def test_set_document_id(self):
        self.syncJob.set_document_id("12")
        self.assertEqual(12, self.syncJob.document_id)
        self.assertEqual("9_{}".format(self.doc.id), self.syncJob.composite_id)
        self.syncJob.set_document_id("junk")
        self.assertIsNone(self.syncJob.document_id)

    def test_write_failure_leaves_memory_unchanged(self):
        self.syncJob.set_document_id(999)
        with self.assertRaises(DocumentNotFoundError):
            self.syncJob.set_post_types(["page"])
        self.assertEqual(["post"], self.syncJob.get_post_types())
        self.assertEqual(1, self.repo.current_tenant_id())


class TestLinks(SyncJobTestBase):
    def test_edit_link(self):
        self.addJobDocument(documentId=100)
        self.assertEqual(
            "https://source.example.com/wp-admin/post.php?post=100&action=edit&portal=5",
            self.job().get_edit_link())
        self.assertEqual(1, self.repo.current_tenant_id())

    def test_delete_link(self):
        self.addJobDocument(documentId=100)
        self.assertEqual(
            "https://source.example.com/wp-admin/post.php?post=100&action=delete",
            self.job().get_delete_link())

    def test_links_without_document(self):
        job = self.job()
        self.assertIsNone(job.get_edit_link())
        self.assertIsNone(job.get_delete_link())


class TestLifecycle(SyncJobTestBase):
    def test_update_network_options(self):
        self.addJobDocument()
        job = self.job()
        job.update_network_options()
        index = NetworkIndex(self.repo)
        self.assertEqual([SOURCE], index.sources_of(PORTAL))
        self.assertEqual([PORTAL], index.portals_of(SOURCE))

    def test_delete_job(self):
        doc = self.addJobDocument()
        job = self.job()
        job.update_network_options("add")
        job.delete_job()

        self.assertEqual(1, self.repo.current_tenant_id())
        self.assertFalse(job.exists())
        self.assertIsNone(job.document_id)
        self.assertEqual("9_{}".format(doc.id), job.composite_id)
        self.assertFalse(self.job().exists())
        self.repo.switch_to(SOURCE)
        self.assertIsNone(self.repo.get_document(doc.id))
        self.repo.switch_back()
        index = NetworkIndex(self.repo)
        self.assertEqual([], index.sources_of(PORTAL))
        self.assertEqual([], index.portals_of(SOURCE))

    def test_delete_job_without_document(self):
        job = self.job()
        job.update_network_options("add")
        job.delete_job()
        self.assertEqual([], NetworkIndex(self.repo).sources_of(PORTAL))
