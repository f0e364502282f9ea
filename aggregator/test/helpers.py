from contextlib import contextmanager
from io import StringIO
import os
import shutil
import sys
import tempfile

from aggregator.repository import SqliteNetworkRepository

HOME = '/home/me'
PORTAL = 5
SOURCE = 9
PORTAL_DOMAIN = 'portal.example.com'
SOURCE_DOMAIN = 'source.example.com'


def resetEnv():
    os.environ['HOME'] = HOME
    os.environ['AGGREGATOR_STATE_DIR'] = '/tmp/BADDIR'


@contextmanager
def capturedOutput():
    ''' Used to capture stdout or stderr.
    eg.
    with capturedOutput() as (out, err):
        print("foo")

    self.assertEqual(out.getvalue(), "foo")
    '''
    newOut, newErr = StringIO(), StringIO()
    oldOut, oldErr = sys.stdout, sys.stderr
    try:
        sys.stdout, sys.stderr = newOut, newErr
        yield sys.stdout, sys.stderr
    finally:
        sys.stdout, sys.stderr = oldOut, oldErr


class NetworkMixin(object):
    """Temporary SQLite network with a portal and a source site."""

    def setUpNetwork(self):
        self.temp_dir = tempfile.mkdtemp()
        self.repo = SqliteNetworkRepository(os.path.join(self.temp_dir, "network.db"))
        self.repo.add_tenant(1, 'main.example.com')
        self.repo.add_tenant(PORTAL, PORTAL_DOMAIN)
        self.repo.add_tenant(SOURCE, SOURCE_DOMAIN)

    def tearDownNetwork(self):
        self.repo.close()
        shutil.rmtree(self.temp_dir)

    def addJobDocument(self, title="Weekly Sync", documentId=None, portal=PORTAL,
                       source=SOURCE, **meta):
        self.repo.switch_to(source)
        try:
            doc = self.repo.create_document("aggregator_job", title, documentId)
            self.repo.set_meta(doc.id, "portal", portal)
            for key, value in meta.items():
                self.repo.set_meta(doc.id, key, value)
        finally:
            self.repo.switch_back()
        return doc
