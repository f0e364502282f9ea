#!/usr/bin/env python
import argparse
import sys

import aggregator.logging

from .argparse import addArgumentParserBaseFlags
from .binutils import binDescriptionWithStandardFooter
from .config import Config, ConfigError
from .domain import positive_int
from .links import AdminLinkBuilder
from .repository import SqliteNetworkRepository, StoreError
from .service_layer import JobService

_DEBUG_LOG_FILE_NAME = "aggregator-debug"
LOG = aggregator.logging.getLogger(__name__)

DESCRIPTION = """
Manage the sync jobs that link source sites to portal sites in a
multisite network.
"""


def _csv(value):
    return [item.strip() for item in value.split(",") if item.strip()]


def _addPairArgs(parser):
    parser.add_argument("portal", type=int, help="ID of the portal site")
    parser.add_argument("source", type=int, help="ID of the source site")


def parseArgs(args=None):
    parser = argparse.ArgumentParser(
        description=binDescriptionWithStandardFooter(DESCRIPTION),
        formatter_class=argparse.RawDescriptionHelpFormatter)
    addArgumentParserBaseFlags(parser, _DEBUG_LOG_FILE_NAME)
    commands = parser.add_subparsers(dest="command", metavar="COMMAND")
    commands.required = True

    site = commands.add_parser("site", help="Register or list sites")
    siteCommands = site.add_subparsers(dest="siteCommand", metavar="ACTION")
    siteCommands.required = True
    siteAdd = siteCommands.add_parser("add", help="Register a site")
    siteAdd.add_argument("id", type=int)
    siteAdd.add_argument("domain")
    siteCommands.add_parser("list", help="List registered sites")

    create = commands.add_parser("create", help="Create a sync job")
    _addPairArgs(create)
    create.add_argument("--title", default="", help="Title of the job")

    show = commands.add_parser("show", help="Show a sync job")
    _addPairArgs(show)

    setCmd = commands.add_parser("set", help="Change the settings of a sync job")
    _addPairArgs(setCmd)
    setCmd.add_argument("--post-types", dest="postTypes", type=_csv,
                        metavar="A,B", help="Post types to sync")
    setCmd.add_argument("--taxonomies", type=_csv, metavar="A,B",
                        help="Taxonomies to sync")
    setCmd.add_argument("--author", help="Portal author of pushed posts")

    terms = commands.add_parser("terms", help="Set the terms of one taxonomy to sync")
    _addPairArgs(terms)
    terms.add_argument("taxonomy")
    terms.add_argument("names", nargs="+", metavar="NAME")

    link = commands.add_parser("link", help="Print the admin link of a sync job")
    _addPairArgs(link)
    link.add_argument("--delete", action="store_true",
                      help="Print the delete link instead of the edit link")

    delete = commands.add_parser("delete", help="Delete a sync job")
    _addPairArgs(delete)

    sources = commands.add_parser("sources", help="List the sources of a portal")
    sources.add_argument("portal", type=int)

    portals = commands.add_parser("portals", help="List the portals of a source")
    portals.add_argument("source", type=int)

    return parser.parse_args(args)


def showJob(job):
    print("job:        %s" % job.composite_id)
    print("title:      %s" % job.title)
    print("portal:     %d (%s)" % (job.portal_id, job.get_portal_name()))
    print("source:     %d (%s)" % (job.source_id, job.get_source_name()))
    print("author:     %s" % job.get_author())
    print("post types: %s" % ", ".join(job.get_post_types()))
    print("taxonomies: %s" % ", ".join(job.get_taxonomies()))
    for taxonomy in job.get_taxonomies():
        names = [term.name for term in job.get_terms(taxonomy) or []]
        print("  %s: %s" % (taxonomy, ", ".join(names)))
    print("terms:      %d" % job.get_term_count())


class CommandError(Exception):
    pass


def _getJob(service, options, mustExist=True):
    for tenantId in (options.portal, options.source):
        if service.repo.resolve(tenantId) is None:
            raise CommandError("no site with ID %d" % tenantId)
    job = service.get_job(options.portal, options.source)
    if job.composite_id is None:
        raise CommandError("invalid site IDs %r, %r" % (options.portal, options.source))
    if mustExist and not job.exists():
        raise CommandError("no job for portal %d and source %d" % (
            options.portal, options.source))
    return job


def handleSite(service, options):
    if options.siteCommand == "add":
        tenant = service.repo.add_tenant(options.id, options.domain)
        print("added site %d (%s)" % (tenant.id, tenant.domain))
    else:
        for tenant in service.repo.list_tenants():
            print("%d\t%s" % (tenant.id, tenant.domain))


def handleSet(service, options):
    if options.author is not None and positive_int(options.author) is None:
        raise CommandError("invalid author %r" % options.author)
    job = _getJob(service, options)
    if options.postTypes is not None:
        job.set_post_types(options.postTypes)
    if options.taxonomies is not None:
        job.set_taxonomies(options.taxonomies)
    if options.author is not None:
        job.set_author(options.author)
    showJob(job)


def handleTerms(service, options):
    job = _getJob(service, options)
    service.set_terms(job, options.taxonomy, options.names)
    showJob(service.get_job(options.portal, options.source))


def runCommand(service, options):
    # pylint: disable=too-many-branches
    if options.command == "site":
        handleSite(service, options)
    elif options.command == "create":
        _getJob(service, options, mustExist=False)
        showJob(service.create_job(options.portal, options.source, options.title))
    elif options.command == "show":
        showJob(_getJob(service, options))
    elif options.command == "set":
        handleSet(service, options)
    elif options.command == "terms":
        handleTerms(service, options)
    elif options.command == "link":
        job = _getJob(service, options)
        print(job.get_delete_link() if options.delete else job.get_edit_link())
    elif options.command == "delete":
        job = _getJob(service, options)
        job.delete_job()
        print("deleted job %s" % job.composite_id)
    elif options.command == "sources":
        for job in service.jobs_for_portal(options.portal):
            print("%s\t%d\t%s" % (job.composite_id, job.source_id, job.get_source_name()))
    elif options.command == "portals":
        for job in service.jobs_for_source(options.source):
            print("%s\t%d\t%s" % (job.composite_id, job.portal_id, job.get_portal_name()))


def impl_main(args=None):
    options = parseArgs(args)
    try:
        config = Config(options)
    except ConfigError as error:
        print("Error:", error, file=sys.stderr)
        return 1

    aggregator.logging.setup(
        config.logDir,
        _DEBUG_LOG_FILE_NAME,
        debug=options.debug)
    LOG.debug("starting with args %s", options)
    LOG.debug("python: %s", sys.version)

    repo = SqliteNetworkRepository(config.dbFile, home_tenant_id=config.homeSite)
    links = AdminLinkBuilder(repo, scheme=config.linkScheme, admin_path=config.adminPath)
    service = JobService(repo, links)
    try:
        runCommand(service, options)
    except (CommandError, StoreError) as error:
        LOG.debug("command failed", exc_info=True)
        print("Error:", error, file=sys.stderr)
        return 1
    finally:
        service.close()
    return 0


def main():
    sys.exit(impl_main())

