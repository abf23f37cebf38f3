#!/usr/bin/env python3
# activateWebhooks.py
#
# Activate every disabled org and repo webhook in one or more GitHub orgs.
# Meant to run as the last step of a migration, once the hooks have been
# recreated inactive on the target instance.
#
# Usage:
#     INPUT_TARGET_ORGS="org1,org2" INPUT_TARGET_GITHUB_PAT=xxx scripts/activateWebhooks.py

import logging
import sys

import ghutils
from ghclient import GhClient

"""
# Required Environment Variables
export INPUT_TARGET_ORGS=<comma or newline separated list of orgs>
# and either
export INPUT_TARGET_GITHUB_PAT=<Personal Access Token with admin:org_hook and repo>
# or
export INPUT_TARGET_GITHUB_APP_ID=<GitHub App id>
export INPUT_TARGET_GITHUB_APP_PRIVATE_KEY=<GitHub App private key>
export INPUT_TARGET_GITHUB_APP_INSTALLATION_ID=<GitHub App installation id>

# Optional Environment Variables
export INPUT_TARGET_GITHUB_API_URL=<API base url, default https://api.github.com>
export INPUT_FAIL_ON_ERROR=<true to exit 1 when any hook could not be activated>
# Every INPUT_TARGET_* credential falls back to the matching INPUT_SOURCE_* one.
"""


class SweepOutcome:
    """Failures collected during one sweep, in the order they happened."""

    def __init__(self):
        self.failures = []

    @property
    def ok(self):
        return not self.failures

    def addFailure(self, failure):
        self.failures.append(failure)


def activateHooks(hooks, activate, describe, failureName, logger, outcome):
    for hook in hooks:
        hookId = hook["id"]
        # skip webhooks that are already active
        if hook["active"]:
            logger.info(
                'Skipping webhook "{}" for {} (already active)'.format(
                    hookId, describe
                )
            )
            continue
        logger.info('Activating webhook "{}" for {}'.format(hookId, describe))
        try:
            activate(hookId)
        except Exception as e:
            outcome.addFailure("{}:{}".format(failureName, hookId))
            logger.error("ERROR: {}".format(e))


def activateAllOrgWebhooks(client, org, logger, outcome):
    activateHooks(
        client.getOrgWebhooks(org),
        lambda hookId: client.activateOrgWebhook(org, hookId),
        'org "{}"'.format(org),
        "Org hook {}".format(org),
        logger,
        outcome,
    )


def activateAllRepoWebhooks(client, org, repo, logger, outcome):
    activateHooks(
        client.getRepoWebhooks(org, repo),
        lambda hookId: client.activateRepoWebhook(org, repo, hookId),
        '"{}/{}"'.format(org, repo),
        "Repo hook {}/{}".format(org, repo),
        logger,
        outcome,
    )


def activateAll(client, orgs, logger, outcome=None):
    """Sweep every org in order: org hooks first, then each repo's hooks.

    Activation errors are recorded in outcome and the sweep moves on.
    Listing errors propagate, so pass in an outcome you own if you need
    the failures recorded before the error."""
    if outcome is None:
        outcome = SweepOutcome()
    for org in orgs:
        logger.info('Activating webhooks for org "{}"'.format(org))
        activateAllOrgWebhooks(client, org, logger, outcome)
        repos = client.getOrgRepos(org)
        logger.info("Processing repo webhooks")
        for repo in repos:
            logger.info('Activating webhooks for repo "{}/{}"'.format(org, repo))
            activateAllRepoWebhooks(client, org, repo, logger, outcome)
    return outcome


def reportFailures(outcome, logger):
    if outcome.ok:
        return
    logger.error("Failed to activate webhooks:")
    for failure in outcome.failures:
        logger.error("\t{}".format(failure))


def main():
    config = ghutils.resolveConfig()
    logger = ghutils.getLogger(logging.DEBUG if config.debug else logging.INFO)
    logger.info("isDebug? {}".format(config.debug))

    outcome = SweepOutcome()
    try:
        token = ghutils.getAuthToken(config, logger)
        with GhClient(token, config.apiUrl, logger=logger) as client:
            activateAll(client, config.orgs, logger, outcome)
    finally:
        reportFailures(outcome, logger)

    if config.failOnError and not outcome.ok:
        sys.exit(1)


if __name__ == "__main__":
    main()
