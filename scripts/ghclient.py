#!/usr/bin/env python3
# ghclient.py
#
# Thin wrapper over the GitHub REST endpoints the webhook sweep needs.
# Every call raises requests.exceptions.HTTPError on a non-2xx response;
# callers decide which of those are fatal.

import logging

import ghutils
import requests
from ghutils import DEFAULT_TIMEOUT, GHEC_API_URL


def getWebhookFields(hooks):
    return [{"id": hook["id"], "active": hook["active"]} for hook in hooks]


class GhClient:
    def __init__(
        self, token, apiUrl=GHEC_API_URL, timeout=DEFAULT_TIMEOUT, logger=None
    ):
        self.apiUrl = apiUrl.rstrip("/")
        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)
        self.session = requests.Session()
        self.session.headers.update(ghutils.ghHeaders(token))

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def close(self):
        self.session.close()

    def _get(self, path):
        url = "{}{}".format(self.apiUrl, path)
        res = self.session.get(url, timeout=self.timeout)
        self.logger.debug("GET {} - {}".format(url, res.status_code))
        res.raise_for_status()
        return res.json()

    def _activate(self, path):
        url = "{}{}".format(self.apiUrl, path)
        res = self.session.patch(url, json={"active": True}, timeout=self.timeout)
        self.logger.debug("PATCH {} - {}".format(url, res.status_code))
        res.raise_for_status()
        return res

    def getOrgRepos(self, org):
        return [repo["name"] for repo in self._get("/orgs/{}/repos".format(org))]

    def getOrgWebhooks(self, org):
        return getWebhookFields(self._get("/orgs/{}/hooks".format(org)))

    def activateOrgWebhook(self, org, hookId):
        return self._activate("/orgs/{}/hooks/{}".format(org, hookId))

    def getRepoWebhooks(self, org, repo):
        return getWebhookFields(self._get("/repos/{}/{}/hooks".format(org, repo)))

    def activateRepoWebhook(self, org, repo, hookId):
        return self._activate("/repos/{}/{}/hooks/{}".format(org, repo, hookId))
