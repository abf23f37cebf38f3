#!/usr/bin/env python3
# ghutils.py

# Functions used by activateWebhooks.py and ghclient.py
import logging
import os
import re
from collections import namedtuple

import __main__
from github import Auth, GithubIntegration

GHEC_API_URL = "https://api.github.com"
GH_API_VERSION = "2022-11-28"

# Thanks https://stackoverflow.com/a/19202904
COMMENT_RE = re.compile(r"^\s*(#.*|)$")
ORG_SEPARATOR_RE = re.compile(r"[,\n]+")

DEFAULT_TIMEOUT = 300

TRUTHY = ("true", "1", "yes")

Config = namedtuple(
    "Config",
    [
        "orgs",
        "token",
        "appId",
        "appPrivateKey",
        "appInstallationId",
        "apiUrl",
        "failOnError",
        "debug",
    ],
)


def assertGetenv(envVar, message=""):
    env = os.getenv(envVar)
    if not env:
        raise AssertionError(
            "Environment variable '{}' not found. {}".format(envVar, message)
        )
    return env


def inputEnvVar(name):
    # Same mangling the Actions runner applies to `with:` keys
    return "INPUT_{}".format(name.replace(" ", "_").upper())


def getInput(name):
    return os.getenv(inputEnvVar(name), "").strip()


def getInputWithFallback(name):
    return getInput("target_{}".format(name)) or getInput("source_{}".format(name))


def parseOrgList(text):
    return [
        org.strip()
        for org in ORG_SEPARATOR_RE.split(text)
        if not COMMENT_RE.match(org)
    ]


def isDebug():
    return os.getenv("RUNNER_DEBUG") == "1"


def hasAppCredentials(config):
    return bool(config.appId and config.appPrivateKey and config.appInstallationId)


def resolveConfig():
    """Read the action inputs into a Config.

    Every credential and the API URL fall back from the target_ input to
    the source_ input. Raises AssertionError when there is nothing to do
    or no way to authenticate."""
    orgs = parseOrgList(
        assertGetenv(inputEnvVar("target_orgs"), "Provide at least one org")
    )
    if not orgs:
        raise AssertionError("No orgs found in input 'target_orgs'")

    config = Config(
        orgs=orgs,
        token=getInputWithFallback("github_pat"),
        appId=getInputWithFallback("github_app_id"),
        appPrivateKey=getInputWithFallback("github_app_private_key").replace(
            "\\n", "\n"
        ),
        appInstallationId=getInputWithFallback("github_app_installation_id"),
        apiUrl=(getInputWithFallback("github_api_url") or GHEC_API_URL).rstrip("/"),
        failOnError=getInput("fail_on_error").lower() in TRUTHY,
        debug=isDebug(),
    )
    if config.appInstallationId and not config.appInstallationId.isdigit():
        raise AssertionError(
            "GitHub App installation id must be numeric, got '{}'".format(
                config.appInstallationId
            )
        )
    if not config.token and not hasAppCredentials(config):
        raise AssertionError(
            "Provide either a personal access token or a GitHub App id, "
            "private key and installation id"
        )
    return config


def getAuthToken(config, logger):
    # Prefer app auth to PAT if both are available
    if hasAppCredentials(config):
        logger.debug(
            "Requesting installation token for app {} installation {}".format(
                config.appId, config.appInstallationId
            )
        )
        auth = Auth.AppAuth(config.appId, config.appPrivateKey)
        integration = GithubIntegration(auth=auth, base_url=config.apiUrl)
        return integration.get_access_token(int(config.appInstallationId)).token
    logger.debug("Using personal access token")
    return config.token


class CustomFormatter(logging.Formatter):
    green = "\033[1;32m"
    grey = "\033[1;20m"
    yellow = "\033[1;33m"
    red = "\033[1;31m"
    bold_red = "\033[31;1m"
    reset = "\033[0m"
    fmt = "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s"

    FORMATS = {
        logging.DEBUG: green + fmt + reset,
        logging.INFO: grey + fmt + reset,
        logging.WARNING: yellow + fmt + reset,
        logging.ERROR: red + fmt + reset,
        logging.CRITICAL: bold_red + fmt + reset,
    }

    def format(self, record):
        log_fmt = self.FORMATS.get(record.levelno)
        formatter = logging.Formatter(log_fmt, "%Y-%m-%d %H:%M:%S")
        return formatter.format(record)


def getLogger(level=logging.INFO, loggerName=""):
    # Thanks https://stackoverflow.com/a/35514032 for the __main__ hint
    try:
        if not loggerName:
            loggerName = os.path.basename(__main__.__file__)
    except Exception:
        loggerName = __name__
    logger = logging.getLogger(loggerName)
    logger.setLevel(level)

    # one console handler per logger, even if called twice
    if not logger.handlers:
        ch = logging.StreamHandler()
        ch.setLevel(level)
        ch.setFormatter(CustomFormatter())
        logger.addHandler(ch)
    else:
        for handler in logger.handlers:
            handler.setLevel(level)
    return logger


def ghHeaders(ghAuthToken):
    return {
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": GH_API_VERSION,
        "Authorization": "Bearer {}".format(ghAuthToken),
    }
