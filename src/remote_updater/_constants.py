"""Internal constants shared across the library."""

USER_AGENT = "remote-updater"

#: Substring identifying the default registry bulk update-check endpoint.
DEFAULT_REGISTRY_CHECK_PATH = "api.wordpress.org/plugins/update-check"

#: Seconds before a remote version request is abandoned.
REQUEST_TIMEOUT: float = 15.0

ACTION_LATEST_VERSION = "plugin_latest_version"
ACTION_INFORMATION = "plugin_information"
REMOTE_ACTIONS: frozenset[str] = frozenset({ACTION_LATEST_VERSION, ACTION_INFORMATION})

# ------------------------------------------------------------------
# Host hook names
# ------------------------------------------------------------------

HOOK_OUTBOUND_REQUEST = "http_request_args"
HOOK_PENDING_UPDATES = "pre_set_site_transient_update_plugins"
HOOK_DETAIL_VIEW = "plugins_api"

#: Runs ahead of default-priority filters so later ones see the rewritten body.
OUTBOUND_REQUEST_PRIORITY = 5
DEFAULT_PRIORITY = 10
