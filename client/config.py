import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Any, Mapping
from urllib.parse import urlparse

from dotenv import load_dotenv

from domain.errors import ValidationError
from ports.settings_store import SettingsStorePort
from use_cases.poll_job import (
    DEFAULT_POLL_INTERVAL, DEFAULT_STALL_THRESHOLD, DEFAULT_NAVIGATE_DELAY,
)

logger = logging.getLogger(__name__)

load_dotenv()

DEFAULT_API_URL = "http://localhost:8000"
DEFAULT_SETTINGS_FILE = "~/.config/briefing-client/settings.json"
DEFAULT_REQUEST_TIMEOUT = 30.0


def normalize_api_url(url: str) -> str:
    """Strip whitespace and trailing slashes; require an http(s) URL with a host."""
    url = (url or "").strip().rstrip("/")
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValidationError(f"Invalid API URL: {url!r}")
    return url


@dataclass(frozen=True)
class Config:
    """Resolved once at startup and passed to whatever needs it."""
    api_url: str = DEFAULT_API_URL
    api_url_source: str = "default"
    settings_file: str = DEFAULT_SETTINGS_FILE
    poll_interval: float = DEFAULT_POLL_INTERVAL
    stall_threshold: int = DEFAULT_STALL_THRESHOLD
    navigate_delay: float = DEFAULT_NAVIGATE_DELAY
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    debug: bool = False

    def as_dict(self) -> Dict[str, Any]:
        return {
            "api_url": self.api_url,
            "api_url_source": self.api_url_source,
            "settings_file": self.settings_file,
            "poll_interval": self.poll_interval,
            "stall_threshold": self.stall_threshold,
            "navigate_delay": self.navigate_delay,
            "request_timeout": self.request_timeout,
            "debug": self.debug,
        }


def create_settings_store(environ: Optional[Mapping[str, str]] = None) -> SettingsStorePort:
    from adapters.local.json_settings_store import JsonFileSettingsStore

    env = os.environ if environ is None else environ
    path = env.get("BRIEFING_SETTINGS_FILE", DEFAULT_SETTINGS_FILE)
    return JsonFileSettingsStore(str(Path(path).expanduser()))


def _resolve_api_url(
    override: Optional[str],
    store: SettingsStorePort,
    env: Mapping[str, str],
) -> tuple[str, str]:
    # An explicit override must be valid; persisted and env values fall through.
    if override and override.strip():
        return normalize_api_url(override), "override"

    for source, value in (
        ("settings", store.get_api_url()),
        ("env", env.get("BRIEFING_API_URL")),
    ):
        if not value or not value.strip():
            continue
        try:
            return normalize_api_url(value), source
        except ValidationError as e:
            logger.warning(f"Ignoring API URL from {source}: {e}")

    return DEFAULT_API_URL, "default"


def load_config(
    api_url: Optional[str] = None,
    settings_store: Optional[SettingsStorePort] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Config:
    """Build the Config.

    Base URL precedence: explicit api_url, saved setting, BRIEFING_API_URL,
    then DEFAULT_API_URL.
    """
    env = os.environ if environ is None else environ
    store = settings_store or create_settings_store(env)
    url, source = _resolve_api_url(api_url, store, env)

    cfg = Config(
        api_url=url,
        api_url_source=source,
        settings_file=str(Path(env.get("BRIEFING_SETTINGS_FILE", DEFAULT_SETTINGS_FILE)).expanduser()),
        poll_interval=float(env.get("POLL_INTERVAL", DEFAULT_POLL_INTERVAL)),
        stall_threshold=int(env.get("STALL_THRESHOLD", DEFAULT_STALL_THRESHOLD)),
        navigate_delay=float(env.get("NAVIGATE_DELAY", DEFAULT_NAVIGATE_DELAY)),
        request_timeout=float(env.get("REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT)),
        debug=env.get("DEBUG", "0") == "1",
    )
    logger.debug(f"Config: {cfg.as_dict()}")
    return cfg


def create_api_adapter(cfg: Config, transport=None):
    """Create the HTTP job API adapter for cfg.api_url."""
    from adapters.http.job_api import HttpJobApiAdapter
    return HttpJobApiAdapter(cfg.api_url, timeout=cfg.request_timeout, transport=transport)


def create_tracker(cfg: Config, api, notifier=None, navigator=None, scheduler=None, progress=None):
    """Wire a JobTracker from cfg and a job API adapter.

    Missing collaborators default to the logging notifier, navigator and
    progress adapters and the asyncio scheduler.
    """
    from adapters.asyncio_scheduler import AsyncioScheduler
    from adapters.local.log_navigator import LogNavigatorAdapter
    from adapters.local.log_notifier import LogNotificationAdapter
    from adapters.local.log_progress import LogProgressAdapter
    from use_cases.poll_job import JobStatusPoller
    from use_cases.submit_job import SubmissionClient
    from use_cases.track_job import JobTracker

    poller = JobStatusPoller(
        query=api.get_job,
        notifier=notifier or LogNotificationAdapter(),
        navigator=navigator or LogNavigatorAdapter(cfg.api_url),
        scheduler=scheduler or AsyncioScheduler(),
        interval=cfg.poll_interval,
        stall_threshold=cfg.stall_threshold,
        navigate_delay=cfg.navigate_delay,
        progress=progress or LogProgressAdapter(),
    )
    logger.debug(
        f"Tracker: interval={cfg.poll_interval}s stall_threshold={cfg.stall_threshold} "
        f"navigate_delay={cfg.navigate_delay}s"
    )
    return JobTracker(SubmissionClient(api), poller)
