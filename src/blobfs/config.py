import typing as t
from .directories import DIRECTORY_MARKER_NAME
from .exceptions import ConfigError
from .transfer import CopyPollPolicy, DEFAULT_COPY_MAX_POLLS, DEFAULT_COPY_POLL_INTERVAL


class StoreOptions:
    """Settings for a blob file store."""

    def __init__(self,
                 container_name: str,
                 connection_string: t.Optional[str] = None,
                 account_url: t.Optional[str] = None,
                 base_path: t.Optional[str] = None,
                 copy_poll_interval: float = DEFAULT_COPY_POLL_INTERVAL,
                 copy_max_polls: int = DEFAULT_COPY_MAX_POLLS,
                 marker_name: str = DIRECTORY_MARKER_NAME):
        self.container_name = container_name
        self.connection_string = connection_string
        self.account_url = account_url
        self.base_path = base_path
        self.copy_poll_interval = copy_poll_interval
        self.copy_max_polls = copy_max_polls
        self.marker_name = marker_name or DIRECTORY_MARKER_NAME

    def poll_policy(self) -> CopyPollPolicy:
        return CopyPollPolicy(self.copy_poll_interval, self.copy_max_polls)

    @staticmethod
    def from_config(config, section: str = "blobfs"):
        """Build options from the application configuration."""
        container_name = config.as_str((section, "container_name"), default=None)
        if not container_name:
            raise ConfigError(f"{section}.container_name", "CONFIG", 1000)
        connection_string = config.as_str((section, "connection_string"), default=None)
        account_url = config.as_str((section, "account_url"), default=None)
        if not (connection_string or account_url):
            raise ConfigError(f"{section}.connection_string", "CONFIG", 1001)
        return StoreOptions(
            container_name=container_name,
            connection_string=connection_string,
            account_url=account_url,
            base_path=config.as_str((section, "base_path"), default=None),
            copy_poll_interval=config.as_float((section, "copy_poll_interval"), default=DEFAULT_COPY_POLL_INTERVAL),
            copy_max_polls=config.as_int((section, "copy_max_polls"), default=DEFAULT_COPY_MAX_POLLS),
            marker_name=config.as_str((section, "marker_name"), default=DIRECTORY_MARKER_NAME),
        )
