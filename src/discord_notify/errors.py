from __future__ import annotations
from typing import Optional, Sequence


class NotifyError(Exception):
    stage = "notify"


class ConfigError(NotifyError):
    stage = "configuration"


class MissingConfigError(ConfigError):
    def __init__(self, fields: Sequence[str]):
        self.fields = list(fields)
        names = ", ".join(self.fields)
        super().__init__(
            f"configuration failed: missing {names} "
            f"(pass it as a flag, set it in the environment, or run --init)"
        )


class ConfigStoreError(ConfigError):
    pass


class DispatchError(NotifyError):
    def __init__(self, stage: str, message: str):
        self.stage = stage
        super().__init__(f"{stage} failed: {message}")


class HttpError(DispatchError):
    def __init__(self, stage: str, status: Optional[int] = None,
                 detail: str = "", cause: Optional[BaseException] = None):
        self.status = status
        self.cause = cause
        if status is not None:
            message = f"HTTP {status}" + (f" ({detail})" if detail else "")
        else:
            message = f"request error: {cause}"
        super().__init__(stage, message)


class MalformedResponseError(DispatchError):
    pass
