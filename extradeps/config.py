"""Rule options, validated before any file is analyzed."""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, ValidationError

from extradeps.exceptions import ConfigError
from extradeps.policy import Fixed, GlobList, PolicySetting

_POLICY_FIELDS = ("dev_dependencies", "optional_dependencies", "peer_dependencies")


class RuleOptions(BaseModel):
    """Options accepted by the rule, keyed by their package.json-style names.

    Each policy option is either a boolean or a list of glob patterns;
    ``packageDir`` is a directory or list of directories whose package.json
    is merged with the nearest one.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    dev_dependencies: StrictBool | list[StrictStr] = Field(
        default=True, alias="devDependencies"
    )
    optional_dependencies: StrictBool | list[StrictStr] = Field(
        default=True, alias="optionalDependencies"
    )
    peer_dependencies: StrictBool | list[StrictStr] = Field(
        default=True, alias="peerDependencies"
    )
    package_dir: StrictStr | list[StrictStr] | None = Field(default=None, alias="packageDir")

    @classmethod
    def from_dict(cls, data: Any) -> RuleOptions:
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigError(f"Options must be a JSON object, got {type(data).__name__}")
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            messages = []
            for err in exc.errors():
                loc = ".".join(str(part) for part in err["loc"])
                messages.append(f"{loc}: {err['msg']}")
            raise ConfigError("Invalid options: " + "; ".join(messages)) from exc

    def setting(self, name: str) -> PolicySetting:
        """Return the policy option *name* as a Fixed or GlobList setting."""
        if name not in _POLICY_FIELDS:
            raise KeyError(name)
        value = getattr(self, name)
        if isinstance(value, bool):
            return Fixed(value)
        return GlobList(tuple(value))

    def package_dirs(self) -> tuple[str, ...]:
        if self.package_dir is None:
            return ()
        if isinstance(self.package_dir, str):
            return (self.package_dir,)
        return tuple(self.package_dir)

    def with_package_dirs(self, dirs: Sequence[str]) -> RuleOptions:
        return self.model_copy(update={"package_dir": list(dirs)})


def load_options(path: str | Path) -> RuleOptions:
    """Load options from a JSON file.

    The options object may sit at the top level or under an ``"options"`` key.
    """
    try:
        content = Path(path).read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in config file {path}: {exc}") from exc

    if isinstance(data, dict) and set(data) == {"options"}:
        data = data["options"]
    return RuleOptions.from_dict(data)
