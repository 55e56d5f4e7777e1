"""Settings sources: a cascade of YAML files, then ``-o`` overrides.

For each top-level settings field ``<name>``, ``<root>/<name>.yaml`` is read
first and ``<root>/env.d/<env>/<name>.yaml`` is deep-merged over it, so an
environment file only has to state what differs. Overrides given on the
command line as ``-o storage.persistent.database.echo=true`` are merged
over both; their values are parsed as YAML.

Sources listed earlier in Settings.settings_customise_sources win, and
pydantic-settings deep-merges the partial documents they return.
"""

import functools
import typing as t
from pathlib import Path

import pydantic as p
import yaml
from pydantic_settings import PydanticBaseSettingsSource
from pydantic_settings import SettingsError

import bulletin.lib.util as util
from bulletin.model import DeploymentEnvironment

# fields of Settings that describe the cascade itself
_bootstrap_fields = frozenset({"root", "env", "override"})


class SettingsCurrentState(t.TypedDict, total=False):
    root: t.Required[p.AnyUrl]
    env: t.Required[DeploymentEnvironment]
    override: tuple[str, ...]


class SettingsSource(PydanticBaseSettingsSource):
    @property
    def state(self) -> SettingsCurrentState:
        return t.cast(SettingsCurrentState, self.current_state)

    def __call__(self) -> dict[str, t.Any]:
        data: dict[str, t.Any] = {}
        for field_name, field in self.settings_cls.model_fields.items():
            if field_name in _bootstrap_fields:
                continue
            try:
                value, key, is_complex = self.get_field_value(field, field_name)
            except KeyError:
                continue
            except (OSError, yaml.YAMLError) as e:
                raise SettingsError(f"error reading {field_name!r} from {self!r}") from e
            data[key] = self.prepare_field_value(field_name, field, value, is_complex)
        return data

    def prepare_field_value(self, field_name: str, field: p.fields.FieldInfo, value: t.Any, value_is_complex: bool):
        return value


class YAMLCascadingSettingsSource(SettingsSource):
    @functools.cached_property
    def load_paths(self) -> list[Path]:
        root = self.state["root"]
        if root.scheme != "file" or root.path is None:
            raise SettingsError(f"config root must be a file:// URL, got {root}")
        paths = [Path(root.path)]
        env = self.state["env"]
        if env is not DeploymentEnvironment.Local:
            # local/ has no directory of its own, that's just root
            paths.append(Path(root.path) / "env.d" / env.value)
        return paths

    def get_field_value(self, field: p.fields.FieldInfo, field_name: str) -> tuple[t.Any, str, bool]:
        merged: dict[str, t.Any] | None = None
        for path in self.load_paths:
            fn = path / f"{field_name}.yaml"
            if not fn.exists():
                continue
            doc = yaml.safe_load(fn.read_text(encoding="utf8")) or {}
            merged = doc if merged is None else util.deep_update(merged, doc)
        if merged is None:
            raise KeyError(field_name)
        return merged, field_name, True


class OverrideSettingsSource(SettingsSource):
    @functools.cached_property
    def parsed_options(self) -> dict[str, t.Any]:
        od: dict[str, t.Any] = {}
        for o in self.state.get("override", ()):
            if "=" not in o:
                raise SettingsError(f"override must be given as key=value: {o!r}")
            k, v = (s.strip() for s in o.split("=", 1))
            *path, key = k.split(".")
            target = od
            for part in path:
                target = target.setdefault(part, {})
            target[key] = yaml.safe_load(v)
        return od

    def get_field_value(self, field: p.fields.FieldInfo, field_name: str) -> tuple[t.Any, str, bool]:
        if field_name not in self.parsed_options:
            raise KeyError(field_name)
        option = self.parsed_options[field_name]
        return option, field_name, isinstance(option, dict)
