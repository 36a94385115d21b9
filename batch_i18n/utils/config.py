"""Options object for a batch_i18n run and its JSON loader.

The configuration file is a flat-ish JSON object (default name ``i18n.config.json`` in the
working directory). Every key is optional; missing keys fall back to ``I18N_DEFAULTS``.
"""
from __future__ import annotations

import copy
import dataclasses
import json
import logging
import pathlib
from typing import Any, Dict, List, Optional, Tuple

from batch_i18n.errors import ConfigError
from batch_i18n.utils.fs import atomic_write

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "i18n.config.json"

I18N_DEFAULTS: Dict[str, Any] = {
    "outputPath": "./i18n-mapping.json",
    "ignorePaths": ["node_modules", "dist", ".git", "*.d.ts"],
    "fileExtensions": [".vue", ".ts", ".js"],
    "fieldNames": ["i18n"],
    "logLevel": None,
    "vue": {
        "importStatement": "import { useI18n } from 'vue-i18n';",
        "instanceStatement": "const { t } = useI18n();",
        "i18nMethod": {
            "template": "$t",
            "script": "t",
        },
    },
    "typescript": {
        "importStatement": "import { i18n } from '@/i18n';",
        "i18nMethod": "i18n.global.t",
    },
    "javascript": {
        "importStatement": "import { i18n } from '@/i18n';",
        "i18nMethod": "i18n.global.t",
    },
}


@dataclasses.dataclass
class VueOptions:
    import_statement: str
    instance_statement: str
    template_method: str = "$t"
    script_method: str = "t"


@dataclasses.dataclass
class ScriptOptions:
    import_statement: str
    i18n_method: str


@dataclasses.dataclass
class I18nConfig:
    output_path: str
    ignore_paths: List[str]
    file_extensions: List[str]
    vue: VueOptions
    typescript: ScriptOptions
    javascript: ScriptOptions
    field_names: Tuple[str, ...] = ("i18n",)
    log_level: Optional[str] = None
    source: Optional[pathlib.Path] = None

    def options_for_suffix(self, suffix: str) -> ScriptOptions:
        """Script dialect options for a standalone file suffix (.js/.jsx use javascript)."""
        if suffix in (".js", ".jsx", ".mjs", ".cjs"):
            return self.javascript
        return self.typescript

    def lookup_names(self) -> Tuple[str, ...]:
        """Every configured lookup function name, used to recognise already-localized text."""
        names = [
            self.vue.template_method,
            self.vue.script_method,
            self.typescript.i18n_method,
            self.javascript.i18n_method,
        ]
        seen: List[str] = []
        for n in names:
            if n and n not in seen:
                seen.append(n)
        return tuple(seen)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], source: Optional[pathlib.Path] = None) -> "I18nConfig":
        merged = _deep_merge(I18N_DEFAULTS, data or {})
        # javascript falls back to typescript when the user only configured the latter
        if "javascript" not in (data or {}) and "typescript" in (data or {}):
            merged["javascript"] = copy.deepcopy(merged["typescript"])
        _validate(merged)
        vue = merged["vue"]
        return cls(
            output_path=merged["outputPath"],
            ignore_paths=list(merged["ignorePaths"]),
            file_extensions=[_dotted(e) for e in merged["fileExtensions"]],
            vue=VueOptions(
                import_statement=vue["importStatement"],
                instance_statement=vue["instanceStatement"],
                template_method=vue["i18nMethod"]["template"],
                script_method=vue["i18nMethod"]["script"],
            ),
            typescript=ScriptOptions(
                import_statement=merged["typescript"]["importStatement"],
                i18n_method=merged["typescript"]["i18nMethod"],
            ),
            javascript=ScriptOptions(
                import_statement=merged["javascript"]["importStatement"],
                i18n_method=merged["javascript"]["i18nMethod"],
            ),
            field_names=tuple(merged["fieldNames"]),
            log_level=merged.get("logLevel"),
            source=source,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "outputPath": self.output_path,
            "ignorePaths": list(self.ignore_paths),
            "fileExtensions": list(self.file_extensions),
            "fieldNames": list(self.field_names),
            "logLevel": self.log_level,
            "vue": {
                "importStatement": self.vue.import_statement,
                "instanceStatement": self.vue.instance_statement,
                "i18nMethod": {
                    "template": self.vue.template_method,
                    "script": self.vue.script_method,
                },
            },
            "typescript": {
                "importStatement": self.typescript.import_statement,
                "i18nMethod": self.typescript.i18n_method,
            },
            "javascript": {
                "importStatement": self.javascript.import_statement,
                "i18nMethod": self.javascript.i18n_method,
            },
        }


def _dotted(ext: str) -> str:
    ext = str(ext).strip()
    return ext if ext.startswith(".") else f".{ext}"


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = _deep_merge(out[key], value)
        else:
            out[key] = copy.deepcopy(value)
    return out


def _validate(cfg: Dict[str, Any]) -> None:
    if not isinstance(cfg.get("outputPath"), str):
        raise ConfigError("outputPath must be a string")
    for key in ("ignorePaths", "fileExtensions", "fieldNames"):
        val = cfg.get(key)
        if not isinstance(val, list) or not all(isinstance(v, str) for v in val):
            raise ConfigError(f"{key} must be a list of strings")
    vue = cfg.get("vue")
    if not isinstance(vue, dict) or not isinstance(vue.get("i18nMethod"), dict):
        raise ConfigError("vue.i18nMethod must be an object with 'template' and 'script'")
    for key in ("importStatement", "instanceStatement"):
        if not isinstance(vue.get(key), str):
            raise ConfigError(f"vue.{key} must be a string")
    for key in ("template", "script"):
        if not isinstance(vue["i18nMethod"].get(key), str) or not vue["i18nMethod"][key]:
            raise ConfigError(f"vue.i18nMethod.{key} must be a non-empty string")
    for dialect in ("typescript", "javascript"):
        section = cfg.get(dialect)
        if not isinstance(section, dict):
            raise ConfigError(f"{dialect} must be an object")
        if not isinstance(section.get("importStatement"), str):
            raise ConfigError(f"{dialect}.importStatement must be a string")
        if not isinstance(section.get("i18nMethod"), str) or not section["i18nMethod"]:
            raise ConfigError(f"{dialect}.i18nMethod must be a non-empty string")


def default_config() -> I18nConfig:
    return I18nConfig.from_dict({})


def load_config(path: Optional[pathlib.Path] = None, cwd: Optional[pathlib.Path] = None) -> I18nConfig:
    """Load the run configuration.

    With an explicit ``path`` any read/parse/validation failure raises ConfigError.
    Without one, ``i18n.config.json`` in ``cwd`` is used when present; if that file is broken
    a warning is logged and the defaults are returned.
    """
    explicit = path is not None
    cfg_path = pathlib.Path(path) if explicit else (cwd or pathlib.Path.cwd()) / CONFIG_FILENAME

    if not cfg_path.exists():
        if explicit:
            raise ConfigError(f"Config file not found: {cfg_path}")
        return default_config()

    try:
        raw = cfg_path.read_text(encoding="utf-8")
        data = json.loads(raw or "{}")
        if not isinstance(data, dict):
            raise ConfigError(f"{cfg_path} must contain a JSON object")
        cfg = I18nConfig.from_dict(data, source=cfg_path)
    except (OSError, ValueError, ConfigError) as e:
        if explicit:
            if isinstance(e, ConfigError):
                raise
            raise ConfigError(f"Failed to read/parse {cfg_path}: {e}") from e
        logger.warning("Failed to load %s, using defaults: %s", cfg_path, e)
        return default_config()

    logger.info("Loaded config file: %s", cfg_path)
    return cfg


def write_default_config(path: pathlib.Path) -> bool:
    """Write the default configuration to ``path``.

    Returns False and leaves the file untouched when it already exists, so a customized config
    is never replaced.
    """
    if path.exists():
        logger.debug("Config file %s already exists", path)
        return False
    text = json.dumps(I18N_DEFAULTS, indent=2, ensure_ascii=False) + "\n"
    atomic_write(path, text)
    logger.info("Wrote default config to %s", path)
    return True
