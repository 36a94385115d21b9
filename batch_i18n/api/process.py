# -*- coding: utf-8 -*-
"""Per-file and batch pipeline around the engine.

``process_file`` is the failure boundary: anything that goes wrong while one file is read,
transformed or written is logged and turned into ``FileResult(success=False)``. Nothing below
it stops a batch.
"""
from __future__ import annotations

import concurrent.futures as cf
import dataclasses
import logging
import pathlib
import re
from typing import Iterable, List, Optional, Sequence, Tuple

from batch_i18n.engine.extract import SCRIPT_CONTEXT, TEMPLATE_CONTEXT, Term, extract
from batch_i18n.engine.inject import inject_script_import, inject_vue_script
from batch_i18n.engine.registry import KeyRegistry
from batch_i18n.engine.rewrite import rewrite
from batch_i18n.errors import I18nError
from batch_i18n.utils.config import I18nConfig
from batch_i18n.utils.fs import atomic_write, backup_file, unified_diff

logger = logging.getLogger(__name__)

VUE_SUFFIXES = (".vue",)
SCRIPT_SUFFIXES = (".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs")
JSX_SUFFIXES = (".tsx", ".jsx")

# outermost <template> (greedy, nested <template #slot> blocks stay inside)
TEMPLATE_BLOCK_RE = re.compile(r"(<template\b[^>]*>)([\s\S]*)(</template>)", re.I)
SCRIPT_BLOCK_RE = re.compile(r"(<script\b[^>]*>)([\s\S]*?)(</script>)", re.I)
_TSX_LANG_RE = re.compile(r"""\blang\s*=\s*["']tsx["']""", re.I)
_SETUP_ATTR_RE = re.compile(r"\bsetup\b", re.I)


@dataclasses.dataclass
class ProcessOptions:
    template: bool = True
    script: bool = True
    ts: bool = True
    dry_run: bool = False
    backup: bool = False
    emit_diff: bool = False
    max_file_size: Optional[int] = 2 * 1024 * 1024


@dataclasses.dataclass
class FileResult:
    path: pathlib.Path
    success: bool
    extracted: int = 0
    changed: bool = False
    error: Optional[str] = None
    diff: Optional[str] = None
    skipped: Optional[str] = None


@dataclasses.dataclass
class BatchReport:
    results: List[FileResult]
    registry: KeyRegistry

    @property
    def scanned(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.success)

    @property
    def extracted(self) -> int:
        return sum(r.extracted for r in self.results if r.success)

    @property
    def unique_keys(self) -> int:
        return len(self.registry)

    @property
    def changed(self) -> int:
        return sum(1 for r in self.results if r.changed)

    def summary_lines(self, dry_run: bool = False) -> List[str]:
        lines = [
            "=== Done ===",
            f"Files scanned:    {self.scanned}",
            f"Files succeeded:  {self.succeeded}",
            f"Terms extracted:  {self.extracted}",
            f"Unique keys:      {self.unique_keys}",
        ]
        if self.failed:
            lines.append(f"Files failed:     {self.failed}")
        if dry_run:
            lines.append("Dry run: no source files were modified.")
        return lines


# ── Text transforms ──────────────────────────────────────────────────────────

def _pick_script_block(text: str) -> Optional[re.Match]:
    blocks = list(SCRIPT_BLOCK_RE.finditer(text))
    if not blocks:
        return None
    for m in blocks:
        if _SETUP_ATTR_RE.search(m.group(1)):
            return m
    return blocks[0]


def process_vue_text(
    text: str,
    config: I18nConfig,
    options: Optional[ProcessOptions] = None,
    registry: Optional[KeyRegistry] = None,
) -> Tuple[str, int]:
    """Rewrite a single-file component; return ``(new_text, replaced_terms)``."""
    options = options or ProcessOptions()
    registry = registry if registry is not None else KeyRegistry()
    names = config.lookup_names()
    out = text
    count = 0

    if options.template:
        m = TEMPLATE_BLOCK_RE.search(out)
        if m:
            body = m.group(2)
            terms = extract(body, TEMPLATE_CONTEXT, lookup_names=names, field_names=config.field_names)
            new_body, n = rewrite(
                body, terms, mode=TEMPLATE_CONTEXT, method=config.vue.template_method, registry=registry
            )
            if n:
                out = out[:m.start(2)] + new_body + out[m.end(2):]
                count += n

    if options.script:
        m = _pick_script_block(out)
        if m:
            body = m.group(2)
            jsx = bool(_TSX_LANG_RE.search(m.group(1)))
            terms = extract(body, SCRIPT_CONTEXT, lookup_names=names, field_names=config.field_names, jsx=jsx)
            new_body, n = rewrite(
                body, terms, mode=SCRIPT_CONTEXT, method=config.vue.script_method, registry=registry
            )
            if n:
                new_body = inject_vue_script(new_body, config.vue.import_statement, config.vue.instance_statement)
                out = out[:m.start(2)] + new_body + out[m.end(2):]
                count += n

    return out, count


def process_script_text(
    text: str,
    suffix: str,
    config: I18nConfig,
    registry: Optional[KeyRegistry] = None,
) -> Tuple[str, int]:
    """Rewrite a standalone TS/JS module; return ``(new_text, replaced_terms)``."""
    registry = registry if registry is not None else KeyRegistry()
    opts = config.options_for_suffix(suffix)
    terms = extract(
        text,
        SCRIPT_CONTEXT,
        lookup_names=config.lookup_names(),
        field_names=config.field_names,
        jsx=suffix in JSX_SUFFIXES,
    )
    new_text, n = rewrite(text, terms, mode=SCRIPT_CONTEXT, method=opts.i18n_method, registry=registry)
    if n:
        new_text = inject_script_import(new_text, opts.import_statement)
    return new_text, n


def collect_terms(text: str, suffix: str, config: I18nConfig, options: Optional[ProcessOptions] = None) -> List[Term]:
    """Extraction only: the candidate terms of a file's text, nothing is rewritten."""
    options = options or ProcessOptions()
    names = config.lookup_names()
    if suffix in VUE_SUFFIXES:
        terms: List[Term] = []
        if options.template:
            m = TEMPLATE_BLOCK_RE.search(text)
            if m:
                terms.extend(extract(m.group(2), TEMPLATE_CONTEXT, lookup_names=names, field_names=config.field_names))
        if options.script:
            m = _pick_script_block(text)
            if m:
                jsx = bool(_TSX_LANG_RE.search(m.group(1)))
                terms.extend(
                    extract(m.group(2), SCRIPT_CONTEXT, lookup_names=names, field_names=config.field_names, jsx=jsx)
                )
        return terms
    if suffix in SCRIPT_SUFFIXES and options.ts:
        return extract(
            text, SCRIPT_CONTEXT, lookup_names=names, field_names=config.field_names, jsx=suffix in JSX_SUFFIXES
        )
    return []


# ── Files ────────────────────────────────────────────────────────────────────

def _precheck(p: pathlib.Path, max_file_size: Optional[int]) -> Optional[str]:
    if p.is_symlink():
        return "symlink"
    if max_file_size and p.stat().st_size > max_file_size:
        return f"larger than {max_file_size} bytes"
    return None


def process_file(
    p: pathlib.Path,
    config: I18nConfig,
    options: Optional[ProcessOptions] = None,
    registry: Optional[KeyRegistry] = None,
) -> FileResult:
    """Read, transform and (unless dry-run) write one file.

    Keys land in ``registry`` only when the whole file succeeded.
    """
    options = options or ProcessOptions()
    local = KeyRegistry()
    try:
        reason = _precheck(p, options.max_file_size)
        if reason:
            logger.warning("Skipping %s: %s", p, reason)
            return FileResult(p, True, skipped=reason)

        suffix = p.suffix.lower()
        if suffix in VUE_SUFFIXES:
            text = p.read_text(encoding="utf-8")
            new_text, count = process_vue_text(text, config, options, local)
        elif suffix in SCRIPT_SUFFIXES:
            if not options.ts:
                return FileResult(p, True, skipped="script files disabled")
            text = p.read_text(encoding="utf-8")
            new_text, count = process_script_text(text, suffix, config, local)
        else:
            return FileResult(p, True, skipped="unsupported file type")

        changed = new_text != text
        diff = unified_diff(text, new_text, p) if (changed and options.emit_diff) else None
        if changed and not options.dry_run:
            if options.backup:
                backup_file(p, text)
            atomic_write(p, new_text)
    except (I18nError, OSError, UnicodeDecodeError) as e:
        logger.error("Failed to process %s: %s", p, e)
        return FileResult(p, False, error=str(e))

    if registry is not None:
        registry.merge(local)
    if count:
        logger.info("%s: %d term(s)", p, count)
    return FileResult(p, True, extracted=count, changed=changed, diff=diff)


def process_batch(
    paths: Sequence[pathlib.Path],
    config: I18nConfig,
    options: Optional[ProcessOptions] = None,
    registry: Optional[KeyRegistry] = None,
    threads: int = 1,
) -> BatchReport:
    """Run ``process_file`` over ``paths`` with a thread pool.

    Each file fills its own registry; they are merged into ``registry`` in input order once the
    pool is done, so the mapping iterates the same way whatever the scheduling was.
    """
    options = options or ProcessOptions()
    registry = registry if registry is not None else KeyRegistry()

    def _work(p: pathlib.Path) -> Tuple[FileResult, KeyRegistry]:
        local = KeyRegistry()
        return process_file(p, config, options, local), local

    with cf.ThreadPoolExecutor(max_workers=max(1, threads)) as ex:
        outcomes = list(ex.map(_work, paths))

    results: List[FileResult] = []
    for result, local in outcomes:
        results.append(result)
        if result.success:
            registry.merge(local)
    return BatchReport(results, registry)


def extract_batch(
    paths: Iterable[pathlib.Path],
    config: I18nConfig,
    options: Optional[ProcessOptions] = None,
    registry: Optional[KeyRegistry] = None,
) -> BatchReport:
    """Scan-only counterpart of ``process_batch``: register raw term text, never write sources."""
    options = options or ProcessOptions()
    registry = registry if registry is not None else KeyRegistry()
    results: List[FileResult] = []
    for p in paths:
        try:
            text = p.read_text(encoding="utf-8")
            terms = collect_terms(text, p.suffix.lower(), config, options)
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Failed to scan %s: %s", p, e)
            results.append(FileResult(p, False, error=str(e)))
            continue
        for term in terms:
            registry.register(term.content, term.content)
        results.append(FileResult(p, True, extracted=len(terms)))
    return BatchReport(results, registry)
