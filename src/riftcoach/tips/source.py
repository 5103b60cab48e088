# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Loading tip rule documents from a directory of YAML files."""

from __future__ import annotations

import asyncio
import inspect
import os
from collections.abc import Awaitable, Callable
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from riftcoach.constants import DEFAULT_RULE_RELOAD_DEBOUNCE_S
from riftcoach.logging import get_logger
from riftcoach.tips.rules import RuleSet, TipModule, TipsDocument

logger = get_logger(__name__)

RULE_SUFFIXES = (".yml", ".yaml")
RELOAD_EVENTS = frozenset({EVENT_TYPE_CREATED, EVENT_TYPE_MODIFIED, EVENT_TYPE_DELETED, EVENT_TYPE_MOVED})


class RuleDocumentError(Exception):
    """A rule document could not be parsed or validated."""

    def __init__(self, source: str, message: str) -> None:
        super().__init__(f"{source}: {message}")
        self.source = source


class RuleLoadResult(BaseModel):
    rule_set: RuleSet = Field(default_factory=RuleSet)
    documents: tuple[str, ...] = ()
    errors: tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True)

    @property
    def ok(self) -> bool:
        return not self.errors


def parse_rule_document(text: str, source: str = "<string>") -> TipsDocument:
    """Parse one YAML document; an empty document has no modules."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise RuleDocumentError(source, f"invalid YAML: {e}") from e
    if data is None:
        return TipsDocument()
    if not isinstance(data, dict):
        raise RuleDocumentError(source, "top level must be a mapping")
    try:
        return TipsDocument.model_validate(data)
    except ValidationError as e:
        raise RuleDocumentError(source, f"invalid rule document: {e}") from e


def rule_files(directory: Path) -> list[Path]:
    if not directory.is_dir():
        return []
    return sorted(p for p in directory.iterdir() if p.is_file() and p.suffix.lower() in RULE_SUFFIXES)


def _drop_duplicate_rules(modules: list[TipModule], errors: list[str]) -> tuple[TipModule, ...]:
    seen: set[str] = set()
    kept: list[TipModule] = []
    for module in modules:
        rules = []
        for rule in module.rules:
            if rule.id in seen:
                errors.append(f"duplicate rule id '{rule.id}' in module '{module.id}' ignored")
                continue
            seen.add(rule.id)
            rules.append(rule)
        kept.append(module.model_copy(update={"rules": tuple(rules)}))
    return tuple(kept)


def load_rule_documents(directory: Path) -> RuleLoadResult:
    """Merge every rule document in ``directory``.

    Documents that fail to read, parse or validate are skipped and reported in
    ``errors``; the remaining documents still load.
    """
    modules: list[TipModule] = []
    documents: list[str] = []
    errors: list[str] = []

    for path in rule_files(directory):
        try:
            text = path.read_text(encoding="utf-8")
            document = parse_rule_document(text, path.name)
        except (OSError, RuleDocumentError) as e:
            logger.warning("tip_document_skipped", path=str(path), error=str(e))
            errors.append(str(e))
            continue
        documents.append(path.name)
        modules.extend(document.modules)

    result = RuleLoadResult(
        rule_set=RuleSet(modules=_drop_duplicate_rules(modules, errors)),
        documents=tuple(documents),
        errors=tuple(errors),
    )
    logger.info(
        "tip_rules_loaded",
        directory=str(directory),
        documents=len(documents),
        rules=result.rule_set.rule_count,
        errors=len(errors),
    )
    return result


RuleSetCallback = Callable[[RuleSet], Awaitable[None] | None]


class _RuleFileHandler(FileSystemEventHandler):
    """Forwards rule document changes from the observer thread to the loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop, notify: Callable[[], None]) -> None:
        self._loop = loop
        self._notify = notify

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory or event.event_type not in RELOAD_EVENTS:
            return
        paths = (os.fsdecode(event.src_path), os.fsdecode(event.dest_path or ""))
        if any(path.endswith(RULE_SUFFIXES) for path in paths):
            self._loop.call_soon_threadsafe(self._notify)


class DirectoryRuleSource:
    """Rule documents in one directory, reloaded when the files change."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def load(self) -> RuleLoadResult:
        return load_rule_documents(self.directory)

    async def watch(
        self,
        callback: RuleSetCallback,
        debounce_s: float = DEFAULT_RULE_RELOAD_DEBOUNCE_S,
    ) -> None:
        """Hand every reloaded rule set to ``callback`` until cancelled.

        Bursts of file events within ``debounce_s`` collapse into one reload.
        A failed reload is logged and the watch keeps running.
        """
        loop = asyncio.get_running_loop()
        changes = asyncio.Event()
        if not self.directory.exists():
            logger.info("tip_rules_dir_created", directory=str(self.directory))
            self.directory.mkdir(parents=True, exist_ok=True)

        observer = Observer()
        observer.schedule(_RuleFileHandler(loop, changes.set), str(self.directory), recursive=False)
        observer.start()
        try:
            while True:
                await changes.wait()
                await asyncio.sleep(debounce_s)
                changes.clear()
                try:
                    result = self.load()
                    outcome = callback(result.rule_set)
                    if inspect.isawaitable(outcome):
                        await outcome
                except Exception as e:
                    logger.error("tip_rules_reload_failed", directory=str(self.directory), error=str(e))
                    continue
                logger.info("tip_rules_reloaded", directory=str(self.directory), errors=len(result.errors))
        finally:
            observer.stop()
            observer.join(timeout=5)
