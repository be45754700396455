"""Orchestration layer: category management and folder categorization runs."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .classifier import CategoryClassifier
from .config import AppConfig, WeightConfig
from .errors import FolderLoadError
from .logging_setup import init_logging
from .mailhost import LocalMailHost, MailHost
from .reporting import StatusReporter
from .schemas import ClassificationResult, ClassificationState, Message, RunSummary
from .scoring import ScoringEngine
from .storage import SQLiteCategoryStore


class CategorizationPipeline:
    """Runs the classifier over a folder, one message at a time."""

    def __init__(
        self,
        config: AppConfig,
        store: SQLiteCategoryStore,
        host: MailHost,
        reporter: Optional[StatusReporter] = None,
    ):
        self.config = config
        self.store = store
        self.host = host
        self.reporter = reporter or StatusReporter(verbose=config.logging.verbose)
        self.scorer = ScoringEngine(host=host, reporter=self.reporter)
        self.classifier = CategoryClassifier(self.scorer, host, self.reporter)

    @classmethod
    def from_config(cls, config: AppConfig) -> "CategorizationPipeline":
        init_logging(level=config.logging.level, style=config.logging.style)
        store = SQLiteCategoryStore(config.paths.sqlite_path)
        host = LocalMailHost(config.paths.mail_dir, store=store)
        reporter = StatusReporter(logging.getLogger("mail_categorizer"), verbose=config.logging.verbose)
        return cls(config, store, host, reporter)

    def categories(self) -> Dict[str, Tuple[str, ...]]:
        return self.store.get_all()

    def add_category(self, name: str, keywords: Union[str, Iterable[str]]) -> List[str]:
        saved = self.store.add_category(name, keywords)
        self.reporter.info(f"Category saved: {name.strip()}", {"keywords": ", ".join(saved)})
        return saved

    def delete_category(self, name: str) -> bool:
        deleted = self.store.delete_category(name)
        if deleted:
            self.reporter.info(f"Category deleted: {name}")
        else:
            self.reporter.error(f"Category not found: {name}")
        return deleted

    def list_folders(self) -> List[str]:
        self.reporter.info("Loading folders...")
        try:
            folders = self.host.list_folders()
        except Exception as exc:
            self.reporter.error(f"Error loading folders: {exc}")
            self.reporter.show_status(f"Error loading folders: {exc}")
            raise FolderLoadError(str(exc)) from exc
        for folder in folders:
            self.reporter.verbose(f"Folder loaded: {folder}")
        self.reporter.success(f"Loaded {len(folders)} folders")
        return folders

    def process_message(
        self,
        message: Message,
        categories: Mapping[str, Tuple[str, ...]],
        weights: WeightConfig,
    ) -> ClassificationResult:
        return self.classifier.classify(message, categories, weights)

    def process_folder(
        self,
        folder: str,
        weights: Optional[WeightConfig] = None,
        cancel: Optional[Callable[[], bool]] = None,
    ) -> RunSummary:
        """Classify every message in ``folder`` with a snapshot of the categories.

        ``cancel`` is consulted between messages only.
        """
        weights = weights or self.config.weights
        categories = dict(self.store.get_all())
        summary = RunSummary(folder=folder)

        self.reporter.show_status("Processing folder...")
        self.reporter.info(f"Starting to process folder: {folder}")

        try:
            messages = self.host.list_messages(folder)
        except Exception as exc:
            summary.error = str(exc) or type(exc).__name__
            self.reporter.error(f"Error processing folder: {exc}")
            self.reporter.show_status(summary.message())
            return summary

        summary.total = len(messages)
        self.reporter.info(f"Found {summary.total} emails to process")

        for message in messages:
            if cancel is not None and cancel():
                summary.cancelled = True
                self.reporter.info(f"Run cancelled after {summary.processed}/{summary.total} emails")
                break

            try:
                result = self.process_message(message, categories, weights)
            except Exception as exc:
                summary.processed += 1
                summary.failed += 1
                self.reporter.error(
                    f"Error processing email: {exc}",
                    {"message_id": message.id, "error_type": type(exc).__name__},
                )
                continue

            summary.results.append(result)
            summary.processed += 1
            if result.state is ClassificationState.APPLIED:
                summary.categorized += 1
            elif result.state is ClassificationState.APPLY_FAILED:
                summary.failed += 1

            self.reporter.verbose(f"Progress: {summary.processed}/{summary.total} emails processed")

        text = summary.message()
        self.reporter.success(text)
        self.reporter.show_status(text)
        return summary

    def close(self) -> None:
        self.store.close()
