from __future__ import annotations

import fnmatch
import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Dict, Iterator, List, Optional

try:
    from tqdm import tqdm
except ImportError:  # pragma: no cover - fallback when tqdm is missing
    tqdm = None  # type: ignore

from .models import FileResults, ParserOptions
from .pipeline import DEFAULT_LOGGER_NAME, CredentialParser
from .utils import read_text_safely


SLOW_SCAN_THRESHOLD_SECONDS = 1.0
DEFAULT_EXCLUDE_DIRS = [".git", ".venv", "node_modules", "venv", ".tox", ".mypy_cache", ".pytest_cache", "__pycache__"]


def configure_logging(verbose: bool = False, logger_name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    """Configure and return the package logger.

    Installs a single stream handler the first time it is called so script
    usage gets output without ``logging.basicConfig``. ``verbose`` lowers the
    level from WARNING to INFO.
    """

    logger = logging.getLogger(logger_name)
    level = logging.INFO if verbose else logging.WARNING
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s - %(message)s")
        )
        logger.addHandler(handler)

    return logger


class SingleFileScanner:
    def __init__(
        self,
        file_path: Path,
        options: Optional[ParserOptions] = None,
        *,
        parser: Optional[CredentialParser] = None,
        logger: Optional[logging.Logger] = None,
        verbose: bool = False,
    ) -> None:
        self.file_path = file_path
        self.options = options or ParserOptions()
        base_logger = logger or logging.getLogger(DEFAULT_LOGGER_NAME)
        self.logger = base_logger.getChild(self.__class__.__name__.lower())
        self.parser = parser or CredentialParser(logger=base_logger)
        self.verbose = verbose
        if verbose:
            self.logger.setLevel(logging.INFO)

    def scan(self) -> Optional[FileResults]:
        """Parse the file. Returns None when it cannot be read as text."""

        text = read_text_safely(self.file_path)
        if text is None:
            self.logger.warning("Skipping %s: unreadable or binary", self.file_path)
            return None
        fmt, results = self.parser.parse_with_format(text, self.options)
        if self.verbose:
            self.logger.info("%s: format=%s, %d credential(s)", self.file_path, fmt, len(results))
        return FileResults(file_path=self.file_path, format=fmt, results=results)


class DirectoryScanner:
    def __init__(
        self,
        root: Path,
        options: Optional[ParserOptions] = None,
        include_globs: Optional[List[str]] = None,
        exclude_dirs: Optional[List[str]] = None,
        max_file_size: int = 5_000_000,
        workers: int = 8,
        *,
        parser: Optional[CredentialParser] = None,
        logger: Optional[logging.Logger] = None,
        verbose: bool = False,
        show_progress: bool = True,
        progress_desc: str = "Parsing files",
    ) -> None:
        self.root = root
        self.options = options or ParserOptions()
        self.include_globs = include_globs or ["*"]
        self.exclude_dirs = set(DEFAULT_EXCLUDE_DIRS if exclude_dirs is None else exclude_dirs)
        self.max_file_size = max_file_size
        self.workers = max(1, workers)
        base_logger = logger or logging.getLogger(DEFAULT_LOGGER_NAME)
        self.logger = base_logger.getChild(self.__class__.__name__.lower())
        # one parser for every worker; parsing keeps no state between calls
        self.parser = parser or CredentialParser(logger=base_logger)
        self.verbose = verbose
        if verbose:
            self.logger.setLevel(logging.INFO)
        self.show_progress = bool(show_progress)
        self.progress_desc = progress_desc
        self._progress_bar = None
        self._progress_lock = threading.Lock()
        self._slow_log_threshold = SLOW_SCAN_THRESHOLD_SECONDS

    def _is_excluded(self, path: Path) -> bool:
        try:
            parts = path.relative_to(self.root).parts[:-1]
        except ValueError:
            parts = path.parts[:-1]
        return any(part in self.exclude_dirs for part in parts)

    def _iter_files(self) -> Iterator[Path]:
        for p in sorted(self.root.rglob("*")):
            if p.is_dir() or self._is_excluded(p):
                continue
            if not any(fnmatch.fnmatch(p.name, pat) for pat in self.include_globs):
                continue
            try:
                size = p.stat().st_size
            except OSError as exc:
                self.logger.warning("Unable to stat %s: %s", p, exc)
                continue
            if size > self.max_file_size:
                if self.verbose:
                    self.logger.info("Skipping %s: %d bytes exceeds --max-file-size", p, size)
                continue
            yield p

    def scan(self) -> List[FileResults]:
        files = list(self._iter_files())
        total_files = len(files)

        if self.verbose:
            self.logger.info("Discovered %d file(s) to parse", total_files)

        if not total_files:
            return []

        progress_bar = None
        if self.show_progress and tqdm is not None:
            progress_bar = tqdm(total=total_files, desc=self.progress_desc, unit="file")
        elif self.show_progress and tqdm is None:
            self.logger.info("tqdm is not installed; progress bar disabled")

        collected: Dict[Path, FileResults] = {}
        executor = ThreadPoolExecutor(max_workers=self.workers)
        try:
            self._progress_bar = progress_bar
            futures = {executor.submit(self._scan_file, path): path for path in files}
            for future in as_completed(futures):
                path = futures[future]
                try:
                    fr = future.result()
                    if fr is not None:
                        collected[path] = fr
                except Exception as exc:
                    if self.verbose:
                        self.logger.exception("Error parsing %s", path)
                    else:
                        self.logger.warning("Error parsing %s: %s", path, exc)
                finally:
                    if progress_bar is not None:
                        progress_bar.update(1)
        except KeyboardInterrupt:
            if self.verbose:
                self.logger.info("Scan interrupted by user; shutting down workers")
            raise
        finally:
            executor.shutdown(wait=True, cancel_futures=True)
            if progress_bar is not None:
                progress_bar.close()
            self._progress_bar = None

        # report in path order, not completion order
        return [collected[p] for p in files if p in collected]

    def _scan_file(self, path: Path) -> Optional[FileResults]:
        display_path = self._format_display_path(path)
        self._update_current_file_display(display_path)

        start_time = time.perf_counter()
        text = read_text_safely(path, max_bytes=self.max_file_size)
        if text is None:
            self.logger.warning("Skipping %s: unreadable or binary", display_path)
            return None
        fmt, results = self.parser.parse_with_format(text, self.options)
        self._maybe_log_slow_file(display_path, time.perf_counter() - start_time, len(text), fmt)
        return FileResults(file_path=path, format=fmt, results=results)

    def _format_display_path(self, path: Path) -> str:
        try:
            return str(path.relative_to(self.root))
        except ValueError:
            return str(path)

    def _update_current_file_display(self, display_path: str) -> None:
        label = display_path
        if len(label) > 60:
            label = f"...{label[-57:]}"
        if self._progress_bar is not None:
            with self._progress_lock:
                self._progress_bar.set_postfix_str(label, refresh=False)
                self._progress_bar.refresh()
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug("Processing %s", display_path)

    def _maybe_log_slow_file(self, display_path: str, duration: float, size: int, fmt: str) -> None:
        if not self.logger.isEnabledFor(logging.DEBUG):
            return
        if duration < self._slow_log_threshold:
            return
        self.logger.debug(
            "Slow parse for %s took %.2fs (format=%s, %s chars)",
            display_path,
            duration,
            fmt,
            f"{size:,}",
        )
