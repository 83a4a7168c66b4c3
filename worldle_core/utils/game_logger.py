"""
Game Logger Module for the Worldle engine

This module provides structured logging for game events, guesses,
statistics writes and recovered errors.
"""

import logging
import json
from datetime import datetime
from typing import Dict, Any, Optional
from pathlib import Path


class GameLogger:
    """
    Centralized logging system for the game engine.

    Features:
    - Game event logging (new games, wins, losses)
    - Guess logging
    - Statistics write logging
    - Corrupt persisted state reporting
    - JSON structured logs for easy parsing
    """

    def __init__(self, log_dir: Optional[str] = None, level: str = 'INFO'):
        self.log_dir: Optional[Path] = None
        self.logger = logging.getLogger('worldle_game')
        self.configure(log_dir, level)

    def configure(self, log_dir: Optional[str] = None, level: str = 'INFO') -> None:
        """
        (Re)build the handlers. A file handler is only added when log_dir is set.
        """
        self.log_dir = Path(log_dir) if log_dir else None
        if self.log_dir is not None:
            self.log_dir.mkdir(parents=True, exist_ok=True)
        self.logger = self._setup_logger(level)

    def _setup_logger(self, level: str) -> logging.Logger:
        """Setup the main game logger with console and optional file handlers."""
        logger = logging.getLogger('worldle_game')
        logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

        # Prevent duplicate handlers
        if logger.handlers:
            for handler in list(logger.handlers):
                handler.close()
            logger.handlers.clear()

        # Console handler for only important messages (WARNING and above)
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
        logger.addHandler(console_handler)

        if self.log_dir is not None:
            # Create log file with date
            file_handler = logging.FileHandler(self._log_file(), encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(
                '%(asctime)s | %(levelname)s | %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            ))
            logger.addHandler(file_handler)

        return logger

    def _log_file(self) -> Path:
        return self.log_dir / f"game_log_{datetime.now().strftime('%Y-%m-%d')}.log"

    def _create_log_entry(self, event_type: str, action: str, details: Dict[str, Any]) -> str:
        """Create a structured log entry."""
        log_entry = {
            'timestamp': datetime.now().isoformat(),
            'event_type': event_type,
            'action': action,
            'details': details
        }
        return json.dumps(log_entry, ensure_ascii=False, default=str)

    def log_game_event(self, event: str, mode: str, **kwargs):
        """
        Log game-specific events (new games, wins, losses).

        Args:
            event: Type of game event (e.g., 'game_started', 'game_won', 'game_lost')
            mode: Game mode ('daily' or 'free')
            **kwargs: Additional game details
        """
        details = {'mode': mode, **kwargs}
        self.logger.info(self._create_log_entry('GAME_EVENT', event, details))

    def log_guess(self, mode: str, country_code: str, proximity_percent: int, **kwargs):
        details = {
            'mode': mode,
            'country_code': country_code,
            'proximity_percent': proximity_percent,
            **kwargs
        }
        self.logger.info(self._create_log_entry('GUESS', 'submit_guess', details))

    def log_stats_event(self, action: str, **kwargs):
        """Log writes to, and rejections from, the statistics store."""
        self.logger.info(self._create_log_entry('STATS', action, kwargs))

    def log_error(self, error: Exception, action: str, **kwargs):
        """
        Log errors with full context.

        Args:
            error: Exception that occurred
            action: Action that was being performed
            **kwargs: Additional details
        """
        details = {
            'error_type': type(error).__name__,
            'error_message': str(error),
            **kwargs
        }
        self.logger.error(self._create_log_entry('ERROR', action, details))

    def log_corrupt_state(self, key: str, reason: str):
        """Report a stored value that could not be read and was replaced by defaults."""
        details = {'key': key, 'reason': reason}
        self.logger.warning(self._create_log_entry('CORRUPT_STATE', 'recover_defaults', details))

    def get_log_stats(self) -> Dict[str, Any]:
        """Get statistics about logged events (useful for monitoring)."""
        if self.log_dir is None:
            return {'error': 'File logging is disabled'}

        log_file = self._log_file()
        if not log_file.exists():
            return {'error': 'No log file found for today'}

        stats = {
            'log_file': str(log_file),
            'file_size_mb': round(log_file.stat().st_size / (1024 * 1024), 2),
            'total_entries': 0,
            'game_events': 0,
            'guesses': 0,
            'stats_events': 0,
            'corrupt_state': 0,
            'errors': 0
        }

        try:
            with open(log_file, 'r', encoding='utf-8') as f:
                for line in f:
                    if not line.strip():
                        continue
                    stats['total_entries'] += 1
                    if '"GAME_EVENT"' in line:
                        stats['game_events'] += 1
                    elif '"GUESS"' in line:
                        stats['guesses'] += 1
                    elif '"STATS"' in line:
                        stats['stats_events'] += 1
                    elif '"CORRUPT_STATE"' in line:
                        stats['corrupt_state'] += 1
                    elif '"ERROR"' in line:
                        stats['errors'] += 1
        except OSError as e:
            return {'error': f'Failed to get stats: {str(e)}'}

        return stats


# Global logger instance, file logging is enabled by create_game()
game_logger = GameLogger()
